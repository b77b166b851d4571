from types import SimpleNamespace
from typing import Any, Dict
from marshmallow import INCLUDE, Schema, post_load

MAX_REPR_LEN = 80


class BaseModel(SimpleNamespace):
    """Attribute bag every engine model derives from."""

    def __repr__(self) -> str:
        repr_ = super().__repr__()
        return repr_ if len(repr_) <= MAX_REPR_LEN else repr_[:MAX_REPR_LEN] + " ...)"


class BaseSchema(Schema):
    """Loads input into an instance of `__model__`."""

    __model__: type = BaseModel

    class Meta:
        unknown = INCLUDE
        ordered = True

    @post_load
    def make_object(self, data: Dict[str, Any], **kwargs: Any) -> BaseModel:
        return self.__model__(**data)
