import yaml
from marshmallow import fields, pre_load, ValidationError
from shipyard.types.base import BaseSchema
from shipyard.types.models.workload import WorkloadDescriptor


class WorkloadDescriptorSchema(BaseSchema):
    """Loads a rendered manifest, given as a mapping or YAML text."""

    __model__ = WorkloadDescriptor

    kind = fields.String(data_key="kind", required=True)
    namespace = fields.String(data_key="namespace", required=True)
    name = fields.String(data_key="name", required=True)
    payload = fields.Dict(data_key="payload", required=True)

    @pre_load
    def decode_payload(self, data, **kwargs):
        if isinstance(data, str):
            data = {"payload": data}
        data = dict(data)
        payload = data.get("payload")
        if isinstance(payload, (str, bytes)):
            try:
                payload = yaml.safe_load(payload)
            except yaml.YAMLError as ex:
                raise ValidationError(f"invalid manifest: {ex}", "payload")
            if not isinstance(payload, dict):
                raise ValidationError("manifest is not a mapping", "payload")
            data["payload"] = payload
        if isinstance(payload, dict):
            metadata = payload.get("metadata") or {}
            data.setdefault("kind", payload.get("kind"))
            data.setdefault("name", metadata.get("name"))
            data.setdefault("namespace", metadata.get("namespace") or "default")
        return data
