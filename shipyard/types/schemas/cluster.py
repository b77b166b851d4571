from marshmallow import fields, validates, ValidationError
from shipyard.types.base import BaseSchema, BaseModel
from shipyard.types.models.cluster import ClusterBinding


class ClusterBindingSchema(BaseSchema):
    __model__ = ClusterBinding

    name = fields.String(data_key="name", required=True)
    vendor = fields.String(data_key="vendor", required=True)
    env = fields.String(data_key="env", required=True)
    kubeconfig = fields.String(data_key="kubeconfig", allow_none=True, load_default=None)
    context = fields.String(data_key="context", allow_none=True, load_default=None)
    local_dns = fields.Boolean(data_key="localDNS", allow_none=False, load_default=False)
    server_version = fields.Raw(load_default=None, load_only=True)
    group_versions = fields.Raw(load_default=dict, load_only=True)

    @validates("name")
    def validate_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Cluster name must not be empty.")


class ClusterConfig(BaseModel):
    clusters: list


class ClusterConfigSchema(BaseSchema):
    """Top level of the clusters file."""

    __model__ = ClusterConfig

    clusters = fields.List(
        fields.Nested(ClusterBindingSchema()),
        data_key="clusters",
        load_default=list,
    )
