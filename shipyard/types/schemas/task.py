from marshmallow import fields
from shipyard.types.base import BaseSchema
from shipyard.types.models.task import DeploymentTask


class DeploymentTaskSchema(BaseSchema):
    __model__ = DeploymentTask

    id = fields.String(data_key="id", required=True)
    app_id = fields.String(data_key="appId", required=True)
    env_name = fields.String(data_key="envName", required=True)
    cluster_name = fields.String(data_key="clusterName", required=True)
    namespace = fields.String(data_key="namespace", load_default="default")
    version = fields.String(data_key="version", load_default="")
    action = fields.String(data_key="action", required=True)
    status = fields.String(data_key="status", load_default="init")
    suspend = fields.Boolean(data_key="suspend", load_default=False)
    retry_count = fields.Integer(data_key="retryCount", load_default=0)
    project_name = fields.String(data_key="projectName", allow_none=True, load_default=None)
    app_name = fields.String(data_key="appName", allow_none=True, load_default=None)
    config_commit_id = fields.String(data_key="configCommitId", allow_none=True, load_default=None)
    manual_job_name = fields.String(data_key="manualJobName", allow_none=True, load_default=None)
