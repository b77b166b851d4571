from enum import Enum
from typing import Optional
from shipyard.types.base import BaseModel


class AppType(str, Enum):
    SERVICE = "Service"
    WORKER = "Worker"
    CRON_JOB = "CronJob"
    ONE_TIME_JOB = "OneTimeJob"


class TaskAction(str, Enum):
    FULL_DEPLOY = "full_deploy"
    CANARY_DEPLOY = "canary_deploy"
    FULL_CANARY_DEPLOY = "full_canary_deploy"
    STOP = "stop"
    RESTART = "restart"
    RESUME = "resume"
    DELETE = "delete"
    CLEAN = "clean"
    MANUAL_LAUNCH = "manual_launch"
    UPDATE_HPA = "update_hpa"
    RELOAD_CONFIG = "reload_config"
    DISABLE_IN_CLUSTER_DNS = "disable_in_cluster_dns"
    ENABLE_IN_CLUSTER_DNS = "enable_in_cluster_dns"


class TaskStatus(str, Enum):
    INIT = "init"
    CREATE_CONFIG_MAP_UNDERWAY = "create-config_map-underway"
    CREATE_CONFIG_MAP_FINISH = "create-config_map-finish"
    CREATE_CANARY_DEPLOYMENT_UNDERWAY = "create-canary_deployment-underway"
    CREATE_CANARY_DEPLOYMENT_FINISH = "create-canary_deployment-finish"
    CREATE_FULL_DEPLOYMENT_UNDERWAY = "create-full_deployment-underway"
    CREATE_FULL_DEPLOYMENT_FINISH = "create-full_deployment-finish"
    CREATE_FULL_CRONJOB_UNDERWAY = "create-full_cronjob-underway"
    CREATE_FULL_CRONJOB_FINISH = "create-full_cronjob-finish"
    CREATE_JOB_UNDERWAY = "create-job-underway"
    CREATE_JOB_FINISH = "create-job-finish"
    CREATE_HPA_UNDERWAY = "create-hpa-underway"
    CREATE_HPA_FINISH = "create-hpa-finish"
    CREATE_K8S_SERVICE_UNDERWAY = "create-k8s_service-underway"
    CREATE_K8S_SERVICE_FINISH = "create-k8s_service-finish"
    ALL_CREATION_PHASES_FINISH = "all-creation_phases-finish"
    UPDATE_CONFIG_MAP_UNDERWAY = "update-config_map-underway"
    UPDATE_CONFIG_MAP_FINISH = "update-config_map-finish"
    UPDATE_DEPLOYMENT_ANNOTATION_UNDERWAY = "update-deployment-annotation-underway"
    UPDATE_DEPLOYMENT_ANNOTATION_FINISH = "update-deployment-annotation-finish"
    CLEAN_DEPLOYMENT_UNDERWAY = "clean-deployment-underway"
    CLEAN_DEPLOYMENT_FINISH = "clean-deployment-finish"
    CLEAN_CRONJOB_UNDERWAY = "clean-cronjob-underway"
    CLEAN_CRONJOB_FINISH = "clean-cronjob-finish"
    CLEAN_JOB_UNDERWAY = "clean-job-underway"
    CLEAN_JOB_FINISH = "clean-job-finish"
    CLEAN_HPA_UNDERWAY = "clean-hpa-underway"
    CLEAN_HPA_FINISH = "clean-hpa-finish"
    CLEAN_K8S_SERVICE_UNDERWAY = "clean-k8s_service-underway"
    CLEAN_K8S_SERVICE_FINISH = "clean-k8s_service-finish"
    CLEAN_CONFIG_MAP_UNDERWAY = "clean-config_map-underway"
    CLEAN_CONFIG_MAP_FINISH = "clean-config_map-finish"
    UPDATE_DEPLOYMENT_SCALE_UNDERWAY = "update-deployment_scale-underway"
    UPDATE_DEPLOYMENT_SCALE_FINISH = "update-deployment_scale-finish"
    UPDATE_CRONJOB_SUSPEND_UNDERWAY = "update-cronjob_suspend-underway"
    UPDATE_CRONJOB_SUSPEND_FINISH = "update-cronjob_suspend-finish"
    RESTART_DEPLOYMENT_UNDERWAY = "restart-deployment-underway"
    RESTART_DEPLOYMENT_FINISH = "restart-deployment-finish"
    UPDATE_HPA_UNDERWAY = "update-hpa-underway"
    UPDATE_HPA_FINISH = "update-hpa-finish"
    SUCCESS = "success"
    FAIL = "fail"


class LaunchType(str, Enum):
    MANUAL = "manual"


class DeploymentTask(BaseModel):
    """A deployment pipeline task, read only here."""

    id: str
    app_id: str
    env_name: str
    cluster_name: str
    namespace: str
    version: str
    action: str
    status: str
    suspend: bool
    retry_count: int
    project_name: Optional[str]
    app_name: Optional[str]
    config_commit_id: Optional[str]
    manual_job_name: Optional[str]

    @property
    def finished(self) -> bool:
        return self.status in {TaskStatus.SUCCESS.value, TaskStatus.FAIL.value}
