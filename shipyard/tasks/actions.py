"""Which operator actions an app version accepts, given its last task."""
import logging
from typing import Any, Dict, Mapping, Optional, Union
from marshmallow import ValidationError
from shipyard.types.models.task import AppType, DeploymentTask, TaskAction, TaskStatus
from shipyard.types.schemas.task import DeploymentTaskSchema
from shipyard.utils.errors import (
    ActionNotPermittedError,
    ConflictInFlightError,
    PermanentConfigError,
)

logger = logging.getLogger(__name__)

#: Retries of a failing task before it is marked failed
TASK_MAX_RETRY_COUNT = 10

#: Actions starting the first deployment of a version
INIT_DEPLOY_ACTIONS = (TaskAction.FULL_DEPLOY, TaskAction.CANARY_DEPLOY)

#: Actions that leave a version running
DEPLOY_FAMILY_ACTIONS = (
    TaskAction.FULL_DEPLOY,
    TaskAction.CANARY_DEPLOY,
    TaskAction.FULL_CANARY_DEPLOY,
    TaskAction.RESTART,
    TaskAction.RESUME,
    TaskAction.MANUAL_LAUNCH,
    TaskAction.UPDATE_HPA,
    TaskAction.RELOAD_CONFIG,
)

TERMINAL_STATUSES = (TaskStatus.SUCCESS, TaskStatus.FAIL)

#: Actions an operator may request, all denied by default
OPERATOR_ACTIONS = (
    TaskAction.STOP,
    TaskAction.RESTART,
    TaskAction.RESUME,
    TaskAction.DELETE,
    TaskAction.MANUAL_LAUNCH,
    TaskAction.UPDATE_HPA,
    TaskAction.RELOAD_CONFIG,
)


def default_actions() -> Dict[TaskAction, bool]:
    return {action: False for action in OPERATOR_ACTIONS}


def _as_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def permitted_actions(
    app_type: Union[AppType, str],
    last_action: Union[TaskAction, str],
    last_task_suspended: bool,
    unfinished_other_task_count: int,
) -> Dict[TaskAction, bool]:
    """Map every operator action to whether it is currently allowed.

    Pure: the same inputs always give the same answer.
    """
    allowed = default_actions()

    # another task still running blocks everything
    if unfinished_other_task_count > 0:
        return allowed

    app_type = _as_enum(AppType, app_type)
    action = _as_enum(TaskAction, last_action)

    if app_type in (AppType.SERVICE, AppType.WORKER):
        if action == TaskAction.STOP:
            allowed[TaskAction.RESUME] = True
        else:
            allowed[TaskAction.STOP] = True
        allowed[TaskAction.RESTART] = True
        allowed[TaskAction.DELETE] = True
        allowed[TaskAction.UPDATE_HPA] = True
        allowed[TaskAction.RELOAD_CONFIG] = True
    elif app_type == AppType.CRON_JOB:
        if action == TaskAction.STOP:
            allowed[TaskAction.RESUME] = True
        else:
            allowed[TaskAction.STOP] = True
        allowed[TaskAction.DELETE] = True
        allowed[TaskAction.MANUAL_LAUNCH] = True
    elif app_type == AppType.ONE_TIME_JOB:
        allowed[TaskAction.DELETE] = True

    if action in DEPLOY_FAMILY_ACTIONS:
        if last_task_suspended:
            for key in (
                TaskAction.STOP,
                TaskAction.RESTART,
                TaskAction.RESUME,
                TaskAction.MANUAL_LAUNCH,
                TaskAction.UPDATE_HPA,
                TaskAction.RELOAD_CONFIG,
            ):
                allowed[key] = False
    elif action == TaskAction.STOP:
        allowed[TaskAction.STOP] = False
        allowed[TaskAction.UPDATE_HPA] = False
        allowed[TaskAction.RELOAD_CONFIG] = False
    elif action == TaskAction.DELETE:
        allowed = default_actions()
    else:
        allowed = default_actions()
        logger.error(f"unknown action: {last_action}")
    return allowed


def permitted_actions_for_task(
    app_type: Union[AppType, str],
    last_task: DeploymentTask,
    unfinished_other_task_count: int,
) -> Dict[TaskAction, bool]:
    return permitted_actions(
        app_type, last_task.action, bool(last_task.suspend), unfinished_other_task_count
    )


def check_action(
    action: Union[TaskAction, str],
    app_type: Union[AppType, str],
    last_action: Union[TaskAction, str],
    last_task_suspended: bool,
    unfinished_other_task_count: int,
) -> TaskAction:
    """Validate an operator request, returning the action on success.

    Raises:
        ConflictInFlightError: another task is still unfinished
        ActionNotPermittedError: the action is not allowed right now
    """
    if unfinished_other_task_count > 0:
        raise ConflictInFlightError(
            f"{unfinished_other_task_count} unfinished task(s) in flight"
        )
    requested: Optional[TaskAction] = _as_enum(TaskAction, action)
    allowed = permitted_actions(
        app_type, last_action, last_task_suspended, unfinished_other_task_count
    )
    if requested is None or not allowed.get(requested, False):
        raise ActionNotPermittedError(
            f"action({action}) is not permitted after {last_action} for {app_type}"
        )
    return requested


def load_task(data: Mapping[str, Any]) -> DeploymentTask:
    """Decode a task row as stored by the deployment pipeline."""
    try:
        return DeploymentTaskSchema().load(data)
    except ValidationError as ex:
        raise PermanentConfigError(f"invalid task: {ex.messages}") from ex


def is_terminal(status: Union[TaskStatus, str]) -> bool:
    return _as_enum(TaskStatus, status) in TERMINAL_STATUSES


def can_retry(task: DeploymentTask) -> bool:
    return not task.finished and (task.retry_count or 0) < TASK_MAX_RETRY_COUNT
