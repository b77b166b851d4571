from .actions import (
    DEPLOY_FAMILY_ACTIONS,
    INIT_DEPLOY_ACTIONS,
    OPERATOR_ACTIONS,
    TASK_MAX_RETRY_COUNT,
    TERMINAL_STATUSES,
    can_retry,
    check_action,
    default_actions,
    is_terminal,
    load_task,
    permitted_actions,
    permitted_actions_for_task,
)

__all__ = [
    "DEPLOY_FAMILY_ACTIONS",
    "INIT_DEPLOY_ACTIONS",
    "OPERATOR_ACTIONS",
    "TASK_MAX_RETRY_COUNT",
    "TERMINAL_STATUSES",
    "can_retry",
    "check_action",
    "default_actions",
    "is_terminal",
    "load_task",
    "permitted_actions",
    "permitted_actions_for_task",
]
