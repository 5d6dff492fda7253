from devflow.enums import TaskStatus
from devflow.exceptions import raise_bad_request, raise_invalid_transition

def coerce_status(value) -> TaskStatus:
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise_bad_request(f"Invalid status: {value}. Allowed: {allowed}")

def is_valid_transition(current_status, new_status) -> bool:
    try:
        current = TaskStatus(current_status)
        target = TaskStatus(new_status)
    except ValueError:
        return False
    return target in current.next_states

def validate_status_transition(current_status: str, new_status) -> TaskStatus:
    """
    Checks a move along the task workflow:
    todo -> in_progress -> in_review -> done, with in_progress -> todo,
    in_review -> in_progress and done -> in_review as the way back.
    Moving to the current status is not a transition and is rejected too.
    """
    target = coerce_status(new_status)
    if not is_valid_transition(current_status, target):
        raise_invalid_transition(current_status, target.value)
    return target
