"""Utility functions for handling enum/string values safely."""
from enum import Enum


def enum_to_str(v):
    """
    Convert an enum member or plain value to its string form.

    Examples:
        >>> enum_to_str(LeaveStatus.PENDED_REVOKE)
        'PENDED_REVOKE'
        >>> enum_to_str('NEW')
        'NEW'
        >>> enum_to_str(None)
    """
    if v is None:
        return None
    if isinstance(v, Enum):
        return v.value
    return str(v)
