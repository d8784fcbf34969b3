from .enums import Device, Role
from .user import User
from .shift_overlap import shift_overlaps
from .shift import Shift

__all__ = [
    "Device",
    "Role",
    "User",
    "shift_overlaps",
    "Shift",
]
