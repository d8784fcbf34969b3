from dataclasses import dataclass

from shiftcal.models.enums import Role


@dataclass(frozen=True)
class Actor:
    """Who is calling: taken from the access token, passed into every mutation."""

    user_id: int
    role: str


# Roles allowed to create/update/delete shifts.
SCHEDULING_ROLES = {Role.ADMIN, Role.USER}

# Roles allowed to touch any user's shifts and the user directory.
ADMIN_ROLES = {Role.ADMIN}


def to_role(value: str | None) -> Role:
    try:
        return Role(value)
    except ValueError:
        return Role.NONE


def can_schedule(role: str | None) -> bool:
    return to_role(role) in SCHEDULING_ROLES


def is_admin(role: str | None) -> bool:
    return to_role(role) in ADMIN_ROLES
