from __future__ import annotations


class ShiftCalendarError(Exception):
    """Base for validation/consistency failures. Never retried."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidRange(ShiftCalendarError):
    status_code = 400


class InvalidDevice(ShiftCalendarError):
    status_code = 400


class InvalidDate(ShiftCalendarError):
    status_code = 400


class NotFound(ShiftCalendarError):
    status_code = 404


class UnknownDevice(ShiftCalendarError):
    status_code = 404


class UnknownUser(ShiftCalendarError):
    # a shift points at a user the directory doesn't know: data problem, not a client one
    status_code = 500


class Forbidden(ShiftCalendarError):
    status_code = 403


class IdentityProviderError(Exception):
    """User directory call failed (transport error or unexpected status)."""
