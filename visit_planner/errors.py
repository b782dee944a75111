"""Typed failures of the schedule relay.

Each error knows the HTTP status it maps to and renders the ``{error, details}``
body the front-end expects. Extraction misses and JSON parse failures are not
errors: they degrade to ``schedule=None``.
"""

from typing import Any


class ScheduleError(Exception):
    status_code: int = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(ScheduleError):
    """Completion capability or deployment is not configured."""

    status_code = 500


class ScheduleValidationError(ScheduleError):
    """The caller omitted required input."""

    status_code = 400


class ProviderError(ScheduleError):
    """The completion call itself failed."""

    status_code = 500


class PayloadTooLargeError(ScheduleError):
    status_code = 413
