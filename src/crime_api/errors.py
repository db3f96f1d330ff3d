"""
errors.py
---------
Domain errors raised by the incident write path.

Each error carries the plain-text message and HTTP status the API answers
with. Conflicts and missing records use 500 like every other failure, so
callers only ever see a status and a human-readable reason.
"""


class CrimeDataError(Exception):
    """Base class for errors that are reported back to the caller as text."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class IncidentConflictError(CrimeDataError):
    """An incident with the same case number is already stored."""


class IncidentNotFoundError(CrimeDataError):
    """No incident has the requested case number."""


class InvalidIncidentError(CrimeDataError):
    """The submitted incident payload is missing fields or has bad values."""
