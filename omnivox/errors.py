"""
Exception taxonomy.

Only AuthenticationError stops a run. Everything else is collected by the
pipeline and reported as a warning next to the partial data.
"""

from __future__ import annotations

from typing import Optional


class PortalError(Exception):
    """Base class for every error raised by this package."""


class AuthenticationError(PortalError):
    """
    Login failed. Fatal: the run is aborted.

    `stage` tells where it broke (login-page, token, submit, landing, course-list).
    """

    def __init__(self, message: str, institution: Optional[str] = None, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.institution = institution
        self.stage = stage

    def __str__(self) -> str:
        context = [part for part in (self.institution, self.stage) if part]
        if not context:
            return self.message
        return f"[{' / '.join(context)}] {self.message}"


class NavigationError(PortalError):
    """A page could not be reached (HTTP error, timeout, missing link)."""


class ExtractionStructureError(PortalError):
    """A page misses an element required to read it (e.g. the course heading)."""


class DateParseError(PortalError, ValueError):
    """A date string from the portal could not be turned into a datetime."""


class UnrecognizedMonthError(DateParseError):
    """The month token is not covered by the institution's month table."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unrecognized month token: {token!r}")
        self.token = token


class UnknownInstitutionError(PortalError, KeyError):
    """No session/adapter pair is registered under that name."""

    def __init__(self, name: str, supported: list[str]) -> None:
        super().__init__(name)
        self.name = name
        self.supported = supported

    def __str__(self) -> str:
        return f"Unknown institution {self.name!r} (supported: {', '.join(self.supported)})"
