"""Service error hierarchy.

Every error carries the HTTP status the API layer should answer with.
"""

from typing import Optional


class BountySyncError(Exception):
    """Base class for errors surfaced to callers"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BountySyncError):
    """Input failed schema constraints (raised before any I/O)"""

    status_code = 400


class NotFoundError(BountySyncError):
    status_code = 404


class ForbiddenError(BountySyncError):
    status_code = 403


class UnsupportedProviderError(BountySyncError):
    """Repository URL points at a host no tracker variant handles"""

    status_code = 400


class MalformedUrlError(BountySyncError):
    status_code = 400


class RemoteProviderError(BountySyncError):
    """Upstream tracker API failure.

    `upstream_status` is the HTTP status the tracker answered with (None when
    the request never got a response); `upstream_message` is its raw message.
    """

    status_code = 502
    provider = "unknown"

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        upstream_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_message = upstream_message
