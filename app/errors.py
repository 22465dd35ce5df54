"""Exception types raised by the sync pipeline and its API clients."""

from __future__ import annotations


class MovieSyncError(RuntimeError):
    """Base class for sync failures."""


class APIError(MovieSyncError):
    """An upstream HTTP API call failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body_snippet: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


class TMDBError(APIError):
    """The movie catalog API returned an error or could not be reached."""


class WebflowError(APIError):
    """The Webflow CMS rejected a request or could not be reached."""


class SyncAlreadyRunningError(MovieSyncError):
    """A sync run was requested while another one is still in progress."""
