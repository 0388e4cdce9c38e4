"""Error taxonomy for content delivery failures."""

from __future__ import annotations

from typing import Optional


class ContentError(RuntimeError):
    """Base class for all failures talking to the content server."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class NetworkUnavailable(ContentError):
    """The server could not be reached."""


class RequestTimeout(ContentError):
    """The server did not answer within the configured timeout."""


class NotFound(ContentError):
    """The requested item does not exist."""


class RenditionNotFound(NotFound):
    """An asset has no rendition matching the requested name, format or link."""


class HomePageNotConfigured(NotFound):
    """The home page item has not been published to the channel."""


class MalformedResponse(ContentError):
    """The server answered with something other than the expected JSON."""


class ServerError(ContentError):
    """The server answered with an unexpected HTTP status."""

    def __init__(self, status: int, message: str, url: Optional[str] = None):
        super().__init__(message, url=url)
        self.status = status
