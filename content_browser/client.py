"""HTTP client for the content delivery REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import quote

import requests

from .config import ContentConfig
from .errors import (
    MalformedResponse,
    NetworkUnavailable,
    NotFound,
    RequestTimeout,
    ServerError,
)

logger = logging.getLogger(__name__)

DELIVERY_API_URL_PATH = "/content/published/api/"

# Never sent as query parameters; they select the item path instead.
IDENTIFIER_KEYS = frozenset({"id", "slug"})


def _format_value(value: Any) -> str:
    # The delivery API only accepts lowercase booleans.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_format_value(item) for item in value)
    return str(value)


class ContentClient:
    """Issues GET requests against a published content channel.

    Every request is authorised by the channel token and bounded by the
    configured timeout. Failures are raised as ``ContentError`` subclasses.
    """

    def __init__(
        self, config: ContentConfig, session: Optional[requests.Session] = None
    ):
        self.config = config
        self._session = session or requests.Session()
        self._owns_session = session is None

    def __enter__(self) -> "ContentClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    @property
    def delivery_url(self) -> str:
        """Base URL of the published delivery API, with trailing slash."""
        server = self.config.server_url.rstrip("/")
        return f"{server}{DELIVERY_API_URL_PATH}{self.config.api_version}/"

    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Return the full URL for ``path`` with the channel token and params."""
        query: Dict[str, str] = {"channelToken": self.config.channel_token}
        for key, value in (params or {}).items():
            if key in IDENTIFIER_KEYS or value is None:
                continue
            query[key] = _format_value(value)

        prepared = requests.PreparedRequest()
        prepared.prepare_url(self.delivery_url + path, query)
        return prepared.url

    def query_items(
        self,
        q: Optional[str] = None,
        fields: Optional[Iterable[str] | str] = None,
        order_by: Optional[Iterable[str] | str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        **params: Any,
    ) -> Dict[str, Any]:
        """Search items with a SCIM filter expression.

        Args:
            q: Filter such as ``(type eq "Article")``.
            fields: Fields to include for each returned item.
            order_by: Sort order, e.g. ``fields.published_date:desc``.
            offset: Index of the first result to return.
            limit: Maximum number of results.
            **params: Any further delivery API query parameters.

        Returns:
            The parsed search result, with matches under ``items``.
        """
        query: Dict[str, Any] = {
            "q": q,
            "fields": fields,
            "orderBy": order_by,
            "offset": offset,
            "limit": limit,
        }
        query.update(params)
        return self._call_server(self.build_url("items", query))

    def get_item(
        self,
        id: Optional[str] = None,
        slug: Optional[str] = None,
        expand: Optional[Iterable[str] | str] = None,
        **params: Any,
    ) -> Dict[str, Any]:
        """Fetch one item by id or, failing that, by slug."""
        if id is not None:
            path = "items/" + quote(str(id), safe="")
        elif slug is not None:
            path = "items/.by.slug/" + quote(str(slug), safe="")
        else:
            raise ValueError("get_item requires an id or a slug.")

        query: Dict[str, Any] = {"expand": expand}
        query.update(params)
        return self._call_server(self.build_url(path, query))

    def get_rendition_url(self, id: str) -> str:
        """Return the native rendition URL of an asset without contacting the server."""
        return self.build_url("assets/" + quote(str(id), safe="") + "/native")

    def _mask(self, url: str) -> str:
        token = self.config.channel_token
        if not token:
            return url
        return url.replace(quote(token, safe=""), "***").replace(token, "***")

    def _call_server(self, url: str) -> Dict[str, Any]:
        safe_url = self._mask(url)
        logger.debug("GET %s", safe_url)
        try:
            response = self._session.get(url, timeout=self.config.timeout)
        except requests.Timeout as exc:
            logger.warning("Request timed out after %ss: %s", self.config.timeout, safe_url)
            raise RequestTimeout(f"Timed out fetching {safe_url}", url=safe_url) from exc
        except requests.RequestException as exc:
            logger.warning("Request failed for %s: %s", safe_url, exc)
            raise NetworkUnavailable(
                f"Could not reach content server: {exc}", url=safe_url
            ) from exc

        status = response.status_code
        if status == 404:
            logger.warning("Item not found: %s", safe_url)
            raise NotFound(f"Not found: {safe_url}", url=safe_url)
        if status < 200 or status >= 300:
            logger.warning("Unexpected status %d from %s", status, safe_url)
            raise ServerError(
                status, f"Content server answered {status} for {safe_url}", url=safe_url
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Response from %s is not valid JSON: %s", safe_url, exc)
            raise MalformedResponse(
                f"Invalid JSON from {safe_url}", url=safe_url
            ) from exc

        if not isinstance(payload, dict):
            logger.warning("Response from %s is not a JSON object", safe_url)
            raise MalformedResponse(
                f"Expected a JSON object from {safe_url}", url=safe_url
            )
        return payload
