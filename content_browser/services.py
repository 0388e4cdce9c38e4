"""Content queries used by the topic, article list and article screens."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .client import ContentClient
from .config import (
    DEFAULT_ARTICLE_TYPE,
    DEFAULT_HOME_PAGE_NAME,
    DEFAULT_HOME_PAGE_TYPE,
)
from .errors import MalformedResponse, RenditionNotFound
from .models import HomePage

logger = logging.getLogger(__name__)

MEDIUM_RENDITION = "Medium"


def _items(result: Dict[str, Any]) -> List[Dict[str, Any]]:
    items = result.get("items")
    if items is None:
        return []
    if not isinstance(items, list):
        raise MalformedResponse("Query result 'items' is not a list.")
    return items


def fetch_home_page(
    client: ContentClient,
    content_type: str = DEFAULT_HOME_PAGE_TYPE,
    name: str = DEFAULT_HOME_PAGE_NAME,
) -> Optional[HomePage]:
    """Fetch the top level values to be displayed on the home page.

    Returns ``None`` when no home page item has been published.
    """
    result = client.query_items(q=f'(type eq "{content_type}" AND name eq "{name}")')
    items = _items(result)
    if not items:
        logger.info("No '%s' item named '%s' in channel", content_type, name)
        return None

    fields = items[0].get("fields")
    if not isinstance(fields, dict):
        raise MalformedResponse("Home page item has no fields.")

    logo = fields.get("company_logo") or {}
    topics = fields.get("topics") or []
    if not isinstance(topics, list) or not all(isinstance(t, dict) for t in topics):
        raise MalformedResponse("Home page 'topics' is not a list of item references.")
    return HomePage(
        logo_id=logo.get("id") if isinstance(logo, dict) else None,
        title=fields.get("company_name"),
        topics=topics,
        about_url=fields.get("about_url"),
        contact_url=fields.get("contact_url"),
    )


def fetch_topic(client: ContentClient, topic_id: str) -> Dict[str, Any]:
    return client.get_item(id=topic_id, expand="fields.thumbnail")


def fetch_articles(
    client: ContentClient, topic_id: str, content_type: str = DEFAULT_ARTICLE_TYPE
) -> List[Dict[str, Any]]:
    """Return the articles of a topic, newest first."""
    result = client.query_items(
        q=f'(type eq "{content_type}" AND fields.topic eq "{topic_id}")',
        order_by="fields.published_date:desc",
    )
    articles = _items(result)
    logger.debug("Topic %s has %d articles", topic_id, len(articles))
    return articles


def fetch_article(client: ContentClient, article_id: str) -> Dict[str, Any]:
    return client.get_item(id=article_id, expand="fields.author")


def _first(entries: Any, key: str, wanted: str) -> Optional[Dict[str, Any]]:
    for entry in entries or []:
        if isinstance(entry, dict) and entry.get(key) == wanted:
            return entry
    return None


def find_rendition_url(
    asset: Dict[str, Any],
    rendition: str = MEDIUM_RENDITION,
    fmt: str = "jpg",
    rel: str = "self",
) -> str:
    """Walk rendition name, then format, then link relation to a URL."""
    asset_id = asset.get("id")
    fields = asset.get("fields") or {}

    match = _first(fields.get("renditions"), "name", rendition)
    if match is None:
        raise RenditionNotFound(f"Asset {asset_id} has no '{rendition}' rendition.")

    variant = _first(match.get("formats"), "format", fmt)
    if variant is None:
        raise RenditionNotFound(
            f"Rendition '{rendition}' of asset {asset_id} has no '{fmt}' format."
        )

    link = _first(variant.get("links"), "rel", rel)
    if link is None or not link.get("href"):
        raise RenditionNotFound(
            f"Rendition '{rendition}/{fmt}' of asset {asset_id} has no '{rel}' link."
        )
    return link["href"]


def get_medium_rendition_url(client: ContentClient, asset_id: str) -> str:
    asset = client.get_item(id=asset_id, expand="fields.renditions")
    return find_rendition_url(asset)


def get_rendition_url(client: ContentClient, asset_id: str) -> str:
    return client.get_rendition_url(asset_id)
