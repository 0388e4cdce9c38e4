"""Assembly of the topics, articles and article detail screens."""

from __future__ import annotations

import concurrent.futures
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .client import ContentClient
from .config import DEFAULT_ARTICLE_TYPE, DEFAULT_HOME_PAGE_NAME, DEFAULT_HOME_PAGE_TYPE
from .errors import ContentError, HomePageNotConfigured, MalformedResponse
from .models import (
    ArticleCard,
    ArticleDetail,
    ArticlesPage,
    TopicCard,
    TopicsPage,
)
from .services import (
    fetch_article,
    fetch_articles,
    fetch_home_page,
    fetch_topic,
    get_medium_rendition_url,
    get_rendition_url,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def parse_published(value: Optional[Dict[str, Any]]) -> Optional[datetime]:
    """Convert a ``published_date`` field to a timezone-aware datetime."""
    if not value or not value.get("value"):
        return None
    raw = value["value"]
    if not isinstance(raw, str):
        raise MalformedResponse(f"Published date is not a string: {raw!r}")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise MalformedResponse(f"Unparseable published date: {value['value']}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value: Optional[datetime]) -> str:
    """Format a date as e.g. ``September 24, 2019``."""
    if value is None:
        return ""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def _nested_id(record: Dict[str, Any], *path: str) -> Optional[str]:
    current: Any = record
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    if isinstance(current, dict):
        return current.get("id")
    return None


def _published_or_none(item: Dict[str, Any]) -> Optional[datetime]:
    fields = item.get("fields") or {}
    try:
        return parse_published(fields.get("published_date"))
    except MalformedResponse as exc:
        logger.warning("Ignoring published date of %s: %s", item.get("id"), exc)
        return None


def _medium_url_or_none(
    client: ContentClient, asset_id: Optional[str], owner: str
) -> Optional[str]:
    """Resolve an image for display; a missing image never fails the screen."""
    if not asset_id:
        return None
    try:
        return get_medium_rendition_url(client, asset_id)
    except ContentError as exc:
        logger.warning("No image for %s: %s", owner, exc)
        return None


def _map_in_order(
    func: Callable[[T], R], items: Sequence[T], concurrency: int
) -> List[R]:
    """Run ``func`` over ``items`` concurrently, returning results in input order.

    If any call raises, calls that have not started yet are cancelled and
    the first exception is re-raised.
    """
    if not items:
        return []

    with concurrent.futures.ThreadPoolExecutor(max_workers=concurrency) as executor:
        futures = [executor.submit(func, item) for item in items]
        try:
            return [future.result() for future in futures]
        except BaseException:
            for future in futures:
                future.cancel()
            raise


def load_topics_page(
    client: ContentClient,
    concurrency: int = 5,
    home_type: str = DEFAULT_HOME_PAGE_TYPE,
    home_name: str = DEFAULT_HOME_PAGE_NAME,
) -> TopicsPage:
    """Build the topics screen from the home page item and its topics."""
    home = fetch_home_page(client, content_type=home_type, name=home_name)
    if home is None:
        raise HomePageNotConfigured(
            "No home page found. Verify that data has been seeded to the server "
            "and that the server URL and channel token are configured."
        )

    topic_ids = []
    for reference in home.topics:
        if reference.get("id"):
            topic_ids.append(reference["id"])
        else:
            logger.warning("Home page topic without an id: %s", reference)

    def load_topic(topic_id: str) -> Optional[TopicCard]:
        try:
            topic = fetch_topic(client, topic_id)
        except ContentError as exc:
            logger.warning("Skipping topic %s: %s", topic_id, exc)
            return None
        return TopicCard(
            id=topic.get("id", topic_id),
            name=topic.get("name", ""),
            description=topic.get("description"),
            thumbnail_url=_medium_url_or_none(
                client, _nested_id(topic, "fields", "thumbnail"), f"topic {topic_id}"
            ),
        )

    cards = _map_in_order(load_topic, topic_ids, concurrency)
    topics = [card for card in cards if card is not None]
    logger.info("Loaded %d of %d topics", len(topics), len(topic_ids))

    return TopicsPage(
        title=home.title,
        about_url=home.about_url,
        contact_url=home.contact_url,
        logo_url=get_rendition_url(client, home.logo_id) if home.logo_id else None,
        topics=topics,
    )


def load_articles_page(
    client: ContentClient,
    topic_id: str,
    topic_name: Optional[str] = None,
    concurrency: int = 5,
    article_type: str = DEFAULT_ARTICLE_TYPE,
) -> ArticlesPage:
    """Build the article list of a topic, with a thumbnail for each article."""
    articles = fetch_articles(client, topic_id, content_type=article_type)

    def load_card(article: Dict[str, Any]) -> ArticleCard:
        return ArticleCard(
            id=article.get("id", ""),
            name=article.get("name", ""),
            description=article.get("description"),
            published=_published_or_none(article),
            thumbnail_url=_medium_url_or_none(
                client,
                _nested_id(article, "fields", "image"),
                f"article {article.get('id')}",
            ),
        )

    return ArticlesPage(
        topic_id=topic_id,
        topic_name=topic_name,
        articles=_map_in_order(load_card, articles, concurrency),
    )


def load_article_detail(client: ContentClient, article_id: str) -> ArticleDetail:
    """Fetch an article, then its image URL, then its author's avatar.

    Only a failure to fetch the article itself is raised.
    """
    article = fetch_article(client, article_id)
    fields = article.get("fields") or {}

    image_id = _nested_id(article, "fields", "image")
    image_url = get_rendition_url(client, image_id) if image_id else None

    author = fields.get("author") or {}
    avatar_url = _medium_url_or_none(
        client, _nested_id(author, "fields", "avatar"), f"author of {article_id}"
    )

    return ArticleDetail(
        id=article.get("id", article_id),
        name=article.get("name", ""),
        published=_published_or_none(article),
        author_name=author.get("name"),
        author_avatar_url=avatar_url,
        image_url=image_url,
        image_caption=fields.get("image_caption"),
        body_html=fields.get("article_content"),
    )
