"""View-ready records built from content server items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class HomePage:
    """Top level values shown on the topics page."""

    logo_id: Optional[str]
    title: Optional[str]
    topics: List[Dict[str, Any]]
    about_url: Optional[str] = None
    contact_url: Optional[str] = None


@dataclass
class TopicCard:
    id: str
    name: str
    description: Optional[str]
    thumbnail_url: Optional[str]


@dataclass
class TopicsPage:
    title: Optional[str]
    about_url: Optional[str]
    contact_url: Optional[str]
    logo_url: Optional[str]
    topics: List[TopicCard] = field(default_factory=list)


@dataclass
class ArticleCard:
    id: str
    name: str
    description: Optional[str]
    published: Optional[datetime]
    thumbnail_url: Optional[str] = None


@dataclass
class ArticlesPage:
    topic_id: str
    topic_name: Optional[str]
    articles: List[ArticleCard] = field(default_factory=list)


@dataclass
class ArticleDetail:
    """Everything needed to display a single article."""

    id: str
    name: str
    published: Optional[datetime]
    author_name: Optional[str]
    author_avatar_url: Optional[str]
    image_url: Optional[str]
    image_caption: Optional[str]
    body_html: Optional[str]
