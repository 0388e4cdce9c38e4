"""Rendering helpers for the screens printed by the CLI."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from .models import ArticleDetail, ArticlesPage, TopicsPage
from .templating import get_environment


def render_topics_page(page: TopicsPage) -> str:
    template = get_environment().get_template("topics.txt.j2")
    return template.render(page=page)


def render_articles_page(page: ArticlesPage) -> str:
    template = get_environment().get_template("articles.txt.j2")
    return template.render(page=page)


def render_article_detail(article: ArticleDetail) -> str:
    template = get_environment().get_template("article.txt.j2")
    return template.render(article=article)


def to_json(page: Any) -> str:
    """Serialise a page dataclass (or plain value) as indented JSON."""
    if dataclasses.is_dataclass(page):
        page = dataclasses.asdict(page)
    return json.dumps(page, indent=2, ensure_ascii=False, default=str)
