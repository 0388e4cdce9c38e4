"""Jinja2 environment for content_browser templates."""

from __future__ import annotations

import re
from importlib import resources

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader

from .views import format_date

_ENV: Environment | None = None


def _html_to_text(value: str | None) -> str:
    """Return the readable text of an HTML fragment, one paragraph per line."""
    if not value:
        return ""
    soup = BeautifulSoup(value, "html.parser")
    text = soup.get_text(separator="\n", strip=True)
    text = re.sub(r"\n{2,}", "\n", text)
    return text.strip()


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        template_dir = resources.files(__package__) / "templates"
        loader = FileSystemLoader(str(template_dir))
        _ENV = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        _ENV.filters["html_to_text"] = _html_to_text
        _ENV.filters["mdy"] = format_date
    return _ENV
