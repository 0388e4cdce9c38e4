"""Command-line interface for the content_browser application."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional

from .client import ContentClient
from .config import AppConfig, parse_app_config, parse_env_config
from .errors import ContentError
from .renderers import (
    render_article_detail,
    render_articles_page,
    render_topics_page,
    to_json,
)
from .services import get_medium_rendition_url, get_rendition_url
from .views import load_article_detail, load_articles_page, load_topics_page

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Browse topics and articles published to a content channel."
    )
    parser.add_argument(
        "--config",
        default="configs/config.xml",
        help="Path to the main configuration XML file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING). Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file. Overrides config.",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("topics", help="List the topics on the home page.")

    articles = subparsers.add_parser("articles", help="List the articles of a topic.")
    articles.add_argument("topic_id", help="ID of the topic.")
    articles.add_argument("--topic-name", default=None, help="Title to display.")

    article = subparsers.add_parser("article", help="Show a single article.")
    article.add_argument("article_id", help="ID of the article.")

    rendition = subparsers.add_parser("rendition", help="Print an asset's image URL.")
    rendition.add_argument("asset_id", help="ID of the image asset.")
    rendition.add_argument(
        "--medium",
        action="store_true",
        help="Resolve the medium jpg rendition instead of the native URL.",
    )

    return parser


LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Route log records to stderr and, optionally, to ``log_file``.

    Connection pool chatter from urllib3 is only shown at DEBUG.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(
        logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    )
    logger.debug(
        "Logging at %s to %s",
        logging.getLevelName(level),
        log_file or "stderr only",
    )


def run_command(args: argparse.Namespace, app_config: AppConfig) -> str:
    """Execute the selected subcommand and return the text to print."""
    with ContentClient(app_config.content_config()) as client:
        if args.command == "rendition":
            if args.medium:
                return get_medium_rendition_url(client, args.asset_id)
            return get_rendition_url(client, args.asset_id)

        if args.command == "topics":
            page = load_topics_page(
                client,
                concurrency=app_config.concurrency,
                home_type=app_config.home_page.content_type,
                home_name=app_config.home_page.name,
            )
            render = render_topics_page
        elif args.command == "articles":
            page = load_articles_page(
                client,
                args.topic_id,
                topic_name=args.topic_name,
                concurrency=app_config.concurrency,
                article_type=app_config.article_type,
            )
            render = render_articles_page
        else:
            page = load_article_detail(client, args.article_id)
            render = render_article_detail

    if args.format == "json":
        return to_json(page)
    return render(page)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = parse_app_config(args.config)

        if app_config.env_file:
            env_vars = parse_env_config(app_config.env_file)
            os.environ.update(env_vars)

        # CLI overrides config
        log_level = args.log_level or app_config.logging.level
        log_file = args.log_file or app_config.logging.file

        configure_logging(log_level, log_file)

        output = run_command(args, app_config)
    except ValueError as exc:
        parser.error(str(exc))
    except (ContentError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    print(output)
    return 0
