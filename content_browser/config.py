"""Configuration loading for the content server connection."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from xml.etree import ElementTree as ET

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "v1.1"
DEFAULT_HOME_PAGE_TYPE = "OCEGettingStartedHomePage"
DEFAULT_HOME_PAGE_NAME = "HomePage"
DEFAULT_ARTICLE_TYPE = "OCEGettingStartedArticle"

SERVER_URL_ENV = "CONTENT_SERVER_URL"
CHANNEL_TOKEN_ENV = "CONTENT_CHANNEL_TOKEN"
API_VERSION_ENV = "CONTENT_API_VERSION"


@dataclass
class ContentConfig:
    """Connection settings for the content delivery API."""

    server_url: str
    channel_token: str
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 10.0


@dataclass
class HomePageConfig:
    content_type: str = DEFAULT_HOME_PAGE_TYPE
    name: str = DEFAULT_HOME_PAGE_NAME


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class AppConfig:
    server_url: Optional[str]
    channel_token: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 10.0
    concurrency: int = 5
    env_file: Optional[str] = None
    home_page: HomePageConfig = field(default_factory=HomePageConfig)
    article_type: str = DEFAULT_ARTICLE_TYPE
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def content_config(self) -> ContentConfig:
        """Build client settings, letting environment variables win over XML."""
        server_url = os.environ.get(SERVER_URL_ENV) or self.server_url
        channel_token = os.environ.get(CHANNEL_TOKEN_ENV) or self.channel_token
        api_version = os.environ.get(API_VERSION_ENV) or self.api_version

        if not server_url:
            raise ValueError("No content server URL configured.")
        if not channel_token:
            raise ValueError(
                f"No channel token configured. Set <channel-token> or {CHANNEL_TOKEN_ENV}."
            )
        if self.timeout <= 0:
            raise ValueError("Request timeout must be positive.")

        return ContentConfig(
            server_url=server_url,
            channel_token=channel_token,
            api_version=api_version,
            timeout=self.timeout,
        )


def _resolve_path(config_path: Path, value: str) -> str:
    """Resolve ``value`` against the directory holding the config file."""
    target = Path(value).expanduser()
    if not target.is_absolute():
        target = config_path.parent / target
    return str(target.resolve())


def _text(root: ET.Element, tag: str) -> Optional[str]:
    value = root.findtext(tag)
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_env_config(path: str) -> Dict[str, str]:
    """Read ``<variable name="...">value</variable>`` pairs, e.g. the channel token."""
    if not path:
        return {}

    logger.info("Loading environment overrides from %s", path)
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ValueError(f"Environment file {path} is not valid XML: {exc}") from exc

    env_vars: Dict[str, str] = {}
    for var in root.findall("variable"):
        name = var.attrib.get("name")
        value = (var.text or "").strip()
        if not name or not value:
            logger.debug("Ignoring empty environment variable entry in %s", path)
            continue
        env_vars[name] = value

    logger.debug("Loaded %d environment overrides", len(env_vars))
    return env_vars


def parse_app_config(path: str) -> AppConfig:
    """Parse the main application configuration XML."""
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    logger.info("Loading application configuration from %s", config_path)
    tree = ET.parse(config_path)
    root = tree.getroot()

    env_node = root.find("env")
    env_file = (
        _resolve_path(config_path, env_node.text.strip())
        if env_node is not None and env_node.text
        else None
    )

    server_url = _text(root, "server-url")
    if not server_url and not env_file and not os.environ.get(SERVER_URL_ENV):
        raise ValueError("Config missing <server-url>")

    try:
        timeout = float(root.findtext("timeout", "10"))
        concurrency = int(root.findtext("concurrency", "5"))
    except ValueError as exc:
        raise ValueError(f"Invalid numeric value in {config_path}: {exc}") from exc
    if concurrency < 1:
        raise ValueError("<concurrency> must be at least 1.")

    home_node = root.find("home-page")
    home_page = HomePageConfig()
    if home_node is not None:
        home_page.content_type = home_node.attrib.get("type", home_page.content_type)
        home_page.name = home_node.attrib.get("name", home_page.name)

    log_node = root.find("logging")
    logging_config = LoggingConfig()
    if log_node is not None:
        logging_config.level = log_node.findtext("level", "INFO")
        log_file = log_node.findtext("file")
        if log_file:
            logging_config.file = _resolve_path(config_path, log_file)

    return AppConfig(
        server_url=server_url,
        channel_token=_text(root, "channel-token"),
        api_version=_text(root, "api-version") or DEFAULT_API_VERSION,
        timeout=timeout,
        concurrency=concurrency,
        env_file=env_file,
        home_page=home_page,
        article_type=_text(root, "article-type") or DEFAULT_ARTICLE_TYPE,
        logging=logging_config,
    )
