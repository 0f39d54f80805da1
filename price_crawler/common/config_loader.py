"""
Configuration Loader

Loads YAML configuration files for the crawler (HTTP, search page markup,
concurrency) and the per-retailer price extraction rules.

Environment variables (read from a .env file when present) override the
matching YAML values:
    PRICE_CRAWLER_USER_AGENT
    PRICE_CRAWLER_CELL_WORKERS
    PRICE_CRAWLER_PAGE_WORKERS
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .constants import (
    DEFAULT_EXCLUDED_EXTENSIONS,
    DEFAULT_OUTPUT_SUFFIX,
    DEFAULT_REDIRECT_PREFIX,
    DEFAULT_RESULT_CLASS,
    DEFAULT_SEARCH_URL,
    DEFAULT_SNIPPET_CLASS,
    DEFAULT_SNIPPET_INDEX,
    DEFAULT_TITLE_TAG,
    DEFAULT_USER_AGENT,
)

logger = logging.getLogger(__name__)


@dataclass
class SearchSettings:
    """Search engine URL and the markup conventions of its results page."""
    url: str = DEFAULT_SEARCH_URL
    result_class: str = DEFAULT_RESULT_CLASS
    title_tag: str = DEFAULT_TITLE_TAG
    snippet_class: str = DEFAULT_SNIPPET_CLASS
    snippet_index: int = DEFAULT_SNIPPET_INDEX
    redirect_prefix: str = DEFAULT_REDIRECT_PREFIX


@dataclass
class CrawlerSettings:
    """Run-wide crawler settings."""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    min_host_interval: float = 1.0   # seconds between requests to one host
    max_in_flight: int = 4           # concurrent HTTP requests, all hosts
    cell_workers: int = 4
    page_workers: int = 3
    excluded_extensions: Tuple[str, ...] = DEFAULT_EXCLUDED_EXTENSIONS
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    search: SearchSettings = field(default_factory=SearchSettings)


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'crawler.yaml'), or a path
            to a file outside the config directory

    Returns:
        Parsed YAML content as dictionary (empty if the file is empty)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = Path(filename)
    if not config_path.is_file():
        config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer)", name, value)
        return default


def build_crawler_settings(config: Dict[str, Any]) -> CrawlerSettings:
    """
    Build CrawlerSettings from a parsed crawler.yaml dict.

    Missing sections or keys fall back to the built-in defaults.
    """
    defaults = CrawlerSettings()
    http = config.get('http') or {}
    search = config.get('search') or {}
    discovery = config.get('discovery') or {}
    concurrency = config.get('concurrency') or {}
    output = config.get('output') or {}

    extensions = discovery.get('excluded_extensions') or list(defaults.excluded_extensions)

    return CrawlerSettings(
        user_agent=http.get('user_agent', defaults.user_agent),
        timeout=float(http.get('timeout', defaults.timeout)),
        min_host_interval=float(http.get('min_host_interval', defaults.min_host_interval)),
        max_in_flight=int(http.get('max_in_flight', defaults.max_in_flight)),
        cell_workers=int(concurrency.get('cell_workers', defaults.cell_workers)),
        page_workers=int(concurrency.get('page_workers', defaults.page_workers)),
        excluded_extensions=tuple(ext.lower() for ext in extensions),
        output_suffix=output.get('suffix', defaults.output_suffix),
        search=SearchSettings(
            url=search.get('url', DEFAULT_SEARCH_URL),
            result_class=search.get('result_class', DEFAULT_RESULT_CLASS),
            title_tag=search.get('title_tag', DEFAULT_TITLE_TAG),
            snippet_class=search.get('snippet_class', DEFAULT_SNIPPET_CLASS),
            snippet_index=int(search.get('snippet_index', DEFAULT_SNIPPET_INDEX)),
            redirect_prefix=search.get('redirect_prefix', DEFAULT_REDIRECT_PREFIX),
        ),
    )


def load_crawler_settings(path: Optional[str] = None) -> CrawlerSettings:
    """
    Load crawler settings from YAML, then apply environment overrides.

    Args:
        path: Optional path to a crawler config file (default: config/crawler.yaml)

    Returns:
        CrawlerSettings
    """
    load_dotenv()

    try:
        config = load_config(path or 'crawler.yaml')
    except FileNotFoundError:
        if path:
            raise
        logger.warning("crawler.yaml not found, using defaults")
        config = {}

    settings = build_crawler_settings(config)

    user_agent = os.environ.get('PRICE_CRAWLER_USER_AGENT')
    if user_agent:
        settings.user_agent = user_agent
    settings.cell_workers = _env_int('PRICE_CRAWLER_CELL_WORKERS', settings.cell_workers)
    settings.page_workers = _env_int('PRICE_CRAWLER_PAGE_WORKERS', settings.page_workers)

    return settings


def load_retailer_rules(path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load per-retailer price extraction rules.

    Returns:
        Dictionary mapping retailer domain to its rule definition

    Example:
        {
            'argos.co.uk': {'selector': '[itemprop="price"]', 'attribute': 'content'},
            'rdo.co.uk': {'selector': '#final-price'},
            ...
        }
    """
    config = load_config(path or 'retailers.yaml')
    return config.get('retailers', {}) or {}
