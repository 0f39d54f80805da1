# Common utilities
from .config_loader import (
    CrawlerSettings,
    SearchSettings,
    load_config,
    load_crawler_settings,
    load_retailer_rules,
)
from .http_client import PageFetcher
from .log_config import setup_logging
