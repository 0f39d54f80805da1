"""
Retailer Price Rule Registry

Maps a retailer domain to the rule that reads the raw price text off that
retailer's product page. Adding a retailer means registering one rule;
dispatch never changes.
"""

import logging
from typing import Callable, Dict, List, Optional, Union

from bs4 import BeautifulSoup

from ..common.config_loader import load_retailer_rules

logger = logging.getLogger(__name__)

PriceRule = Callable[[BeautifulSoup], Optional[str]]


class SelectorRule:
    """
    Structural price lookup: the first element matching a CSS selector,
    then either one of its attributes or its text.

    Nesting is expressed with descendant selectors, e.g.
    `.prd-amounts .current` reads "within .prd-amounts, the first .current".

    Usage:
        rule = SelectorRule('[itemprop="price"]', attribute='content')
        raw = rule(soup)   # '499.00' or None
    """

    def __init__(self, selector: str, attribute: Optional[str] = None):
        self.selector = selector
        self.attribute = attribute

    def __call__(self, soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(self.selector)
        if element is None:
            return None

        if self.attribute:
            value = element.get(self.attribute)
            if isinstance(value, list):
                value = " ".join(value)
        else:
            value = element.get_text(" ", strip=True)

        if not value or not value.strip():
            return None
        return value.strip()

    def __repr__(self) -> str:
        if self.attribute:
            return f"SelectorRule({self.selector!r}, attribute={self.attribute!r})"
        return f"SelectorRule({self.selector!r})"


class SiteExtractorRegistry:
    """
    Registry of price rules keyed by retailer domain (case-insensitive).

    Populated once at startup and frozen before a run, so workers read it
    without locking.
    """

    def __init__(self):
        """Initialize empty registry"""
        self._rules: Dict[str, PriceRule] = {}
        self._frozen = False

    @staticmethod
    def _key(domain: str) -> str:
        return domain.strip().lower()

    def register(self, domain: str, rule: PriceRule) -> None:
        """
        Register the price rule for a retailer domain.

        Args:
            domain: Retailer domain (e.g., 'argos.co.uk')
            rule: Callable taking the parsed page and returning raw price text or None

        Raises:
            ValueError: If the domain is blank or already registered
            RuntimeError: If the registry has been frozen
        """
        if self._frozen:
            raise RuntimeError("Registry is frozen; register rules before the run starts")

        key = self._key(domain)
        if not key:
            raise ValueError("Retailer domain must not be empty")
        if key in self._rules:
            raise ValueError(f"Rule for '{domain}' is already registered")

        self._rules[key] = rule

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def has_rule(self, domain: str) -> bool:
        return self._key(domain) in self._rules

    def get_rule(self, domain: str) -> Optional[PriceRule]:
        return self._rules.get(self._key(domain))

    def domains(self) -> List[str]:
        """Get all registered retailer domains, sorted."""
        return sorted(self._rules)

    def extract(self, domain: str, page: Union[str, BeautifulSoup]) -> Optional[str]:
        """
        Read the raw price text from a retailer page.

        Args:
            domain: Retailer domain
            page: Page HTML, or an already parsed BeautifulSoup

        Returns:
            Raw price text, or None if the retailer has no rule or the page
            does not have the expected structure
        """
        rule = self.get_rule(domain)
        if rule is None:
            return None

        soup = page if isinstance(page, BeautifulSoup) else BeautifulSoup(page or "", "lxml")

        try:
            return rule(soup)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            # Page layout drift for one retailer must not stop the others
            logger.debug("Price rule for %s failed: %s: %s", domain, type(e).__name__, e)
            return None
        except Exception as e:
            # Broken rule (bad selector, bug in a custom rule); the page is treated as priceless
            logger.warning("Price rule for %s raised %s: %s", domain, type(e).__name__, e)
            return None

    def count(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"SiteExtractorRegistry({self.count()} retailers: {', '.join(self.domains())})"


def build_registry(rules: Dict[str, Dict]) -> SiteExtractorRegistry:
    """
    Build a registry of SelectorRules from rule definitions.

    Args:
        rules: Mapping of domain to {'selector': ..., 'attribute': ...}

    Returns:
        Unfrozen registry, so callers can add custom rules
    """
    registry = SiteExtractorRegistry()
    for domain, definition in rules.items():
        selector = (definition or {}).get('selector')
        if not selector:
            logger.warning("Skipping rule for %s: no selector", domain)
            continue
        registry.register(domain, SelectorRule(selector, definition.get('attribute')))
    return registry


def build_default_registry(path: Optional[str] = None) -> SiteExtractorRegistry:
    """Build the registry from config/retailers.yaml (or the given file)."""
    registry = build_registry(load_retailer_rules(path))
    logger.debug("Loaded %r", registry)
    return registry
