"""Tests for price_crawler/extraction/registry.py"""

import pytest
from bs4 import BeautifulSoup

from price_crawler.extraction.registry import (
    SelectorRule,
    SiteExtractorRegistry,
    build_default_registry,
    build_registry,
)


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


class TestSelectorRule:
    def test_reads_text(self):
        rule = SelectorRule("#final-price")
        assert rule(make_soup('<span id="final-price"> £349.00 </span>')) == "£349.00"

    def test_reads_attribute(self):
        rule = SelectorRule('[itemprop="price"]', attribute="content")
        soup = make_soup('<meta itemprop="price" content="249.99"><span itemprop="price">x</span>')
        assert rule(soup) == "249.99"

    def test_nested_lookup(self):
        rule = SelectorRule(".prd-amounts .current")
        html = """
        <div class="current">£1.00</div>
        <div class="prd-amounts"><span class="was">£500</span><span class="current">£449</span></div>
        """
        assert rule(make_soup(html)) == "£449"

    def test_first_match_wins(self):
        rule = SelectorRule(".price")
        assert rule(make_soup('<p class="price">£10</p><p class="price">£5</p>')) == "£10"

    def test_missing_element_returns_none(self):
        assert SelectorRule("#final-price")(make_soup("<p>nothing</p>")) is None

    def test_missing_attribute_returns_none(self):
        rule = SelectorRule('[itemprop="price"]', attribute="content")
        assert rule(make_soup('<span itemprop="price">£5</span>')) is None

    def test_blank_text_returns_none(self):
        assert SelectorRule(".price")(make_soup('<p class="price">   </p>')) is None


class TestSiteExtractorRegistry:
    def test_register_and_extract(self):
        registry = SiteExtractorRegistry()
        registry.register("rdo.co.uk", SelectorRule("#final-price"))
        assert registry.extract("rdo.co.uk", '<b id="final-price">£99</b>') == "£99"

    def test_unknown_domain_returns_none(self):
        registry = SiteExtractorRegistry()
        assert registry.extract("unknown.com", '<b class="price">£99</b>') is None
        assert registry.has_rule("unknown.com") is False

    def test_lookup_is_case_insensitive(self):
        registry = SiteExtractorRegistry()
        registry.register("AO.com", SelectorRule(".price"))
        assert registry.has_rule("ao.com")
        assert registry.has_rule(" Ao.Com ")

    def test_duplicate_registration_raises(self):
        registry = SiteExtractorRegistry()
        registry.register("ao.com", SelectorRule(".price"))
        with pytest.raises(ValueError):
            registry.register("ao.com", SelectorRule(".other"))

    def test_blank_domain_raises(self):
        with pytest.raises(ValueError):
            SiteExtractorRegistry().register("  ", SelectorRule(".price"))

    def test_frozen_registry_rejects_new_rules(self):
        registry = SiteExtractorRegistry()
        registry.freeze()
        assert registry.frozen
        with pytest.raises(RuntimeError):
            registry.register("ao.com", SelectorRule(".price"))

    def test_rules_are_independent(self):
        registry = SiteExtractorRegistry()
        registry.register("a.com", SelectorRule(".a"))
        registry.register("b.com", SelectorRule(".b"))
        html = '<p class="a">£1</p><p class="b">£2</p>'
        assert registry.extract("a.com", html) == "£1"
        assert registry.extract("b.com", html) == "£2"

    def test_custom_rule_failure_mapped_to_none(self):
        def fragile_rule(soup):
            return soup.find(id="productInformation").find(itemprop="price").text

        registry = SiteExtractorRegistry()
        registry.register("ao.com", fragile_rule)
        assert registry.extract("ao.com", "<html><body></body></html>") is None

    def test_rule_raising_unexpected_error_returns_none(self):
        def broken_rule(soup):
            raise RuntimeError("layout drift")

        registry = SiteExtractorRegistry()
        registry.register("ao.com", broken_rule)
        assert registry.extract("ao.com", '<p class="price">£1</p>') is None

    def test_malformed_selector_returns_none(self):
        registry = SiteExtractorRegistry()
        registry.register("rdo.co.uk", SelectorRule("[broken"))
        assert registry.extract("rdo.co.uk", '<span id="final-price">£199.97</span>') is None

    def test_broken_rule_does_not_affect_other_retailers(self):
        registry = SiteExtractorRegistry()
        registry.register("rdo.co.uk", SelectorRule("[broken"))
        registry.register("ao.com", SelectorRule(".price"))
        html = '<p class="price">£529</p>'
        assert registry.extract("rdo.co.uk", html) is None
        assert registry.extract("ao.com", html) == "£529"

    def test_accepts_parsed_soup(self):
        registry = SiteExtractorRegistry()
        registry.register("ao.com", SelectorRule(".price"))
        assert registry.extract("ao.com", make_soup('<p class="price">£3</p>')) == "£3"

    def test_domains_sorted(self):
        registry = build_registry({"b.com": {"selector": ".p"}, "a.com": {"selector": ".p"}})
        assert registry.domains() == ["a.com", "b.com"]
        assert registry.count() == 2


class TestBuildRegistry:
    def test_skips_rule_without_selector(self):
        registry = build_registry({"a.com": {"attribute": "content"}, "b.com": {"selector": ".p"}})
        assert registry.domains() == ["b.com"]

    def test_built_registry_is_not_frozen(self):
        assert build_registry({}).frozen is False


class TestDefaultRetailerRules:
    """The shipped config/retailers.yaml rules against minimal page markup."""

    @pytest.fixture(scope="class")
    def registry(self):
        return build_default_registry()

    def test_argos_reads_itemprop_content(self, registry):
        html = '<div><span itemprop="price" content="279.00">£279.00</span></div>'
        assert registry.extract("argos.co.uk", html) == "279.00"

    def test_currys_reads_current_amount(self, registry):
        html = '<div class="prd-amounts"><strong class="current">£399.00</strong></div>'
        assert registry.extract("currys.co.uk", html) == "£399.00"

    def test_ao_reads_price_inside_product_information(self, registry):
        html = """
        <span itemprop="price">£1.00</span>
        <section id="productInformation"><span itemprop="price">£529</span></section>
        """
        assert registry.extract("ao.com", html) == "£529"

    def test_rdo_reads_final_price(self, registry):
        assert registry.extract("rdo.co.uk", '<span id="final-price">£199.97</span>') == "£199.97"

    def test_marks_electrical_reads_cashback_price(self, registry):
        html = '<p class="price">£10</p><p class="price price-cashback">£449</p>'
        assert registry.extract("markselectrical.co.uk", html) == "£449"

    def test_layout_drift_returns_none(self, registry):
        for domain in registry.domains():
            assert registry.extract(domain, "<html><body><p>Redesigned</p></body></html>") is None
