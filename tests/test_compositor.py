"""Tests for compositor.py — route table and listing pages."""
import pytest

from toolkit.browser import Location, MountPoint
from toolkit.compositor import CatalogCompositor
from toolkit.config import settings
from toolkit.tools.registry import ToolSet, build_registry


def many_tools(count, category="math"):
    tools = ToolSet(category)
    for i in range(count):
        tools.tool(f"tool-{i}", f"Tool {i}", description=f"Number {i}")(lambda data: data)
    return tools


class TestRouteTable:
    def test_paths(self, routes):
        assert set(routes.paths()) == {
            "/", "/404", "/sitemap", "/search",
            "/category/health", "/category/utilities", "/category/calculators",
            "/tools/health/bmi-calculator", "/tools/utilities/picker",
            "/tools/utilities/broken", "/tools/calculators/schedule",
        }

    def test_tool_metadata(self, routes):
        meta = routes.get("/tools/health/bmi-calculator").metadata
        assert meta.title == f"BMI Calculator{settings.title_suffix}"
        assert meta.category == "health"
        assert meta.icon == "⚖️"

    def test_category_metadata(self, routes):
        meta = routes.get("/category/utilities").metadata
        assert meta.title == f"Text & Utilities{settings.title_suffix}"
        assert meta.description.startswith("2 text & utilities")

    def test_build_twice_rejected(self, compositor):
        with pytest.raises(ValueError):
            compositor.build()


class TestListingPages:
    def render(self, compositor, path, query=""):
        entry = compositor.routes.get(path)
        return str(entry.render(MountPoint(), Location(path=path, query=query)))

    def test_home_limits_cards(self, monkeypatch):
        monkeypatch.setattr(settings, "home_cards_per_category", 8)
        compositor = CatalogCompositor(build_registry(many_tools(10)))
        compositor.build()
        html = self.render(compositor, "/")
        assert html.count('class="tool-card') == 8
        assert "View 2 More Tools" in html
        assert "View All 10" in html

    def test_home_without_overflow(self, compositor):
        html = self.render(compositor, "/")
        assert "More Tools" not in html
        assert "Health &amp; Fitness" in html

    def test_category_page(self, compositor):
        html = self.render(compositor, "/category/utilities")
        assert "Option Picker" in html and "Broken Tool" in html
        assert "BMI Calculator" not in html
        assert "2 tools available" in html

    def test_search_page(self, compositor):
        html = self.render(compositor, "/search", "q=picker")
        assert "Option Picker" in html
        assert "1 results" in html

    def test_search_empty_state(self, compositor):
        html = self.render(compositor, "/search", "q=zzz")
        assert "No tools found" in html

    def test_search_evaluated_at_request_time(self, registry, compositor):
        extra = ToolSet("math")
        extra.tool("late", "Late Arrival")(lambda data: data)
        registry.include(extra)
        assert "Late Arrival" in self.render(compositor, "/search", "q=late")

    def test_sitemap_page(self, compositor):
        html = self.render(compositor, "/sitemap")
        for name in ("BMI Calculator", "Option Picker", "Broken Tool", "Schedule"):
            assert name in html

    def test_tool_page_lists_related(self, compositor):
        html = self.render(compositor, "/tools/utilities/picker")
        assert 'id="related-tools"' in html
        assert "Broken Tool" in html


class TestSitemapEntries:
    def test_entries(self, compositor):
        entries = compositor.sitemap_entries("https://tools.example.com/")
        urls = {e.url for e in entries}
        assert "https://tools.example.com/tools/health/bmi-calculator" in urls
        assert "https://tools.example.com/" in urls
        assert not any(u.endswith("/404") for u in urls)

    def test_search_not_listed(self, compositor):
        urls = {e.url for e in compositor.sitemap_entries("https://tools.example.com")}
        assert "https://tools.example.com/sitemap" in urls
        assert "https://tools.example.com/search" not in urls
