"""Tests for router.py — path resolution, document updates, history, submissions."""
import asyncio

import pytest
from markupsafe import Markup

from toolkit.browser import Window
from toolkit.compositor import CatalogCompositor
from toolkit.config import settings
from toolkit.errors import RegistryNotReady
from toolkit.router import (
    NavigationTrigger, RouteEntry, RouteMetadata, RouteTable, Router, RouterState,
)
from toolkit.tools.registry import ToolRegistry

BMI_PATH = "/tools/health/bmi-calculator"


def static(html):
    return lambda mount, location: Markup(html)


class TestRouteTable:
    def test_duplicate_path_rejected(self):
        table = RouteTable()
        table.add(RouteEntry("/", static("home"), RouteMetadata(title="Home")))
        with pytest.raises(ValueError):
            table.add(RouteEntry("/", static("again"), RouteMetadata(title="Home")))


class TestResolution:
    def test_tool_page(self, router, window):
        entry = router.navigate(BMI_PATH)
        assert entry.path == BMI_PATH
        assert entry.tool_id == "bmi-calculator"
        assert router.state is RouterState.RENDERED
        assert not router.not_found
        assert 'id="tool-form"' in str(window.document.mount)

    def test_unknown_path_falls_back_to_404(self, router, window):
        entry = router.navigate("/no/such/page")
        assert entry.path == "/404"
        assert router.not_found
        assert window.location.path == "/no/such/page"
        assert window.document.title == f"Page Not Found{settings.title_suffix}"
        assert "Page Not Found" in str(window.document.mount)

    def test_known_tool_under_wrong_path_redirects(self, router, window):
        router.navigate("/")
        entries_before = len(window.history)
        entry = router.navigate("/tools/wrong-category/bmi-calculator")
        assert entry.path == "/404"
        assert window.location.path == "/404"
        assert window.history.current == "/404"
        assert len(window.history) == entries_before

    def test_unknown_tool_path_is_plain_404(self, router, window):
        router.navigate("/tools/health/nope")
        assert router.not_found
        assert window.location.path == "/tools/health/nope"

    def test_trailing_slash_normalized(self, router):
        assert router.navigate(BMI_PATH + "/").path == BMI_PATH

    def test_home_fallback_without_404(self, registry):
        table = RouteTable()
        table.add(RouteEntry("/", static("home"), RouteMetadata(title="Home")))
        router = Router(Window(), table, registry)
        assert router.navigate("/missing").path == "/"
        assert router.not_found

    def test_no_fallback_stays_idle(self, registry):
        router = Router(Window(), RouteTable(), registry)
        assert router.navigate("/anything") is None
        assert router.state is RouterState.IDLE

    def test_render_failure_shows_error(self, registry):
        def explode(mount, location):
            raise RuntimeError("template exploded")

        table = RouteTable()
        table.add(RouteEntry("/", explode, RouteMetadata(title="Home")))
        window = Window()
        Router(window, table, registry).navigate("/")
        html = str(window.document.mount)
        assert "Calculation Error" in html
        assert "template exploded" in html


class TestMetadata:
    def test_head_tags(self, router, window):
        router.navigate(BMI_PATH)
        doc = window.document
        title = f"BMI Calculator{settings.title_suffix}"
        assert doc.title == title
        assert doc.meta("description") == "Calculate Body Mass Index"
        assert "BMI Calculator" in doc.meta("keywords")
        assert doc.meta("og:title", attribute="property") == title
        assert doc.meta("og:url", attribute="property") == "http://localhost" + BMI_PATH
        assert doc.meta("twitter:description") == "Calculate Body Mass Index"
        assert doc.links["canonical"] == "http://localhost" + BMI_PATH

    def test_breadcrumbs(self, router, window):
        router.navigate(BMI_PATH)
        crumbs = [(c.name, c.url) for c in window.document.breadcrumbs]
        assert crumbs == [
            ("Home", "/"),
            ("Health & Fitness", "/category/health"),
            ("BMI Calculator", BMI_PATH),
        ]

    def test_breadcrumb_structured_data(self, router, window):
        router.navigate(BMI_PATH)
        data = window.document.structured_data
        assert data["@type"] == "BreadcrumbList"
        assert [i["position"] for i in data["itemListElement"]] == [1, 2, 3]
        assert data["itemListElement"][1]["item"] == "http://localhost/category/health"

    def test_structured_data_replaced(self, router, window):
        router.navigate(BMI_PATH)
        router.navigate("/")
        assert len(window.document.structured_data["itemListElement"]) == 1

    def test_resolution_idempotent(self, router, window):
        router.navigate(BMI_PATH)
        first = (dict(window.document.metas), list(window.document.breadcrumbs), window.document.structured_data)
        router.navigate(BMI_PATH)
        second = (dict(window.document.metas), list(window.document.breadcrumbs), window.document.structured_data)
        assert first == second


class TestNavigation:
    def test_history_push_back_forward(self, router, window):
        router.navigate("/")
        router.navigate("/category/health")
        router.navigate(BMI_PATH)
        assert window.history.entries == ["/", "/category/health", BMI_PATH]

        router.back()
        assert window.location.path == "/category/health"
        assert router.last_trigger is NavigationTrigger.POPSTATE
        assert len(window.history) == 3

        router.forward()
        assert window.location.path == BMI_PATH

    def test_back_at_start(self, router):
        assert router.back() is None

    def test_handle_link(self, router, window):
        assert router.handle_link("/category/utilities")
        assert window.location.path == "/category/utilities"
        assert router.last_trigger is NavigationTrigger.LINK
        assert router.handle_link("http://localhost/sitemap")
        assert not router.handle_link("https://example.com/elsewhere")
        assert window.location.path == "/sitemap"

    def test_active_navigation(self, router, window):
        router.navigate(BMI_PATH)
        assert window.document.nav.active_category == "health"
        router.navigate("/category/utilities")
        assert window.document.nav.active_category == "utilities"
        assert window.document.nav.is_active("/category/utilities")
        router.navigate("/")
        assert window.document.nav.active_category is None

    def test_scrolls_to_top(self, router, window):
        window.scroll_y = 500
        router.navigate("/sitemap")
        assert window.scroll_y == 0

    def test_search_reads_query(self, router, window):
        router.navigate("/search?q=BMI")
        html = str(window.document.mount)
        assert "BMI Calculator" in html
        assert "Option Picker" not in html


class TestSubmit:
    def test_result_painted_into_page(self, router, window):
        router.navigate(BMI_PATH)
        rendered = router.submit("bmi-calculator", {"weight": "70", "height": "175"})
        assert rendered.kind == "numeric"
        html = str(window.document.mount)
        assert "22.86" in html
        assert 'value="70"' in html
        assert router.last_trigger is NavigationTrigger.SUBMIT

    def test_compute_exception_shown_as_error(self, router, window):
        router.navigate("/tools/utilities/broken")
        rendered = router.submit("broken", {})
        assert rendered.kind == "error"
        assert "division by zero" in str(window.document.mount)

    def test_navigation_clears_result(self, router, window):
        router.navigate(BMI_PATH)
        router.submit("bmi-calculator", {"weight": "70", "height": "175"})
        router.navigate(BMI_PATH)
        assert "22.86" not in str(window.document.mount)


class TestStart:
    @pytest.mark.asyncio
    async def test_waits_for_registry(self, tool_sets):
        registry = ToolRegistry()
        for tool_set in tool_sets:
            registry.include(tool_set)
        routes = CatalogCompositor(registry).build()
        window = Window(path=BMI_PATH)
        router = Router(window, routes, registry)

        task = asyncio.create_task(router.start())
        await asyncio.sleep(0.01)
        assert router.state is RouterState.IDLE
        registry.mark_ready()
        entry = await task
        assert entry.path == BMI_PATH
        assert router.last_trigger is NavigationTrigger.INITIAL
        assert window.history.entries == [BMI_PATH]

    @pytest.mark.asyncio
    async def test_times_out(self, monkeypatch, routes):
        monkeypatch.setattr(settings, "ready_timeout_s", 0.01)
        router = Router(Window(), routes, ToolRegistry())
        with pytest.raises(RegistryNotReady):
            await router.start("/")
