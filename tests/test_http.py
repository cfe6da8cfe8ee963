"""Tests for main.py — the HTTP surface, driven through FastAPI's TestClient."""
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from toolkit.main import create_app


@pytest.fixture
def client(tool_sets):
    with TestClient(create_app(*tool_sets)) as c:
        yield c


class TestPages:
    def test_home(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "<title>" in resp.text
        assert 'id="app"' in resp.text

    def test_tool_page_head(self, client):
        resp = client.get("/tools/health/bmi-calculator")
        assert resp.status_code == 200
        assert 'rel="canonical" href="http://testserver/tools/health/bmi-calculator"' in resp.text
        assert '<meta property="og:title"' in resp.text
        assert "BreadcrumbList" in resp.text

    def test_unknown_page_is_404(self, client):
        resp = client.get("/definitely/not/here")
        assert resp.status_code == 404
        assert "Page Not Found" in resp.text

    def test_submit_form(self, client):
        resp = client.post("/tools/health/bmi-calculator", data={"weight": "70", "height": "175"})
        assert resp.status_code == 200
        assert "22.86" in resp.text

    def test_submit_error(self, client):
        resp = client.post("/tools/health/bmi-calculator", data={"weight": "70"})
        assert resp.status_code == 200
        assert "Height is required" in resp.text

    def test_submit_unknown_tool(self, client):
        resp = client.post("/tools/health/nope", data={})
        assert resp.status_code == 404


class TestPageScript:
    @pytest.fixture(autouse=True)
    def _feedback(self):
        with patch.dict("toolkit.rendering.env.globals", {"feedback_ms": 2000}):
            yield

    def test_result_page_loads_script(self, client):
        resp = client.post("/tools/health/bmi-calculator", data={"weight": "70", "height": "175"})
        assert 'data-action="copy"' in resp.text
        assert '<script src="/static/toolkit.js" data-feedback-ms="2000" defer></script>' in resp.text

    def test_error_card_is_dismissable(self, client):
        resp = client.post("/tools/health/bmi-calculator", data={"weight": "70"})
        assert 'class="result-error' in resp.text
        assert 'data-action="dismiss"' in resp.text
        assert 'src="/static/toolkit.js"' in resp.text

    def test_every_page_loads_script(self, client):
        for path in ("/", "/sitemap", "/definitely/not/here"):
            assert 'src="/static/toolkit.js"' in client.get(path).text

    def test_script_served(self, client):
        resp = client.get("/static/toolkit.js")
        assert resp.status_code == 200
        assert "javascript" in resp.headers["content-type"]
        for needle in ("navigator.clipboard.writeText", "execCommand('copy')", "navigator.share",
                       "Copied!", "Shared!", ".result-error", "copy-fallback"):
            assert needle in resp.text


class TestApi:
    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True, "tools": 4}

    def test_list_tools(self, client):
        body = client.get("/api/tools").json()
        assert body["count"] == 4
        bmi = next(t for t in body["tools"] if t["id"] == "bmi-calculator")
        assert bmi["path"] == "/tools/health/bmi-calculator"

    def test_run(self, client):
        body = client.post("/api/tools/schedule/run", json={}).json()
        assert body["tool_id"] == "schedule"
        assert body["plan"]["kind"] == "table"
        assert body["plan"]["tables"][0]["headers"] == ["a", "b"]
        assert "results.csv" in body["html"]

    def test_run_error_plan(self, client):
        body = client.post("/api/tools/broken/run", json={}).json()
        assert body["plan"] == {"kind": "error", "message": "division by zero"}

    def test_run_unknown(self, client):
        assert client.post("/api/tools/nope/run", json={}).status_code == 404

    def test_sitemap_xml(self, client):
        resp = client.get("/sitemap.xml")
        assert resp.headers["content-type"].startswith("application/xml")
        assert "<loc>http://testserver/tools/health/bmi-calculator</loc>" in resp.text
        assert "<loc>http://testserver/search</loc>" not in resp.text
