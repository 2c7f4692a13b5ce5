"""
위키 조회 API 통합 테스트

FastAPI TestClient로 라우터, 예외 핸들러, LookupService를 함께 검증합니다.
LookupService는 dependency_overrides로 메모리 문서 소스 기반 인스턴스로 교체합니다.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from wikigraph.api.main import app
from wikigraph.api.routes import lookup as lookup_routes
from wikigraph.api.routes.lookup import get_lookup_service, reset_lookup_service
from wikigraph.config.settings import reset_settings

BASE = "/api/v1/wiki"


@pytest.fixture
def client(service):
    app.dependency_overrides[get_lookup_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.mark.integration
class TestLookupAPI:
    """조회 API 테스트 클래스"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_pagename(self, client):
        response = client.get(f"{BASE}/pagename", params={"page": "a:start"})

        assert response.status_code == 200
        assert response.json() == {"id": "a:start", "title": "Start Page"}

    def test_links_and_tags(self, client):
        assert client.get(f"{BASE}/links", params={"page": "a:start"}).json() == ["a:child", "a:sibling"]
        assert client.get(f"{BASE}/tags", params={"page": "a:child"}).json() == ["demo", "two words"]

    def test_pageinfo_and_preview(self, client):
        info = client.get(f"{BASE}/pageinfo", params={"page": "a:child"}).json()
        preview = client.get(f"{BASE}/preview", params={"page": "a:child"}).json()

        assert info["namespace"] == "a"
        assert info["title"] == "Child"
        assert preview["id"] == "a:child"

    @pytest.mark.parametrize("path,parameter", [
        ("pagename", "page"),
        ("links", "page"),
        ("tags", "page"),
        ("pageinfo", "page"),
        ("tagpages", "tag"),
        ("search", "q"),
    ])
    def test_missing_parameter(self, client, source, path, parameter):
        response = client.get(f"{BASE}/{path}")

        assert response.status_code == 200
        assert response.json() == {"error": f"Missing {parameter} parameter"}
        assert sum(source.calls.values()) == 0

    def test_allpages_defaults_to_base_namespace(self, client):
        pages = client.get(f"{BASE}/allpages").json()

        assert {p["id"] for p in pages} == {"a:start", "a:child", "a:sibling", "b:other"}

        scoped = client.get(f"{BASE}/allpages", params={"namespace": "b"}).json()
        assert scoped == [{"id": "b:other", "size": len("====== Other ======\n{{tag>other}}\n")}]

    def test_namespaces(self, client):
        assert client.get(f"{BASE}/namespaces").json() == ["a", "b"]

    def test_random(self, client):
        assert "id" in client.get(f"{BASE}/random").json()

    def test_random_without_pages(self, client, source):
        source.pages.clear()

        response = client.get(f"{BASE}/random")

        assert response.status_code == 200
        assert response.json() == {"error": "No pages found"}

    def test_tag_endpoints(self, client):
        assert client.get(f"{BASE}/tagpages", params={"tag": "other"}).json() == [{"id": "b:other"}]
        assert client.get(f"{BASE}/tagindex").json()["demo"] == [{"id": "a:start"}, {"id": "a:child"}]

    def test_graph(self, client):
        graph = client.get(f"{BASE}/graph", params={"namespace": "b"}).json()

        assert graph["nodes"] == [
            {"id": "b:other", "label": "Other", "type": "page", "namespace": "b"},
            {"id": "tag:other", "label": "other", "type": "tag", "namespace": ""},
        ]
        assert graph["edges"] == [{"from": "b:other", "to": "tag:other", "type": "tag"}]

    def test_config(self, client):
        assert client.get(f"{BASE}/config").json() == {"wiki_url": "http://wiki.test", "base_namespace": ""}

    def test_upstream_error_is_500(self, client, source):
        source.failing.add("a:start")

        response = client.get(f"{BASE}/links", params={"page": "a:start"})

        assert response.status_code == 500
        assert "Fetch failed" in response.json()["error"]


@pytest.mark.integration
class TestLookupDispatcher:
    """api 파라미터 기반 조회 테스트 클래스"""

    def test_dispatch_actions(self, client):
        assert client.get(f"{BASE}/lookup", params={"api": "pagename", "page": "a:start"}).json()["title"] == "Start Page"
        assert client.get(f"{BASE}/lookup", params={"api": "search", "q": "other"}).json()[0]["id"] == "b:other"

    def test_unknown_action(self, client):
        response = client.get(f"{BASE}/lookup", params={"api": "nope"})

        assert response.status_code == 200
        assert response.json() == {"error": "Unknown API action: nope"}

    def test_missing_action(self, client):
        assert client.get(f"{BASE}/lookup").json() == {"error": "Unknown API action: "}


@pytest.mark.integration
class TestConfigurationErrors:
    """설정 오류 테스트 클래스"""

    @pytest.fixture(autouse=True)
    def unconfigured(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("WIKIGRAPH_WIKI_URL", raising=False)
        reset_settings()
        reset_lookup_service()
        yield
        reset_settings()
        reset_lookup_service()

    def test_missing_wiki_url(self):
        response = TestClient(app).get(f"{BASE}/links", params={"page": "a:start"})

        assert response.status_code == 500
        assert "Wiki URL not configured" in response.json()["error"]
        assert "trace" not in response.json()

    def test_trace_in_debug_mode(self, monkeypatch):
        monkeypatch.setenv("WIKIGRAPH_DEBUG", "true")
        reset_settings()

        response = TestClient(app).get(f"{BASE}/links", params={"page": "a:start"})

        assert response.status_code == 500
        assert "ConfigurationError" in response.json()["trace"]


@pytest.mark.integration
class TestAppLifecycle:
    """헬스 체크와 종료 처리 테스트 클래스"""

    @pytest.fixture
    def installed(self, service, monkeypatch):
        """테스트 서비스를 조회 서비스 싱글톤으로 등록"""
        monkeypatch.setattr(lookup_routes, "_lookup_service", service)
        return service

    def test_health_without_service(self, monkeypatch):
        monkeypatch.setattr(lookup_routes, "_lookup_service", None)

        body = TestClient(app).get("/health").json()

        assert body["status"] == "healthy"
        assert "cache" not in body

    def test_health_reports_cache(self, installed):
        body = TestClient(app).get("/health").json()

        assert body["status"] == "healthy"
        assert body["cache"]["status"] == "healthy"
        assert body["cache"]["backend"] == "memory"

    def test_shutdown_closes_cache(self, installed):
        installed.cache.close = Mock(wraps=installed.cache.close)

        with TestClient(app) as client:
            assert client.get("/health").status_code == 200

        installed.cache.close.assert_called_once()
        assert lookup_routes.current_lookup_service() is None
