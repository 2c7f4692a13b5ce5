"""
pytest 설정 및 공통 픽스처

이 파일은 모든 테스트에서 사용할 수 있는 공통 픽스처와 설정을 제공합니다.
- 메모리 문서 소스 (FakeSource)
- 시각을 직접 조정할 수 있는 캐시
- 테스트용 설정과 LookupService
"""

import random
from collections import Counter
from typing import Any, Dict, List, Optional

import pytest

from wikigraph.config.settings import Settings
from wikigraph.core.exceptions import UpstreamError
from wikigraph.core.identifiers import in_namespace
from wikigraph.core.utils.cache_manager import CacheConfig, CacheManager
from wikigraph.lookup.service import LookupService


SAMPLE_PAGES = {
    "a:start": (
        "====== Start Page ======\n"
        "Welcome. See [[a:child]] and [[sibling|the sibling]].\n"
        "External [[https://example.com|site]] is ignored.\n"
        "{{tag>demo}}\n"
    ),
    "a:child": (
        "====== Child ======\n"
        "Back to [[start]].\n"
        '{{tag>demo "two words"}}\n'
    ),
    "a:sibling": "No heading here, only [[wp>Interwiki]].",
    "b:other": "====== Other ======\n{{tag>other}}\n",
}


class FakeClock:
    """직접 조정하는 시계"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeSource:
    """메모리 문서 소스 (호출 횟수 기록)"""

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages = dict(SAMPLE_PAGES if pages is None else pages)
        self.calls: Counter = Counter()
        self.fetched: List[str] = []
        self.failing: set = set()

    def authenticate(self) -> bool:
        self.calls["authenticate"] += 1
        return True

    def fetch_raw(self, document_id: str) -> str:
        self.calls["fetch_raw"] += 1
        self.fetched.append(document_id)
        if document_id in self.failing:
            raise UpstreamError(f"Fetch failed for {document_id}")
        return self.pages.get(document_id, "")

    def list_all(self, namespace: str = "") -> List[Dict[str, Any]]:
        self.calls["list_all"] += 1
        return [
            {"id": page_id, "size": len(text)}
            for page_id, text in self.pages.items()
            if in_namespace(page_id, namespace)
        ]

    def search(self, query: str) -> List[Dict[str, Any]]:
        self.calls["search"] += 1
        return [
            {"id": page_id, "score": 1}
            for page_id, text in self.pages.items()
            if query.lower() in text.lower()
        ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """테스트용 설정 (.env 파일 무시)"""
    return Settings(
        _env_file=None,
        wiki_url="http://wiki.test",
        base_namespace="",
        cache_ttl=300,
        tag_index_ttl=3600,
        max_pages=500,
        tag_scan_fetch_limit=50,
        preview_length=200,
    )


@pytest.fixture
def cache(clock) -> CacheManager:
    return CacheManager(CacheConfig(backend="memory", max_entries=1000), clock=clock)


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def service(source, cache, settings) -> LookupService:
    return LookupService(source, cache, settings, rng=random.Random(42))


@pytest.fixture
def make_service(cache, settings):
    """문서 집합과 설정 값을 바꿔 (LookupService, FakeSource) 생성"""
    def _make(pages: Optional[Dict[str, str]] = None, **overrides):
        fake = FakeSource(pages)
        return LookupService(fake, cache, settings.model_copy(update=overrides), rng=random.Random(42)), fake
    return _make


# 테스트 마커별 설정
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "unit: Unit test marker"
    )
    config.addinivalue_line(
        "markers", "integration: Integration test marker"
    )
    config.addinivalue_line(
        "markers", "slow: Slow test marker"
    )


def pytest_collection_modifyitems(config, items):
    """테스트 컬렉션 수정"""
    # slow 마커가 있는 테스트는 기본적으로 skip
    skip_slow = pytest.mark.skip(reason="slow test skipped by default")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
