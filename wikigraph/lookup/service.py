"""
Lookup Service

DocumentSource와 마크업 추출기를 TTL 캐시 뒤에 두는 조회 서비스
- 캐시 키: 연산 이름 + ":" + 정규화된 인자
- 문서 단위 조회는 짧은 TTL, 태그 인덱스는 긴 TTL
- 문서 단위 캐시 미스 시 원문을 한 번만 조회하여 제목/링크/태그/미리보기를 함께 저장
- 상위 오류(UpstreamError)는 재시도 없이 그대로 전달
"""

import logging
import random
from typing import Any, Dict, List, Optional

from wikigraph.config.settings import Settings
from wikigraph.core.exceptions import NotFoundError
from wikigraph.core.identifiers import TAG_PREFIX, clean_id, get_namespace, in_namespace
from wikigraph.core.schemas.graph import GraphData, GraphEdge, GraphNode
from wikigraph.core.schemas.pages import PageInfo, PagePreview, PageRef, PageTitle
from wikigraph.core.utils.cache_manager import CacheManager
from wikigraph.extractor.markup import analyze
from wikigraph.source.base import DocumentSource

logger = logging.getLogger(__name__)

TAG_INDEX_KEY = "tagindex"
ALL_PAGES_FULL_KEY = "allpages_full"


class LookupService:
    """TTL 캐시 기반 추출 서비스"""

    def __init__(
        self,
        source: DocumentSource,
        cache: CacheManager,
        settings: Settings,
        rng: Optional[random.Random] = None
    ):
        """
        LookupService 초기화

        Args:
            source: 위키 문서 소스
            cache: 조회 캐시
            settings: 애플리케이션 설정 (TTL, 조회 제한)
            rng: 임의 문서 선택용 난수 생성기
        """
        self.source = source
        self.cache = cache
        self.settings = settings
        self.rng = rng or random.Random()

    @property
    def ttl(self) -> int:
        return self.settings.cache_ttl

    @property
    def index_ttl(self) -> int:
        return self.settings.tag_index_ttl

    # 문서 단위 추출

    def _analyze(self, page_id: str) -> Dict[str, Any]:
        """원문을 한 번 조회하여 문서 단위 캐시 항목을 모두 채웁니다."""
        raw = self.source.fetch_raw(page_id)
        if not raw:
            logger.info(f"Empty or missing document: {page_id}")

        extraction = analyze(raw, page_id, self.settings.preview_length)
        values = {
            "pagename": PageTitle(id=page_id, title=extraction.title).model_dump(),
            "links": extraction.links,
            "tags": extraction.tags,
            "preview": PagePreview(id=page_id, excerpt=extraction.preview).model_dump()
        }
        for operation, value in values.items():
            self.cache.set(f"{operation}:{page_id}", value)
        return values

    def _document_value(self, operation: str, page_id: str) -> Any:
        cached = self.cache.get(f"{operation}:{page_id}", self.ttl)
        if cached is not None:
            return cached
        return self._analyze(page_id)[operation]

    def page_title(self, page_id: str) -> Dict[str, str]:
        """문서 제목 {id, title}"""
        return self._document_value("pagename", clean_id(page_id))

    def page_links(self, page_id: str) -> List[str]:
        """문서의 내부 링크 목록"""
        return self._document_value("links", clean_id(page_id))

    def page_tags(self, page_id: str) -> List[str]:
        """문서의 태그 목록"""
        return self._document_value("tags", clean_id(page_id))

    def content_preview(self, page_id: str) -> Dict[str, str]:
        """본문 미리보기 {id, excerpt}"""
        return self._document_value("preview", clean_id(page_id))

    def page_info(self, page_id: str) -> Dict[str, Any]:
        """문서 정보 {id, title, namespace, tags}"""
        page_id = clean_id(page_id)
        key = f"pageinfo:{page_id}"
        cached = self.cache.get(key, self.ttl)
        if cached is not None:
            return cached

        info = PageInfo(
            id=page_id,
            title=self.page_title(page_id)["title"],
            namespace=get_namespace(page_id),
            tags=self.page_tags(page_id)
        ).model_dump()
        self.cache.set(key, info)
        return info

    # 문서 목록

    def _all_page_ids(self) -> List[str]:
        """전체 문서 ID 목록 (max_pages 제한 없음, 태그 검색용)"""
        cached = self.cache.get(ALL_PAGES_FULL_KEY, self.ttl)
        if cached is not None:
            return [page["id"] for page in cached]

        pages = [{"id": clean_id(page["id"])} for page in self.source.list_all("")]
        self.cache.set(ALL_PAGES_FULL_KEY, pages)
        return [page["id"] for page in pages]

    def all_pages(self, namespace: str = "") -> List[Dict[str, Any]]:
        """네임스페이스 범위의 문서 목록 [{id, size}] (최대 max_pages개)"""
        namespace = clean_id(namespace)
        key = f"allpages:{namespace}"
        cached = self.cache.get(key, self.ttl)
        if cached is not None:
            return cached

        pages = [
            PageRef(id=page["id"], size=page.get("size", 0)).model_dump()
            for page in self.source.list_all(namespace)
            if in_namespace(page["id"], namespace)
        ][:self.settings.max_pages]
        self.cache.set(key, pages)
        return pages

    def namespaces(self, namespace: str = "") -> List[str]:
        """문서들이 속한 네임스페이스 목록 (접두사 필터, 정렬)"""
        namespace = clean_id(namespace)
        key = f"namespaces:{namespace}"
        cached = self.cache.get(key, self.ttl)
        if cached is not None:
            return cached

        found = set()
        for page_id in self._all_page_ids():
            page_namespace = get_namespace(page_id)
            if page_namespace and page_namespace.startswith(namespace):
                found.add(page_namespace)

        result = sorted(found)
        self.cache.set(key, result)
        return result

    def random_page(self) -> Dict[str, str]:
        """기본 네임스페이스에서 임의 문서 선택"""
        pages = self.all_pages(self.settings.base_namespace)
        if not pages:
            raise NotFoundError("No pages found")
        return {"id": self.rng.choice(pages)["id"]}

    def search_pages(self, query: str) -> List[Dict[str, Any]]:
        """전문 검색 [{id, ...}]"""
        query = query.strip()
        key = f"search:{query}"
        cached = self.cache.get(key, self.ttl)
        if cached is not None:
            return cached

        results = self.source.search(query)
        self.cache.set(key, results)
        return results

    # 태그 인덱스

    def tag_index(self) -> Dict[str, List[Dict[str, str]]]:
        """
        태그 → 문서 목록 집계 인덱스

        캐시에 없으면 전체 문서의 태그(문서 단위 캐시 재사용)로 구성하여
        긴 TTL로 저장합니다.
        """
        cached = self.cache.get(TAG_INDEX_KEY, self.index_ttl)
        if cached is not None:
            return cached

        index: Dict[str, List[Dict[str, str]]] = {}
        for page_id in self._all_page_ids():
            for tag in self.page_tags(page_id):
                index.setdefault(tag, []).append({"id": page_id})

        self.cache.set(TAG_INDEX_KEY, index)
        logger.info(f"Tag index built: {len(index)} tags")
        return index

    def pages_by_tag(self, tag: str) -> List[Dict[str, str]]:
        """
        태그가 달린 문서 목록

        1. 캐시된 태그 인덱스가 있으면 인덱스에서 응답
        2. 없으면 문서별 태그 캐시를 훑고, 캐시되지 않은 문서는 요청당
           tag_scan_fetch_limit개까지만 조회하여 부분 결과를 반환
        """
        index = self.cache.get(TAG_INDEX_KEY, self.index_ttl)
        if index is not None:
            return index.get(tag, [])

        result: List[Dict[str, str]] = []
        uncached: List[str] = []

        for page_id in self._all_page_ids():
            page_tags = self.cache.get(f"tags:{page_id}", self.ttl)
            if page_tags is None:
                uncached.append(page_id)
            elif tag in page_tags:
                result.append({"id": page_id})

        fetch_limit = min(len(uncached), self.settings.tag_scan_fetch_limit)
        for page_id in uncached[:fetch_limit]:
            if tag in self._analyze(page_id)["tags"]:
                result.append({"id": page_id})

        remaining = len(uncached) - fetch_limit
        if remaining:
            logger.info(f"Tag lookup '{tag}': {remaining} pages not yet indexed for this request")

        return result

    # 전체 그래프

    def build_graph(self, namespace: str = "") -> Dict[str, Any]:
        """
        네임스페이스 범위 전체 그래프 {nodes, edges}

        문서 단위 캐시를 재사용하며, 필터가 없는 경우 태그 인덱스도 함께 저장합니다.
        """
        namespace = clean_id(namespace)
        key = f"graph:{namespace}"
        cached = self.cache.get(key, self.ttl)
        if cached is not None:
            return cached

        page_nodes: List[GraphNode] = []
        tag_nodes: Dict[str, GraphNode] = {}
        edges: List[GraphEdge] = []
        seen_edges = set()
        index: Dict[str, List[Dict[str, str]]] = {}

        def add_edge(source: str, target: str, edge_type: str):
            edge_key = (edge_type, source, target)
            if edge_key not in seen_edges:
                seen_edges.add(edge_key)
                edges.append(GraphEdge(source=source, target=target, type=edge_type))

        for page_id in self._all_page_ids():
            if not in_namespace(page_id, namespace):
                continue

            page_nodes.append(GraphNode(
                id=page_id,
                label=self.page_title(page_id)["title"],
                type="page",
                namespace=get_namespace(page_id)
            ))

            for link in self.page_links(page_id):
                add_edge(page_id, link, "link")

            for tag in self.page_tags(page_id):
                tag_id = TAG_PREFIX + tag
                if tag_id not in tag_nodes:
                    tag_nodes[tag_id] = GraphNode(id=tag_id, label=tag, type="tag", namespace="")
                add_edge(page_id, tag_id, "tag")
                index.setdefault(tag, []).append({"id": page_id})

        graph = GraphData(nodes=page_nodes + list(tag_nodes.values()), edges=edges).to_payload()
        self.cache.set(key, graph)

        if not namespace:
            self.cache.set(TAG_INDEX_KEY, index)

        logger.info(f"Graph built for namespace '{namespace}': {len(graph['nodes'])} nodes, {len(graph['edges'])} edges")
        return graph

    def client_config(self) -> Dict[str, str]:
        """프론트엔드용 설정"""
        return {
            "wiki_url": self.settings.wiki_url,
            "base_namespace": self.settings.base_namespace
        }
