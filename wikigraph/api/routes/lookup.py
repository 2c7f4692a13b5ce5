"""
위키 조회 API 라우터

문서 제목/링크/태그, 문서 목록, 태그 인덱스, 전체 그래프 조회 엔드포인트 제공
- 요청 오류(파라미터 누락, 알 수 없는 action)는 200 + {"error": ...}
- 설정/전송 오류는 500 + {"error": ...} (main.py 예외 핸들러)
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, Query

from wikigraph.core.exceptions import MalformedInputError
from wikigraph.lookup.factory import build_lookup_service
from wikigraph.lookup.service import LookupService

logger = logging.getLogger(__name__)

# 라우터 생성
router = APIRouter(
    prefix="/wiki",
    tags=["wiki"],
    responses={
        500: {"description": "Configuration or upstream error"}
    }
)

# 전역 LookupService 인스턴스
_lookup_service: Optional[LookupService] = None


def get_lookup_service() -> LookupService:
    """
    LookupService 싱글톤 인스턴스 반환

    Raises:
        ConfigurationError: 위키 URL이 설정되지 않은 경우
    """
    global _lookup_service
    if _lookup_service is None:
        _lookup_service = build_lookup_service()
        logger.info("LookupService 싱글톤 인스턴스 생성")
    return _lookup_service


def current_lookup_service() -> Optional[LookupService]:
    """이미 생성된 싱글톤 (생성하지 않음)"""
    return _lookup_service


def reset_lookup_service():
    """싱글톤 초기화 (설정 변경 후, 앱 종료 시). 캐시 핸들을 닫습니다."""
    global _lookup_service
    if _lookup_service is not None:
        _lookup_service.cache.close()
        logger.info("LookupService 싱글톤 종료")
    _lookup_service = None


def _require(params: Dict[str, Optional[str]], name: str) -> str:
    value = params.get(name)
    if not value:
        raise MalformedInputError.missing(name)
    return value


def _namespace(service: LookupService, params: Dict[str, Optional[str]]) -> str:
    namespace = params.get("namespace")
    return service.settings.base_namespace if namespace is None else namespace


ACTIONS: Dict[str, Callable[[LookupService, Dict[str, Optional[str]]], Any]] = {
    "pagename": lambda s, p: s.page_title(_require(p, "page")),
    "links": lambda s, p: s.page_links(_require(p, "page")),
    "tags": lambda s, p: s.page_tags(_require(p, "page")),
    "pageinfo": lambda s, p: s.page_info(_require(p, "page")),
    "preview": lambda s, p: s.content_preview(_require(p, "page")),
    "allpages": lambda s, p: s.all_pages(_namespace(s, p)),
    "namespaces": lambda s, p: s.namespaces(_namespace(s, p)),
    "random": lambda s, p: s.random_page(),
    "search": lambda s, p: s.search_pages(_require(p, "q")),
    "tagpages": lambda s, p: s.pages_by_tag(_require(p, "tag")),
    "tagindex": lambda s, p: s.tag_index(),
    "graph": lambda s, p: s.build_graph(_namespace(s, p)),
    "config": lambda s, p: s.client_config(),
}


def dispatch(service: LookupService, action: str, params: Dict[str, Optional[str]]) -> Any:
    """
    조회 action 실행

    Args:
        service: 조회 서비스
        action: action 이름 (pagename, links, ...)
        params: 요청 파라미터 (page, namespace, tag, q)

    Returns:
        Any: JSON 직렬화 가능한 결과

    Raises:
        MalformedInputError: 알 수 없는 action 또는 필수 파라미터 누락
    """
    handler = ACTIONS.get(action)
    if handler is None:
        raise MalformedInputError(f"Unknown API action: {action}", parameter="api")
    return handler(service, params)


@router.get("/lookup", summary="action 기반 조회 (api 파라미터)")
def lookup(
    api: str = Query("", description="조회 action"),
    page: Optional[str] = None,
    namespace: Optional[str] = None,
    tag: Optional[str] = None,
    q: Optional[str] = None,
    service: LookupService = Depends(get_lookup_service)
):
    return dispatch(service, api, {"page": page, "namespace": namespace, "tag": tag, "q": q})


@router.get("/pagename", summary="문서 제목")
def page_title(page: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "pagename", {"page": page})


@router.get("/links", summary="문서 내부 링크")
def page_links(page: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "links", {"page": page})


@router.get("/tags", summary="문서 태그")
def page_tags(page: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "tags", {"page": page})


@router.get("/pageinfo", summary="문서 정보 (제목, 네임스페이스, 태그)")
def page_info(page: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "pageinfo", {"page": page})


@router.get("/preview", summary="본문 미리보기")
def content_preview(page: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "preview", {"page": page})


@router.get("/allpages", summary="네임스페이스 문서 목록")
def all_pages(namespace: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "allpages", {"namespace": namespace})


@router.get("/namespaces", summary="네임스페이스 목록")
def namespaces(namespace: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "namespaces", {"namespace": namespace})


@router.get("/random", summary="임의 문서")
def random_page(service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "random", {})


@router.get("/search", summary="전문 검색")
def search_pages(q: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "search", {"q": q})


@router.get("/tagpages", summary="태그가 달린 문서 목록")
def pages_by_tag(tag: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "tagpages", {"tag": tag})


@router.get("/tagindex", summary="태그 인덱스")
def tag_index(service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "tagindex", {})


@router.get("/graph", summary="전체 그래프")
def full_graph(namespace: Optional[str] = None, service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "graph", {"namespace": namespace})


@router.get("/config", summary="프론트엔드 설정")
def client_config(service: LookupService = Depends(get_lookup_service)):
    return dispatch(service, "config", {})
