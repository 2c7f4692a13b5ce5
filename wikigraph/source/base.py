"""
DocumentSource 프로토콜

세션/쿠키 유지와 재시도는 구현체의 책임입니다. 실패는 UpstreamError로 전달합니다.
"""

from typing import Any, Dict, List, Protocol, runtime_checkable


@runtime_checkable
class DocumentSource(Protocol):
    """위키 문서 소스"""

    def authenticate(self) -> bool:
        """세션 인증 (각 논리 호출 전에 수행)"""
        ...

    def fetch_raw(self, document_id: str) -> str:
        """문서 원문 조회 (없는 문서는 빈 문자열)"""
        ...

    def list_all(self, namespace: str = "") -> List[Dict[str, Any]]:
        """네임스페이스 범위의 문서 목록 [{id, size}]"""
        ...

    def search(self, query: str) -> List[Dict[str, Any]]:
        """전문 검색 결과 [{id, ...}]"""
        ...
