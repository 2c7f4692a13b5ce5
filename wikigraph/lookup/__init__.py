"""
Lookup Service

TTL 캐시 기반 추출 서비스
- 문서 제목/링크/태그/정보/미리보기 조회
- 문서 목록, 네임스페이스, 검색, 태그 인덱스
- 서버측 전체 그래프 구성
"""

from .factory import build_lookup_service
from .service import LookupService

__all__ = [
    "LookupService",
    "build_lookup_service"
]
