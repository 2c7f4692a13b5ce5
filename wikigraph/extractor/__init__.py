"""
Markup Extractor

DokuWiki 마크업에서 그래프 관계를 추출합니다.
- 내부 링크 추출 및 네임스페이스 기준 식별자 해석
- 태그 플러그인 구문 추출
- 제목/미리보기 추출
"""

from .markup import (
    PageExtraction,
    analyze,
    extract_links,
    extract_preview,
    extract_tags,
    extract_title,
    is_graph_link
)
from .resolver import normalize_link_token, resolve_link

__all__ = [
    "PageExtraction",
    "analyze",
    "extract_links",
    "extract_preview",
    "extract_tags",
    "extract_title",
    "is_graph_link",
    "normalize_link_token",
    "resolve_link"
]
