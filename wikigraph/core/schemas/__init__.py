"""
스키마 패키지

조회 API와 전체 그래프 응답에 사용하는 Pydantic 스키마를 정의합니다.
"""

from .graph import GraphData, GraphEdge, GraphNode
from .pages import PageInfo, PagePreview, PageRef, PageTitle

__all__ = [
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "PageInfo",
    "PagePreview",
    "PageRef",
    "PageTitle"
]
