"""
위키 그래프 탐색 패키지

- 탐색 세션 (노드/엣지 상태, 확장, 태그 로딩)
- 경로 역추적 및 강조
- 새 노드 배치, 표시 스타일
- 렌더러 인터페이스와 데이터 제공자
"""

from .models import (
    EdgeKind,
    ExpansionResult,
    ExplorerEdge,
    ExplorerNode,
    Node,
    NodeState,
    PageNode,
    RootNode,
    TagNode,
    edge_id,
)
from .placement import centroid, spawn_position
from .providers import ApiDataProvider, GraphDataProvider, ServiceDataProvider
from .renderer import GraphRenderer, InteractionEvent, InteractionKind, MemoryRenderer
from .session import ExplorerSession
from .traceback import TraceHighlighter, TracePath, trace_back

__all__ = [
    "EdgeKind",
    "ExpansionResult",
    "ExplorerEdge",
    "ExplorerNode",
    "Node",
    "NodeState",
    "PageNode",
    "RootNode",
    "TagNode",
    "edge_id",
    "centroid",
    "spawn_position",
    "ApiDataProvider",
    "GraphDataProvider",
    "ServiceDataProvider",
    "GraphRenderer",
    "InteractionEvent",
    "InteractionKind",
    "MemoryRenderer",
    "ExplorerSession",
    "TraceHighlighter",
    "TracePath",
    "trace_back",
]
