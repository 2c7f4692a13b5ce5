"""
경로 역추적 및 강조

노드에서 부모 포인터를 따라 시작 노드까지 올라가는 경로를 계산하고,
렌더러에서 해당 경로를 강조합니다.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from .models import EdgeKind, ExplorerEdge, ExplorerNode, edge_id
from .renderer import GraphRenderer
from .styles import render_edge, render_node

logger = logging.getLogger(__name__)

MAX_TRACE_ITERATIONS = 100


class TracePath(BaseModel):
    """시작 노드 → 대상 노드 순서의 경로"""
    nodes: List[str] = Field(default_factory=list)
    edges: List[str] = Field(default_factory=list)
    truncated: bool = Field(default=False, description="시작 노드에 도달하기 전에 멈췄는지 여부")


def find_edge(edges: Mapping[str, ExplorerEdge], upper: str, lower: str) -> Optional[str]:
    """두 노드를 잇는 엣지 ID (타입 무관)"""
    for kind in EdgeKind:
        candidate = edge_id(kind, upper, lower)
        if candidate in edges:
            return candidate
    return None


def trace_back(
    nodes: Mapping[str, ExplorerNode],
    edges: Mapping[str, ExplorerEdge],
    roots: Sequence[str],
    node_id: str,
    max_iterations: int = MAX_TRACE_ITERATIONS
) -> TracePath:
    """
    부모 포인터를 따라 시작 노드까지 경로 계산

    시작 노드에 도달하거나, 부모가 없거나, 이미 지나온 노드로 돌아오거나,
    max_iterations에 도달하면 멈춥니다.

    Args:
        nodes: 노드 ID → 노드
        edges: 엣지 ID → 엣지
        roots: 시작 노드 ID 목록
        node_id: 대상 노드 ID
        max_iterations: 최대 반복 횟수

    Returns:
        TracePath: 시작 노드가 앞에 오는 경로
    """
    path: List[str] = []
    reached_root = False
    current = node_id

    for _ in range(max_iterations):
        if current not in nodes:
            break
        path.append(current)
        if current in roots:
            reached_root = True
            break
        parent = nodes[current].parent
        if not parent or parent == current or parent in path:
            break
        current = parent

    path.reverse()
    path_edges = []
    for upper, lower in zip(path, path[1:]):
        found = find_edge(edges, upper, lower)
        if found is not None:
            path_edges.append(found)

    return TracePath(nodes=path, edges=path_edges, truncated=bool(path) and not reached_root)


class TraceHighlighter:
    """선택 노드의 역추적 경로 강조 상태"""

    def __init__(
        self,
        nodes: Dict[str, ExplorerNode],
        edges: Dict[str, ExplorerEdge],
        roots: List[str],
        renderer: GraphRenderer,
        max_iterations: int = MAX_TRACE_ITERATIONS
    ):
        self.nodes = nodes
        self.edges = edges
        self.roots = roots
        self.renderer = renderer
        self.max_iterations = max_iterations
        self.selected: Optional[str] = None
        self.path: Optional[TracePath] = None

    def highlight(self, node_id: str) -> TracePath:
        """경로 강조 (같은 노드를 다시 선택하면 그대로 유지)"""
        if node_id == self.selected and self.path is not None:
            return self.path

        self.reset()
        path = trace_back(self.nodes, self.edges, self.roots, node_id, self.max_iterations)
        if path.truncated:
            logger.debug(f"Trace from {node_id} stopped before reaching a root")

        self.renderer.update_nodes([
            render_node(self.nodes[n], highlighted=True, with_position=False) for n in path.nodes
        ])
        self.renderer.update_edges([
            render_edge(self.edges[e], highlighted=True) for e in path.edges
        ])
        self.selected = node_id
        self.path = path
        return path

    def reset(self):
        """강조 해제 (남아있는 노드/엣지만 원래 스타일로 복원)"""
        if self.path is not None:
            self.renderer.update_nodes([
                render_node(self.nodes[n], with_position=False) for n in self.path.nodes if n in self.nodes
            ])
            self.renderer.update_edges([
                render_edge(self.edges[e]) for e in self.path.edges if e in self.edges
            ])
        self.forget()

    def forget(self):
        """렌더러를 건드리지 않고 선택 상태만 초기화"""
        self.selected = None
        self.path = None
