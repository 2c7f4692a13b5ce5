"""
렌더러 인터페이스와 상호작용 이벤트

탐색 세션은 렌더러에 노드/엣지 추가·갱신만 요청하며, 렌더러는 좌표 조회와
사용자 상호작용 이벤트 전달을 담당합니다.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel


class InteractionKind(str, Enum):
    """렌더러 상호작용 이벤트 종류"""
    PRIMARY_SELECT = "primary_select"      # 선택 → 경로 강조
    SECONDARY_SELECT = "secondary_select"  # 확장
    DOUBLE_ACTIVATE = "double_activate"    # 원본 문서 열기
    HOVER_ENTER = "hover_enter"            # 경로 강조
    HOVER_LEAVE = "hover_leave"            # 강조 해제


class InteractionEvent(BaseModel):
    """렌더러 상호작용 이벤트"""
    kind: InteractionKind
    node_id: Optional[str] = None


@runtime_checkable
class GraphRenderer(Protocol):
    """그래프 렌더러 인터페이스"""

    def add_nodes(self, nodes: List[Dict[str, Any]]) -> None:
        ...

    def update_nodes(self, nodes: List[Dict[str, Any]]) -> None:
        ...

    def add_edges(self, edges: List[Dict[str, Any]]) -> None:
        ...

    def update_edges(self, edges: List[Dict[str, Any]]) -> None:
        ...

    def clear(self) -> None:
        ...

    def positions(self, node_ids: Optional[Iterable[str]] = None) -> Dict[str, Tuple[float, float]]:
        ...


class MemoryRenderer:
    """
    메모리 렌더러

    화면 없이 노드/엣지 딕셔너리를 보관합니다. 이미 있는 ID를 추가하면
    ValueError를 발생시키고, 갱신은 기존 항목에 필드를 병합합니다.
    """

    def __init__(self):
        self.nodes: Dict[str, Dict[str, Any]] = {}
        self.edges: Dict[str, Dict[str, Any]] = {}
        self.batches: int = 0

    @staticmethod
    def _add(store: Dict[str, Dict[str, Any]], items: List[Dict[str, Any]]):
        for item in items:
            if item["id"] in store:
                raise ValueError(f"Item with id '{item['id']}' already exists")
        for item in items:
            store[item["id"]] = dict(item)

    @staticmethod
    def _update(store: Dict[str, Dict[str, Any]], items: List[Dict[str, Any]]):
        for item in items:
            store.setdefault(item["id"], {}).update(item)

    def add_nodes(self, nodes: List[Dict[str, Any]]) -> None:
        self._add(self.nodes, nodes)
        self.batches += 1

    def update_nodes(self, nodes: List[Dict[str, Any]]) -> None:
        self._update(self.nodes, nodes)

    def add_edges(self, edges: List[Dict[str, Any]]) -> None:
        self._add(self.edges, edges)
        self.batches += 1

    def update_edges(self, edges: List[Dict[str, Any]]) -> None:
        self._update(self.edges, edges)

    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()

    def positions(self, node_ids: Optional[Iterable[str]] = None) -> Dict[str, Tuple[float, float]]:
        """좌표가 있는 노드의 위치"""
        ids = self.nodes.keys() if node_ids is None else node_ids
        result = {}
        for node_id in ids:
            node = self.nodes.get(node_id)
            if node is not None and "x" in node and "y" in node:
                result[node_id] = (node["x"], node["y"])
        return result
