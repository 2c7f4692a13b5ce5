"""
탐색 세션 (그래프 상태 관리)

세션이 노드/엣지/시작 노드 목록을 소유하며 모든 변경은 세션 메서드를 거칩니다.

동작 방식:
1. 조회(await) 후 대상 노드가 아직 있는지 다시 확인
2. 현재 노드/엣지 기준으로 중복을 걸러 추가할 묶음을 한 번에 계산
3. 묶음을 상태와 렌더러에 한 번에 반영 (중간에 await 없음)

제목 갱신과 태그 로딩은 백그라운드 작업으로 예약되며 drain()으로 기다릴 수 있습니다.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional, Set, Tuple, Union
from urllib.parse import quote

from wikigraph.core.exceptions import UpstreamError
from wikigraph.core.identifiers import (
    clean_id,
    get_local_name,
    get_namespace,
    page_node_id,
    tag_node_id,
)
from wikigraph.core.schemas.graph import GraphData, GraphEdge, GraphNode

from .models import (
    EdgeKind,
    ExpansionResult,
    ExplorerEdge,
    ExplorerNode,
    NodeState,
    PageNode,
    RootNode,
    TagNode,
    edge_id,
)
from .placement import SPAWN_DISTANCE, centroid, spawn_position
from .providers import GraphDataProvider
from .renderer import GraphRenderer, InteractionEvent, InteractionKind, MemoryRenderer
from .styles import CHILD_LABEL_WIDTH, ROOT_LABEL_WIDTH, render_edge, render_node, unwrap, word_wrap
from .traceback import MAX_TRACE_ITERATIONS, TraceHighlighter, TracePath

logger = logging.getLogger(__name__)


class ExplorerSession:
    """위키 링크 그래프 탐색 세션"""

    def __init__(
        self,
        provider: GraphDataProvider,
        renderer: Optional[GraphRenderer] = None,
        wiki_url: str = "",
        spawn_distance: float = SPAWN_DISTANCE,
        trace_max_iterations: int = MAX_TRACE_ITERATIONS
    ):
        """
        탐색 세션 초기화

        Args:
            provider: 비동기 조회 제공자
            renderer: 그래프 렌더러 (기본: MemoryRenderer)
            wiki_url: 원본 문서 링크용 위키 URL
            spawn_distance: 새 노드와 부모 사이 거리
            trace_max_iterations: 경로 역추적 최대 반복 횟수
        """
        self.provider = provider
        self.renderer: GraphRenderer = renderer if renderer is not None else MemoryRenderer()
        self.wiki_url = wiki_url.rstrip("/")
        self.spawn_distance = spawn_distance

        self.nodes: Dict[str, ExplorerNode] = {}
        self.edges: Dict[str, ExplorerEdge] = {}
        self.roots: List[str] = []

        self.highlighter = TraceHighlighter(
            self.nodes, self.edges, self.roots, self.renderer, trace_max_iterations
        )
        self._tasks: Set[asyncio.Task] = set()

    # 시작 노드

    async def add_root(self, document_id: str) -> ExplorerNode:
        """
        시작 노드 추가

        이미 그래프에 있는 문서면 level/parent를 유지한 채 RootNode로 승격합니다.
        제목과 태그를 조회한 뒤 반환합니다.

        Args:
            document_id: 문서 ID

        Returns:
            ExplorerNode: 시작 노드

        Raises:
            ValueError: 같은 ID의 태그 노드가 이미 있는 경우
        """
        page_id = clean_id(document_id)
        node_id = page_node_id(page_id)
        existing = self.nodes.get(node_id)

        if existing is None:
            node = RootNode(
                id=node_id,
                label=word_wrap(get_local_name(page_id), ROOT_LABEL_WIDTH),
                level=0,
                parent=node_id,
                page_id=page_id,
                namespace=get_namespace(page_id),
                x=0,
                y=0
            )
            self.nodes[node_id] = node
            self.renderer.add_nodes([render_node(node)])
        elif isinstance(existing, TagNode):
            raise ValueError(f"'{document_id}' collides with tag node {node_id}")
        elif isinstance(existing, RootNode):
            node = existing
        else:
            node = RootNode(**existing.model_dump(exclude={"kind"}))
            self.nodes[node_id] = node
            self.renderer.update_nodes([render_node(node, with_position=False)])

        if node_id not in self.roots:
            self.roots.append(node_id)
        logger.info(f"Root added: {page_id}")

        await asyncio.gather(
            self._refresh_title(node_id),
            self.load_tags(page_id, node_id, node.level)
        )
        return self.nodes.get(node_id, node)

    async def reset(self, document_id: str) -> ExplorerNode:
        """그래프를 비우고 하나의 시작 노드부터 다시 시작"""
        self.nodes.clear()
        self.edges.clear()
        self.roots.clear()
        self.highlighter.forget()
        self.renderer.clear()
        return await self.add_root(document_id)

    # 확장

    async def expand(self, node_id: str, force: bool = False) -> ExpansionResult:
        """
        노드 확장

        문서/시작 노드는 링크를, 태그 노드는 태그 이름 전문 검색 결과를 가져와
        자식 노드로 추가합니다. 이미 확장된 노드는 force=True가 아니면 다시
        조회하지 않습니다.

        Args:
            node_id: 확장할 노드 ID
            force: 확장 여부와 관계없이 다시 조회

        Returns:
            ExpansionResult: 추가된 노드/엣지 ID

        Raises:
            UpstreamError: 조회 실패 (그래프는 변경되지 않음)
        """
        node = self.nodes.get(node_id)
        if node is None:
            logger.debug(f"Expand ignored, unknown node: {node_id}")
            return ExpansionResult(node_id=node_id, skipped=True)
        if node.expanded and not force:
            return ExpansionResult(node_id=node_id, skipped=True)

        if isinstance(node, TagNode):
            results = await self.provider.search_pages(node.tag_name)
            targets = [item["id"] if isinstance(item, dict) else str(item) for item in results]
            kind = EdgeKind.TAG
        else:
            targets = await self.provider.page_links(node.page_id)
            kind = EdgeKind.LINK

        # 조회 중 노드가 사라졌을 수 있음 (reset 등)
        parent = self.nodes.get(node_id)
        if parent is None:
            logger.debug(f"Expand result dropped, node no longer present: {node_id}")
            return ExpansionResult(node_id=node_id, skipped=True)

        new_nodes, new_edges = self._collect_children(parent, targets, kind)
        self._apply(new_nodes, new_edges)
        parent.state = NodeState.EXPANDED

        for child in new_nodes:
            self._schedule(self._refresh_title(child.id))
            self._schedule(self.load_tags(child.page_id, child.id, child.level))

        logger.info(f"Expanded {node_id}: +{len(new_nodes)} nodes, +{len(new_edges)} edges")
        return ExpansionResult(
            node_id=node_id,
            added_nodes=[n.id for n in new_nodes],
            added_edges=[e.id for e in new_edges]
        )

    def _collect_children(
        self,
        parent: ExplorerNode,
        targets: List[str],
        kind: EdgeKind
    ) -> Tuple[List[PageNode], List[ExplorerEdge]]:
        level = parent.level + 1
        position = self._spawn_for(parent.id)
        new_nodes: List[PageNode] = []
        new_edges: List[ExplorerEdge] = []
        pending: Set[str] = set()

        for target in targets:
            page_id = clean_id(target)
            if not page_id:
                continue
            child_id = page_node_id(page_id)

            if child_id not in self.nodes and child_id not in pending:
                pending.add(child_id)
                new_nodes.append(PageNode(
                    id=child_id,
                    label=word_wrap(get_local_name(page_id), CHILD_LABEL_WIDTH),
                    level=level,
                    parent=parent.id,
                    page_id=page_id,
                    namespace=get_namespace(page_id),
                    x=position[0] if position else None,
                    y=position[1] if position else None
                ))

            self._collect_edge(new_edges, kind, parent.id, child_id, level)

        return new_nodes, new_edges

    def _collect_edge(
        self,
        new_edges: List[ExplorerEdge],
        kind: EdgeKind,
        source: str,
        target: str,
        level: int
    ):
        if source == target:
            return
        eid = edge_id(kind, source, target)
        if eid in self.edges or any(e.id == eid for e in new_edges):
            return
        new_edges.append(ExplorerEdge(id=eid, source=source, target=target, kind=kind, level=level))

    # 태그

    async def load_tags(self, document_id: str, owner_node_id: str, level: int) -> ExpansionResult:
        """
        문서 태그를 조회하여 태그 노드(level+1)와 owner → tag 엣지를 추가

        Args:
            document_id: 태그를 조회할 문서 ID
            owner_node_id: 태그 엣지의 시작 노드 ID
            level: 소유 노드 level

        Returns:
            ExpansionResult: 추가된 노드/엣지 ID
        """
        tags = await self.provider.page_tags(document_id)

        owner = self.nodes.get(owner_node_id)
        if owner is None:
            logger.debug(f"Tag load dropped, node no longer present: {owner_node_id}")
            return ExpansionResult(node_id=owner_node_id, skipped=True)

        position = self._spawn_for(owner_node_id)
        new_nodes: List[TagNode] = []
        new_edges: List[ExplorerEdge] = []
        pending: Set[str] = set()

        for tag in tags:
            tag_id = tag_node_id(tag)
            if tag_id not in self.nodes and tag_id not in pending:
                pending.add(tag_id)
                new_nodes.append(TagNode(
                    id=tag_id,
                    label="#" + tag,
                    level=level + 1,
                    parent=owner_node_id,
                    tag_name=tag,
                    x=position[0] if position else None,
                    y=position[1] if position else None
                ))
            self._collect_edge(new_edges, EdgeKind.TAG, owner_node_id, tag_id, level + 1)

        self._apply(new_nodes, new_edges)
        return ExpansionResult(
            node_id=owner_node_id,
            added_nodes=[n.id for n in new_nodes],
            added_edges=[e.id for e in new_edges]
        )

    async def _refresh_title(self, node_id: str):
        """임시 라벨(로컬 이름)을 문서 제목으로 교체 (실패 시 임시 라벨 유지)"""
        node = self.nodes.get(node_id)
        if not isinstance(node, PageNode):
            return

        try:
            title = await self.provider.page_title(node.page_id)
        except UpstreamError as e:
            logger.warning(f"Title lookup failed for {node.page_id}: {e}")
            return

        node = self.nodes.get(node_id)
        if not isinstance(node, PageNode):
            return

        width = ROOT_LABEL_WIDTH if isinstance(node, RootNode) else CHILD_LABEL_WIDTH
        node.label = word_wrap(title, width)
        node.title_loaded = True
        self.renderer.update_nodes([{"id": node_id, "label": node.label}])

    # 반영

    def _apply(self, new_nodes: List[ExplorerNode], new_edges: List[ExplorerEdge]):
        """노드/엣지 묶음을 상태와 렌더러에 한 번에 반영"""
        for node in new_nodes:
            self.nodes[node.id] = node
        for edge in new_edges:
            self.edges[edge.id] = edge

        if new_nodes:
            self.renderer.add_nodes([render_node(n) for n in new_nodes])
        if new_edges:
            self.renderer.add_edges([render_edge(e) for e in new_edges])

    def _spawn_for(self, parent_id: str) -> Optional[Tuple[int, int]]:
        positions = self.renderer.positions()
        parent_position = positions.get(parent_id)
        if parent_position is None:
            return None
        return spawn_position(parent_position, centroid(positions.values()), self.spawn_distance)

    # 백그라운드 작업

    def _schedule(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Background graph update failed: {error}")

    async def drain(self):
        """예약된 백그라운드 작업이 모두 끝날 때까지 대기"""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    @property
    def pending_tasks(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    # 상호작용

    async def handle_event(self, event: InteractionEvent) -> Union[ExpansionResult, TracePath, str, None]:
        """
        렌더러 상호작용 이벤트 처리

        - secondary_select: 노드 확장
        - primary_select / hover_enter: 경로 강조 (노드가 없으면 강조 해제)
        - hover_leave: 강조 해제
        - double_activate: 원본 문서 URL 반환
        """
        kind = event.kind
        node_id = event.node_id

        if kind == InteractionKind.SECONDARY_SELECT:
            return await self.expand(node_id) if node_id else None

        if kind in (InteractionKind.PRIMARY_SELECT, InteractionKind.HOVER_ENTER):
            if node_id is None or node_id not in self.nodes:
                self.highlighter.reset()
                return None
            return self.highlighter.highlight(node_id)

        if kind == InteractionKind.HOVER_LEAVE:
            self.highlighter.reset()
            return None

        if kind == InteractionKind.DOUBLE_ACTIVATE:
            return self.source_url(node_id) if node_id else None

        return None

    def source_url(self, node_id: str) -> Optional[str]:
        """노드의 원본 위키 URL (문서 보기 또는 태그 검색)"""
        node = self.nodes.get(node_id)
        if node is None:
            return None
        if not self.wiki_url:
            return "#"
        if isinstance(node, TagNode):
            return f"{self.wiki_url}/doku.php?do=search&id={quote(node.tag_name, safe='')}"
        return f"{self.wiki_url}/doku.php?id={quote(node.page_id, safe=':')}"

    def snapshot(self) -> GraphData:
        """현재 세션 그래프"""
        nodes = [
            GraphNode(
                id=node.id,
                label=unwrap(node.label),
                type="tag" if isinstance(node, TagNode) else "page",
                namespace="" if isinstance(node, TagNode) else node.namespace
            )
            for node in self.nodes.values()
        ]
        edges = [
            GraphEdge(source=edge.source, target=edge.target, type=edge.kind.value)
            for edge in self.edges.values()
        ]
        return GraphData(nodes=nodes, edges=edges)
