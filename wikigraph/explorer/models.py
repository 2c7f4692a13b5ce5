"""
탐색 그래프 노드/엣지 모델

노드는 kind 필드로 구분되는 닫힌 변형 타입입니다.
- PageNode: 문서 노드
- RootNode: 탐색 시작점으로 지정된 문서 노드
- TagNode: 태그 노드
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class NodeState(str, Enum):
    """노드 상태 열거형"""
    PRESENT = "present"    # 추가됨 (제목 로딩 중일 수 있음)
    EXPANDED = "expanded"  # 링크/태그를 한 번 이상 요청함


class EdgeKind(str, Enum):
    """엣지 타입 열거형"""
    LINK = "link"  # page → page (마크업 링크)
    TAG = "tag"    # page → tag (태그 주석), tag → page (태그 검색 결과)


class ExplorerNode(BaseModel):
    """노드 공통 속성"""
    id: str = Field(..., description="노드 ID (의미 키에서 결정)")
    label: str = Field(..., description="표시 라벨")
    level: int = Field(default=0, ge=0, description="시작 노드로부터의 거리")
    parent: Optional[str] = Field(default=None, description="처음 발견한 노드 ID")
    state: NodeState = Field(default=NodeState.PRESENT)
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def expanded(self) -> bool:
        return self.state == NodeState.EXPANDED


class PageNode(ExplorerNode):
    """문서 노드"""
    kind: Literal["page"] = "page"
    page_id: str = Field(..., description="문서 ID")
    namespace: str = ""
    title_loaded: bool = False


class RootNode(PageNode):
    """탐색 시작 문서 노드"""
    kind: Literal["root"] = "root"


class TagNode(ExplorerNode):
    """태그 노드"""
    kind: Literal["tag"] = "tag"
    tag_name: str = Field(..., description="태그 원문 (대소문자 유지)")


Node = Annotated[Union[RootNode, PageNode, TagNode], Field(discriminator="kind")]


class ExplorerEdge(BaseModel):
    """방향성 타입 엣지"""
    id: str
    source: str
    target: str
    kind: EdgeKind
    level: int = 0


def edge_id(kind: EdgeKind, source: str, target: str) -> str:
    """엣지 ID (타입별 순서쌍당 하나)"""
    return f"{kind.value}:{source}->{target}"


class ExpansionResult(BaseModel):
    """확장/태그 로딩 결과"""
    node_id: str
    added_nodes: List[str] = Field(default_factory=list)
    added_edges: List[str] = Field(default_factory=list)
    skipped: bool = Field(default=False, description="이미 확장되었거나 노드가 사라진 경우")
