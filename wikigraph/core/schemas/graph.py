"""
전체 그래프 응답 스키마

서버에서 미리 계산한 {nodes, edges} 구조 (비증분 렌더링용)
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

NodeType = Literal["page", "tag"]
EdgeType = Literal["link", "tag"]


class GraphNode(BaseModel):
    """그래프 노드 모델"""
    id: str = Field(..., description="노드 ID (문서 ID 또는 tag:<이름>)")
    label: str = Field(..., description="노드 라벨")
    type: NodeType = Field(default="page", description="노드 타입")
    namespace: str = Field(default="", description="문서 네임스페이스")


class GraphEdge(BaseModel):
    """그래프 엣지 모델"""
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., alias="from", description="시작 노드 ID")
    target: str = Field(..., alias="to", description="도착 노드 ID")
    type: EdgeType = Field(default="link", description="엣지 타입")


class GraphData(BaseModel):
    """그래프 데이터 모델"""
    nodes: List[GraphNode] = Field(default_factory=list, description="노드 목록")
    edges: List[GraphEdge] = Field(default_factory=list, description="엣지 목록")

    def to_payload(self) -> dict:
        """JSON 응답/캐시용 딕셔너리 ('from'/'to' 키 사용)"""
        return self.model_dump(by_alias=True)
