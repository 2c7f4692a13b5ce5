"""
문서 조회 응답 스키마
"""

from typing import List

from pydantic import BaseModel, Field


class PageTitle(BaseModel):
    """문서 제목 응답"""
    id: str = Field(..., description="문서 ID")
    title: str = Field(..., description="표시 제목 (없으면 문서 ID)")


class PageInfo(BaseModel):
    """문서 정보 응답 (제목, 네임스페이스, 태그)"""
    id: str
    title: str
    namespace: str = ""
    tags: List[str] = Field(default_factory=list)


class PageRef(BaseModel):
    """문서 목록 항목"""
    id: str
    size: int = 0


class PagePreview(BaseModel):
    """본문 미리보기 응답"""
    id: str
    excerpt: str = ""
