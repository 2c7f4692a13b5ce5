"""
Markup Extractor

DokuWiki 마크업에서 내부 링크, 태그, 제목, 미리보기를 추출하는 순수 함수 모듈
- [[target]] / [[target|label]] 내부 링크
- {{tag>tag1 tag2 "multi word tag"}} 태그 플러그인 구문
- ====== Title ====== 제목
"""

import re
from typing import List

from pydantic import BaseModel, Field

from wikigraph.core.identifiers import get_namespace
from .resolver import normalize_link_token, resolve_link

LINK_PATTERN = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]+)?\]\]")
TAG_BLOCK_PATTERN = re.compile(r"\{\{tag>([^}]+)\}\}")
TAG_TOKEN_PATTERN = re.compile(r'"([^"]+)"|\S+')
HEADING_PATTERN = re.compile(r"^=+\s*(.+?)\s*=+$", re.MULTILINE)

# 외부 링크, 윈도우 공유(\\server), 미디어({{...}}) 는 그래프 링크가 아님
NON_GRAPH_LINK_PATTERN = re.compile(r"^(https?:|mailto:|\\\\|\{)")
INTERWIKI_SEPARATOR = ">"

# 미리보기용 마크업 제거 패턴
_MACRO_PATTERN = re.compile(r"\{\{[^}]*\}\}")
_LABELED_LINK_PATTERN = re.compile(r"\[\[[^\]|]+\|([^\]]+)\]\]")
_PLAIN_LINK_PATTERN = re.compile(r"\[\[([^\]|]+)\]\]")
_HEADING_MARK_PATTERN = re.compile(r"^\s*=+\s*(.*?)\s*=+\s*$", re.MULTILINE)
_LIST_MARK_PATTERN = re.compile(r"^\s+[*\-]\s*", re.MULTILINE)
_TABLE_MARK_PATTERN = re.compile(r"[\^|]")
_INLINE_FORMAT_PATTERN = re.compile(r"\*\*|//|__|''|<[^>]+>|~~[A-Z]+~~")
_WHITESPACE_PATTERN = re.compile(r"\s+")

ELLIPSIS = "..."


class PageExtraction(BaseModel):
    """문서 하나에서 추출한 구조 정보"""
    id: str = Field(..., description="문서 ID")
    title: str = Field(..., description="표시 제목")
    links: List[str] = Field(default_factory=list, description="해석된 내부 링크 문서 ID")
    tags: List[str] = Field(default_factory=list, description="태그 목록")
    preview: str = Field(default="", description="본문 미리보기")


def is_graph_link(token: str) -> bool:
    """외부/인터위키/미디어 링크가 아닌지 확인"""
    token = token.strip()
    if NON_GRAPH_LINK_PATTERN.match(token):
        return False
    return INTERWIKI_SEPARATOR not in token


def extract_links(text: str, current_id: str) -> List[str]:
    """
    내부 링크 추출

    Args:
        text: 원본 위키 텍스트
        current_id: 텍스트가 속한 문서 ID

    Returns:
        List[str]: 순서가 유지되고 중복이 제거된 절대 문서 ID 목록
    """
    if not text:
        return []

    namespace = get_namespace(current_id)
    links: List[str] = []
    seen = set()

    for match in LINK_PATTERN.finditer(text):
        raw = match.group(1)
        if not is_graph_link(raw):
            continue

        resolved = resolve_link(normalize_link_token(raw), namespace)
        if resolved and resolved not in seen:
            seen.add(resolved)
            links.append(resolved)

    return links


def extract_tags(text: str) -> List[str]:
    """
    태그 추출

    여러 개의 {{tag>...}} 블록을 모두 읽으며, 따옴표로 묶인 토큰은
    하나의 태그로 유지합니다 (따옴표 제거).
    """
    if not text:
        return []

    tags: List[str] = []
    seen = set()

    for block in TAG_BLOCK_PATTERN.finditer(text):
        for token in TAG_TOKEN_PATTERN.finditer(block.group(1)):
            tag = token.group(0).strip('"').strip()
            if tag and tag not in seen:
                seen.add(tag)
                tags.append(tag)

    return tags


def extract_title(text: str, current_id: str) -> str:
    """첫 번째 제목 줄을 반환, 없으면 문서 ID를 제목으로 사용"""
    if not text:
        return current_id

    match = HEADING_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return current_id


def extract_preview(text: str, length: int = 200) -> str:
    """
    본문 미리보기 생성

    제목 표시, 링크 괄호, 미디어/태그 매크로, 인라인 서식을 제거하고
    단어 경계에서 잘라냅니다.
    """
    if not text:
        return ""

    plain = _MACRO_PATTERN.sub(" ", text)
    plain = _LABELED_LINK_PATTERN.sub(r"\1", plain)
    plain = _PLAIN_LINK_PATTERN.sub(r"\1", plain)
    plain = _HEADING_MARK_PATTERN.sub(r"\1", plain)
    plain = _LIST_MARK_PATTERN.sub(" ", plain)
    plain = _TABLE_MARK_PATTERN.sub(" ", plain)
    plain = _INLINE_FORMAT_PATTERN.sub("", plain)
    plain = _WHITESPACE_PATTERN.sub(" ", plain).strip()

    if len(plain) <= length:
        return plain

    cut = plain[:length]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip() + ELLIPSIS


def analyze(text: str, current_id: str, preview_length: int = 200) -> PageExtraction:
    """문서 하나를 한 번에 분석 (제목, 링크, 태그, 미리보기)"""
    return PageExtraction(
        id=current_id,
        title=extract_title(text, current_id),
        links=extract_links(text, current_id),
        tags=extract_tags(text),
        preview=extract_preview(text, preview_length)
    )
