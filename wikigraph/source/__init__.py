"""
Document Source

위키 문서 저장소 경계
- DocumentSource 프로토콜 (인증, 원문 조회, 문서 목록, 전문 검색)
- DokuWiki XML-RPC 클라이언트
"""

from .base import DocumentSource
from .dokuwiki import DokuWikiClient

__all__ = [
    "DocumentSource",
    "DokuWikiClient"
]
