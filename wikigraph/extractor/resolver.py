"""
식별자 해석기

링크 토큰을 참조 문서의 네임스페이스 기준으로 절대 문서 ID로 변환합니다.

해석 우선순위:
1. ':'로 시작 → 절대 참조
2. '..'로 시작 → 상위 네임스페이스 참조
3. ':' 포함 → 이미 네임스페이스가 지정된 참조
4. 현재 네임스페이스가 있으면 → 현재 네임스페이스에 결합
5. 그 외 → 그대로 반환
"""

import re
from typing import Optional

from wikigraph.core.identifiers import NAMESPACE_SEPARATOR

_ANCHOR_PATTERN = re.compile(r"#.*$")
_WHITESPACE_PATTERN = re.compile(r"\s+")

PARENT_MARKER = ".."


def normalize_link_token(raw: str) -> str:
    """
    링크 토큰 정규화

    앞뒤 공백 제거, 소문자 변환, 공백을 '_'로 치환, 앵커(#...) 제거
    """
    token = raw.strip().lower()
    token = _WHITESPACE_PATTERN.sub("_", token)
    return _ANCHOR_PATTERN.sub("", token)


def resolve_link(token: str, namespace: str) -> Optional[str]:
    """
    정규화된 링크 토큰을 절대 문서 ID로 해석

    Args:
        token: 정규화된 링크 토큰
        namespace: 참조하는 문서의 네임스페이스

    Returns:
        Optional[str]: 절대 문서 ID (링크가 아니면 None)
    """
    if not token:
        return None

    if token.startswith(NAMESPACE_SEPARATOR):
        return token.lstrip(NAMESPACE_SEPARATOR) or None

    if token.startswith(PARENT_MARKER):
        remainder = token[len(PARENT_MARKER):]
        if remainder.startswith(NAMESPACE_SEPARATOR):
            remainder = remainder[1:]
        if not remainder:
            return None
        parent_namespace = namespace.rpartition(NAMESPACE_SEPARATOR)[0]
        if parent_namespace:
            return parent_namespace + NAMESPACE_SEPARATOR + remainder
        return remainder

    if NAMESPACE_SEPARATOR in token:
        return token

    if namespace:
        return namespace + NAMESPACE_SEPARATOR + token

    return token
