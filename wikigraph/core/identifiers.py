"""
문서 식별자 규칙

DokuWiki 문서 ID는 콜론으로 구분된 경로이며 대소문자를 구분하지 않습니다.
마지막 콜론 앞부분이 네임스페이스, 마지막 세그먼트가 로컬 이름입니다.
"""

import re

NAMESPACE_SEPARATOR = ":"
TAG_PREFIX = "tag:"

_NEUTRAL_PATTERN = re.compile(r"[^\w:\-]")


def clean_id(document_id: str) -> str:
    """요청 파라미터의 문서 ID를 정규형(소문자, 앞쪽 콜론 제거)으로 변환"""
    return document_id.strip().lower().lstrip(NAMESPACE_SEPARATOR)


def get_namespace(document_id: str) -> str:
    """문서 ID의 네임스페이스 부분 반환 (없으면 빈 문자열)"""
    namespace, _, _ = document_id.rpartition(NAMESPACE_SEPARATOR)
    return namespace


def get_local_name(document_id: str) -> str:
    """문서 ID의 마지막 세그먼트 반환"""
    return document_id.rpartition(NAMESPACE_SEPARATOR)[2]


def neutral_id(identifier: str) -> str:
    """
    그래프 노드 ID 생성

    콜론(네임스페이스 구분자), 하이픈, 밑줄과 유니코드 문자·숫자만 남깁니다.
    한글/CJK 태그도 서로 다른 ID를 가집니다.
    """
    identifier = identifier.lower().replace("%20", "_")
    return _NEUTRAL_PATTERN.sub("", identifier)


def page_node_id(document_id: str) -> str:
    return neutral_id(document_id)


def tag_node_id(tag: str) -> str:
    return neutral_id(TAG_PREFIX + tag)


def in_namespace(document_id: str, namespace: str) -> bool:
    """문서가 네임스페이스 필터 범위에 속하는지 확인 (빈 필터는 전체)"""
    if not namespace:
        return True
    return document_id == namespace or document_id.startswith(namespace + NAMESPACE_SEPARATOR)
