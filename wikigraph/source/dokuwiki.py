"""
DokuWiki XML-RPC 클라이언트

requests 세션으로 XML-RPC 요청을 전송합니다. 세션이 쿠키를 유지하므로
로그인 상태가 호출 사이에 이어집니다.
"""

import logging
import xmlrpc.client
from typing import Any, Dict, List, Optional
from xml.parsers.expat import ExpatError

import requests

from wikigraph.core.exceptions import UpstreamError
from wikigraph.core.identifiers import in_namespace
from wikigraph.core.utils.retry_manager import RetryExhaustedError, RetryManager

logger = logging.getLogger(__name__)

# 재시도 대상 전송 오류 (HTTP 상태 오류는 재시도하지 않음)
TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)

SEARCH_RESULT_FIELDS = ("id", "title", "score", "snippet", "size", "mtime")


class DokuWikiClient:
    """DokuWiki XML-RPC API 클라이언트"""

    def __init__(
        self,
        url: str,
        username: str = "",
        password: str = "",
        timeout: float = 30.0,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        session: Optional[requests.Session] = None
    ):
        """
        DokuWiki 클라이언트 초기화

        Args:
            url: XML-RPC 엔드포인트 전체 URL
            username: 로그인 사용자 (빈 값이면 익명 접근)
            password: 로그인 비밀번호
            timeout: 요청 타임아웃 (초)
            max_retries: 전송 오류 재시도 횟수
            retry_delay: 재시도 지연 (초)
            session: 공유할 requests 세션
        """
        self.url = url
        self.username = username
        self.password = password
        self.timeout = timeout
        self.session = session or requests.Session()
        self.retry_manager = RetryManager(
            max_retries=max_retries,
            delay=retry_delay,
            retry_on=TRANSIENT_ERRORS
        )

        logger.info(f"DokuWikiClient initialized: {self.url}")

    def _post(self, body: bytes) -> requests.Response:
        return self.session.post(
            self.url,
            data=body,
            headers={"Content-Type": "text/xml"},
            timeout=self.timeout
        )

    def call(self, method: str, *params: Any) -> Any:
        """
        XML-RPC 메서드 호출

        Args:
            method: XML-RPC 메서드 이름
            *params: 메서드 인자

        Returns:
            Any: 디코딩된 응답 값

        Raises:
            UpstreamError: 전송 실패, HTTP 오류, XML-RPC fault, 잘못된 응답
        """
        body = xmlrpc.client.dumps(params, methodname=method, encoding="utf-8", allow_none=True)

        try:
            response = self.retry_manager.run(lambda: self._post(body.encode("utf-8")), label=method)
        except RetryExhaustedError as e:
            raise UpstreamError(f"Transport error calling {method}: {e.last_exception}") from e
        except requests.RequestException as e:
            raise UpstreamError(f"Transport error calling {method}: {e}") from e

        if response.status_code >= 400:
            raise UpstreamError(f"HTTP {response.status_code} calling {method}", code=response.status_code)

        try:
            result, _ = xmlrpc.client.loads(response.content, use_builtin_types=True)
        except xmlrpc.client.Fault as fault:
            raise UpstreamError(f"XML-RPC fault: {fault.faultString}", code=fault.faultCode) from fault
        except (ExpatError, xmlrpc.client.ResponseError) as e:
            raise UpstreamError(f"Malformed XML-RPC response for {method}: {e}") from e

        return result[0] if result else None

    def authenticate(self) -> bool:
        """로그인 (자격 증명이 없으면 익명 접근으로 간주)"""
        if not self.username:
            return True

        logged_in = bool(self.call("dokuwiki.login", self.username, self.password))
        if not logged_in:
            logger.warning(f"DokuWiki login rejected for user '{self.username}'")
        return logged_in

    def fetch_raw(self, document_id: str) -> str:
        """문서 원문 조회"""
        self.authenticate()
        content = self.call("wiki.getPage", document_id)
        return content or ""

    def list_all(self, namespace: str = "") -> List[Dict[str, Any]]:
        """전체 문서 목록을 조회하여 네임스페이스로 필터링"""
        self.authenticate()
        pages = self.call("wiki.getAllPages") or []
        return [
            {"id": page["id"], "size": int(page.get("size") or 0)}
            for page in pages
            if in_namespace(page["id"], namespace)
        ]

    def search(self, query: str) -> List[Dict[str, Any]]:
        """전문 검색"""
        self.authenticate()
        results = self.call("dokuwiki.search", query) or []
        return [
            {field: result[field] for field in SEARCH_RESULT_FIELDS if field in result}
            for result in results
        ]

