"""
탐색 세션용 비동기 데이터 제공자

- ServiceDataProvider: 같은 프로세스의 LookupService를 작업 스레드에서 호출
- ApiDataProvider: HTTP 조회 API를 httpx로 호출
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import httpx

from wikigraph.core.exceptions import UpstreamError
from wikigraph.lookup.service import LookupService

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:8000/api/v1/wiki"


@runtime_checkable
class GraphDataProvider(Protocol):
    """탐색 세션이 사용하는 조회 인터페이스"""

    async def page_title(self, page_id: str) -> str:
        ...

    async def page_links(self, page_id: str) -> List[str]:
        ...

    async def page_tags(self, page_id: str) -> List[str]:
        ...

    async def search_pages(self, query: str) -> List[Dict[str, Any]]:
        ...


class ServiceDataProvider:
    """LookupService 직접 호출 (블로킹 호출은 asyncio.to_thread로 실행)"""

    def __init__(self, service: LookupService):
        self.service = service

    async def page_title(self, page_id: str) -> str:
        data = await asyncio.to_thread(self.service.page_title, page_id)
        return data.get("title") or data["id"]

    async def page_links(self, page_id: str) -> List[str]:
        return await asyncio.to_thread(self.service.page_links, page_id)

    async def page_tags(self, page_id: str) -> List[str]:
        return await asyncio.to_thread(self.service.page_tags, page_id)

    async def search_pages(self, query: str) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.service.search_pages, query)


class ApiDataProvider:
    """HTTP 조회 API 클라이언트"""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0
    ):
        """
        Args:
            base_url: 조회 API 기본 URL (라우터 prefix 포함)
            client: 공유할 httpx 클라이언트 (테스트에서 MockTransport 주입)
            timeout: 요청 타임아웃 (초)
        """
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def _request(self, action: str, **params: Any) -> Any:
        """
        조회 API 호출

        Raises:
            UpstreamError: 전송 실패, JSON이 아닌 응답, {error} 응답
        """
        url = f"{self.base_url}/{action}"
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to {url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"Non-JSON response from {url} (HTTP {response.status_code})",
                                code=response.status_code) from e

        if isinstance(data, dict) and "error" in data:
            raise UpstreamError(str(data["error"]), code=response.status_code)
        if response.status_code >= 400:
            raise UpstreamError(f"HTTP {response.status_code} from {url}", code=response.status_code)
        return data

    async def page_title(self, page_id: str) -> str:
        data = await self._request("pagename", page=page_id)
        return data.get("title") or data.get("id") or page_id

    async def page_links(self, page_id: str) -> List[str]:
        return await self._request("links", page=page_id)

    async def page_tags(self, page_id: str) -> List[str]:
        return await self._request("tags", page=page_id)

    async def search_pages(self, query: str) -> List[Dict[str, Any]]:
        return await self._request("search", q=query)

    async def aclose(self):
        await self.client.aclose()
