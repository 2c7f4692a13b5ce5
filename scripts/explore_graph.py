#!/usr/bin/env python3
"""
위키 그래프 탐색 스크립트

시작 문서에서 지정한 깊이까지 링크를 확장하고 결과 그래프를 출력합니다.
- 기본: 실행 중인 조회 API 서버 사용 (ApiDataProvider)
- --local: 설정(.env)으로 LookupService를 직접 구성 (ServiceDataProvider)
"""

import argparse
import asyncio
import json
import sys

from wikigraph.api.main import configure_logging
from wikigraph.core.exceptions import WikiGraphError
from wikigraph.explorer import (
    ApiDataProvider,
    ExplorerSession,
    MemoryRenderer,
    PageNode,
    ServiceDataProvider,
)
from wikigraph.explorer.providers import DEFAULT_API_BASE
from wikigraph.lookup import build_lookup_service


async def explore(args: argparse.Namespace) -> ExplorerSession:
    """시작 문서부터 depth 단계까지 확장"""
    if args.local:
        provider = ServiceDataProvider(build_lookup_service())
    else:
        provider = ApiDataProvider(args.api)

    session = ExplorerSession(provider, MemoryRenderer(), wiki_url=args.wiki_url)
    try:
        await session.add_root(args.page)
        frontier = list(session.roots)

        for depth in range(args.depth):
            discovered = []
            for node_id in frontier:
                result = await session.expand(node_id)
                discovered.extend(result.added_nodes)
            await session.drain()
            print(f"🔎 depth {depth + 1}: +{len(discovered)} pages", file=sys.stderr)
            frontier = [n for n in discovered if isinstance(session.nodes.get(n), PageNode)]
    finally:
        if isinstance(provider, ApiDataProvider):
            await provider.aclose()

    return session


def main():
    """메인 실행 함수"""
    parser = argparse.ArgumentParser(description="위키 링크 그래프 탐색")
    parser.add_argument("page", help="시작 문서 ID (예: wiki:start)")
    parser.add_argument("--depth", type=int, default=1, help="확장 깊이 (기본값: 1)")
    parser.add_argument("--api", default=DEFAULT_API_BASE, help="조회 API 기본 URL")
    parser.add_argument("--local", action="store_true", help="API 서버 없이 직접 조회")
    parser.add_argument("--wiki-url", default="", help="원본 문서 링크용 위키 URL")
    args = parser.parse_args()

    configure_logging()

    try:
        session = asyncio.run(explore(args))
    except WikiGraphError as e:
        print(f"❌ 탐색 실패: {e}", file=sys.stderr)
        sys.exit(1)

    payload = session.snapshot().to_payload()
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    print(f"✅ {len(payload['nodes'])} nodes, {len(payload['edges'])} edges", file=sys.stderr)


if __name__ == "__main__":
    main()
