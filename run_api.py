#!/usr/bin/env python3
"""
Wiki Graph API 서버 실행 스크립트

설정(.env, WIKIGRAPH_*)의 호스트/포트로 조회 API 서버를 실행합니다.
"""

if __name__ == "__main__":
    import uvicorn
    from wikigraph.config.settings import get_settings

    settings = get_settings()

    print("🚀 Wiki Graph API 서버를 시작합니다...")
    print(f"📖 API 문서: http://localhost:{settings.api_port}/docs")
    print(f"🔗 위키: {settings.wiki_url or '(WIKIGRAPH_WIKI_URL 미설정)'}")

    uvicorn.run(
        "wikigraph.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
