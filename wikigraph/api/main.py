import logging
import traceback
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wikigraph import __version__
from wikigraph.api.routes import lookup
from wikigraph.config.settings import Settings, get_settings
from wikigraph.core.exceptions import MalformedInputError, NotFoundError, WikiGraphError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings = None):
    """Settings.log_level에 맞춰 루트 로거 설정"""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("wikigraph").setLevel(level)


def _error_payload(exc: Exception) -> dict:
    payload = {"error": str(exc)}
    if get_settings().debug:
        payload["trace"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return payload


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 수명 주기 (종료 시 조회 서비스의 캐시 핸들 정리)"""
    logger.info("Starting Wiki Graph API...")
    yield
    lookup.reset_lookup_service()
    logger.info("Wiki Graph API stopped")


# FastAPI 인스턴스 생성
app = FastAPI(
    title=get_settings().app_name,
    description="DokuWiki 문서 링크/태그 그래프 조회 API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# 요청 오류는 200 + {"error"} (작업 수행 없음)
@app.exception_handler(MalformedInputError)
async def malformed_input_handler(request: Request, exc: MalformedInputError):
    logger.info(f"Rejected request {request.url.path}: {exc}")
    return JSONResponse(status_code=200, content={"error": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=200, content={"error": str(exc)})


# 설정/전송 오류는 500
@app.exception_handler(WikiGraphError)
async def wiki_graph_error_handler(request: Request, exc: WikiGraphError):
    logger.error(f"Lookup failed {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=_error_payload(exc))


# Health check 엔드포인트
@app.get("/health")
async def health_check():
    payload = {"status": "healthy", "message": "Wiki Graph API is running"}

    # 조회 서비스가 만들어진 뒤에만 캐시 상태 포함
    service = lookup.current_lookup_service()
    if service is not None:
        cache = service.cache.health_check()
        payload["cache"] = cache
        if cache["status"] != "healthy":
            payload["status"] = "degraded"
    return payload


# router 추가
app.include_router(lookup.router, prefix="/api/v1")


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
