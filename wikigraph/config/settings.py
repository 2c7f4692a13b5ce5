"""
설정 관리 클래스

환경 변수(WIKIGRAPH_ 접두사) 및 .env 파일의 설정을 통합 관리합니다.
"""

from typing import Optional, Dict, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 기본 설정
    app_name: str = "Wiki Graph API"
    debug: bool = False

    # API 설정
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # DokuWiki 연결 설정
    wiki_url: str = Field(default="", description="DokuWiki 기본 URL (끝 슬래시 없이)")
    xmlrpc_path: str = Field(default="/lib/exe/xmlrpc.php", description="XML-RPC 엔드포인트 경로")
    username: str = ""
    password: str = ""
    base_namespace: str = Field(default="", description="탐색 대상 네임스페이스 (빈 값이면 전체)")
    request_timeout: float = 30.0
    max_retries: int = Field(default=2, ge=0)
    retry_delay: float = Field(default=1.0, ge=0.0)

    # 캐시 설정
    cache_backend: str = Field(default="memory", description="memory 또는 disk")
    cache_dir: str = "./data/cache"
    cache_max_entries: int = Field(default=10000, ge=1)
    cache_ttl: int = Field(default=300, description="문서 단위 조회 TTL (초, 0이면 캐시 없음)")
    tag_index_ttl: int = Field(default=3600, description="태그 인덱스 TTL (초)")

    # 조회 제한
    max_pages: int = Field(default=500, ge=1, description="allpages 응답 최대 문서 수")
    tag_scan_fetch_limit: int = Field(default=50, ge=0, description="태그 검색 시 요청당 최대 콜드 조회 수")
    preview_length: int = Field(default=200, ge=1)

    # 로그 설정
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WIKIGRAPH_",
        case_sensitive=False,
        extra="ignore"  # 추가 환경 변수 무시
    )

    @field_validator("wiki_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """URL 끝의 슬래시 제거"""
        return v.strip().rstrip("/")

    @field_validator("cache_backend")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        """캐시 백엔드 검증"""
        allowed_backends = {"memory", "disk"}
        v = v.lower()
        if v not in allowed_backends:
            raise ValueError(f"지원하지 않는 캐시 백엔드: {v}. 지원 백엔드: {allowed_backends}")
        return v

    @property
    def xmlrpc_url(self) -> str:
        return self.wiki_url + self.xmlrpc_path

    def get_cache_config(self) -> Dict[str, Any]:
        """캐시 설정을 반환합니다"""
        return {
            "backend": self.cache_backend,
            "cache_dir": self.cache_dir,
            "max_entries": self.cache_max_entries,
        }

    def get_client_config(self) -> Dict[str, Any]:
        """DokuWiki 클라이언트 설정을 반환합니다"""
        return {
            "url": self.xmlrpc_url,
            "username": self.username,
            "password": self.password,
            "timeout": self.request_timeout,
            "max_retries": self.max_retries,
            "retry_delay": self.retry_delay,
        }


# 전역 설정 인스턴스
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """설정 인스턴스를 반환합니다."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """설정 인스턴스를 초기화합니다 (테스트에서 환경변수 재적용용)"""
    global _settings
    _settings = None
