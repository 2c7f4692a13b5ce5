"""
LookupService 구성

설정으로부터 DokuWiki 클라이언트와 캐시를 만들어 서비스를 조립합니다.
"""

import logging
from typing import Optional

from wikigraph.config.settings import Settings, get_settings
from wikigraph.core.exceptions import ConfigurationError
from wikigraph.core.utils.cache_manager import CacheConfig, CacheManager
from wikigraph.source.dokuwiki import DokuWikiClient
from .service import LookupService

logger = logging.getLogger(__name__)


def build_lookup_service(settings: Optional[Settings] = None) -> LookupService:
    """
    설정 기반 LookupService 생성

    Raises:
        ConfigurationError: 위키 URL이 설정되지 않은 경우
    """
    settings = settings or get_settings()

    if not settings.wiki_url:
        raise ConfigurationError("Wiki URL not configured. Set WIKIGRAPH_WIKI_URL.")

    client = DokuWikiClient(**settings.get_client_config())
    cache = CacheManager(CacheConfig(**settings.get_cache_config()))

    logger.info(f"LookupService built for {settings.wiki_url} (cache backend: {settings.cache_backend})")
    return LookupService(client, cache, settings)
