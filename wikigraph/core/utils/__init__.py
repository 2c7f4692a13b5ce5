"""
유틸리티 패키지

- TTL 조회 캐시 관리 (cachetools / diskcache)
- 재시도 로직 관리
"""

from .cache_manager import CacheConfig, CacheManager
from .retry_manager import RetryExhaustedError, RetryManager

__all__ = [
    "CacheConfig",
    "CacheManager",
    "RetryExhaustedError",
    "RetryManager"
]
