"""
TTL 기반 조회 캐시 관리자

(키) → (값, 저장 시각) 형태로 저장하고, 조회 시점에 호출자가 지정한 TTL로
만료 여부를 판단합니다. 만료된 항목은 별도 정리 없이 조회 시 없는 것으로 취급합니다.

백엔드:
- memory: cachetools LRUCache (프로세스 내 공유)
- disk: diskcache (프로세스 간 공유, 재시작 후에도 유지)
"""

import json
import logging
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import diskcache
from cachetools import LRUCache
from pydantic import BaseModel

logger = logging.getLogger(__name__)

_MISSING = object()


class CacheConfig(BaseModel):
    """캐시 설정"""
    backend: str = "memory"
    cache_dir: str = "./data/cache"
    max_entries: int = 10000


class CacheManager:
    """
    조회 결과 캐시 관리자

    값은 JSON 직렬화 가능한 데이터여야 합니다. 저장소 접근은 스레드 락으로
    보호하지만 계산은 락 밖에서 하므로, 같은 키를 동시에 계산하면 마지막 쓰기가 남습니다.
    """

    def __init__(self, config: Optional[CacheConfig] = None, clock: Callable[[], float] = time.time):
        """
        CacheManager 초기화

        Args:
            config: 캐시 설정 (기본값: 메모리 백엔드)
            clock: 현재 시각(초)을 반환하는 함수
        """
        self.config = config or CacheConfig()
        self.clock = clock

        if self.config.backend == "disk":
            self.cache_dir = Path(self.config.cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self.cache = diskcache.Cache(directory=str(self.cache_dir / "lookup"))
        else:
            self.cache_dir = None
            self.cache = LRUCache(maxsize=self.config.max_entries)

        self.stats = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "sets": 0
        }
        # LRUCache는 스레드 안전하지 않음 (조회도 순서를 갱신)
        self._lock = threading.Lock()

        logger.info(f"CacheManager initialized with backend: {self.config.backend}")

    def _log_structured(self, event: str, **kwargs):
        """
        구조화된 JSON 로그 출력

        Args:
            event: 이벤트 이름
            **kwargs: 추가 로그 데이터
        """
        log_data = {
            "event": event,
            "timestamp": datetime.now().isoformat(),
            **kwargs
        }
        logger.debug(json.dumps(log_data, ensure_ascii=False))

    def get(self, key: str, ttl: float, default: Any = None) -> Any:
        """
        캐시 조회

        Args:
            key: 캐시 키
            ttl: 유효 시간 (초). 0 이하이면 항상 미스
            default: 미스일 때 반환할 값

        Returns:
            Any: 저장 시각으로부터 ttl 이내이면 저장된 값, 아니면 default
        """
        if ttl <= 0:
            self.stats["misses"] += 1
            return default

        with self._lock:
            entry = self.cache.get(key, _MISSING)
        if entry is _MISSING:
            self.stats["misses"] += 1
            self._log_structured("cache_miss", key=key)
            return default

        age = self.clock() - entry["timestamp"]
        if age >= ttl:
            self.stats["expired"] += 1
            self.stats["misses"] += 1
            self._log_structured("cache_expired", key=key, age=age, ttl=ttl)
            return default

        self.stats["hits"] += 1
        self._log_structured("cache_hit", key=key, age=age)
        return entry["value"]

    def set(self, key: str, value: Any) -> None:
        """현재 시각으로 캐시 저장"""
        entry = {"value": value, "timestamp": self.clock()}
        with self._lock:
            self.cache[key] = entry
        self.stats["sets"] += 1
        self._log_structured("cache_set", key=key)

    def delete(self, key: str) -> bool:
        """캐시 삭제"""
        with self._lock:
            try:
                del self.cache[key]
                return True
            except KeyError:
                return False

    def clear(self) -> None:
        """전체 캐시 정리"""
        with self._lock:
            self.cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        """캐시 통계 반환"""
        total = self.stats["hits"] + self.stats["misses"]
        with self._lock:
            size = len(self.cache)
        return {
            **self.stats,
            "size": size,
            "hit_rate": self.stats["hits"] / total if total else 0.0
        }

    def health_check(self) -> Dict[str, Any]:
        """상태 점검"""
        test_key = "health_check_test"
        self.set(test_key, {"timestamp": datetime.now().isoformat()})
        readable = self.get(test_key, ttl=10) is not None
        self.delete(test_key)

        return {
            "status": "healthy" if readable else "error",
            "backend": self.config.backend,
            "cache_stats": self.get_stats(),
            "config": self.config.model_dump()
        }

    def close(self) -> None:
        """디스크 백엔드 핸들 정리"""
        if isinstance(self.cache, diskcache.Cache):
            self.cache.close()
