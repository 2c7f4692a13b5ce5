"""
재시도 로직 관리자

문서 소스 어댑터가 일시적인 전송 오류(연결 거부, 타임아웃)를 고정 지연으로
다시 시도할 때 사용합니다. 재시도 대상이 아닌 예외는 그대로 전달됩니다.
"""

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """모든 시도가 재시도 대상 예외로 실패함"""

    def __init__(self, label: str, attempts: int, last_exception: BaseException):
        self.label = label
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(f"{label} failed after {attempts} attempts: {last_exception}")


class RetryManager:
    """고정 지연 재시도"""

    def __init__(
        self,
        max_retries: int = 2,
        delay: float = 1.0,
        retry_on: Tuple[Type[BaseException], ...] = (ConnectionError, TimeoutError),
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Args:
            max_retries: 첫 시도 이후 추가 시도 횟수
            delay: 시도 사이 지연 (초)
            retry_on: 재시도할 예외 타입
            sleep: 지연 함수 (테스트에서 교체)
        """
        self.max_retries = max_retries
        self.delay = delay
        self.retry_on = retry_on
        self._sleep = sleep

    @property
    def attempts(self) -> int:
        return self.max_retries + 1

    def run(self, operation: Callable[[], T], label: str = "operation") -> T:
        """
        operation을 성공하거나 시도 횟수가 끝날 때까지 실행

        Raises:
            RetryExhaustedError: 마지막 시도까지 재시도 대상 예외로 실패한 경우
        """
        attempt = 1
        while True:
            try:
                return operation()
            except self.retry_on as e:
                if attempt >= self.attempts:
                    logger.error(f"{label}: giving up after {attempt} attempts ({e})")
                    raise RetryExhaustedError(label, attempt, e) from e
                logger.warning(f"{label}: attempt {attempt}/{self.attempts} failed ({e}), retrying in {self.delay}s")
                self._sleep(self.delay)
                attempt += 1
