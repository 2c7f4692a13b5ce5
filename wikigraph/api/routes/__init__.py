"""API 라우터 패키지"""

from . import lookup

__all__ = ["lookup"]
