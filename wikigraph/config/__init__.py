"""
설정 관리 모듈

환경 변수 및 .env 파일의 설정을 관리합니다.
"""

from .settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings"
]
