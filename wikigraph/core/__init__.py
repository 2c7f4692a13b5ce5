"""
핵심 기능 모듈

공통 스키마, 예외, 식별자 규칙, 유틸리티를 제공합니다.
"""
