"""위키 그래프 처리 중 발생하는 예외 정의"""


class WikiGraphError(Exception):
    """위키 그래프 예외 기본 클래스"""
    pass


class ConfigurationError(WikiGraphError):
    """연결 설정이 없거나 잘못된 경우 (치명적, 재시도 없음)"""
    pass


class UpstreamError(WikiGraphError):
    """문서 소스와 통신 중 전송/프로토콜 오류"""

    def __init__(self, message: str, code: int = 0):
        self.code = code
        super().__init__(message)


class NotFoundError(WikiGraphError):
    """요청한 문서나 태그의 내용이 비어 있는 경우"""
    pass


class MalformedInputError(WikiGraphError):
    """필수 요청 파라미터 누락 등 잘못된 요청"""

    def __init__(self, message: str, parameter: str = ""):
        self.parameter = parameter
        super().__init__(message)

    @classmethod
    def missing(cls, parameter: str) -> "MalformedInputError":
        return cls(f"Missing {parameter} parameter", parameter=parameter)
