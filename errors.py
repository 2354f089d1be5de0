class TimetableError(Exception):
    pass


class ConfigurationError(TimetableError):
    """피드 URL이 비어 있음. 네트워크 접근 전에 발생합니다."""


class FetchError(TimetableError):
    """피드 다운로드 또는 파싱 실패. 원인 예외를 `cause`에 담습니다."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
