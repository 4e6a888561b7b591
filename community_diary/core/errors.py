# community_diary/core/errors.py
"""
서비스 계층에서 사용하는 오류 타입 정의.

각 서비스의 공개 메서드는 내부 오류를 잡아 작업 이름이 들어간 하나의 메시지로
다시 던지지만, 원래 오류의 종류(kind)는 그대로 보존합니다.
HTTP 응답 코드 결정은 경계 계층(create_app의 에러 핸들러)이 담당합니다.
"""
import logging
from enum import Enum
from typing import NoReturn, Optional

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """서비스 오류의 종류"""
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    STORE_FAILURE = "STORE_FAILURE"
    CONFLICT = "CONFLICT"  # 다이어리 날짜 중복 금지 모드에서만 사용
    INVALID_INPUT = "INVALID_INPUT"


class ServiceError(Exception):
    """
    서비스 계층의 공통 예외.

    :param message: 호출자에게 보여줄 메시지
    :param kind: 오류 종류 (ErrorKind)
    :param detail: 내부에서 발생한 원래 오류 메시지
    """
    def __init__(self, message: str, kind: ErrorKind = ErrorKind.STORE_FAILURE, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.detail = detail


class NotFoundError(ServiceError):
    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.NOT_FOUND)


class ForbiddenError(ServiceError):
    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.FORBIDDEN)


class ConflictError(ServiceError):
    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.CONFLICT)


def raise_operation_error(message: str, error: Exception) -> NoReturn:
    """
    내부 오류를 로그로 남기고, 작업 메시지를 담은 ServiceError로 다시 던집니다.
    잘못된 입력값(ValueError, TypeError)은 INVALID_INPUT, 그 밖의 예외(드라이버, 네트워크 오류 등)는
    STORE_FAILURE로 분류합니다.
    """
    logger.error(f"{message} ({type(error).__name__}: {error})", exc_info=error)
    if isinstance(error, ServiceError):
        raise ServiceError(message, kind=error.kind, detail=error.message) from error
    if isinstance(error, (ValueError, TypeError)):
        raise ServiceError(message, kind=ErrorKind.INVALID_INPUT, detail=str(error)) from error
    raise ServiceError(message, kind=ErrorKind.STORE_FAILURE, detail=str(error)) from error
