import functools
import logging

from sqlalchemy.exc import SQLAlchemyError

from src.services.exceptions import InternalError

logger = logging.getLogger(__name__)


def translate_store_errors(message: str):
    """
    저장소(SQLAlchemy) 오류를 InternalError로 바꿔 던지는 데코레이터.

    원래 오류는 서버 로그에만 남기고, 사용자에게는 작업별 일반 메시지만 전달합니다.
    서비스 계층의 예외(ValidationError, NotFoundError 등)는 그대로 통과합니다.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.exception("%s (%s)", message, func.__qualname__)
                raise InternalError(message) from e
        return wrapper
    return decorator
