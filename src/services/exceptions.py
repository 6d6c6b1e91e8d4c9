# src/services/exceptions.py

# --- Validation Exceptions ---
class ValidationError(Exception):
    """요청 값이 누락되었거나 형식이 잘못되었을 때"""
    pass

# --- Not Found Exceptions ---
class NotFoundError(Exception):
    """참조한 엔티티를 찾을 수 없을 때"""
    pass

class ProjectNotFoundError(NotFoundError):
    """프로젝트를 찾을 수 없을 때"""
    pass

class TicketNotFoundError(NotFoundError):
    """티켓을 찾을 수 없을 때"""
    pass

class UserNotFoundError(NotFoundError):
    """사용자를 찾을 수 없을 때"""
    pass

# --- Conflict Exceptions ---
class ConflictError(Exception):
    """유일성 제약 조건을 위반했을 때"""
    pass

class UserAlreadyExistsError(ConflictError):
    """같은 이메일의 사용자가 이미 존재할 때"""
    pass

# --- Auth Exceptions ---
class TokenInvalidError(Exception):
    """토큰이 유효하지 않거나 없을 때"""
    pass

class AuthenticationError(Exception):
    """사용자 자격 증명 실패 시"""
    pass

# --- Infrastructure Exceptions ---
class InternalError(Exception):
    """저장소 오류 등 예상하지 못한 실패. 메시지는 사용자에게 그대로 노출됩니다."""
    pass

class RateLimitExceededError(Exception):
    """클라이언트가 허용된 요청 빈도를 초과했을 때"""
    def __init__(self, message: str, retry_after: float):
        super().__init__(message)
        self.retry_after = retry_after
