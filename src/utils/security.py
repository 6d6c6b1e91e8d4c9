# src/utils/security.py
import hashlib
import hmac
import secrets

PBKDF2_ITERATIONS = 260000
_SCHEME = "pbkdf2_sha256"


def hash_password(password: str, salt: str = None, iterations: int = PBKDF2_ITERATIONS) -> str:
    """
    PBKDF2-HMAC-SHA256으로 비밀번호를 해시합니다.

    Returns:
        "pbkdf2_sha256$<iterations>$<salt>$<hex digest>" 형식의 문자열.
    """
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """저장된 해시가 주어진 평문 비밀번호와 일치하는지 확인합니다. 형식이 잘못된 해시는 불일치로 봅니다."""
    try:
        scheme, iterations, salt, _ = stored_hash.split("$")
        iterations = int(iterations)
    except (AttributeError, ValueError):
        return False
    if scheme != _SCHEME:
        return False
    return hmac.compare_digest(hash_password(password, salt, iterations), stored_hash)
