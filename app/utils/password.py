"""비밀번호 해싱, 검증 및 정책 유틸리티 모듈.

Password hashing, verification and policy utility module.
Uses bcrypt directly for storage; plain text is never persisted.
"""

import bcrypt

# 비밀번호 정책 — 최소 10자, 숫자 1개 이상 (Minimum length 10, at least one digit)
PASSWORD_MIN_LENGTH: int = 10


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password using bcrypt with a random salt.
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교 검증합니다.

    Verify a plain text password against a stored bcrypt hash.

    Args:
        plain_password: 검증할 평문 비밀번호 (Plain text password to verify)
        hashed_password: 저장된 bcrypt 해시 (Stored bcrypt hash)

    Returns:
        bool: 일치하면 True (True if password matches hash)
    """
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def password_policy_errors(password: str) -> list[str]:
    """비밀번호 정책 위반 목록을 반환합니다.

    Return the list of policy violations for a candidate password.
    An empty list means the password is acceptable.
    """
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Passwords must be at least {PASSWORD_MIN_LENGTH} characters.")
    if not any(ch.isdigit() for ch in password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    return errors
