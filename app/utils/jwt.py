"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.

JWT Payload Structure:
    {
        "sub": "user_uuid",              # 사용자 ID (User identifier)
        "name": "jdoe",                  # 사용자명 (Username)
        "roles": ["Manager"],            # 역할 이름 목록 (Role names)
        "iss": "CompanyEmployeesAPI",    # 발급자 (Issuer)
        "aud": "https://localhost:5001", # 대상자 (Audience)
        "exp": 1234567890                # 만료 시간 UNIX timestamp (Expiration)
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from app.config import settings


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a signed JWT access token with issuer, audience and expiry claims.
    Token expires after JWT_EXPIRE_MINUTES.

    Args:
        data: JWT 페이로드 데이터 (Claims, typically sub/name/roles)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)

    Example:
        token = create_access_token({"sub": str(user.id), "name": user.username, "roles": ["Manager"]})
    """
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    to_encode.update({
        "exp": expire,
        "iss": settings.JWT_VALID_ISSUER,
        "aud": settings.JWT_VALID_AUDIENCE,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string: signature, lifetime, issuer
    and audience are all validated.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)

    Returns:
        dict[str, Any]: 디코딩된 페이로드 딕셔너리 (Decoded payload dictionary)

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        issuer=settings.JWT_VALID_ISSUER,
        audience=settings.JWT_VALID_AUDIENCE,
    )
