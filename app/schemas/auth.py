"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication Pydantic request/response schema definitions.
Covers user registration, login and the issued token.
"""

from pydantic import BaseModel, Field


class UserForRegistration(BaseModel):
    """회원가입 요청 스키마.

    User registration request schema.

    Attributes:
        first_name: 이름 (First name, optional)
        last_name: 성 (Last name, optional)
        username: 로그인 아이디 (Login username, unique)
        password: 비밀번호 (Plain text; min 10 chars with a digit)
        email: 이메일 (Email address, unique)
        phone_number: 전화번호 (Phone number, optional)
        roles: 부여할 역할 이름 목록 (Role names to assign)
    """

    first_name: str | None = None
    last_name: str | None = None
    username: str = Field(..., min_length=1, description="Username is required")
    password: str = Field(..., min_length=1, description="Password is required")
    email: str | None = None
    phone_number: str | None = None
    roles: list[str] = Field(default_factory=list)


class UserForAuthentication(BaseModel):
    """로그인 요청 스키마 (Login request)."""

    username: str = Field(..., min_length=1, description="User name is required")
    password: str = Field(..., min_length=1, description="Password is required")


class TokenResponse(BaseModel):
    """토큰 응답 스키마 (Issued bearer token)."""

    token: str


class RegisteredUserResponse(BaseModel):
    """회원가입 결과 응답 스키마.

    Attributes:
        id: 사용자 UUID (User identifier)
        username: 로그인 아이디 (Username)
        roles: 부여된 역할 (Assigned role names)
    """

    id: str
    username: str
    roles: list[str]
