"""인증 API 테스트 — 회원가입, 로그인, 토큰 검증.

Authentication API tests — Registration rules, login and bearer token
verification (signature, expiry, issuer, audience).
"""

from datetime import datetime, timedelta, timezone

import jwt
from httpx import AsyncClient

from app.config import settings
from app.utils.jwt import decode_token
from tests.conftest import auth_header

AUTH = "/api/authentication"


def _registration(**overrides) -> dict:
    body = {
        "first_name": "John",
        "last_name": "Doe",
        "username": "jdoe",
        "password": "Password1000",
        "email": "jdoe@test.com",
        "phone_number": "589-777-2233",
        "roles": ["Manager"],
    }
    body.update(overrides)
    return body


# ===== 회원가입 (Registration) =====

class TestRegistration:
    """회원가입 테스트."""

    async def test_register_success(self, client: AsyncClient, roles):
        """정상 가입 시 201과 부여된 역할."""
        res = await client.post(AUTH, json=_registration())
        assert res.status_code == 201
        data = res.json()
        assert data["username"] == "jdoe"
        assert data["roles"] == ["Manager"]

    async def test_register_role_name_case_insensitive(self, client: AsyncClient, roles):
        """역할 이름은 대소문자를 구분하지 않습니다."""
        res = await client.post(AUTH, json=_registration(roles=["administrator"]))
        assert res.status_code == 201
        assert res.json()["roles"] == ["Administrator"]

    async def test_register_weak_password(self, client: AsyncClient, roles):
        """비밀번호 정책 위반 시 400과 오류 목록."""
        res = await client.post(AUTH, json=_registration(password="short"))
        assert res.status_code == 400
        errors = res.json()["detail"]
        assert "Passwords must be at least 10 characters." in errors
        assert "Passwords must have at least one digit ('0'-'9')." in errors

    async def test_register_duplicate_username(self, client: AsyncClient, manager_user):
        """이미 존재하는 사용자명은 400."""
        res = await client.post(AUTH, json=_registration(username="MANAGER", email="other@test.com"))
        assert res.status_code == 400
        assert "Username 'MANAGER' is already taken." in res.json()["detail"]

    async def test_register_duplicate_email(self, client: AsyncClient, manager_user):
        """이미 존재하는 이메일은 400."""
        res = await client.post(AUTH, json=_registration(email="manager@test.com"))
        assert res.status_code == 400

    async def test_register_unknown_role(self, client: AsyncClient, roles):
        """존재하지 않는 역할은 400."""
        res = await client.post(AUTH, json=_registration(roles=["Janitor"]))
        assert res.status_code == 400
        assert "Role JANITOR does not exist." in res.json()["detail"]

    async def test_register_null_body(self, client: AsyncClient, roles):
        """본문이 없으면 400."""
        res = await client.post(AUTH)
        assert res.status_code == 400

    async def test_register_missing_username(self, client: AsyncClient, roles):
        """필수 필드 누락은 422."""
        body = _registration()
        del body["username"]
        res = await client.post(AUTH, json=body)
        assert res.status_code == 422


# ===== 로그인 (Login) =====

class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, manager_user):
        """로그인 성공 시 검증 가능한 토큰을 받습니다."""
        res = await client.post(f"{AUTH}/login", json={"username": "manager", "password": "manager12345"})
        assert res.status_code == 200
        payload = decode_token(res.json()["token"])
        assert payload["sub"] == str(manager_user.id)
        assert payload["name"] == "manager"
        assert payload["roles"] == ["Manager"]
        assert payload["iss"] == settings.JWT_VALID_ISSUER
        assert payload["aud"] == settings.JWT_VALID_AUDIENCE

    async def test_login_token_grants_access(self, client: AsyncClient, manager_user, company):
        """발급된 토큰으로 보호된 엔드포인트에 접근합니다."""
        res = await client.post(f"{AUTH}/login", json={"username": "manager", "password": "manager12345"})
        token = res.json()["token"]
        listing = await client.get("/api/companies", headers=auth_header(token))
        assert listing.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, manager_user):
        """잘못된 비밀번호는 401."""
        res = await client.post(f"{AUTH}/login", json={"username": "manager", "password": "wrong-password1"})
        assert res.status_code == 401

    async def test_login_unknown_user(self, client: AsyncClient, roles):
        """존재하지 않는 사용자는 401."""
        res = await client.post(f"{AUTH}/login", json={"username": "ghost", "password": "whatever123"})
        assert res.status_code == 401

    async def test_register_then_login(self, client: AsyncClient, roles):
        """가입한 계정으로 로그인할 수 있습니다."""
        await client.post(AUTH, json=_registration())
        res = await client.post(f"{AUTH}/login", json={"username": "jdoe", "password": "Password1000"})
        assert res.status_code == 200


# ===== 토큰 검증 (Token verification) =====

class TestTokenVerification:
    """Bearer 토큰 검증 테스트."""

    def _token(self, user, **overrides) -> str:
        claims = {
            "sub": str(user.id),
            "name": user.username,
            "roles": user.role_names,
            "iss": settings.JWT_VALID_ISSUER,
            "aud": settings.JWT_VALID_AUDIENCE,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        }
        claims.update(overrides)
        return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    async def test_expired_token(self, client: AsyncClient, manager_user):
        """만료된 토큰은 401."""
        token = self._token(manager_user, exp=datetime.now(timezone.utc) - timedelta(minutes=1))
        res = await client.get("/api/companies", headers=auth_header(token))
        assert res.status_code == 401

    async def test_wrong_audience(self, client: AsyncClient, manager_user):
        """대상자가 다르면 401."""
        token = self._token(manager_user, aud="https://elsewhere")
        res = await client.get("/api/companies", headers=auth_header(token))
        assert res.status_code == 401

    async def test_wrong_issuer(self, client: AsyncClient, manager_user):
        """발급자가 다르면 401."""
        token = self._token(manager_user, iss="SomeoneElse")
        res = await client.get("/api/companies", headers=auth_header(token))
        assert res.status_code == 401

    async def test_garbage_token(self, client: AsyncClient, roles):
        """형식이 잘못된 토큰은 401."""
        res = await client.get("/api/companies", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_unknown_user(self, client: AsyncClient, manager_user, db):
        """토큰의 사용자가 삭제되었으면 401."""
        token = self._token(manager_user)
        await db.delete(manager_user)
        await db.commit()
        res = await client.get("/api/companies", headers=auth_header(token))
        assert res.status_code == 401
