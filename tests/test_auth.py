"""인증 API 테스트 — 회원가입, 로그인, 토큰 회전, 로그아웃, /me, 세션 가드.

Auth API tests — Registration, login, refresh-token rotation, logout, /me,
and the session guard's failure reasons.
"""

from datetime import timedelta
from types import SimpleNamespace

from httpx import AsyncClient

from tests.conftest import auth_header, create_user, make_token
from vidtube.repositories.session_repository import session_repository
from vidtube.repositories.user_repository import user_repository
from vidtube.utils.jwt import create_refresh_token, decode_refresh_token

AUTH = "/api/v1/auth"


async def _login(client: AsyncClient, username: str, password: str) -> dict:
    res = await client.post(f"{AUTH}/login", json={"username": username, "password": password})
    assert res.status_code == 200
    return res.json()["data"]


async def _refresh(client: AsyncClient, refresh_token: str):
    return await client.post(f"{AUTH}/refresh", json={"refreshToken": refresh_token})


# ===== Register =====

class TestRegister:
    """회원가입 테스트."""

    async def test_register_success(self, client: AsyncClient):
        """회원가입 성공 — 201, 비밀 필드 없음."""
        res = await client.post(f"{AUTH}/register", json={
            "fullName": "Carol Kim",
            "email": "Carol@Test.com",
            "username": "Carol",
            "password": "carol123!",
        })
        assert res.status_code == 201
        body = res.json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        assert body["data"]["username"] == "carol"
        assert body["data"]["email"] == "carol@test.com"
        assert "password" not in body["data"]
        assert "passwordHash" not in body["data"]

    async def test_register_duplicate_username(self, client: AsyncClient, alice):
        """중복 사용자명 — 409."""
        res = await client.post(f"{AUTH}/register", json={
            "fullName": "Other Alice",
            "email": "other@test.com",
            "username": "alice",
            "password": "pw123456!",
        })
        assert res.status_code == 409
        assert res.json()["code"] == "conflict"

    async def test_register_duplicate_email(self, client: AsyncClient, alice):
        res = await client.post(f"{AUTH}/register", json={
            "fullName": "Other",
            "email": "ALICE@test.com",
            "username": "someoneelse",
            "password": "pw123456!",
        })
        assert res.status_code == 409

    async def test_register_race_loser_gets_conflict(self, client: AsyncClient, monkeypatch, alice):
        """중복 검사를 통과한 뒤 유니크 제약 위반 — 500이 아닌 409.

        A concurrent registration that commits between the duplicate check
        and the insert is simulated by making the check miss.
        """
        async def _no_conflict(*args, **kwargs):
            return None

        monkeypatch.setattr(user_repository, "find_conflicting", _no_conflict)

        res = await client.post(f"{AUTH}/register", json={
            "fullName": "Alice Again",
            "email": "alice@test.com",
            "username": "alice",
            "password": "pw123456!",
        })
        assert res.status_code == 409
        assert res.json()["code"] == "conflict"

        # 실패한 SAVEPOINT 이후에도 기존 계정은 유지됨 — The existing account survives
        login = await client.post(f"{AUTH}/login", json={"username": "alice", "password": "alice123!"})
        assert login.status_code == 200

    async def test_register_blank_field(self, client: AsyncClient):
        """공백 필드 — 400."""
        res = await client.post(f"{AUTH}/register", json={
            "fullName": "  ",
            "email": "x@test.com",
            "username": "x",
            "password": "pw123456!",
        })
        assert res.status_code == 400
        assert res.json()["message"] == "All fields are required"

    async def test_register_missing_field(self, client: AsyncClient):
        """필드 누락 — 요청 검증 오류 400."""
        res = await client.post(f"{AUTH}/register", json={"username": "x"})
        assert res.status_code == 400
        assert res.json()["code"] == "validation_error"


# ===== Login =====

class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, alice):
        """로그인 성공 — 토큰 쌍과 프로필, httpOnly 쿠키."""
        res = await client.post(f"{AUTH}/login", json={"username": "alice", "password": "alice123!"})
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "User logged in successfully"
        assert body["data"]["accessToken"]
        assert body["data"]["refreshToken"]
        assert body["data"]["user"]["id"] == str(alice.id)

        cookies = res.headers.get_list("set-cookie")
        assert any(c.startswith("accessToken=") and "HttpOnly" in c for c in cookies)
        assert any(c.startswith("refreshToken=") and "HttpOnly" in c for c in cookies)

    async def test_login_by_email(self, client: AsyncClient, alice):
        res = await client.post(f"{AUTH}/login", json={"email": "alice@test.com", "password": "alice123!"})
        assert res.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, alice):
        """잘못된 비밀번호 — 401 invalid_credentials."""
        res = await client.post(f"{AUTH}/login", json={"username": "alice", "password": "wrong"})
        assert res.status_code == 401
        body = res.json()
        assert body["code"] == "invalid_credentials"
        assert body["success"] is False
        assert body["data"] is None

    async def test_login_unknown_user(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/login", json={"username": "nobody", "password": "whatever"})
        assert res.status_code == 401
        assert res.json()["code"] == "invalid_credentials"

    async def test_login_inactive_user(self, client: AsyncClient, db):
        """비활성 계정 — 401."""
        await create_user(db, "dormant", "dormant123!", is_active=False)
        res = await client.post(f"{AUTH}/login", json={"username": "dormant", "password": "dormant123!"})
        assert res.status_code == 401

    async def test_login_without_identifier(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/login", json={"password": "whatever"})
        assert res.status_code == 400


# ===== Refresh =====

class TestRefresh:
    """토큰 회전 테스트."""

    async def test_refresh_rotates_pair(self, client: AsyncClient, alice):
        """갱신 성공 — 새 토큰 쌍."""
        tokens = await _login(client, "alice", "alice123!")
        res = await _refresh(client, tokens["refreshToken"])
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["refreshToken"] != tokens["refreshToken"]

        me = await client.get(f"{AUTH}/me", headers=auth_header(data["accessToken"]))
        assert me.status_code == 200

    async def test_rotated_token_is_stale(self, client: AsyncClient, alice):
        """회전된 이전 토큰 재사용 — 401 stale_token, 새 토큰은 유효."""
        tokens = await _login(client, "alice", "alice123!")
        first = await _refresh(client, tokens["refreshToken"])
        assert first.status_code == 200

        replay = await _refresh(client, tokens["refreshToken"])
        assert replay.status_code == 401
        assert replay.json()["code"] == "stale_token"

        latest = first.json()["data"]["refreshToken"]
        assert (await _refresh(client, latest)).status_code == 200

    async def test_new_login_supersedes_previous_refresh(self, client: AsyncClient, alice):
        """재로그인 시 이전 리프레시 토큰 무효."""
        old = await _login(client, "alice", "alice123!")
        await _login(client, "alice", "alice123!")
        res = await _refresh(client, old["refreshToken"])
        assert res.status_code == 401
        assert res.json()["code"] == "stale_token"

    async def test_concurrent_rotation_loser_is_stale(self, client: AsyncClient, monkeypatch, alice):
        """같은 토큰으로 동시 회전 — 저장값을 먼저 읽었더라도 교체에 실패하면 stale_token.

        The stored handle is read before the winner commits, so only the
        conditional update can detect the lost race.
        """
        tokens = await _login(client, "alice", "alice123!")
        presented_id = decode_refresh_token(tokens["refreshToken"])["jti"]

        winner = await _refresh(client, tokens["refreshToken"])
        assert winner.status_code == 200

        async def _pre_rotation_row(db, user_id):
            return SimpleNamespace(user_id=user_id, token_id=presented_id)

        monkeypatch.setattr(session_repository, "get_session", _pre_rotation_row)

        loser = await _refresh(client, tokens["refreshToken"])
        assert loser.status_code == 401
        assert loser.json()["code"] == "stale_token"

        # 승자의 토큰은 여전히 유효 — The winner's token remains the stored handle
        monkeypatch.undo()
        latest = winner.json()["data"]["refreshToken"]
        assert (await _refresh(client, latest)).status_code == 200

    async def test_refresh_from_cookie(self, client: AsyncClient, alice):
        """쿠키로 전달된 리프레시 토큰."""
        tokens = await _login(client, "alice", "alice123!")
        res = await client.post(
            f"{AUTH}/refresh",
            headers={"Cookie": f"refreshToken={tokens['refreshToken']}"},
        )
        assert res.status_code == 200

    async def test_refresh_missing_token(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/refresh")
        assert res.status_code == 401
        assert res.json()["code"] == "missing_token"

    async def test_refresh_garbage_token(self, client: AsyncClient):
        res = await _refresh(client, "not-a-jwt")
        assert res.status_code == 401
        assert res.json()["code"] == "invalid_token"

    async def test_refresh_expired_token(self, client: AsyncClient, alice):
        token = create_refresh_token({"sub": str(alice.id)}, token_id="abc", expires_delta=timedelta(seconds=-5))
        res = await _refresh(client, token)
        assert res.status_code == 401
        assert res.json()["code"] == "token_expired"

    async def test_access_token_rejected_as_refresh(self, client: AsyncClient, alice):
        """액세스 토큰으로 갱신 불가 — 다른 서명 키."""
        tokens = await _login(client, "alice", "alice123!")
        res = await _refresh(client, tokens["accessToken"])
        assert res.status_code == 401
        assert res.json()["code"] == "invalid_token"


# ===== Logout =====

class TestLogout:
    """로그아웃 테스트."""

    async def test_logout_revokes_refresh(self, client: AsyncClient, alice):
        """로그아웃 후 갱신 — 401 token_revoked."""
        tokens = await _login(client, "alice", "alice123!")
        res = await client.post(f"{AUTH}/logout", headers=auth_header(tokens["accessToken"]))
        assert res.status_code == 200
        assert res.json()["message"] == "User logged out"

        again = await _refresh(client, tokens["refreshToken"])
        assert again.status_code == 401
        assert again.json()["code"] == "token_revoked"

    async def test_login_after_logout_restores_rotation(self, client: AsyncClient, alice):
        tokens = await _login(client, "alice", "alice123!")
        await client.post(f"{AUTH}/logout", headers=auth_header(tokens["accessToken"]))
        fresh = await _login(client, "alice", "alice123!")
        assert (await _refresh(client, fresh["refreshToken"])).status_code == 200

    async def test_logout_requires_auth(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/logout")
        assert res.status_code == 401


# ===== Session guard (/me) =====

class TestSessionGuard:
    """세션 가드 테스트."""

    async def test_me_with_bearer(self, client: AsyncClient, alice, alice_token):
        res = await client.get(f"{AUTH}/me", headers=auth_header(alice_token))
        assert res.status_code == 200
        assert res.json()["data"]["username"] == "alice"

    async def test_me_with_cookie(self, client: AsyncClient, alice, alice_token):
        """쿠키로 전달된 액세스 토큰."""
        res = await client.get(f"{AUTH}/me", headers={"Cookie": f"accessToken={alice_token}"})
        assert res.status_code == 200

    async def test_me_missing_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401
        assert res.json()["code"] == "missing_token"

    async def test_me_expired_token(self, client: AsyncClient, alice):
        token = make_token(alice, timedelta(seconds=-5))
        res = await client.get(f"{AUTH}/me", headers=auth_header(token))
        assert res.status_code == 401
        assert res.json()["code"] == "token_expired"

    async def test_me_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me", headers=auth_header("invalid.token.here"))
        assert res.status_code == 401
        assert res.json()["code"] == "invalid_token"

    async def test_refresh_token_rejected_as_access(self, client: AsyncClient, alice):
        """리프레시 토큰으로 인증 불가."""
        tokens = await _login(client, "alice", "alice123!")
        res = await client.get(f"{AUTH}/me", headers=auth_header(tokens["refreshToken"]))
        assert res.status_code == 401
        assert res.json()["code"] == "invalid_token"

    async def test_inactive_user_token_rejected(self, client: AsyncClient, db, alice, alice_token):
        alice.is_active = False
        await db.flush()
        res = await client.get(f"{AUTH}/me", headers=auth_header(alice_token))
        assert res.status_code == 401


# ===== Change password =====

class TestChangePassword:
    """비밀번호 변경 테스트."""

    async def test_change_password(self, client: AsyncClient, alice, alice_token):
        res = await client.post(
            f"{AUTH}/change-password",
            json={"oldPassword": "alice123!", "newPassword": "newpass456!"},
            headers=auth_header(alice_token),
        )
        assert res.status_code == 200

        old = await client.post(f"{AUTH}/login", json={"username": "alice", "password": "alice123!"})
        assert old.status_code == 401
        await _login(client, "alice", "newpass456!")

    async def test_change_password_wrong_old(self, client: AsyncClient, alice, alice_token):
        res = await client.post(
            f"{AUTH}/change-password",
            json={"oldPassword": "nope", "newPassword": "newpass456!"},
            headers=auth_header(alice_token),
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid old password"
