"""응답 봉투 및 전역 예외 핸들러 테스트.

Envelope and global error handler tests — every response, success or
failure, carries the same top-level shape.
"""

from httpx import AsyncClient

from vidtube.services.aggregate_service import aggregate_service
from vidtube.utils.exceptions import ForbiddenError


class TestEnvelope:
    """응답 봉투 형태 테스트."""

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {
            "statusCode": 200,
            "data": {"status": "ok"},
            "message": "Health check passed",
            "success": True,
        }

    async def test_unknown_route_uses_failure_envelope(self, client: AsyncClient):
        res = await client.get("/api/v1/does-not-exist")
        assert res.status_code == 404
        body = res.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["statusCode"] == 404
        assert isinstance(body["errors"], list)

    async def test_validation_error_lists_fields(self, client: AsyncClient):
        res = await client.post("/api/v1/auth/login", json={"username": "alice"})
        assert res.status_code == 400
        body = res.json()
        assert body["message"] == "Invalid request data"
        assert any("password" in err for err in body["errors"])

    async def test_unexpected_error_is_generic_500(self, client: AsyncClient, monkeypatch, alice):
        """예상치 못한 예외 — 내부 정보 노출 없는 500."""
        async def _boom(*args, **kwargs):
            raise RuntimeError("database exploded: secret detail")

        monkeypatch.setattr(aggregate_service, "subscriber_count", _boom)

        res = await client.get(f"/api/v1/aggregate/subscriber-count/{alice.id}")
        assert res.status_code == 500
        body = res.json()
        assert body["message"] == "Something went wrong"
        assert body["code"] == "internal_error"
        assert body["success"] is False
        assert "secret detail" not in res.text

    async def test_forbidden_error_envelope(self, client: AsyncClient, monkeypatch, alice):
        """403 예외도 동일한 실패 봉투로 변환."""
        async def _deny(*args, **kwargs):
            raise ForbiddenError()

        monkeypatch.setattr(aggregate_service, "channel_stats", _deny)

        res = await client.get(f"/api/v1/aggregate/channel-stats/{alice.id}")
        assert res.status_code == 403
        body = res.json()
        assert body["code"] == "forbidden"
        assert body["message"] == "Insufficient permissions"
        assert body["errors"] == ["Insufficient permissions"]
        assert body["success"] is False
