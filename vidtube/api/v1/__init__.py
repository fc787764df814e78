"""v1 API 라우터 패키지 — 모든 v1 엔드포인트 통합.

v1 API Router package — Aggregates every endpoint into a single router
mounted under ``/api/v1``.

Included routers:
    - auth: 인증 및 세션 (Authentication and refresh sessions)
    - toggles: 구독/좋아요 토글 (Subscription and like toggles)
    - aggregates: 구독자 수, 구독 상태, 채널 통계 (Aggregate views)
    - subscriptions: 구독 목록 (Subscriber and subscribed-channel lists)
    - likes: 좋아요한 영상 목록 (Liked video list)
    - dashboard: 내 채널 통계, 채널 영상 목록 (Channel dashboard)
"""

from fastapi import APIRouter

from vidtube.api.v1.aggregates import router as aggregates_router
from vidtube.api.v1.auth import router as auth_router
from vidtube.api.v1.dashboard import router as dashboard_router
from vidtube.api.v1.likes import router as likes_router
from vidtube.api.v1.subscriptions import router as subscriptions_router
from vidtube.api.v1.toggles import router as toggles_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(toggles_router, prefix="/toggle", tags=["Toggle"])
api_router.include_router(aggregates_router, prefix="/aggregate", tags=["Aggregate"])
api_router.include_router(subscriptions_router, prefix="/subscriptions", tags=["Subscriptions"])
api_router.include_router(likes_router, prefix="/likes", tags=["Likes"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
