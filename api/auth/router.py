"""
    인증 라우터 통합

    /auth/login, /auth/logout, /auth/refresh: 쿠키 기반 관리자 세션
    /auth/me: 액세스 토큰의 관리자 정보
"""
from fastapi import APIRouter
from .endpoints import login, logout, me, token_reissue

auth_router = APIRouter(prefix="/auth", tags=["인증"])

for endpoint in (login, logout, token_reissue, me):
    auth_router.include_router(endpoint.router)
