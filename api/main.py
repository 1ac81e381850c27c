"""
    상담 관리자 API 메인 애플리케이션

    FastAPI 애플리케이션의 진입점입니다.
    모든 라우터를 등록하고 기본 설정을 관리합니다.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from health.router import health_router
from auth.router import auth_router
from orders.router import orders_router
from uploads.router import uploads_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)

app = FastAPI(
    title="Consultation Admin API",
    description="주문 상담/배송 관리 API",
    version="1.0.0"
)

# CORS 설정 추가
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True, # 쿠키 전달 허용
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# 라우터 등록
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(orders_router)
app.include_router(uploads_router)

@app.get("/")
def root():
    """API 루트 엔드포인트"""
    return {
        "message": "Consultation Admin API Server",
        "version": "1.0.0",
        "description": "주문 상담/배송 관리 API",
        "endpoints": {
            "health": "/health",
            "auth": "/auth",
            "orders": "/orders",
            "uploads": "/uploads",
            "docs": "/docs",
            "redoc": "/redoc"
        }
    }
