"""
    Uploads 도메인 메인 라우터
"""

from fastapi import APIRouter
from .endpoints.images import router as images_router

# 메인 라우터 생성
uploads_router = APIRouter(prefix="/uploads", tags=["Uploads"])

# 하위 라우터들 포함
uploads_router.include_router(images_router)
