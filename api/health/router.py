"""
    헬스체크 및 시스템 상태 확인 API
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db import get_table_list
from db.session import get_db
from db.models.admin_users import AdminUser
from db.models.orders import Order

health_router = APIRouter(
    prefix="/health",
    tags=["Health Check"]
)

@health_router.get("")
def health_check():
    """서버 동작 여부만 확인 (DB 조회 없음)"""
    return {"status": "healthy", "service": "consultation-admin-api"}

@health_router.get("/db")
def test_database_connection(db: Session = Depends(get_db)):
    """데이터베이스 연결 및 테이블 상태 확인"""
    try:
        return {
            "status": "success",
            "admin_count": db.query(AdminUser).count(),
            "order_count": db.query(Order).count(),
            "tables": [table["name"] for table in get_table_list()],
        }
    except Exception as e:
        return {
            "status": "error",
            "message": f"Database connection failed: {str(e)}"
        }
