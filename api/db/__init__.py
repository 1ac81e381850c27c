"""
Order Admin Database Package
데이터베이스 연결, 세션 관리, 모델 정의를 담당하는 패키지

테이블 구조 (3개 테이블):
- 관리자: admin_users
- 주문: orders, order_items
"""

import logging

# 기본 데이터베이스 구성요소
from .base import Base, metadata
from .session import engine, SessionLocal, get_db

# ORM models
from .models.admin_users import AdminUser   # 관리자 계정
from .models.orders import Order, OrderItem   # 주문 / 주문 상품

logger = logging.getLogger(__name__)

__all__ = [
    # 데이터베이스 기본 구성요소
    "Base",
    "metadata",
    "engine",
    "SessionLocal",
    "get_db",

    # 모델들
    "AdminUser",
    "Order",
    "OrderItem",

    # 유틸리티 함수들
    "create_tables",
    "drop_tables",
    "get_table_list",
]

def create_tables():
    """
    모든 테이블을 생성합니다.
    기존 테이블이 있어도 에러가 발생하지 않습니다.
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("모든 테이블이 성공적으로 생성되었습니다.")
        return True
    except Exception:
        logger.exception("테이블 생성 중 오류 발생")
        return False

def drop_tables():
    """
    모든 테이블을 삭제합니다.
    주의: 모든 데이터가 삭제됩니다!
    """
    try:
        Base.metadata.drop_all(bind=engine)
        logger.info("모든 테이블이 성공적으로 삭제되었습니다.")
        return True
    except Exception:
        logger.exception("테이블 삭제 중 오류 발생")
        return False

def get_table_list():
    """
    현재 정의된 모든 테이블 목록을 반환합니다.
    """
    tables = []
    for table_name, table in Base.metadata.tables.items():
        tables.append({
            'name': table_name,
            'columns': len(table.columns),
            'foreign_keys': len(table.foreign_keys),
            'indexes': len(table.indexes)
        })
    return tables
