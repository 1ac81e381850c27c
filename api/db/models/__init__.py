"""
주문 관리 Database Models Package
관리자 도구가 사용하는 테이블 모델들을 정의하는 패키지
"""

# 관리자 계정
from .admin_users import AdminUser

# 주문 모델들
from .orders import Order, OrderItem

__all__ = [
    "AdminUser",
    "Order",
    "OrderItem",
]
