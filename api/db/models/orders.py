import uuid

from sqlalchemy import Column, String, Integer, BigInteger, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Order(Base):
    """주문 테이블 (스토어프런트 결제 흐름에서 생성, 관리자 도구에서 수정)"""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid, comment='PK: 주문 고유 ID')
    order_id = Column(String(64), unique=True, nullable=False, comment='주문번호 (고객 노출용)')

    # 주문자 정보
    user_email = Column(String(255), comment='주문자 이메일')
    user_name = Column(String(50), comment='주문자명')
    user_phone = Column(String(30), comment='주문자 연락처')

    # 금액 정보 (원 단위)
    total_amount = Column(BigInteger, nullable=False, default=0, comment='최종 결제금액 (저장값, 조회 시 재계산하지 않음)')
    shipping_fee = Column(BigInteger, nullable=True, comment='배송비')
    coupon_discount = Column(BigInteger, nullable=True, comment='쿠폰 할인액 (0 이상)')
    used_points = Column(BigInteger, nullable=True, comment='사용 포인트 (0 이상)')

    # 결제 / 상담 상태
    status = Column(String(30), nullable=False, default="pending", comment='결제 상태 (payment_pending, pending, completed, cancelled)')
    payment_key = Column(String(255), nullable=True, comment='결제 키')
    consultation_status = Column(String(30), nullable=False, default="chatting_required", index=True, comment='상담 상태')

    # 관리자 배정
    assigned_admin_id = Column(String(36), ForeignKey("admin_users.id"), nullable=True, comment='접수 담당 관리자')
    handler_admin_id = Column(String(36), ForeignKey("admin_users.id"), nullable=True, comment='상담 처리 관리자')
    handled_at = Column(DateTime, nullable=True, comment='상담 처리 관리자 지정 시점')
    admin_memo = Column(Text, nullable=True, comment='관리자 메모')

    # 배송지 정보
    shipping_name = Column(String(50), nullable=True, comment='수령자')
    shipping_phone = Column(String(30), nullable=True, comment='수령자 연락처')
    shipping_postal_code = Column(String(10), nullable=True, comment='우편번호')
    shipping_address = Column(String(255), nullable=True, comment='주소')
    shipping_address_detail = Column(String(255), nullable=True, comment='상세주소')
    shipping_message = Column(String(255), nullable=True, comment='배송 메세지')

    # 배송 정보
    shipping_company = Column(String(50), nullable=True, comment='택배사')
    tracking_number = Column(String(50), nullable=True, comment='송장번호')
    shipped_at = Column(DateTime, nullable=True, comment='송장 등록 시점')

    created_at = Column(DateTime, default=func.current_timestamp(), comment='주문 생성 시점')
    updated_at = Column(DateTime, default=func.current_timestamp(), onupdate=func.current_timestamp(), comment='수정 시점')

    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.created_at")
    assigned_admin = relationship("AdminUser", foreign_keys=[assigned_admin_id])
    handler_admin = relationship("AdminUser", foreign_keys=[handler_admin_id])


class OrderItem(Base):
    """주문 상품 테이블 (주문 시점의 상품명/가격 스냅샷)"""
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=generate_uuid, comment='PK: 주문 상품 ID')
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True, comment='FK: orders.id')
    product_id = Column(String(36), nullable=True, index=True, comment='상품 ID')
    product_name = Column(String(255), comment='상품명 스냅샷')
    product_price = Column(Integer, nullable=False, default=0, comment='상품 가격 스냅샷')
    quantity = Column(Integer, nullable=False, default=1, comment='수량')

    # 옵션 / 추가상품
    option_id = Column(String(36), nullable=True, comment='상품 옵션 ID')
    option_name = Column(String(255), nullable=True, comment='옵션명')
    selected_option_settings = Column(JSON, nullable=True, comment='옵션 세부 설정 선택값 [{type_name, ...}]')
    selected_options = Column(JSON, nullable=True, comment='선택 옵션 [{name, price_adjustment}]')
    selected_addons = Column(JSON, nullable=True, comment='추가 상품 [{name, price, quantity}]')

    created_at = Column(DateTime, default=func.current_timestamp(), comment='생성 시점')

    order = relationship("Order", back_populates="items")
