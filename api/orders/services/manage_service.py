"""
    주문 관리 서비스

    관리자 배정, 처리 관리자 지정, 메모, 배송 정보/배송지 수정, 배송 알림, 결제 취소
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from clients import alimtalk, portone
from db.models.admin_users import AdminUser
from db.models.orders import Order
from orders.cache import order_list_cache
from orders.exceptions import (
    NotificationError,
    OrderValidationError,
    ShippingInfoError,
)
from orders.schema import ShippingAddressRequest
from orders.services.read_service import get_order
from orders.status import ConsultationStatus

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None

    value = value.strip()
    return value or None


def _commit_order(db: Session, order: Order) -> Order:
    """주문 변경사항 커밋 후 목록 캐시 무효화"""
    order.updated_at = datetime.now()

    try:
        db.commit()

    except Exception:
        db.rollback()
        raise

    order_list_cache.invalidate([order.consultation_status])
    return get_order(db, order.id)


def _get_active_admin(db: Session, admin_id: str) -> AdminUser:
    admin = db.query(AdminUser).filter(
        AdminUser.id == admin_id,
        AdminUser.is_active.is_(True)
    ).first()

    if not admin:
        raise OrderValidationError(f"활성화된 관리자(ID: {admin_id})를 찾을 수 없습니다.")

    return admin


# 접수 담당 관리자 배정 / 해제
def assign_admin(db: Session, actor: AdminUser, order_id: str, admin_id: Optional[str]) -> Order:
    order = get_order(db, order_id)

    if admin_id:
        _get_active_admin(db, admin_id)

    order.assigned_admin_id = admin_id or None

    logger.info("담당 관리자 배정: admin=%s, order=%s, assigned=%s", actor.username, order.order_id, admin_id)
    return _commit_order(db, order)


# 상담 처리 관리자 지정 / 해제
def set_handler(db: Session, actor: AdminUser, order_id: str, admin_id: Optional[str]) -> Order:
    order = get_order(db, order_id)

    if admin_id:
        _get_active_admin(db, admin_id)

        # 처리 관리자가 새로 지정/변경될 때만 처리 시점 기록
        if order.handler_admin_id != admin_id:
            order.handled_at = datetime.now()

    # 해제 시 handled_at은 유지
    order.handler_admin_id = admin_id or None

    logger.info("처리 관리자 지정: admin=%s, order=%s, handler=%s", actor.username, order.order_id, admin_id)
    return _commit_order(db, order)


# 관리자 메모 저장 (빈 값이면 삭제)
def update_memo(db: Session, actor: AdminUser, order_id: str, memo: Optional[str]) -> Order:
    order = get_order(db, order_id)
    order.admin_memo = memo if memo and memo.strip() else None

    logger.info("관리자 메모 저장: admin=%s, order=%s", actor.username, order.order_id)
    return _commit_order(db, order)


# 택배사 / 송장번호 저장
def update_shipping_info(
    db: Session,
    actor: AdminUser,
    order_id: str,
    shipping_company: str,
    tracking_number: str
) -> Order:

    shipping_company = _blank_to_none(shipping_company)
    tracking_number = _blank_to_none(tracking_number)

    if not shipping_company or not tracking_number:
        raise ShippingInfoError("택배사와 송장번호를 모두 입력해주세요.")

    order = get_order(db, order_id)

    # 송장번호가 처음 등록되는 시점 기록
    if order.tracking_number is None:
        order.shipped_at = datetime.now()

    order.shipping_company = shipping_company
    order.tracking_number = tracking_number

    logger.info(
        "배송 정보 저장: admin=%s, order=%s, company=%s, tracking=%s",
        actor.username, order.order_id, shipping_company, tracking_number
    )
    return _commit_order(db, order)


# 배송지 정보 수정 (빈 값은 null로 저장)
def update_shipping_address(db: Session, actor: AdminUser, order_id: str, address: ShippingAddressRequest) -> Order:
    order = get_order(db, order_id)

    for field, value in address.model_dump().items():
        setattr(order, field, _blank_to_none(value))

    logger.info("배송지 정보 수정: admin=%s, order=%s", actor.username, order.order_id)
    return _commit_order(db, order)


# ============================================================================
# 배송 알림
# ============================================================================

def build_shipping_notification(order: Order) -> Dict[str, str]:
    """배송 알림 발송 정보 구성: 배송 정보/연락처가 없으면 ShippingInfoError"""

    if not order.shipping_company or not order.tracking_number:
        raise ShippingInfoError("배송 정보가 완료되지 않았습니다.")

    phone = order.user_phone or order.shipping_phone
    if not phone:
        raise ShippingInfoError("수신자 전화번호가 없습니다.")

    return {
        "phone": phone,
        "order_code": order.order_id,
        "customer_name": order.user_name or order.shipping_name or "",
        "shipping_company": order.shipping_company,
        "tracking_number": order.tracking_number,
    }


async def send_order_shipping_notification(db: Session, order_id: str) -> None:
    """배송 알림톡 발송 (실패 시 NotificationError)"""
    order = await run_in_threadpool(get_order, db, order_id)
    notification = build_shipping_notification(order)

    result = await alimtalk.send_shipping_notification(**notification)
    if not result.success:
        logger.error("배송 알림톡 발송 실패: order=%s, error=%s", order.order_id, result.error)
        raise NotificationError(result.error or "알림톡 발송에 실패했습니다.")

    logger.info("배송 알림톡 발송: order=%s, message_id=%s", order.order_id, result.message_id)


def shipping_notification_or_none(order: Order) -> Optional[Dict[str, str]]:
    """배송 정보 저장 직후 자동 발송용: 발송 조건이 안 되면 None"""
    try:
        return build_shipping_notification(order)
    except ShippingInfoError as e:
        logger.warning("배송 알림톡 자동 발송 생략: order=%s, reason=%s", order.order_id, e)
        return None


async def notify_shipping_best_effort(notification: Dict[str, str]) -> None:
    """
    배송 정보 저장 후 백그라운드로 실행되는 알림 발송

    실패해도 배송 정보 저장은 되돌리지 않고 로그만 남깁니다.
    """
    try:
        result = await alimtalk.send_shipping_notification(**notification)

    except Exception:
        logger.exception("배송 알림톡 발송 중 오류: order=%s", notification.get("order_code"))
        return

    if not result.success:
        logger.warning("배송 알림톡 발송 실패: order=%s, error=%s", notification.get("order_code"), result.error)


# ============================================================================
# 결제 취소
# ============================================================================

async def cancel_order_payment(db: Session, actor: AdminUser, order_id: str, reason: str) -> Order:
    """
    PortOne 결제 취소 후 주문 상태를 취소건으로 변경

    결제 취소가 확인된 뒤에만 status / consultation_status를 기록합니다.
    DB 조회/커밋은 스레드풀에서 실행합니다 (이벤트 루프 블로킹 방지).
    """
    order = await run_in_threadpool(get_order, db, order_id)

    if not order.payment_key:
        raise OrderValidationError("결제 정보가 없어 취소할 수 없습니다.")

    reason = _blank_to_none(reason)
    if not reason:
        raise OrderValidationError("취소 사유를 입력해주세요.")

    previous_status = order.consultation_status
    await portone.cancel_payment(order.order_id, reason)

    logger.info("결제 취소: admin=%s, order=%s, reason=%s", actor.username, order.order_id, reason)
    return await run_in_threadpool(_mark_cancelled, db, order, previous_status)


def _mark_cancelled(db: Session, order: Order, previous_status: str) -> Order:
    order.status = "cancelled"
    order.consultation_status = ConsultationStatus.CANCELLED.value
    order_list_cache.invalidate([previous_status])

    return _commit_order(db, order)
