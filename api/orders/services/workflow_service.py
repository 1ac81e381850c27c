"""
    상담 상태 워크플로우 서비스

    단건/일괄 상담 상태 변경을 처리합니다.
        - 전이 그래프(orders.status.ALLOWED_TRANSITIONS)에 없는 이동은 쓰기 전에 거부
        - 저장된 상태가 선택한 탭(이전 상태)과 다른 주문은 제외
        - 상담 필요 -> 배송필요(상담완료) 이동 시 옵션 설정 미완료 주문은 제외 (단건은 거부)
        - 변경된 상태 탭(이전/이후)의 목록 캐시 무효화
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from db.models.admin_users import AdminUser
from db.models.orders import Order, OrderItem
from orders.cache import order_list_cache
from orders.exceptions import EmptySelectionError, InvalidTransitionError, OrderValidationError
from orders.schema import BulkStatusUpdateResponse
from orders.services.read_service import get_order
from orders.status import ConsultationStatus, is_allowed_transition

logger = logging.getLogger(__name__)


def _unique_ids(order_ids: Iterable[str]) -> List[str]:
    return [order_id for order_id in dict.fromkeys(order_ids) if order_id]


def is_incompletely_configured(option_id, selected_option_settings) -> bool:
    """옵션이 연결된 주문 상품인데 옵션 세부 설정이 비어 있으면 미완료"""
    return bool(option_id) and not selected_option_settings


def find_incomplete_order_ids(db: Session, order_ids: List[str]) -> Set[str]:
    """옵션 설정이 완료되지 않은 주문 상품을 하나라도 가진 주문 ID"""
    rows = db.query(
        OrderItem.order_id,
        OrderItem.option_id,
        OrderItem.selected_option_settings
    ).filter(OrderItem.order_id.in_(order_ids)).all()

    return {
        order_id
        for order_id, option_id, settings in rows
        if is_incompletely_configured(option_id, settings)
    }


def write_consultation_status(
    db: Session,
    order_ids: List[str],
    status: ConsultationStatus,
    from_statuses: Optional[Iterable[ConsultationStatus]] = None
) -> int:
    """
    UPDATE orders SET consultation_status, updated_at WHERE id IN (...) [AND consultation_status IN (...)]

    from_statuses가 있으면 조회 이후 다른 요청이 상태를 바꾼 행은 갱신하지 않습니다.
    하나의 트랜잭션으로 커밋하고, 실패 시 롤백 후 예외를 그대로 올립니다.

    Returns:
        int: 갱신된 행 수
    """
    try:
        query = db.query(Order).filter(Order.id.in_(order_ids))
        if from_statuses is not None:
            query = query.filter(Order.consultation_status.in_([s.value for s in from_statuses]))

        updated_count = query.update(
            {
                Order.consultation_status: status.value,
                Order.updated_at: datetime.now(),
            },
            synchronize_session=False
        )
        db.commit()

    except Exception:
        db.rollback()
        raise

    return updated_count


def _ensure_allowed(source: ConsultationStatus, target: ConsultationStatus) -> None:
    if not is_allowed_transition(source, target):
        raise InvalidTransitionError(source.value, target.value)


def _is_guarded_edge(source: ConsultationStatus, target: ConsultationStatus) -> bool:
    # 상담 필요 -> 배송필요(상담완료): 옵션 설정 완료 필요
    return (source == ConsultationStatus.CONSULTATION_REQUIRED
            and target == ConsultationStatus.CONSULTATION_COMPLETED)


# 선택 주문 상담 상태 일괄 변경
def apply_bulk_transition(
    db: Session,
    actor: AdminUser,
    order_ids: List[str],
    target_status: ConsultationStatus,
    source_status: ConsultationStatus
) -> BulkStatusUpdateResponse:

    selected_ids = _unique_ids(order_ids)
    if not selected_ids:
        raise EmptySelectionError()

    _ensure_allowed(source_status, target_status)

    # 선택한 탭 상태와 저장된 상태 비교 (이미 이동 완료된 주문은 멱등 쓰기 대상)
    stored_statuses = dict(
        db.query(Order.id, Order.consultation_status).filter(Order.id.in_(selected_ids)).all()
    )
    writable_statuses = {source_status.value, target_status.value}
    eligible_ids = [
        order_id for order_id in selected_ids
        if stored_statuses.get(order_id) in writable_statuses
    ]
    mismatched_count = len(selected_ids) - len(eligible_ids)

    incomplete_count = 0
    if _is_guarded_edge(source_status, target_status) and eligible_ids:
        incomplete_ids = find_incomplete_order_ids(db, eligible_ids)
        incomplete_count = sum(1 for order_id in eligible_ids if order_id in incomplete_ids)
        eligible_ids = [order_id for order_id in eligible_ids if order_id not in incomplete_ids]

    skipped_count = mismatched_count + incomplete_count

    if not eligible_ids:
        logger.info(
            "상담 상태 일괄 변경 차단: admin=%s, %s -> %s, mismatched=%d, incomplete=%d",
            actor.username, source_status.value, target_status.value, mismatched_count, incomplete_count
        )
        return BulkStatusUpdateResponse(
            success=False,
            message=f"선택한 주문 {skipped_count}건 모두 이동할 수 없습니다. ({_skip_reason(mismatched_count, incomplete_count)})",
            updated_count=0,
            skipped_count=skipped_count,
            mismatched_count=mismatched_count,
            all_blocked=True,
        )

    updated_count = write_consultation_status(
        db, eligible_ids, target_status, from_statuses=[source_status, target_status]
    )
    order_list_cache.invalidate([source_status.value, target_status.value])

    # 조회와 갱신 사이에 다른 요청이 상태를 바꾼 주문
    skipped_count += len(eligible_ids) - updated_count

    logger.info(
        "상담 상태 일괄 변경: admin=%s, %s -> %s, updated=%d, skipped=%d",
        actor.username, source_status.value, target_status.value, updated_count, skipped_count
    )

    message = f"선택한 주문 {updated_count}건의 상담 상태를 변경했습니다."
    if skipped_count:
        message += f" ({skipped_count}건 제외: {_skip_reason(mismatched_count, incomplete_count)})"

    return BulkStatusUpdateResponse(
        success=True,
        message=message,
        updated_count=updated_count,
        skipped_count=skipped_count,
        mismatched_count=mismatched_count,
        all_blocked=False,
    )


def _skip_reason(mismatched_count: int, incomplete_count: int) -> str:
    reasons = []
    if mismatched_count:
        reasons.append(f"선택한 탭과 상태가 다른 주문 {mismatched_count}건")
    if incomplete_count:
        reasons.append(f"옵션 설정 미완료 {incomplete_count}건")
    return ", ".join(reasons) or "상태 변경 중 제외"


# 주문 상세 화면 이전/다음 단계 이동
def apply_single_transition(
    db: Session,
    actor: AdminUser,
    order_id: str,
    target_status: ConsultationStatus
) -> Order:

    order = get_order(db, order_id)

    try:
        current_status = ConsultationStatus(order.consultation_status)
    except ValueError:
        raise InvalidTransitionError(order.consultation_status, target_status.value) from None

    _ensure_allowed(current_status, target_status)

    if _is_guarded_edge(current_status, target_status):
        incomplete_items = [
            item.product_name or item.id
            for item in order.items
            if is_incompletely_configured(item.option_id, item.selected_option_settings)
        ]
        if incomplete_items:
            raise OrderValidationError(
                f"옵션 설정이 완료되지 않은 상품이 있습니다: {', '.join(incomplete_items)}"
            )

    updated_count = write_consultation_status(
        db, [order.id], target_status, from_statuses=[current_status, target_status]
    )
    order_list_cache.invalidate([current_status.value, target_status.value])

    # 조회 이후 다른 요청이 먼저 상태를 바꾼 경우
    if not updated_count:
        raise InvalidTransitionError(current_status.value, target_status.value)

    logger.info(
        "상담 상태 변경: admin=%s, order=%s, %s -> %s",
        actor.username, order.order_id, current_status.value, target_status.value
    )

    return get_order(db, order_id)
