"""
    주문 조회 관련 서비스 로직
"""

import math
from typing import Dict, List

from sqlalchemy import asc, desc, or_, select
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from db.models.orders import Order, OrderItem
from orders.cache import order_list_cache
from orders.exceptions import OrderNotFoundError
from orders.schema import (
    OrderDetailResponse,
    OrderFilters,
    OrderListResponse,
    OrderResponse,
    StatusActionsResponse,
)
from orders.services.pricing_service import reconcile_order_total
from orders.status import ConsultationStatus, get_status_actions

# 결제 대기 / 처리 대기 주문은 관리자 목록에서 제외
HIDDEN_PAYMENT_STATUSES = ("payment_pending", "pending")

# 결제 상태 필터 값 -> orders.status 값
PAYMENT_STATUS_MAP = {
    "paid": "completed",
    "cancelled": "cancelled",
}

KNOWN_STATUSES = {status.value for status in ConsultationStatus}


def _with_relations(query: Query) -> Query:
    return query.options(
        selectinload(Order.items),
        joinedload(Order.assigned_admin),
        joinedload(Order.handler_admin),
    )


def _apply_filters(query: Query, filters: OrderFilters) -> Query:
    """목록 / 전체 ID 조회 공통 필터"""

    query = query.filter(~Order.status.in_(HIDDEN_PAYMENT_STATUSES))

    if filters.consultation_status:
        query = query.filter(Order.consultation_status == filters.consultation_status.value)

    if filters.payment_status and filters.payment_status != "all":
        status_value = PAYMENT_STATUS_MAP.get(filters.payment_status, filters.payment_status)
        query = query.filter(Order.status == status_value)

    if filters.assigned_admin_id:
        query = query.filter(Order.assigned_admin_id == filters.assigned_admin_id)

    if filters.handler_admin_id:
        query = query.filter(Order.handler_admin_id == filters.handler_admin_id)

    # 주문번호 / 이메일 / 이름 / 연락처 부분 검색
    if filters.search:
        keyword = f"%{filters.search.strip()}%"
        query = query.filter(or_(
            Order.order_id.ilike(keyword),
            Order.user_email.ilike(keyword),
            Order.user_name.ilike(keyword),
            Order.user_phone.ilike(keyword),
        ))

    if filters.start_date:
        query = query.filter(Order.created_at >= filters.start_date)

    if filters.end_date:
        query = query.filter(Order.created_at <= filters.end_date)

    # 해당 상품이 포함된 주문만
    if filters.product_id:
        product_order_ids = select(OrderItem.order_id).where(OrderItem.product_id == filters.product_id)
        query = query.filter(Order.id.in_(product_order_ids))

    return query


def _apply_sort(query: Query, sort_by: str) -> Query:
    sort_map = {
        "oldest": asc(Order.created_at),
        "amount_high": desc(Order.total_amount),
        "amount_low": asc(Order.total_amount),
        "latest": desc(Order.created_at),
    }
    return query.order_by(sort_map.get(sort_by, desc(Order.created_at)), desc(Order.id))


# 주문 목록 조회
def list_orders(db: Session, filters: OrderFilters) -> OrderListResponse:

    status = filters.consultation_status.value if filters.consultation_status else None
    cache_key = filters.model_dump_json()

    cached = order_list_cache.get(status, cache_key)
    if cached is not None:
        return OrderListResponse.model_validate(cached)

    query = _apply_filters(db.query(Order), filters)
    total_count = query.count()

    query = _apply_sort(_with_relations(query), filters.sort_by)

    # limit이 없으면 전체 조회 (페이지 1개)
    if filters.limit:
        orders = query.offset((filters.page - 1) * filters.limit).limit(filters.limit).all()
        total_pages = max(math.ceil(total_count / filters.limit), 1)
        current_page = filters.page
    else:
        orders = query.all()
        total_pages = 1
        current_page = 1

    result = OrderListResponse(
        orders=[OrderResponse.model_validate(order) for order in orders],
        total_count=total_count,
        total_pages=total_pages,
        current_page=current_page,
    )

    order_list_cache.set(status, cache_key, result.model_dump(mode="json"))
    return result


# 상담 상태 탭별 주문 수
def count_by_consultation_status(db: Session, statuses: List[ConsultationStatus]) -> Dict[str, int]:

    counts = {}
    for status in statuses:
        cached = order_list_cache.get(status.value, "count")
        if cached is not None:
            counts[status.value] = cached
            continue

        count = db.query(Order).filter(
            Order.consultation_status == status.value,
            ~Order.status.in_(HIDDEN_PAYMENT_STATUSES)
        ).count()

        order_list_cache.set(status.value, "count", count)
        counts[status.value] = count

    return counts


# 필터 조건에 맞는 전체 주문 ID (전체 선택용)
def find_all_ids(db: Session, filters: OrderFilters) -> List[str]:
    query = _apply_filters(db.query(Order.id), filters)
    return [order_id for (order_id,) in query.all()]


def get_order(db: Session, order_id: str) -> Order:
    order = _with_relations(db.query(Order)).filter(Order.id == order_id).first()

    if not order:
        raise OrderNotFoundError(f"주문(ID: {order_id})을 찾을 수 없습니다.")

    return order


# 주문 상세 조회: 금액 재계산 + 이동 버튼 정보 포함
def get_order_detail(db: Session, order_id: str) -> OrderDetailResponse:
    order = get_order(db, order_id)

    # 정의되지 않은 상태값이 저장된 주문은 이동 버튼 없이 반환
    status_actions = None
    if order.consultation_status in KNOWN_STATUSES:
        status_actions = StatusActionsResponse(**get_status_actions(ConsultationStatus(order.consultation_status)))

    return OrderDetailResponse(
        **OrderResponse.model_validate(order).model_dump(),
        price_summary=reconcile_order_total(order),
        status_actions=status_actions,
    )
