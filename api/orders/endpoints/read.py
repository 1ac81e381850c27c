"""
    주문 조회 엔드포인트

    /ids, /status-counts 는 /{order_id} 보다 먼저 등록되어야 합니다.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from auth.dependencies import get_current_admin
from db.models.admin_users import AdminUser
from db.session import get_db
from orders.exceptions import OrderWorkflowError
from orders.schema import (
    OrderDetailResponse,
    OrderFilters,
    OrderIdsResponse,
    OrderListResponse,
    OrderSortOption,
    StatusActionsResponse,
)
from orders.services.read_service import (
    count_by_consultation_status,
    find_all_ids,
    get_order,
    get_order_detail,
    list_orders,
)
from orders.status import ConsultationStatus, get_status_actions

read_router = APIRouter()


def order_filters(
    consultation_status: Optional[ConsultationStatus] = Query(None, description="상담 상태 탭"),
    payment_status: Optional[str] = Query(None, description="결제 상태 (paid, completed, cancelled ...)"),
    assigned_admin_id: Optional[str] = Query(None, description="배정 관리자 ID"),
    handler_admin_id: Optional[str] = Query(None, description="처리 관리자 ID"),
    product_id: Optional[str] = Query(None, description="해당 상품을 포함한 주문만"),
    search: Optional[str] = Query(None, description="주문번호/이메일/이름/전화번호 검색"),
    start_date: Optional[datetime] = Query(None, description="주문일 시작"),
    end_date: Optional[datetime] = Query(None, description="주문일 끝"),
    sort_by: OrderSortOption = Query("latest", description="정렬 (latest, oldest, amount_high, amount_low)"),
    page: int = Query(1, ge=1, description="페이지 (1부터)"),
    limit: int = Query(20, ge=1, le=100, description="페이지당 개수 (최대 100)"),
    fetch_all: bool = Query(False, alias="all", description="true면 페이지 없이 전체 조회"),
) -> OrderFilters:
    return OrderFilters(
        consultation_status=consultation_status,
        payment_status=payment_status,
        assigned_admin_id=assigned_admin_id,
        handler_admin_id=handler_admin_id,
        product_id=product_id,
        search=search,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        page=page,
        limit=None if fetch_all else limit,
    )


# 주문 목록 조회 API
@read_router.get("", response_model=OrderListResponse)
def read_orders(
    filters: OrderFilters = Depends(order_filters),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        return list_orders(db, filters)

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"주문 목록 조회 중 오류가 발생했습니다: {str(e)}")


# 전체 선택용 주문 ID 조회 API
@read_router.get("/ids", response_model=OrderIdsResponse)
def read_order_ids(
    filters: OrderFilters = Depends(order_filters),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order_ids = find_all_ids(db, filters)
        return OrderIdsResponse(order_ids=order_ids, total_count=len(order_ids))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"주문 ID 조회 중 오류가 발생했습니다: {str(e)}")


# 상담 상태 탭별 주문 수 API
@read_router.get("/status-counts")
def read_status_counts(
    statuses: Optional[List[ConsultationStatus]] = Query(None, description="조회할 상태 (없으면 전체)"),
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        return count_by_consultation_status(db, statuses or list(ConsultationStatus))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"상태별 주문 수 조회 중 오류가 발생했습니다: {str(e)}")


# 주문 상세 조회 API
@read_router.get("/{order_id}", response_model=OrderDetailResponse)
def read_order_detail(
    order_id: str,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        return get_order_detail(db, order_id)

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"주문 상세 조회 중 오류가 발생했습니다: {str(e)}")


# 주문 상세 화면 이동 버튼 정보 API
@read_router.get("/{order_id}/status-actions", response_model=StatusActionsResponse)
def read_status_actions(
    order_id: str,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order = get_order(db, order_id)

        try:
            status = ConsultationStatus(order.consultation_status)
        except ValueError:
            raise HTTPException(status_code=409, detail=f"알 수 없는 상담 상태입니다: {order.consultation_status}")

        return StatusActionsResponse(**get_status_actions(status))

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"이동 버튼 정보 조회 중 오류가 발생했습니다: {str(e)}")
