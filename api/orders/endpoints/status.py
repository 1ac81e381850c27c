"""
    상담 상태 변경 엔드포인트 (단건 / 선택 일괄)
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth.dependencies import get_current_admin
from db.models.admin_users import AdminUser
from db.session import get_db
from orders.exceptions import OrderWorkflowError
from orders.schema import (
    BulkStatusUpdateRequest,
    BulkStatusUpdateResponse,
    OrderResponse,
    OrderUpdateResponse,
    StatusUpdateRequest,
)
from orders.services.workflow_service import apply_bulk_transition, apply_single_transition
from orders.status import get_status_label

status_router = APIRouter()


# 선택 주문 상담 상태 일괄 변경 API
@status_router.post("/consultation-status/bulk", response_model=BulkStatusUpdateResponse)
def update_consultation_status_bulk(
    request: BulkStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        return apply_bulk_transition(
            db,
            admin,
            request.order_ids,
            target_status=request.target_status,
            source_status=request.source_status,
        )

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"상담 상태 일괄 변경 중 오류가 발생했습니다: {str(e)}")


# 주문 상세 상담 상태 변경 API
@status_router.patch("/{order_id}/consultation-status", response_model=OrderUpdateResponse)
def update_consultation_status(
    order_id: str,
    request: StatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order = apply_single_transition(db, admin, order_id, request.consultation_status)

        return OrderUpdateResponse(
            success=True,
            message=f"상담 상태를 '{get_status_label(order.consultation_status)}'(으)로 변경했습니다.",
            data=OrderResponse.model_validate(order)
        )

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"상담 상태 변경 중 오류가 발생했습니다: {str(e)}")
