"""
    배송 엑셀 내보내기 엔드포인트
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth.dependencies import get_current_admin
from db.models.admin_users import AdminUser
from db.session import get_db
from orders.exceptions import OrderWorkflowError
from orders.schema import ShippingExportRequest, ShippingExportResponse
from orders.services.export_service import export_and_advance, export_only

export_router = APIRouter()


@export_router.post("/shipping-export", response_model=ShippingExportResponse)
def export_shipping_excel(
    request: ShippingExportRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    """
    선택 주문 배송 엑셀 생성

    - advance=true: 엑셀 생성 후 배송처리(shipped)로 이동
    - advance=false: 엑셀만 생성
    """
    try:
        if request.advance:
            return export_and_advance(db, admin, request.order_ids)

        return export_only(db, admin, request.order_ids)

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"배송 엑셀 생성 중 오류가 발생했습니다: {str(e)}")
