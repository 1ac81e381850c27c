"""
    주문 관리 엔드포인트

    관리자 배정, 처리 관리자, 메모, 배송 정보/배송지, 배송 알림, 결제 취소
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from auth.dependencies import get_current_admin
from db.models.admin_users import AdminUser
from db.session import get_db
from orders.exceptions import OrderWorkflowError
from orders.schema import (
    AssignAdminRequest,
    CancelPaymentRequest,
    MemoUpdateRequest,
    OrderResponse,
    OrderUpdateResponse,
    ShippingAddressRequest,
    ShippingInfoRequest,
    SimpleResponse,
)
from orders.services import manage_service

manage_router = APIRouter()


def _updated(order, message: str) -> OrderUpdateResponse:
    return OrderUpdateResponse(success=True, message=message, data=OrderResponse.model_validate(order))


@manage_router.patch("/{order_id}/assigned-admin", response_model=OrderUpdateResponse)
def update_assigned_admin(
    order_id: str,
    request: AssignAdminRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order = manage_service.assign_admin(db, admin, order_id, request.admin_id)
        return _updated(order, "담당 관리자를 변경했습니다.")

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"담당 관리자 변경 중 오류가 발생했습니다: {str(e)}")


@manage_router.patch("/{order_id}/handler", response_model=OrderUpdateResponse)
def update_handler(
    order_id: str,
    request: AssignAdminRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order = manage_service.set_handler(db, admin, order_id, request.admin_id)
        return _updated(order, "처리 관리자를 변경했습니다.")

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"처리 관리자 변경 중 오류가 발생했습니다: {str(e)}")


@manage_router.patch("/{order_id}/memo", response_model=OrderUpdateResponse)
def update_memo(
    order_id: str,
    request: MemoUpdateRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order = manage_service.update_memo(db, admin, order_id, request.admin_memo)
        return _updated(order, "관리자 메모를 저장했습니다.")

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"관리자 메모 저장 중 오류가 발생했습니다: {str(e)}")


@manage_router.patch("/{order_id}/shipping-info", response_model=OrderUpdateResponse)
def update_shipping_info(
    order_id: str,
    request: ShippingInfoRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    """택배사/송장번호 저장 후 배송 알림톡을 백그라운드로 발송 (실패해도 저장은 유지)"""
    try:
        order = manage_service.update_shipping_info(
            db, admin, order_id, request.shipping_company, request.tracking_number
        )

        # 응답 이후 실행되므로 세션 대신 발송 값만 넘김
        notification = manage_service.shipping_notification_or_none(order)
        if notification:
            background_tasks.add_task(manage_service.notify_shipping_best_effort, notification)

        return _updated(order, "배송 정보를 저장했습니다.")

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"배송 정보 저장 중 오류가 발생했습니다: {str(e)}")


@manage_router.patch("/{order_id}/shipping-address", response_model=OrderUpdateResponse)
def update_shipping_address(
    order_id: str,
    request: ShippingAddressRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order = manage_service.update_shipping_address(db, admin, order_id, request)
        return _updated(order, "배송지 정보를 수정했습니다.")

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"배송지 정보 수정 중 오류가 발생했습니다: {str(e)}")


@manage_router.post("/{order_id}/send-shipping-notification", response_model=SimpleResponse)
async def send_shipping_notification(
    order_id: str,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        await manage_service.send_order_shipping_notification(db, order_id)
        return SimpleResponse(success=True, message="배송 알림톡을 발송했습니다.")

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"배송 알림톡 발송 중 오류가 발생했습니다: {str(e)}")


@manage_router.post("/{order_id}/cancel-payment", response_model=OrderUpdateResponse)
async def cancel_payment(
    order_id: str,
    request: CancelPaymentRequest,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin)
):
    try:
        order = await manage_service.cancel_order_payment(db, admin, order_id, request.reason)
        return _updated(order, "결제를 취소했습니다.")

    except OrderWorkflowError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"결제 취소 중 오류가 발생했습니다: {str(e)}")
