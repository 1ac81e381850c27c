"""
    주문 관련 Pydantic 스키마
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime

from orders.status import ConsultationStatus

OrderSortOption = Literal["latest", "oldest", "amount_high", "amount_low"]


# ============================================================================
# 조회 응답
# ============================================================================

class AdminSummary(BaseModel):
    """배정/처리 관리자 요약"""
    id: str
    username: str
    full_name: Optional[str] = None

    class Config:
        from_attributes = True

class OrderItemResponse(BaseModel):
    """주문 상품 응답"""
    id: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    product_price: int = 0
    quantity: int = 1
    option_id: Optional[str] = None
    option_name: Optional[str] = None
    selected_option_settings: Optional[List[Dict[str, Any]]] = None
    selected_options: Optional[List[Dict[str, Any]]] = None
    selected_addons: Optional[List[Dict[str, Any]]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    """주문 응답 (목록/상세 공통)"""
    id: str
    order_id: str
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    total_amount: int = 0
    shipping_fee: Optional[int] = None
    coupon_discount: Optional[int] = None
    used_points: Optional[int] = None
    status: str
    consultation_status: str
    payment_key: Optional[str] = None
    assigned_admin_id: Optional[str] = None
    handler_admin_id: Optional[str] = None
    handled_at: Optional[datetime] = None
    admin_memo: Optional[str] = None
    shipping_name: Optional[str] = None
    shipping_phone: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    shipping_address: Optional[str] = None
    shipping_address_detail: Optional[str] = None
    shipping_message: Optional[str] = None
    shipping_company: Optional[str] = None
    tracking_number: Optional[str] = None
    shipped_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    assigned_admin: Optional[AdminSummary] = None
    handler_admin: Optional[AdminSummary] = None
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True

class PriceSummary(BaseModel):
    """금액 재계산 결과 (표시용, 저장값을 덮어쓰지 않음)"""
    product_amount: int
    shipping_fee: int
    coupon_discount: int
    used_points: int
    computed_total: int
    stored_total: int
    difference: int
    is_consistent: bool

class StatusAction(BaseModel):
    target: str
    label: str

class StatusActionsResponse(BaseModel):
    """현재 상태 기준 이동 버튼 정보"""
    current: str
    current_label: str
    prev: Optional[str] = None
    prev_label: Optional[str] = None
    next: Optional[str] = None
    next_label: Optional[str] = None
    extra_actions: List[StatusAction] = []

class OrderDetailResponse(OrderResponse):
    """주문 상세 응답"""
    price_summary: PriceSummary
    status_actions: Optional[StatusActionsResponse] = None

class OrderListResponse(BaseModel):
    """주문 목록 응답"""
    orders: List[OrderResponse] = Field(..., description="주문 목록")
    total_count: int = Field(..., description="조건에 맞는 전체 주문 수")
    total_pages: int = Field(..., description="전체 페이지 수")
    current_page: int = Field(..., description="현재 페이지")

class OrderIdsResponse(BaseModel):
    order_ids: List[str]
    total_count: int


# ============================================================================
# 조회 조건
# ============================================================================

class OrderFilters(BaseModel):
    """주문 목록 조회 조건"""
    consultation_status: Optional[ConsultationStatus] = None
    payment_status: Optional[str] = None
    assigned_admin_id: Optional[str] = None
    handler_admin_id: Optional[str] = None
    product_id: Optional[str] = None
    search: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    sort_by: OrderSortOption = "latest"
    page: int = Field(1, ge=1)
    limit: Optional[int] = Field(20, ge=1, le=100, description="None이면 전체 조회")


# ============================================================================
# 상태 변경
# ============================================================================

class StatusUpdateRequest(BaseModel):
    """단건 상담 상태 변경 요청"""
    consultation_status: ConsultationStatus = Field(..., description="이동할 상담 상태")

class BulkStatusUpdateRequest(BaseModel):
    """선택 주문 상담 상태 일괄 변경 요청"""
    order_ids: List[str] = Field(..., description="선택한 주문 ID 목록")
    source_status: ConsultationStatus = Field(..., description="선택한 탭의 상담 상태")
    target_status: ConsultationStatus = Field(..., description="이동할 상담 상태")

class BulkStatusUpdateResponse(BaseModel):
    success: bool
    message: str
    updated_count: int
    skipped_count: int
    mismatched_count: int = Field(0, description="저장된 상태가 선택한 탭과 달라 제외된 주문 수")
    all_blocked: bool = False

class OrderUpdateResponse(BaseModel):
    success: bool
    message: str
    data: OrderResponse


# ============================================================================
# 배송 엑셀
# ============================================================================

class ShippingExportRequest(BaseModel):
    order_ids: List[str] = Field(..., description="엑셀로 내보낼 주문 ID 목록")
    advance: bool = Field(True, description="내보낸 주문을 배송처리(shipped)로 이동할지 여부")

class ShippingExportResponse(BaseModel):
    success: bool
    message: str
    file_name: str
    file_base64: str = Field(..., description="base64로 인코딩된 xlsx 파일")
    count: int
    advanced: bool


# ============================================================================
# 주문 관리
# ============================================================================

class AssignAdminRequest(BaseModel):
    admin_id: Optional[str] = Field(None, description="배정할 관리자 ID (null이면 배정 해제)")

class MemoUpdateRequest(BaseModel):
    admin_memo: Optional[str] = Field(None, description="관리자 메모 (빈 값이면 삭제)")

class ShippingInfoRequest(BaseModel):
    shipping_company: str = Field(..., description="택배사")
    tracking_number: str = Field(..., description="송장번호")

class ShippingAddressRequest(BaseModel):
    shipping_name: Optional[str] = None
    shipping_phone: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    shipping_address: Optional[str] = None
    shipping_address_detail: Optional[str] = None
    shipping_message: Optional[str] = None

class CancelPaymentRequest(BaseModel):
    reason: str = Field(..., description="취소 사유")

class SimpleResponse(BaseModel):
    success: bool
    message: str
