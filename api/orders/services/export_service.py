"""
    [ 배송 엑셀 내보내기 서비스 ]

    배송필요(상담완료) 주문을 택배 발송용 엑셀(배송목록)로 변환하고,
    필요하면 내보낸 주문을 배송처리(shipped) 상태로 이동합니다.

    처리 순서: 조회 -> 엑셀 생성 -> 상태 변경 커밋
        - 상태 변경이 실패하면 파일도 반환하지 않음 (요청 전체 실패)
"""

import base64
import io
import logging
from datetime import datetime
from typing import Any, Dict, List, Tuple

import pandas as pd
from openpyxl.utils import get_column_letter
from sqlalchemy.orm import Session, selectinload

from db.models.admin_users import AdminUser
from db.models.orders import Order, OrderItem
from orders.cache import order_list_cache
from orders.exceptions import EmptySelectionError, OrderNotFoundError
from orders.schema import ShippingExportResponse
from orders.services.workflow_service import write_consultation_status
from orders.status import ConsultationStatus, READY_TO_SHIP
from utils.phone import format_phone_number_with_hyphen

logger = logging.getLogger(__name__)

SHEET_NAME = "배송목록"
SHIPPING_METHOD = "택배"

# 컬럼명, 너비
SHIPPING_COLUMNS: List[Tuple[str, int]] = [
    ("주문일", 12),
    ("주문자", 10),
    ("주문자연락처", 15),
    ("수령자", 10),
    ("수령자연락처", 15),
    ("우편번호", 8),
    ("통합주소", 50),
    ("배송메세지", 30),
    ("상품명", 40),
    ("옵션", 25),
    ("내품수량", 10),
    ("택배사", 12),
    ("송장번호", 20),
    ("발송방식", 10),
    ("주문번호", 20),
    ("결제금액", 15),
]


def _format_option(item: OrderItem) -> str:
    """옵션명 + 선택된 세부 설정 타입 조합: 옵션명 (A+B)"""
    option_display = item.option_name or ""

    settings = item.selected_option_settings or []
    type_names = [s.get("type_name") for s in settings if isinstance(s, dict) and s.get("type_name")]
    if type_names:
        option_display += f" ({'+'.join(type_names)})"

    return option_display.strip()


def build_product_summary(items: List[OrderItem]) -> Tuple[str, str, int]:
    """
    주문 상품 요약 생성

    Returns:
        (상품명 요약, 옵션 요약, 총 수량)
            상품명 요약: "상품A x 2, [추가] 샘플 x 1"
    """
    product_parts = []
    option_parts = []
    total_quantity = 0

    for item in items:
        quantity = item.quantity or 0
        product_parts.append(f"{item.product_name or ''} x {quantity}")
        total_quantity += quantity

        option_display = _format_option(item)
        if option_display:
            option_parts.append(option_display)

        # 추가 상품(addons)은 별도 표기
        for addon in item.selected_addons or []:
            if not isinstance(addon, dict):
                continue
            addon_quantity = addon.get("quantity") or 1
            product_parts.append(f"[추가] {addon.get('name', '')} x {addon_quantity}")
            total_quantity += addon_quantity

    return ", ".join(product_parts), " / ".join(option_parts), total_quantity


def convert_orders_to_shipping_rows(orders: List[Order]) -> List[Dict[str, Any]]:
    """주문 1건당 1행의 배송 엑셀 데이터 생성"""
    rows = []

    for order in orders:
        full_address = " ".join(
            part for part in [order.shipping_address, order.shipping_address_detail] if part
        )
        product_summary, option_summary, total_quantity = build_product_summary(order.items)

        rows.append({
            "주문일": order.created_at.strftime("%Y. %m. %d.") if order.created_at else "",
            "주문자": order.user_name or "",
            "주문자연락처": format_phone_number_with_hyphen(order.user_phone),
            "수령자": order.shipping_name or "",
            "수령자연락처": format_phone_number_with_hyphen(order.shipping_phone),
            "우편번호": order.shipping_postal_code or "",
            "통합주소": full_address,
            "배송메세지": order.shipping_message or "",
            "상품명": product_summary,
            "옵션": option_summary,
            "내품수량": total_quantity,
            "택배사": "",
            "송장번호": "",
            "발송방식": SHIPPING_METHOD,
            "주문번호": order.order_id or "",
            "결제금액": order.total_amount or 0,
        })

    return rows


def render_shipping_excel(rows: List[Dict[str, Any]]) -> bytes:
    """배송 데이터를 xlsx 바이트로 변환"""
    columns = [name for name, _ in SHIPPING_COLUMNS]
    shipping_df = pd.DataFrame(rows, columns=columns)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        shipping_df.to_excel(writer, index=False, sheet_name=SHEET_NAME)

        # 컬럼 너비 설정
        worksheet = writer.sheets[SHEET_NAME]
        for index, (_, width) in enumerate(SHIPPING_COLUMNS, start=1):
            worksheet.column_dimensions[get_column_letter(index)].width = width

    return buffer.getvalue()


def _fetch_orders(db: Session, order_ids: List[str]) -> List[Order]:
    return db.query(Order).options(
        selectinload(Order.items)
    ).filter(
        Order.id.in_(order_ids)
    ).order_by(Order.created_at).all()


def _build_manifest(db: Session, order_ids: List[str]) -> Tuple[bytes, List[Order]]:
    selected_ids = [order_id for order_id in dict.fromkeys(order_ids) if order_id]
    if not selected_ids:
        raise EmptySelectionError("엑셀로 내보낼 주문을 선택해주세요.")

    orders = _fetch_orders(db, selected_ids)
    if not orders:
        raise OrderNotFoundError("선택한 주문을 찾을 수 없습니다.")

    manifest = render_shipping_excel(convert_orders_to_shipping_rows(orders))
    return manifest, orders


def _export_response(manifest: bytes, count: int, advanced: bool) -> ShippingExportResponse:
    message = f"{count}건의 배송 엑셀을 생성했습니다."
    if advanced:
        message += " 배송처리 상태로 이동했습니다."

    return ShippingExportResponse(
        success=True,
        message=message,
        file_name=f"배송목록_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx",
        file_base64=base64.b64encode(manifest).decode("ascii"),
        count=count,
        advanced=advanced,
    )


# 엑셀 생성 + 배송처리 이동
def export_and_advance(db: Session, actor: AdminUser, order_ids: List[str]) -> ShippingExportResponse:
    manifest, orders = _build_manifest(db, order_ids)

    # 조회된 주문만 상태 변경 (엑셀 생성 후 커밋)
    found_ids = [order.id for order in orders]
    previous_statuses = {order.consultation_status for order in orders}

    # 배송필요(상담완료) 외 상태에서 이동하는 주문 기록 (취소건 포함)
    unexpected = [
        f"{order.order_id}({order.consultation_status})"
        for order in orders
        if order.consultation_status != READY_TO_SHIP.value
    ]
    if unexpected:
        logger.warning(
            "배송처리 이동 대상 중 배송필요 상태가 아닌 주문: admin=%s, orders=%s",
            actor.username, ", ".join(unexpected)
        )

    write_consultation_status(db, found_ids, ConsultationStatus.SHIPPED)

    order_list_cache.invalidate([READY_TO_SHIP.value, ConsultationStatus.SHIPPED.value, *previous_statuses])

    logger.info("배송 엑셀 생성 및 배송처리: admin=%s, count=%d", actor.username, len(found_ids))
    return _export_response(manifest, len(found_ids), advanced=True)


# 엑셀 생성만 (상태 변경 없음)
def export_only(db: Session, actor: AdminUser, order_ids: List[str]) -> ShippingExportResponse:
    manifest, orders = _build_manifest(db, order_ids)

    logger.info("배송 엑셀 생성: admin=%s, count=%d", actor.username, len(orders))
    return _export_response(manifest, len(orders), advanced=False)
