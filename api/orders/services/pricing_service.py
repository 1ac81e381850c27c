"""
    주문 금액 계산 서비스

    order_items의 상품 가격, 옵션 추가 비용, 추가상품 가격으로 상품 금액을 계산하고
    저장된 total_amount와 비교합니다. 결과는 표시용이며 DB에 다시 쓰지 않습니다.
"""

from typing import Any, Dict, Iterable, Optional

from db.models.orders import Order, OrderItem
from orders.schema import PriceSummary


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def calculate_order_item_price(item: OrderItem) -> int:
    """
    단일 주문 항목 금액

    공식: (상품 가격 + 옵션 추가 비용 + 추가상품 가격) * 수량
    """
    quantity = item.quantity or 0
    item_total = (item.product_price or 0) * quantity

    # 옵션 가격 추가
    for option in _as_list(item.selected_options):
        if isinstance(option, dict) and option.get("price_adjustment"):
            item_total += int(option["price_adjustment"]) * quantity

    # 추가상품 가격 추가
    for addon in _as_list(item.selected_addons):
        if isinstance(addon, dict) and addon.get("price"):
            item_total += int(addon["price"]) * quantity

    return item_total


def calculate_product_amount(items: Iterable[OrderItem]) -> int:
    return sum(calculate_order_item_price(item) for item in items)


def calculate_final_amount(
    product_amount: int,
    shipping_fee: Optional[int],
    coupon_discount: Optional[int],
    used_points: Optional[int]
) -> int:
    """상품 금액 + 배송비 - 쿠폰 할인 - 포인트 사용"""
    return product_amount + (shipping_fee or 0) - (coupon_discount or 0) - (used_points or 0)


def reconcile_order_total(order: Order) -> PriceSummary:
    """주문 항목으로 재계산한 금액과 저장된 결제금액 비교"""
    product_amount = calculate_product_amount(order.items)
    computed_total = calculate_final_amount(
        product_amount,
        order.shipping_fee,
        order.coupon_discount,
        order.used_points
    )
    stored_total = order.total_amount or 0

    return PriceSummary(
        product_amount=product_amount,
        shipping_fee=order.shipping_fee or 0,
        coupon_discount=order.coupon_discount or 0,
        used_points=order.used_points or 0,
        computed_total=computed_total,
        stored_total=stored_total,
        difference=stored_total - computed_total,
        is_consistent=stored_total == computed_total,
    )
