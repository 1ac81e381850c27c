import pytest

from db.models import Order
from orders.cache import order_list_cache
from orders.exceptions import (
    EmptySelectionError,
    InvalidTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from orders.services.workflow_service import (
    apply_bulk_transition,
    apply_single_transition,
    is_incompletely_configured,
)
from orders.status import ConsultationStatus

S = ConsultationStatus

COMPLETE_ITEM = {
    "product_name": "맞춤 세럼",
    "product_price": 50000,
    "option_id": "opt-1",
    "option_name": "피부 타입",
    "selected_option_settings": [{"type_name": "건성"}],
}
INCOMPLETE_ITEM = {
    "product_name": "맞춤 세럼",
    "product_price": 50000,
    "option_id": "opt-1",
    "option_name": "피부 타입",
    "selected_option_settings": [],
}


def _status(db, order):
    db.expire_all()
    return db.get(Order, order.id).consultation_status


@pytest.mark.parametrize("option_id, settings, expected", [
    (None, None, False),
    (None, [], False),
    ("opt-1", None, True),
    ("opt-1", [], True),
    ("opt-1", [{"type_name": "지성"}], False),
])
def test_is_incompletely_configured(option_id, settings, expected):
    assert is_incompletely_configured(option_id, settings) is expected


def test_guarded_edge_skips_incomplete_orders(db, admin, make_order):
    order_a = make_order(items=[COMPLETE_ITEM])
    order_b = make_order(items=[COMPLETE_ITEM, INCOMPLETE_ITEM])

    result = apply_bulk_transition(
        db, admin, [order_a.id, order_b.id],
        target_status=S.CONSULTATION_COMPLETED,
        source_status=S.CONSULTATION_REQUIRED,
    )

    assert result.success
    assert result.updated_count == 1
    assert result.skipped_count == 1
    assert _status(db, order_a) == "consultation_completed"
    assert _status(db, order_b) == "consultation_required"


def test_guarded_edge_all_blocked(db, admin, make_order):
    orders = [make_order(items=[INCOMPLETE_ITEM]) for _ in range(2)]

    result = apply_bulk_transition(
        db, admin, [order.id for order in orders],
        target_status=S.CONSULTATION_COMPLETED,
        source_status=S.CONSULTATION_REQUIRED,
    )

    assert not result.success
    assert result.all_blocked
    assert result.updated_count == 0
    assert result.skipped_count == 2
    assert all(_status(db, order) == "consultation_required" for order in orders)


def test_unguarded_edge_updates_every_order(db, admin, make_order):
    orders = [make_order(items=[INCOMPLETE_ITEM]) for _ in range(3)]

    result = apply_bulk_transition(
        db, admin, [order.id for order in orders],
        target_status=S.ON_HOLD,
        source_status=S.CONSULTATION_REQUIRED,
    )

    assert result.updated_count == 3
    assert result.skipped_count == 0
    assert all(_status(db, order) == "on_hold" for order in orders)


def test_duplicate_ids_are_counted_once(db, admin, make_order):
    order = make_order()

    result = apply_bulk_transition(
        db, admin, [order.id, order.id],
        target_status=S.ON_HOLD,
        source_status=S.CONSULTATION_REQUIRED,
    )

    assert result.updated_count == 1


def test_empty_selection_is_rejected(db, admin):
    with pytest.raises(EmptySelectionError):
        apply_bulk_transition(db, admin, [], S.ON_HOLD, S.CONSULTATION_REQUIRED)


def test_edge_outside_graph_writes_nothing(db, admin, make_order):
    order = make_order(consultation_status="chatting_required")

    with pytest.raises(InvalidTransitionError):
        apply_bulk_transition(db, admin, [order.id], S.SHIPPED, S.CHATTING_REQUIRED)

    assert _status(db, order) == "chatting_required"


def test_bulk_transition_invalidates_source_and_target_tabs(db, admin, make_order):
    order = make_order()
    order_list_cache.set("consultation_required", "count", 1)
    order_list_cache.set("on_hold", "count", 0)
    order_list_cache.set("shipped", "count", 5)

    apply_bulk_transition(db, admin, [order.id], S.ON_HOLD, S.CONSULTATION_REQUIRED)

    assert order_list_cache.get("consultation_required", "count") is None
    assert order_list_cache.get("on_hold", "count") is None
    assert order_list_cache.get("shipped", "count") == 5


def test_single_transition_from_shipping_on_hold_to_shipped(db, admin, make_order):
    order_c = make_order(consultation_status="shipping_on_hold")

    updated = apply_single_transition(db, admin, order_c.id, S.SHIPPED)

    assert updated.consultation_status == "shipped"


def test_single_transition_is_idempotent(db, admin, make_order):
    order = make_order(consultation_status="shipping_on_hold")

    apply_single_transition(db, admin, order.id, S.SHIPPED)
    again = apply_single_transition(db, admin, order.id, S.SHIPPED)

    assert again.consultation_status == "shipped"


def test_single_transition_rejects_cancelled_target(db, admin, make_order):
    order = make_order(consultation_status="consultation_completed")

    with pytest.raises(InvalidTransitionError):
        apply_single_transition(db, admin, order.id, S.CANCELLED)

    assert _status(db, order) == "consultation_completed"


def test_single_transition_unknown_order(db, admin):
    with pytest.raises(OrderNotFoundError):
        apply_single_transition(db, admin, "missing", S.SHIPPED)


def test_bulk_transition_repeated_leaves_status_unchanged(db, admin, make_order):
    order = make_order()

    apply_bulk_transition(db, admin, [order.id], S.ON_HOLD, S.CONSULTATION_REQUIRED)
    result = apply_bulk_transition(db, admin, [order.id], S.ON_HOLD, S.CONSULTATION_REQUIRED)

    assert result.success
    assert _status(db, order) == "on_hold"


def test_bulk_transition_skips_orders_not_in_selected_tab(db, admin, make_order):
    # 옵션 미완료 주문이 보류 탭에서 선택된 것처럼 요청되어도 가드를 우회할 수 없음
    order = make_order(items=[INCOMPLETE_ITEM])

    result = apply_bulk_transition(db, admin, [order.id], S.CONSULTATION_COMPLETED, S.ON_HOLD)

    assert not result.success
    assert result.all_blocked
    assert result.updated_count == 0
    assert result.mismatched_count == 1
    assert _status(db, order) == "consultation_required"


def test_bulk_transition_does_not_revive_cancelled_order(db, admin, make_order):
    cancelled = make_order(consultation_status="cancelled")
    waiting = make_order(consultation_status="shipping_on_hold")

    result = apply_bulk_transition(db, admin, [cancelled.id, waiting.id], S.SHIPPED, S.SHIPPING_ON_HOLD)

    assert result.success
    assert result.updated_count == 1
    assert result.skipped_count == 1
    assert result.mismatched_count == 1
    assert _status(db, cancelled) == "cancelled"
    assert _status(db, waiting) == "shipped"


def test_bulk_transition_counts_missing_ids_as_skipped(db, admin, make_order):
    order = make_order()

    result = apply_bulk_transition(db, admin, [order.id, "missing"], S.ON_HOLD, S.CONSULTATION_REQUIRED)

    assert result.updated_count == 1
    assert result.skipped_count == 1


def test_single_transition_rejects_incomplete_options(db, admin, make_order):
    order = make_order(items=[COMPLETE_ITEM, INCOMPLETE_ITEM])

    with pytest.raises(OrderValidationError):
        apply_single_transition(db, admin, order.id, S.CONSULTATION_COMPLETED)

    assert _status(db, order) == "consultation_required"


def test_single_transition_with_complete_options(db, admin, make_order):
    order = make_order(items=[COMPLETE_ITEM])

    updated = apply_single_transition(db, admin, order.id, S.CONSULTATION_COMPLETED)

    assert updated.consultation_status == "consultation_completed"
