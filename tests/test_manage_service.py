import asyncio
import threading

import pytest

from clients import alimtalk, portone
from clients.alimtalk import AlimtalkResult
from orders.exceptions import (
    NotificationError,
    OrderValidationError,
    PaymentCancelError,
    ShippingInfoError,
)
from orders.schema import ShippingAddressRequest
from orders.services import manage_service


def test_handler_assignment_sets_handled_at_and_clearing_keeps_it(db, admin, make_order):
    order_d = make_order()
    assert order_d.handled_at is None

    assigned = manage_service.set_handler(db, admin, order_d.id, admin.id)
    handled_at = assigned.handled_at

    assert assigned.handler_admin_id == admin.id
    assert handled_at is not None

    cleared = manage_service.set_handler(db, admin, order_d.id, None)

    assert cleared.handler_admin_id is None
    assert cleared.handled_at == handled_at


def test_handler_must_be_active_admin(db, admin, make_order):
    order = make_order()
    admin.is_active = False
    db.commit()

    with pytest.raises(OrderValidationError):
        manage_service.set_handler(db, admin, order.id, admin.id)


def test_assign_admin(db, admin, make_order):
    order = make_order()

    updated = manage_service.assign_admin(db, admin, order.id, admin.id)

    assert updated.assigned_admin.username == "manager"


def test_blank_memo_is_stored_as_null(db, admin, make_order):
    order = make_order(admin_memo="기존 메모")

    updated = manage_service.update_memo(db, admin, order.id, "   ")

    assert updated.admin_memo is None


def test_shipping_info_requires_both_fields(db, admin, make_order):
    order = make_order()

    with pytest.raises(ShippingInfoError):
        manage_service.update_shipping_info(db, admin, order.id, "CJ대한통운", " ")


def test_shipping_info_sets_shipped_at_once(db, admin, make_order):
    order = make_order()

    first = manage_service.update_shipping_info(db, admin, order.id, "CJ대한통운", "123456789")
    shipped_at = first.shipped_at
    assert shipped_at is not None

    second = manage_service.update_shipping_info(db, admin, order.id, "한진택배", "987654321")

    assert second.tracking_number == "987654321"
    assert second.shipped_at == shipped_at


def test_shipping_address_blank_fields_become_null(db, admin, make_order):
    order = make_order(shipping_message="문 앞")

    updated = manage_service.update_shipping_address(
        db, admin, order.id,
        ShippingAddressRequest(shipping_name="김수령", shipping_message="")
    )

    assert updated.shipping_name == "김수령"
    assert updated.shipping_message is None


def test_build_notification_falls_back_to_shipping_phone(make_order):
    order = make_order(
        user_phone=None,
        shipping_phone="01011112222",
        shipping_company="CJ대한통운",
        tracking_number="123",
    )

    notification = manage_service.build_shipping_notification(order)

    assert notification["phone"] == "01011112222"
    assert notification["order_code"] == order.order_id


def test_build_notification_requires_phone(make_order):
    order = make_order(user_phone=None, shipping_company="CJ대한통운", tracking_number="123")

    with pytest.raises(ShippingInfoError):
        manage_service.build_shipping_notification(order)


def test_send_notification_reports_provider_failure(db, make_order, monkeypatch):
    order = make_order(shipping_company="CJ대한통운", tracking_number="123")

    async def fake_send(**kwargs):
        return AlimtalkResult(success=False, error="알림톡 잔액이 부족합니다.")

    monkeypatch.setattr(alimtalk, "send_shipping_notification", fake_send)

    with pytest.raises(NotificationError):
        asyncio.run(manage_service.send_order_shipping_notification(db, order.id))


def test_best_effort_notification_swallows_errors(monkeypatch):
    async def broken_send(**kwargs):
        raise RuntimeError("network down")

    monkeypatch.setattr(alimtalk, "send_shipping_notification", broken_send)

    asyncio.run(manage_service.notify_shipping_best_effort({"order_code": "ORD-1", "phone": "010"}))


def test_cancel_payment_writes_status_after_provider_success(db, admin, make_order, monkeypatch):
    order = make_order(payment_key="pay-key", consultation_status="consultation_completed")
    calls = []

    async def fake_cancel(payment_id, reason):
        calls.append((payment_id, reason))
        return {"cancellation": {"status": "SUCCEEDED"}}

    monkeypatch.setattr(portone, "cancel_payment", fake_cancel)

    updated = asyncio.run(manage_service.cancel_order_payment(db, admin, order.id, "고객 요청"))

    assert calls == [(order.order_id, "고객 요청")]
    assert updated.status == "cancelled"
    assert updated.consultation_status == "cancelled"


def test_cancel_payment_failure_writes_nothing(db, admin, make_order, monkeypatch):
    order = make_order(payment_key="pay-key", consultation_status="consultation_completed")

    async def failing_cancel(payment_id, reason):
        raise PaymentCancelError("이미 취소된 결제입니다.")

    monkeypatch.setattr(portone, "cancel_payment", failing_cancel)

    with pytest.raises(PaymentCancelError):
        asyncio.run(manage_service.cancel_order_payment(db, admin, order.id, "고객 요청"))

    db.refresh(order)
    assert order.status == "completed"
    assert order.consultation_status == "consultation_completed"


def test_cancel_payment_requires_reason_and_payment_key(db, admin, make_order):
    without_key = make_order()
    with_key = make_order(payment_key="pay-key")

    with pytest.raises(OrderValidationError):
        asyncio.run(manage_service.cancel_order_payment(db, admin, without_key.id, "고객 요청"))

    with pytest.raises(OrderValidationError):
        asyncio.run(manage_service.cancel_order_payment(db, admin, with_key.id, "  "))


def test_cancel_payment_runs_db_work_off_the_event_loop(db, admin, make_order, monkeypatch):
    order = make_order(payment_key="pay-1")
    db_threads = []
    original_commit = manage_service._commit_order
    original_get_order = manage_service.get_order

    def recording_get_order(*args):
        db_threads.append(threading.get_ident())
        return original_get_order(*args)

    def recording_commit(*args):
        db_threads.append(threading.get_ident())
        return original_commit(*args)

    async def fake_cancel(payment_id, reason):
        return {"cancellation": {"status": "SUCCEEDED"}}

    monkeypatch.setattr(manage_service, "get_order", recording_get_order)
    monkeypatch.setattr(manage_service, "_commit_order", recording_commit)
    monkeypatch.setattr(portone, "cancel_payment", fake_cancel)

    async def run():
        loop_thread = threading.get_ident()
        updated = await manage_service.cancel_order_payment(db, admin, order.id, "고객 요청")
        return loop_thread, updated

    loop_thread, updated = asyncio.run(run())

    assert updated.consultation_status == "cancelled"
    assert len(db_threads) >= 2
    assert loop_thread not in db_threads
