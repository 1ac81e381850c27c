import base64

from clients import alimtalk
from clients.alimtalk import AlimtalkResult
from db.models import Order

INCOMPLETE_ITEM = {
    "product_name": "맞춤 세럼",
    "product_price": 50000,
    "option_id": "opt-1",
    "selected_option_settings": None,
}


def test_orders_require_login(client):
    response = client.get("/orders")

    assert response.status_code == 401


def test_list_orders(client, auth_headers, make_order):
    order = make_order(consultation_status="on_hold")

    response = client.get("/orders", params={"consultation_status": "on_hold"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total_count"] == 1
    assert body["orders"][0]["order_id"] == order.order_id


def test_ids_and_status_counts_are_not_treated_as_order_ids(client, auth_headers, make_order):
    make_order(consultation_status="on_hold")

    ids = client.get("/orders/ids", headers=auth_headers)
    counts = client.get("/orders/status-counts", params={"statuses": ["on_hold", "shipped"]}, headers=auth_headers)

    assert ids.json()["total_count"] == 1
    assert counts.json() == {"on_hold": 1, "shipped": 0}


def test_order_detail_and_status_actions(client, auth_headers, make_order):
    order = make_order(consultation_status="shipped")

    detail = client.get(f"/orders/{order.id}", headers=auth_headers)
    actions = client.get(f"/orders/{order.id}/status-actions", headers=auth_headers)

    assert detail.status_code == 200
    assert detail.json()["price_summary"]["computed_total"] == 30000
    assert actions.json()["prev"] == "consultation_completed"
    assert actions.json()["next"] is None


def test_unknown_order_is_404(client, auth_headers):
    response = client.get("/orders/missing", headers=auth_headers)

    assert response.status_code == 404


def test_invalid_single_transition_is_409(client, auth_headers, make_order):
    order = make_order(consultation_status="chatting_required")

    response = client.patch(
        f"/orders/{order.id}/consultation-status",
        json={"consultation_status": "shipped"},
        headers=auth_headers,
    )

    assert response.status_code == 409


def test_bulk_transition_all_blocked(client, auth_headers, make_order):
    order = make_order(items=[INCOMPLETE_ITEM])

    response = client.post(
        "/orders/consultation-status/bulk",
        json={
            "order_ids": [order.id],
            "source_status": "consultation_required",
            "target_status": "consultation_completed",
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["all_blocked"] is True
    assert response.json()["skipped_count"] == 1


def test_bulk_transition_empty_selection_is_400(client, auth_headers):
    response = client.post(
        "/orders/consultation-status/bulk",
        json={"order_ids": [], "source_status": "on_hold", "target_status": "shipping_on_hold"},
        headers=auth_headers,
    )

    assert response.status_code == 400


def test_shipping_export(client, auth_headers, make_order, db):
    order = make_order(consultation_status="consultation_completed")

    response = client.post("/orders/shipping-export", json={"order_ids": [order.id]}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert base64.b64decode(body["file_base64"])[:2] == b"PK"

    db.expire_all()
    assert db.get(Order, order.id).consultation_status == "shipped"


def test_shipping_export_not_found(client, auth_headers):
    response = client.post("/orders/shipping-export", json={"order_ids": ["missing"]}, headers=auth_headers)

    assert response.status_code == 404


def test_notification_failure_does_not_undo_shipping_info(client, auth_headers, make_order, db, monkeypatch):
    order = make_order(consultation_status="consultation_completed")

    async def failing_send(**kwargs):
        return AlimtalkResult(success=False, error="알림톡 잔액이 부족합니다.")

    monkeypatch.setattr(alimtalk, "send_shipping_notification", failing_send)

    response = client.patch(
        f"/orders/{order.id}/shipping-info",
        json={"shipping_company": "CJ대한통운", "tracking_number": "123456789"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    db.expire_all()
    saved = db.get(Order, order.id)
    assert saved.tracking_number == "123456789"
    assert saved.shipped_at is not None


def test_send_notification_without_shipping_info_is_400(client, auth_headers, make_order):
    order = make_order()

    response = client.post(f"/orders/{order.id}/send-shipping-notification", headers=auth_headers)

    assert response.status_code == 400


def test_handler_endpoint(client, auth_headers, admin, make_order):
    order = make_order()

    response = client.patch(f"/orders/{order.id}/handler", json={"admin_id": admin.id}, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["handler_admin"]["username"] == "manager"
    assert data["handled_at"] is not None


def test_upload_requires_master(client, auth_headers):
    response = client.post(
        "/uploads/images",
        files=[("files", ("a.png", b"\x89PNG", "image/png"))],
        headers=auth_headers,
    )

    assert response.status_code == 403


def test_single_transition_with_incomplete_options_is_400(client, auth_headers, make_order):
    order = make_order(items=[INCOMPLETE_ITEM])

    response = client.patch(
        f"/orders/{order.id}/consultation-status",
        json={"consultation_status": "consultation_completed"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert "맞춤 세럼" in response.json()["detail"]
