import os
import uuid

# 설정 모듈이 import 되기 전에 테스트용 환경변수 지정
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["COOKIE_SECURE"] = "false"
os.environ["KAKAO_PF_ID"] = ""
os.environ["PORTONE_API_SECRET"] = "test-secret"
os.environ["ORDER_LIST_CACHE_TTL"] = "30"

import fakeredis
import pytest
from fastapi.testclient import TestClient

from auth.utils.password_utils import hash_password
from auth.utils.token_utils import generate_access_token
from db import create_tables, drop_tables
from db.models import AdminUser, Order, OrderItem
from db.session import SessionLocal
from orders.cache import order_list_cache


@pytest.fixture(autouse=True)
def database():
    order_list_cache.client = fakeredis.FakeRedis(decode_responses=True)
    assert create_tables()
    order_list_cache.clear()
    yield
    drop_tables()
    order_list_cache.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _create_admin(db, username, role):
    admin = AdminUser(username=username, password_hash=hash_password("pass1234"), full_name=f"{username} 관리자", role=role)
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def admin(db):
    return _create_admin(db, "manager", "admin")


@pytest.fixture
def master(db):
    return _create_admin(db, "owner", "master")


@pytest.fixture
def make_order(db):
    """주문 + 주문 상품 생성 (items 미지정 시 옵션 없는 상품 1개)"""

    def _make(consultation_status="consultation_required", status="completed", items=None, **fields):
        fields.setdefault("order_id", f"ORD-{uuid.uuid4().hex[:10]}")
        fields.setdefault("total_amount", 30000)
        fields.setdefault("user_name", "홍길동")
        fields.setdefault("user_phone", "+821012345678")

        order = Order(status=status, consultation_status=consultation_status, **fields)
        for item in items if items is not None else [{"product_name": "진정 토너", "product_price": 30000}]:
            order.items.append(OrderItem(**item))

        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make


@pytest.fixture
def client():
    from main import app

    with TestClient(app) as test_client:
        yield test_client


def bearer(admin_user):
    token = generate_access_token(admin_user.id, admin_user.username, admin_user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(admin):
    return bearer(admin)


@pytest.fixture
def master_headers(master):
    return bearer(master)
