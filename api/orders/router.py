"""
    주문 관련 라우터

    read_router의 목록 조회 경로가 ""이므로 prefix는 include 시점에 지정
"""

from fastapi import APIRouter
from orders.endpoints.read import read_router
from orders.endpoints.status import status_router
from orders.endpoints.export import export_router
from orders.endpoints.manage import manage_router

ORDERS_PREFIX = "/orders"

orders_router = APIRouter(tags=["Orders"])

# 엔드포인트 라우터 포함 (고정 경로가 /{order_id} 보다 먼저 매칭되도록 read_router 먼저)
for endpoint_router in (read_router, status_router, export_router, manage_router):
    orders_router.include_router(endpoint_router, prefix=ORDERS_PREFIX)
