"""
    [ PortOne 결제 취소 클라이언트 ]
"""

import asyncio
import logging
from typing import Any, Dict
from urllib.parse import quote

import aiohttp

import config
from orders.exceptions import PaymentCancelError

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_REASON = "관리자 요청"


async def cancel_payment(payment_id: str, reason: str) -> Dict[str, Any]:
    """
    PortOne 결제 취소 요청

    Returns:
        Dict: PortOne 응답 본문

    Raises:
        PaymentCancelError: 취소 요청이 실패한 경우
    """
    url = f"{config.PORTONE_API_URL}/payments/{quote(payment_id, safe='')}/cancel"
    headers = {
        "Authorization": f"PortOne {config.PORTONE_API_SECRET}",
        "Content-Type": "application/json",
    }

    try:
        timeout = aiohttp.ClientTimeout(total=config.HTTP_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, json={"reason": reason or DEFAULT_CANCEL_REASON}, headers=headers) as response:
                data = await response.json(content_type=None) or {}

                if response.status >= 400:
                    logger.error("결제 취소 실패: payment=%s, status=%s, body=%s", payment_id, response.status, data)
                    raise PaymentCancelError(data.get("message") or "결제 취소에 실패했습니다.")

                return data

    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error("결제 취소 요청 중 오류: payment=%s, error=%s", payment_id, e)
        raise PaymentCancelError("결제 취소 중 오류가 발생했습니다.") from e
