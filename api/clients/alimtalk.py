"""
    [ 카카오 알림톡 클라이언트 ]

    Solapi 알림톡 API(messages/v4/send-many/detail)로 알림톡을 발송합니다.

    환경 변수:
        SOLAPI_API_KEY, SOLAPI_API_SECRET, KAKAO_PF_ID, KAKAO_TEMPLATE_SHIPPING
"""

import asyncio
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

import aiohttp

import config
from utils.phone import format_phone_number

logger = logging.getLogger(__name__)

SEND_MANY_PATH = "/messages/v4/send-many/detail"


@dataclass
class AlimtalkResult:
    """알림톡 발송 결과"""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


def create_auth_header(api_key: str, api_secret: str) -> str:
    """Solapi HMAC-SHA256 인증 헤더"""
    date_time = datetime.now(timezone.utc).isoformat()
    salt = secrets.token_hex(16)  # 32자
    signature = hmac.new(
        api_secret.encode("utf-8"),
        f"{date_time}{salt}".encode("utf-8"),
        hashlib.sha256
    ).hexdigest()

    return f"HMAC-SHA256 apiKey={api_key}, date={date_time}, salt={salt}, signature={signature}"


def normalize_error(message: Optional[str]) -> str:
    """Solapi 오류 메시지를 관리자 화면용 문구로 변환"""
    if not message:
        return "알림톡 발송에 실패했습니다."

    lowered = message.lower()

    if "insufficient" in lowered or "balance" in lowered:
        return "알림톡 잔액이 부족합니다."

    if "recipient" in lowered or "receiver" in lowered:
        return "유효하지 않은 전화번호입니다."

    if "api key" in lowered or "unauthorized" in lowered:
        return "알림톡 API 설정이 올바르지 않습니다."

    if "template" in lowered or "pf id" in lowered:
        return "알림톡 템플릿을 찾을 수 없습니다."

    return message


async def send_alimtalk(phone: str, template_id: str, variables: Dict[str, str]) -> AlimtalkResult:

    if not config.KAKAO_PF_ID:
        return AlimtalkResult(success=False, error="카카오톡 발신 프로필(pfId)이 설정되지 않았습니다.")

    if not config.SOLAPI_API_KEY or not config.SOLAPI_API_SECRET:
        return AlimtalkResult(success=False, error="알림톡 API 설정이 올바르지 않습니다.")

    formatted_phone = format_phone_number(phone)
    payload = {
        "messages": [
            {
                "to": formatted_phone,
                "type": "ATA",
                "kakaoOptions": {
                    "pfId": config.KAKAO_PF_ID,
                    "templateId": template_id,
                    "disableSms": True,
                    "variables": variables,
                },
            }
        ],
        "allowDuplicates": False,
    }
    headers = {
        "Authorization": create_auth_header(config.SOLAPI_API_KEY, config.SOLAPI_API_SECRET),
        "Content-Type": "application/json",
    }

    try:
        timeout = aiohttp.ClientTimeout(total=config.HTTP_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(
                f"{config.SOLAPI_API_URL}{SEND_MANY_PATH}",
                json=payload,
                headers=headers
            ) as response:
                data = await response.json(content_type=None)
                status = response.status

    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error("알림톡 발송 요청 실패: %s", e)
        return AlimtalkResult(success=False, error=normalize_error(str(e)))

    data = data or {}

    if status >= 400:
        logger.error("알림톡 발송 실패: status=%s, body=%s", status, data)
        return AlimtalkResult(
            success=False,
            error=normalize_error(data.get("errorMessage") or data.get("message"))
        )

    # 요청은 성공했지만 개별 메시지 발송이 실패한 경우
    for failure in data.get("failedMessageList") or []:
        if failure.get("to") == formatted_phone:
            logger.error("알림톡 개별 메시지 실패: %s", failure)
            return AlimtalkResult(
                success=False,
                error=normalize_error(
                    failure.get("statusMessage") or failure.get("message") or failure.get("statusCode")
                )
            )

    group_info = data.get("groupInfo") or {}
    return AlimtalkResult(success=True, message_id=group_info.get("groupId") or group_info.get("id"))


async def send_shipping_notification(
    phone: str,
    order_code: str,
    customer_name: str,
    shipping_company: str,
    tracking_number: str
) -> AlimtalkResult:
    """배송 알림톡 발송"""
    return await send_alimtalk(
        phone,
        config.KAKAO_TEMPLATE_SHIPPING,
        {
            "#{고객명}": customer_name,
            "#{주문번호}": order_code,
            "#{택배사}": shipping_company,
            "#{운송장번호}": tracking_number,
        }
    )
