"""
    전화번호 포맷팅 유틸리티
"""

import re
from typing import Optional


def format_phone_number(phone: Optional[str]) -> str:
    """
    +82, 82, 010 등 다양한 형식을 010 형식으로 통일

    formatPhoneNumber("+821012345678") -> "01012345678"
    formatPhoneNumber("010-1234-5678") -> "01012345678"
    formatPhoneNumber("1012345678")    -> "01012345678"
    """
    if not phone:
        return "-"

    clean_phone = re.sub(r"[^0-9]", "", phone)

    # 82로 시작하면 0으로 변환 (8210... -> 010...)
    if clean_phone.startswith("82"):
        return f"0{clean_phone[2:]}"

    if clean_phone.startswith("0"):
        return clean_phone

    # 10으로 시작하면 앞에 0 추가
    if clean_phone.startswith("10"):
        return f"0{clean_phone}"

    return phone


def format_phone_number_with_hyphen(phone: Optional[str]) -> str:
    """010-1234-5678 형식"""
    formatted = format_phone_number(phone)
    if formatted == "-":
        return formatted

    if len(formatted) == 11 and formatted.startswith("010"):
        return f"{formatted[:3]}-{formatted[3:7]}-{formatted[7:]}"

    # 011, 016, 017 등 10자리 번호
    if len(formatted) == 10 and formatted.startswith("01"):
        return f"{formatted[:3]}-{formatted[3:6]}-{formatted[6:]}"

    return formatted
