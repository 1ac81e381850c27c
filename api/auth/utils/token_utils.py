from datetime import datetime, timedelta, timezone
from typing import Any, Dict
import jwt
import secrets

import config

# 액세스 토큰 생성
def generate_access_token(admin_id: str, username: str, role: str) -> str:
    payload = {
        "admin_id": admin_id,
        "username": username,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=config.ACCESS_TOKEN_MINUTES),
        "iat": datetime.now(timezone.utc)
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm="HS256")


# 액세스 토큰 검증: 만료/위조 시 ValueError
def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=["HS256"])

    except jwt.ExpiredSignatureError:
        raise ValueError("액세스 토큰이 만료되었습니다") from None

    except jwt.InvalidTokenError:
        raise ValueError("유효하지 않은 액세스 토큰입니다") from None


# 리프레시 토큰 생성 (랜덤 문자열)
def generate_refresh_token() -> str:
    return secrets.token_urlsafe(32)
