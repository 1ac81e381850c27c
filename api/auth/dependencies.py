"""
    인증 의존성

    요청한 관리자를 액세스 토큰(쿠키 또는 Authorization: Bearer)에서 찾아
    엔드포인트에 명시적으로 전달합니다.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from auth.utils.token_utils import decode_access_token
from db.models.admin_users import AdminUser
from db.session import get_db


def _extract_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization")
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()

    return request.cookies.get("access_token")


def get_current_admin(request: Request, db: Session = Depends(get_db)) -> AdminUser:
    """현재 요청의 관리자 (없거나 비활성 계정이면 401)"""
    token = _extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="로그인이 필요합니다")

    try:
        payload = decode_access_token(token)
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e))

    admin = db.query(AdminUser).filter(AdminUser.id == payload.get("admin_id")).first()
    if not admin or not admin.is_active:
        raise HTTPException(status_code=401, detail="유효하지 않은 관리자 계정입니다")

    return admin


def require_master(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
    """마스터 관리자 전용 기능"""
    if admin.role != "master":
        raise HTTPException(status_code=403, detail="마스터 관리자만 사용할 수 있습니다")

    return admin
