from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Request, Response
from sqlalchemy.orm import Session
from db.session import get_db
from auth.schema import LogoutRequest
from auth.services.auth_service import process_logout

router = APIRouter()

@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    body: Optional[LogoutRequest] = None,
    db: Session = Depends(get_db)
):
    """본문에 refresh_token이 없으면 쿠키의 리프레시 토큰으로 로그아웃"""
    try:
        refresh_token = (body.refresh_token if body else None) or request.cookies.get("refresh_token")

        # 토큰이 없어도 쿠키는 정리
        if refresh_token:
            process_logout(db, refresh_token)

        response.delete_cookie("access_token", path="/")
        response.delete_cookie("refresh_token", path="/")

        return {"success": True, "message": "로그아웃 완료"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"로그아웃 중 오류가 발생했습니다: {str(e)}")
