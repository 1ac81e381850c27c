from typing import Optional
from datetime import datetime
from pydantic import BaseModel

class LoginRequest(BaseModel):
    """로그인 요청 스키마"""
    username: str
    password: str

class LoginResponse(BaseModel):
    """로그인 / 토큰 갱신 응답 스키마"""
    success: bool
    message: str
    admin_id: Optional[str] = None
    role: Optional[str] = None
    username: Optional[str] = None
    full_name: Optional[str] = None

class RefreshRequest(BaseModel):
    """리프레시 토큰 요청 스키마"""
    refresh_token: str

class LogoutRequest(BaseModel):
    """로그아웃 요청 스키마 (없으면 쿠키 사용)"""
    refresh_token: Optional[str] = None

class AdminProfile(BaseModel):
    """현재 로그인한 관리자 정보"""
    id: str
    username: str
    full_name: Optional[str] = None
    role: str
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True
