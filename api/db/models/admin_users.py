import uuid

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from ..base import Base

class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), comment="관리자 고유 ID")
    username = Column(String(50), unique=True, nullable=False, comment="관리자 로그인 ID")
    password_hash = Column(String(255), nullable=False, comment="비밀번호 해시 (bcrypt)")
    full_name = Column(String(50), nullable=True, comment="표시 이름")
    role = Column(String(20), nullable=False, default="admin", comment="관리자 역할 (admin, master)")
    is_active = Column(Boolean, nullable=False, default=True, comment="활성 여부")
    refresh_token = Column(String(500), nullable=True, comment="리프레시 토큰")
    token_expires_at = Column(DateTime, nullable=True, comment="리프레시 토큰 만료 시간")
    last_login_at = Column(DateTime, nullable=True, comment="마지막 로그인 시간")
    created_at = Column(DateTime, default=func.current_timestamp(), comment="생성 시점")
