"""
    [ 인증 서비스 ]

    관리자 인증 관련 비즈니스 로직 처리
"""

from sqlalchemy.orm import Session
from datetime import datetime, timedelta

import config
from db.models.admin_users import AdminUser
from auth.utils.password_utils import verify_password
from auth.utils.token_utils import generate_access_token, generate_refresh_token


# 로그인 처리: 관리자 인증 + 토큰 생성 + DB 저장
# return: (admin, access_token, refresh_token)
def process_login(db: Session, username: str, password: str) -> tuple[AdminUser, str, str]:

    # 관리자 조회
    admin = db.query(AdminUser).filter(
        AdminUser.username == username
    ).first()

    if not admin:
        raise ValueError("관리자 계정을 찾을 수 없습니다")

    if not admin.is_active:
        raise ValueError("비활성화된 관리자 계정입니다")

    # 비밀번호 확인 (bcrypt 해시 비교)
    if not verify_password(password, admin.password_hash):
        raise ValueError("비밀번호가 일치하지 않습니다")

    # JWT 토큰 생성
    access_token = generate_access_token(admin.id, admin.username, admin.role)
    refresh_token = generate_refresh_token()

    # DB 저장 (naive datetime: MySQL DATETIME 컬럼 기준)
    admin.refresh_token = refresh_token
    admin.token_expires_at = datetime.now() + timedelta(days=config.REFRESH_TOKEN_DAYS)
    admin.last_login_at = datetime.now()

    db.commit()

    return admin, access_token, refresh_token


# 로그아웃 처리: 리프레시 토큰 무효화
# return: None
def process_logout(db: Session, refresh_token: str) -> None:

    # 리프레시 토큰으로 관리자 조회
    admin = db.query(AdminUser).filter(
        AdminUser.refresh_token == refresh_token
    ).first()

    if admin:
        # 토큰 정보 초기화
        admin.refresh_token = None
        admin.token_expires_at = None

        db.commit()


# 토큰 갱신 처리: 리프레시 토큰 검증 + 새 액세스 토큰 생성
# return: (admin, access_token)
def process_token_refresh(db: Session, refresh_token: str) -> tuple[AdminUser, str]:

    # 리프레시 토큰으로 관리자 조회 (만료되지 않은 토큰만)
    admin = db.query(AdminUser).filter(
        AdminUser.refresh_token == refresh_token,
        AdminUser.token_expires_at > datetime.now(),
        AdminUser.is_active.is_(True)
    ).first()

    if not admin:
        raise ValueError("유효하지 않은 리프레시 토큰입니다")

    # 새로운 액세스 토큰 생성
    access_token = generate_access_token(admin.id, admin.username, admin.role)

    return admin, access_token
