from fastapi import APIRouter, Depends

from auth.dependencies import get_current_admin
from auth.schema import AdminProfile
from db.models.admin_users import AdminUser

router = APIRouter()

# 대시보드가 배정/처리 관리자 선택, 권한별 메뉴 표시에 사용
@router.get("/me", response_model=AdminProfile)
def read_current_admin(admin: AdminUser = Depends(get_current_admin)):
    return AdminProfile.model_validate(admin)
