"""
    [ 이미지 업로드 엔드포인트 ]

    상품 이미지 여러 장을 multipart로 받아 스토리지에 업로드합니다.
"""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from auth.dependencies import require_master
from db.models.admin_users import AdminUser
from uploads.schema import ImageUploadResponse
from uploads.services.image_upload_service import upload_images

router = APIRouter()

@router.post("/images", response_model=ImageUploadResponse)
async def upload_product_images(
    files: List[UploadFile] = File(...),
    admin: AdminUser = Depends(require_master)
):
    try:
        files_data = [
            {
                "file_name": file.filename or "image",
                "content": await file.read(),
                "content_type": file.content_type or "",
            }
            for file in files
        ]

        return await upload_images(files_data)

    except HTTPException:
        raise

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"이미지 업로드 중 오류 발생: {str(e)}"
        )
