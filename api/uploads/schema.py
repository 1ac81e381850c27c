"""
    [ 이미지 업로드 응답 스키마 ]
"""

from pydantic import BaseModel
from typing import List, Optional

class ImageUploadResult(BaseModel):
    """파일별 업로드 결과"""
    file_name: str
    success: bool
    url: Optional[str] = None
    path: Optional[str] = None
    attempts: int = 0
    error: Optional[str] = None

class ImageUploadResponse(BaseModel):
    """업로드 응답 (status: success | partial_success)"""
    status: str
    message: str
    total_files: int
    uploaded: int
    failed: int
    results: List[ImageUploadResult]
