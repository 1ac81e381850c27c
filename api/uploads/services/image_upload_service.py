"""
    [ 상품 이미지 업로드 서비스 ]

    여러 이미지를 스토리지(product-images 버킷)에 동시에 업로드합니다.
        - 동시에 최대 3개까지 업로드
        - 실패한 파일은 최대 2번 재시도 (1초 x 시도 횟수 만큼 대기)
        - 일부만 실패하면 partial_success, 전부 실패하면 500
"""

import asyncio
import logging
import os
import secrets
import time
from typing import Any, Dict, List
from urllib.parse import quote

import aiohttp
from fastapi import HTTPException

import config
from uploads.schema import ImageUploadResponse, ImageUploadResult

logger = logging.getLogger(__name__)

MAX_CONCURRENT_UPLOADS = 3
MAX_RETRIES = 2
RETRY_DELAY_SECONDS = 1.0


def is_image(content_type: str) -> bool:
    return bool(content_type) and content_type.startswith("image/")


# 원본 확장자를 유지한 랜덤 파일명
def build_storage_path(file_name: str) -> str:
    extension = os.path.splitext(file_name or "")[1].lstrip(".").lower() or "bin"
    return f"{secrets.token_hex(6)}-{int(time.time() * 1000)}.{extension}"


def get_public_url(path: str) -> str:
    return f"{config.STORAGE_URL}/storage/v1/object/public/{config.STORAGE_BUCKET}/{quote(path)}"


async def put_object(session: aiohttp.ClientSession, path: str, content: bytes, content_type: str) -> None:
    """스토리지 REST API로 파일 1개 업로드 (실패 시 aiohttp.ClientError)"""
    async with session.post(
        f"{config.STORAGE_URL}/storage/v1/object/{config.STORAGE_BUCKET}/{quote(path)}",
        data=content,
        headers={
            "Authorization": f"Bearer {config.STORAGE_SERVICE_KEY}",
            "Content-Type": content_type,
            "x-upsert": "false",
        },
    ) as response:
        response.raise_for_status()


# 파일 1개 업로드 + 재시도: gather에 넣기 위해 따로 정의
async def upload_with_retry(
    session: aiohttp.ClientSession,
    semaphore: asyncio.Semaphore,
    file_data: Dict[str, Any]
) -> ImageUploadResult:

    file_name = file_data["file_name"]
    path = build_storage_path(file_name)
    last_error = None

    for attempt in range(1, MAX_RETRIES + 2):
        try:
            # 업로드 중인 동안만 슬롯 점유 (대기 중에는 다른 파일이 업로드)
            async with semaphore:
                await put_object(session, path, file_data["content"], file_data["content_type"])

            return ImageUploadResult(
                file_name=file_name,
                success=True,
                url=get_public_url(path),
                path=path,
                attempts=attempt,
            )

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            last_error = str(e) or e.__class__.__name__
            logger.warning("이미지 업로드 실패: file=%s, attempt=%d, error=%s", file_name, attempt, last_error)

            if attempt <= MAX_RETRIES:
                await asyncio.sleep(RETRY_DELAY_SECONDS * attempt)

    return ImageUploadResult(
        file_name=file_name,
        success=False,
        attempts=MAX_RETRIES + 1,
        error=last_error,
    )


async def upload_images(files: List[Dict[str, Any]]) -> ImageUploadResponse:
    """
    이미지 일괄 업로드

    Args:
        files: [{'file_name': str, 'content': bytes, 'content_type': str}, ...]
    """
    if not files:
        raise HTTPException(status_code=400, detail="업로드할 파일이 없습니다")

    invalid_files = [file_data["file_name"] for file_data in files if not is_image(file_data["content_type"])]
    if invalid_files:
        raise HTTPException(status_code=400, detail=f"이미지 파일만 업로드할 수 있습니다: {', '.join(invalid_files)}")

    semaphore = asyncio.Semaphore(MAX_CONCURRENT_UPLOADS)
    timeout = aiohttp.ClientTimeout(total=config.HTTP_TIMEOUT_SECONDS)

    async with aiohttp.ClientSession(timeout=timeout) as session:
        upload_tasks = [
            asyncio.create_task(upload_with_retry(session, semaphore, file_data))
            for file_data in files
        ]
        results = await asyncio.gather(*upload_tasks)

    uploaded = sum(1 for result in results if result.success)
    failed = len(results) - uploaded

    logger.info("이미지 업로드 완료: total=%d, uploaded=%d, failed=%d", len(results), uploaded, failed)

    # 모든 파일이 실패한 경우
    if uploaded == 0:
        raise HTTPException(status_code=500, detail=f"모든 이미지 업로드 실패 ({failed}개 파일 실패)")

    if failed:
        status = "partial_success"
        message = f"{len(results)}개 중 {uploaded}개 이미지 업로드 성공 ({failed}개 실패)"
    else:
        status = "success"
        message = f"{uploaded}개 이미지 업로드 완료"

    return ImageUploadResponse(
        status=status,
        message=message,
        total_files=len(results),
        uploaded=uploaded,
        failed=failed,
        results=list(results),
    )
