"""
    환경 설정

    .env 파일과 환경변수에서 서버 설정값을 읽어옵니다.
"""

import os
from dotenv import load_dotenv

# 환경변수 로드
load_dotenv()

# ============================== #
# 데이터베이스
# ============================== #

DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "3306")
DB_NAME = os.getenv("DB_NAME")

# DATABASE_URL이 있으면 개별 DB_* 설정보다 우선 (테스트, 로컬 sqlite 등)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+mysqlconnector://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ============================== #
# 인증
# ============================== #

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "consultation_admin_secret_key")
ACCESS_TOKEN_MINUTES = int(os.getenv("ACCESS_TOKEN_MINUTES", "15"))
REFRESH_TOKEN_DAYS = int(os.getenv("REFRESH_TOKEN_DAYS", "7"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "true").lower() == "true"

# ============================== #
# 외부 API (알림톡 / 결제 / 스토리지)
# ============================== #

SOLAPI_API_URL = os.getenv("SOLAPI_API_URL", "https://api.solapi.com")
SOLAPI_API_KEY = os.getenv("SOLAPI_API_KEY", "")
SOLAPI_API_SECRET = os.getenv("SOLAPI_API_SECRET", "")
KAKAO_PF_ID = os.getenv("KAKAO_PF_ID", "")
KAKAO_TEMPLATE_SHIPPING = os.getenv("KAKAO_TEMPLATE_SHIPPING", "shipping_notification")

PORTONE_API_URL = os.getenv("PORTONE_API_URL", "https://api.portone.io")
PORTONE_API_SECRET = os.getenv("PORTONE_API_SECRET", "")

STORAGE_URL = os.getenv("STORAGE_URL", "")
STORAGE_SERVICE_KEY = os.getenv("STORAGE_SERVICE_KEY", "")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "product-images")

# 외부 API 요청 타임아웃 (초)
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

# ============================== #
# 서버
# ============================== #

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# 주문 목록 캐시 (Redis)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# 주문 목록 캐시 유지 시간 (초, 0 이하이면 캐시 사용 안 함)
ORDER_LIST_CACHE_TTL = int(os.getenv("ORDER_LIST_CACHE_TTL", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
