from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import DATABASE_URL

# ============================== #

# sqlite(테스트/로컬)일 때는 단일 커넥션 공유
if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

else:
    # SQLAlchemy 엔진 생성
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        pool_pre_ping=True,  # 연결 상태 확인
        pool_recycle=3600,   # 연결 재사용 시간 (1시간)
    )

# 세션 팩토리 생성
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 데이터베이스 세션 의존성
def get_db():
    """ 데이터베이스 세션을 생성하고 반환하는 의존성 함수 """
    db = SessionLocal() # 새로운 세션 생성

    try:
        yield db  # 세션을 API EndPoint에 전달

    finally:
        db.close() # 요청 완료 후 세션 정리
