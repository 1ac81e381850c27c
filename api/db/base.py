from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# 제약조건 이름 규칙 (MySQL 마이그레이션 시 FK/UNIQUE 이름 고정)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)

# 모든 ORM 모델의 부모 클래스
Base = declarative_base(metadata=metadata)
