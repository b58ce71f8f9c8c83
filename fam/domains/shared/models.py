# fam/domains/shared/models.py

"""
모든 도메인 테이블 모델이 공유하는 컬럼 믹스인과 헬퍼를 정의하는 모듈입니다.

- TimestampMixin: created_at / updated_at
- AuditMixin: 생성/수정/삭제자와 소프트 삭제(is_deleted, deleted_at) 컬럼
- active_unique_index: 소프트 삭제되지 않은 행에만 적용되는 부분(filtered) 고유 인덱스

AuditMixin 컬럼은 저장소 전용이며, 도메인 엔티티(...Read 스키마)에는 노출되지 않습니다.
"""

from typing import Optional
from datetime import datetime, UTC
from sqlmodel import Field, SQLModel
from sqlalchemy import Index, text
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


def active_unique_index(name: str, *columns: str) -> Index:
    """``is_deleted`` 가 거짓인 행에 대해서만 고유한 인덱스 (PostgreSQL / SQLite 부분 인덱스)."""
    return Index(
        name,
        *columns,
        unique=True,
        postgresql_where=text("NOT is_deleted"),
        sqlite_where=text("NOT is_deleted"),
    )


class TimestampMixin(SQLModel):
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "onupdate": func.now()},
        description="레코드 마지막 업데이트 일시"
    )


class AuditMixin(TimestampMixin):
    created_by_id: Optional[int] = Field(default=None, description="생성자 사용자 ID")
    updated_by_id: Optional[int] = Field(default=None, description="최종 수정자 사용자 ID")
    is_deleted: bool = Field(default=False, index=True, description="소프트 삭제 여부")
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_type=TIMESTAMP(timezone=True),
        description="소프트 삭제 일시"
    )
    deleted_by_id: Optional[int] = Field(default=None, description="삭제자 사용자 ID")
