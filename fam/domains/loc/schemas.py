# fam/domains/loc/schemas.py

"""
'loc' 도메인 (위치 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class LocationBase(SQLModel):
    name: str = Field(..., max_length=100)
    code: str = Field(..., max_length=50)
    parent_id: Optional[int] = None
    location_type: str = Field("site", max_length=30)
    description: Optional[str] = None


class LocationCreate(LocationBase):
    pass


class LocationUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=100)
    location_type: Optional[str] = Field(None, max_length=30)
    description: Optional[str] = None


class LocationSummary(SQLModel):
    """다른 엔티티에 포함되어 응답되는 위치 요약"""
    id: int
    name: str
    code: str
    full_path: str


class LocationRead(LocationBase):
    id: int
    full_path: str
    created_at: datetime
    updated_at: datetime
    parent: Optional[LocationSummary] = None  # include=parent 일 때만 채워짐

    class Config:
        from_attributes = True
