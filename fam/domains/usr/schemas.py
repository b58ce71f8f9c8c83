# fam/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 및 역할)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
응답 스키마(...Read)는 목록 조회의 도메인 엔티티로도 사용됩니다.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import EmailStr


# =============================================================================
# 1. 역할 (Role) 스키마
# =============================================================================
class RoleBase(SQLModel):
    code: str = Field(..., max_length=50)
    name: str = Field(..., max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    rank: int = 100
    is_system_role: bool = False


class RoleCreate(RoleBase):
    pass


class RoleUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    rank: Optional[int] = None


class RoleRead(RoleBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# 2. 사용자 (User) 스키마
# =============================================================================
class UserBase(SQLModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    full_name: Optional[str] = Field(None, max_length=100)
    role_id: Optional[int] = None
    is_active: bool = True


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, description="평문 비밀번호 (저장 시 해싱)")


class UserUpdate(SQLModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, max_length=100)
    role_id: Optional[int] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8)


class UserSummary(SQLModel):
    """다른 엔티티에 포함되어 응답되는 사용자 요약"""
    id: int
    username: str
    full_name: Optional[str] = None


class UserRead(UserBase):
    id: int
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    role: Optional[RoleRead] = None  # include=role 일 때만 채워짐

    class Config:
        from_attributes = True
