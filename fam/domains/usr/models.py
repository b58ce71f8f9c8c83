# fam/domains/usr/models.py

"""
'usr' 도메인 (사용자 및 역할)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 roles, users 테이블에 대한 SQLModel 클래스를 포함합니다.
역할(Role)은 데이터로만 관리하며 권한 평가는 하지 않습니다.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import Field, Relationship, SQLModel
from sqlalchemy.types import TIMESTAMP

from fam.domains.shared.models import AuditMixin, active_unique_index


# =============================================================================
# 1. roles 테이블 모델
# =============================================================================
class RoleBase(SQLModel):
    """
    roles 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    code: str = Field(max_length=50, description="역할 코드 (예: ADMIN)")
    name: str = Field(max_length=100, description="역할명")
    description: Optional[str] = Field(default=None, max_length=255, description="설명")
    rank: int = Field(default=100, description="정렬 순위 (작을수록 상위)")
    is_system_role: bool = Field(default=False, description="시스템 기본 역할 여부 (삭제 불가)")


class Role(RoleBase, AuditMixin, table=True):
    """
    roles 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "roles"
    __table_args__ = (
        active_unique_index("ux_roles_code", "code"),
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="역할 고유 ID")


# =============================================================================
# 2. users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    username: str = Field(max_length=50, description="로그인 ID")
    email: str = Field(max_length=100, description="이메일 주소")
    full_name: Optional[str] = Field(default=None, max_length=100, description="이름")
    role_id: Optional[int] = Field(default=None, foreign_key="roles.id", description="역할 ID (FK)")
    is_active: bool = Field(default=True, description="계정 활성 상태")
    last_login_at: Optional[datetime] = Field(
        default=None,
        sa_type=TIMESTAMP(timezone=True),
        description="마지막 로그인 일시"
    )


class User(UserBase, AuditMixin, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"
    __table_args__ = (
        active_unique_index("ux_users_username", "username"),
        active_unique_index("ux_users_email", "email"),
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")

    role: Optional[Role] = Relationship()
