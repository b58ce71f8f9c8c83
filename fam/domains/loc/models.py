# fam/domains/loc/models.py

"""
'loc' 도메인 (위치 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

위치는 부모-자식 계층(사업장 > 건물 > 층 > 실)을 이루며, full_path 에
루트부터의 경로("본사/A동/3층")를 저장하여 계층 순서로 정렬할 수 있게 합니다.
"""

from typing import Optional
from sqlmodel import Field, Relationship, SQLModel

from fam.domains.shared.models import AuditMixin, active_unique_index

PATH_SEPARATOR = "/"


# =============================================================================
# 1. locations 테이블 모델
# =============================================================================
class LocationBase(SQLModel):
    """
    locations 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=100, description="위치명")
    code: str = Field(max_length=50, description="위치 코드")
    parent_id: Optional[int] = Field(default=None, foreign_key="locations.id", description="상위 위치 ID (FK)")
    location_type: str = Field(default="site", max_length=30, description="위치 유형 (site, building, floor, room 등)")
    full_path: str = Field(default="", max_length=500, description="루트부터의 전체 경로")
    description: Optional[str] = Field(default=None, description="설명")


class Location(LocationBase, AuditMixin, table=True):
    """
    locations 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "locations"
    __table_args__ = (
        active_unique_index("ux_locations_code", "code"),
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="위치 고유 ID")

    # 자기 참조 관계: 상위 위치
    parent: Optional["Location"] = Relationship(
        sa_relationship_kwargs={"remote_side": "Location.id"}
    )


def build_full_path(name: str, parent: Optional[Location]) -> str:
    if parent is None or not parent.full_path:
        return name
    return f"{parent.full_path}{PATH_SEPARATOR}{name}"
