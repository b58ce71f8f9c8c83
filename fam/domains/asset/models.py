# fam/domains/asset/models.py

"""
'asset' 도메인 (고정자산)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

자산은 공급업체, 제조사, 위치, 담당자(사용자)를 참조합니다.
관계는 자산 쪽에서만 정의하며 (역방향 컬렉션 없음), include 힌트로 즉시 로딩합니다.
"""

from typing import Optional
from datetime import date
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Relationship, SQLModel

from fam.domains.shared.models import AuditMixin, active_unique_index
from fam.domains.loc.models import Location
from fam.domains.usr.models import User
from fam.domains.ven.models import Manufacturer, Supplier


class AssetStatus(str, Enum):
    """자산 수명주기 상태"""
    DRAFT = "draft"
    IN_SERVICE = "in_service"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"
    DISPOSED = "disposed"


# =============================================================================
# 1. assets 테이블 모델
# =============================================================================
class AssetBase(SQLModel):
    """
    assets 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=200, description="자산명")
    asset_tag: str = Field(max_length=50, description="자산 태그 (관리 번호)")
    serial_no: Optional[str] = Field(default=None, max_length=100, description="제조 일련번호")
    status: AssetStatus = Field(default=AssetStatus.DRAFT, description="수명주기 상태")
    purchase_date: Optional[date] = Field(default=None, description="취득일")
    purchase_cost: Optional[Decimal] = Field(default=None, max_digits=18, decimal_places=2, description="취득가액")
    warranty_until: Optional[date] = Field(default=None, description="보증 만료일")
    supplier_id: Optional[int] = Field(default=None, foreign_key="suppliers.id")
    manufacturer_id: Optional[int] = Field(default=None, foreign_key="manufacturers.id")
    location_id: Optional[int] = Field(default=None, foreign_key="locations.id")
    owner_id: Optional[int] = Field(default=None, foreign_key="users.id", description="담당자 사용자 ID")
    description: Optional[str] = Field(default=None)


class Asset(AssetBase, AuditMixin, table=True):
    """
    assets 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "assets"
    __table_args__ = (
        active_unique_index("ux_assets_asset_tag", "asset_tag"),
        active_unique_index("ux_assets_serial_no", "serial_no"),
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="자산 고유 ID")

    supplier: Optional[Supplier] = Relationship()
    manufacturer: Optional[Manufacturer] = Relationship()
    location: Optional[Location] = Relationship()
    owner: Optional[User] = Relationship()
