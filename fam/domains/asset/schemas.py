# fam/domains/asset/schemas.py

"""
'asset' 도메인 (고정자산)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from sqlmodel import SQLModel, Field

from fam.domains.asset.models import AssetStatus
from fam.domains.loc.schemas import LocationSummary
from fam.domains.usr.schemas import UserSummary
from fam.domains.ven.schemas import ManufacturerRead, SupplierRead


class AssetBase(SQLModel):
    name: str = Field(..., max_length=200)
    asset_tag: str = Field(..., max_length=50)
    serial_no: Optional[str] = Field(None, max_length=100)
    status: AssetStatus = AssetStatus.DRAFT
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    warranty_until: Optional[date] = None
    supplier_id: Optional[int] = None
    manufacturer_id: Optional[int] = None
    location_id: Optional[int] = None
    owner_id: Optional[int] = None
    description: Optional[str] = None


class AssetCreate(AssetBase):
    pass


class AssetUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=200)
    serial_no: Optional[str] = Field(None, max_length=100)
    status: Optional[AssetStatus] = None
    purchase_date: Optional[date] = None
    purchase_cost: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    warranty_until: Optional[date] = None
    supplier_id: Optional[int] = None
    manufacturer_id: Optional[int] = None
    location_id: Optional[int] = None
    owner_id: Optional[int] = None
    description: Optional[str] = None


class AssetRead(AssetBase):
    id: int
    created_at: datetime
    updated_at: datetime

    # include 힌트로 즉시 로딩된 경우에만 채워지는 관계
    supplier: Optional[SupplierRead] = None
    manufacturer: Optional[ManufacturerRead] = None
    location: Optional[LocationSummary] = None
    owner: Optional[UserSummary] = None

    class Config:
        from_attributes = True
