# fam/domains/ven/schemas.py

"""
'ven' 도메인 (공급업체 및 제조사)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
응답 스키마는 다른 도메인과의 일관성을 위해 '...Read' 패턴을 사용합니다.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import EmailStr


# =============================================================================
# 1. 공급업체 (Supplier) 스키마
# =============================================================================
class SupplierBase(SQLModel):
    name: str = Field(..., max_length=200)
    supplier_code: str = Field(..., max_length=50)
    tax_code: Optional[str] = Field(None, max_length=50)
    supplier_type: str = Field("distributor", max_length=30)
    contact_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    website: Optional[str] = Field(None, max_length=255)
    is_preferred: bool = False
    is_active: bool = True
    notes: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=200)
    tax_code: Optional[str] = Field(None, max_length=50)
    supplier_type: Optional[str] = Field(None, max_length=30)
    contact_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    website: Optional[str] = Field(None, max_length=255)
    is_preferred: Optional[bool] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None


class SupplierRead(SupplierBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# 2. 제조사 (Manufacturer) 스키마
# =============================================================================
class ManufacturerBase(SQLModel):
    name: str = Field(..., max_length=200)
    short_name: Optional[str] = Field(None, max_length=50)
    brand_name: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    country_code: Optional[str] = Field(None, min_length=2, max_length=2)
    is_active: bool = True
    description: Optional[str] = None


class ManufacturerCreate(ManufacturerBase):
    pass


class ManufacturerUpdate(SQLModel):
    name: Optional[str] = Field(None, max_length=200)
    short_name: Optional[str] = Field(None, max_length=50)
    brand_name: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    country_code: Optional[str] = Field(None, min_length=2, max_length=2)
    is_active: Optional[bool] = None
    description: Optional[str] = None


class ManufacturerRead(ManufacturerBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
