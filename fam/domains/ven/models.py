# fam/domains/ven/models.py

"""
'ven' 도메인 (공급업체 및 제조사)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 suppliers, manufacturers 테이블에 대한 SQLModel 클래스를 포함합니다.
"""

from typing import Optional
from sqlmodel import Field, SQLModel

from fam.domains.shared.models import AuditMixin, active_unique_index


# =============================================================================
# 1. suppliers 테이블 모델
# =============================================================================
class SupplierBase(SQLModel):
    """
    suppliers 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=200, description="공급업체명")
    supplier_code: str = Field(max_length=50, description="공급업체 코드")
    tax_code: Optional[str] = Field(default=None, max_length=50, description="사업자등록번호")
    supplier_type: str = Field(default="distributor", max_length=30, description="유형 (manufacturer, distributor, service, other)")
    contact_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=255)
    website: Optional[str] = Field(default=None, max_length=255)
    is_preferred: bool = Field(default=False, description="우선 거래처 여부")
    is_active: bool = Field(default=True, description="거래 활성 상태")
    notes: Optional[str] = Field(default=None)


class Supplier(SupplierBase, AuditMixin, table=True):
    """
    suppliers 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "suppliers"
    __table_args__ = (
        active_unique_index("ux_suppliers_supplier_code", "supplier_code"),
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="공급업체 고유 ID")


# =============================================================================
# 2. manufacturers 테이블 모델
# =============================================================================
class ManufacturerBase(SQLModel):
    """
    manufacturers 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=200, description="제조사명")
    short_name: Optional[str] = Field(default=None, max_length=50)
    brand_name: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = Field(default=None, max_length=255)
    country_code: Optional[str] = Field(default=None, max_length=2, description="ISO 3166-1 alpha-2 국가 코드")
    is_active: bool = Field(default=True)
    description: Optional[str] = Field(default=None)


class Manufacturer(ManufacturerBase, AuditMixin, table=True):
    """
    manufacturers 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "manufacturers"
    __table_args__ = (
        active_unique_index("ux_manufacturers_name", "name"),
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="제조사 고유 ID")
