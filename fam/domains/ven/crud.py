# fam/domains/ven/crud.py

"""
'ven' 도메인 (공급업체 및 제조사)의 CRUD 및 페이지 조회를 담당하는 모듈입니다.
"""

from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.crud_base import PagedCRUDBase
from fam.core.querying.field_map import FieldMap
from fam.domains.ven import models as ven_models
from fam.domains.ven import schemas as ven_schemas

supplier_field_map = FieldMap(
    ven_schemas.SupplierRead,
    ven_models.Supplier,
    not_sortable=("notes", "address"),
    default_sort="-created_at",
)

manufacturer_field_map = FieldMap(
    ven_schemas.ManufacturerRead,
    ven_models.Manufacturer,
    not_sortable=("description",),
    default_sort="name",
)


# =============================================================================
# 1. suppliers 테이블 CRUD
# =============================================================================
class CRUDSupplier(PagedCRUDBase[ven_models.Supplier, ven_schemas.SupplierCreate, ven_schemas.SupplierUpdate]):
    def __init__(self):
        super().__init__(model=ven_models.Supplier, field_map=supplier_field_map)

    async def get_by_code(self, db: AsyncSession, *, supplier_code: str) -> Optional[ven_models.Supplier]:
        return await self.get_by_attribute(db, attribute="supplier_code", value=supplier_code)


# =============================================================================
# 2. manufacturers 테이블 CRUD
# =============================================================================
class CRUDManufacturer(PagedCRUDBase[ven_models.Manufacturer, ven_schemas.ManufacturerCreate, ven_schemas.ManufacturerUpdate]):
    def __init__(self):
        super().__init__(model=ven_models.Manufacturer, field_map=manufacturer_field_map)

    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[ven_models.Manufacturer]:
        return await self.get_by_attribute(db, attribute="name", value=name)


supplier = CRUDSupplier()
manufacturer = CRUDManufacturer()
