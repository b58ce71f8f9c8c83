# fam/domains/asset/crud.py

"""
'asset' 도메인 (고정자산)의 CRUD 및 페이지 조회를 담당하는 모듈입니다.
"""

from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.crud_base import PagedCRUDBase
from fam.core.querying.field_map import FieldMap
from fam.domains.asset import models as asset_models
from fam.domains.asset import schemas as asset_schemas

asset_field_map = FieldMap(
    asset_schemas.AssetRead,
    asset_models.Asset,
    not_sortable=("description",),
    includes=("supplier", "manufacturer", "location", "owner"),
    default_sort="-created_at",
)


class CRUDAsset(PagedCRUDBase[asset_models.Asset, asset_schemas.AssetCreate, asset_schemas.AssetUpdate]):
    def __init__(self):
        super().__init__(model=asset_models.Asset, field_map=asset_field_map)

    async def get_by_asset_tag(self, db: AsyncSession, *, asset_tag: str) -> Optional[asset_models.Asset]:
        return await self.get_by_attribute(db, attribute="asset_tag", value=asset_tag)

    async def get_by_serial_no(self, db: AsyncSession, *, serial_no: str) -> Optional[asset_models.Asset]:
        return await self.get_by_attribute(db, attribute="serial_no", value=serial_no)


asset = CRUDAsset()
