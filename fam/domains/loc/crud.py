# fam/domains/loc/crud.py

"""
'loc' 도메인 (위치 관리)의 CRUD 및 페이지 조회를 담당하는 모듈입니다.
생성/이름 변경 시 full_path 를 계산하고, 하위 위치들의 경로도 함께 갱신합니다.
"""

import logging
from typing import Any, Dict, Optional, Union

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.crud_base import PagedCRUDBase
from fam.core.querying.field_map import FieldMap
from fam.domains.loc import models as loc_models
from fam.domains.loc import schemas as loc_schemas

logger = logging.getLogger(__name__)

location_field_map = FieldMap(
    loc_schemas.LocationRead,
    loc_models.Location,
    not_sortable=("description",),
    includes=("parent",),
    default_sort="full_path",
)


class CRUDLocation(PagedCRUDBase[loc_models.Location, loc_schemas.LocationCreate, loc_schemas.LocationUpdate]):
    def __init__(self):
        super().__init__(model=loc_models.Location, field_map=location_field_map)

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[loc_models.Location]:
        return await self.get_by_attribute(db, attribute="code", value=code)

    async def create(self, db: AsyncSession, *, obj_in: loc_schemas.LocationCreate, **values: Any) -> loc_models.Location:
        parent = await self.get(db, obj_in.parent_id) if obj_in.parent_id is not None else None
        values.setdefault("full_path", loc_models.build_full_path(obj_in.name, parent))
        return await super().create(db, obj_in=obj_in, **values)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: loc_models.Location,
        obj_in: Union[loc_schemas.LocationUpdate, Dict[str, Any]],
        **values: Any,
    ) -> loc_models.Location:
        """위치 정보를 업데이트합니다. 이름이 바뀌면 자신과 하위 위치의 full_path 를 다시 계산합니다."""
        update_data = dict(obj_in) if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        new_name = update_data.get("name")
        if new_name and new_name != db_obj.name:
            parent = await self.get(db, db_obj.parent_id) if db_obj.parent_id is not None else None
            new_path = loc_models.build_full_path(new_name, parent)
            update_data["full_path"] = new_path
            await self._move_descendants(db, db_obj, new_path)
        return await super().update(db, db_obj=db_obj, obj_in=update_data, **values)

    async def _move_descendants(self, db: AsyncSession, db_obj: loc_models.Location, new_path: str) -> None:
        # 경로 접두사가 아닌 parent_id 로 하위 위치를 찾습니다. (같은 이름의 형제 위치가 있을 수 있음)
        paths = {db_obj.id: new_path}
        frontier = [db_obj.id]
        moved = 0
        while frontier:
            statement = select(loc_models.Location).where(
                loc_models.Location.parent_id.in_(frontier),
                *self.base_criteria(),
            )
            result = await db.execute(statement)
            frontier = []
            for child in result.scalars().all():
                if child.id in paths:
                    continue
                child.full_path = f"{paths[child.parent_id]}{loc_models.PATH_SEPARATOR}{child.name}"
                paths[child.id] = child.full_path
                frontier.append(child.id)
                db.add(child)
                moved += 1
        if moved:
            logger.info("Re-pathed %d descendant locations of location id=%s", moved, db_obj.id)


location = CRUDLocation()
