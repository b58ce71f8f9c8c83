# fam/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업과 페이지 조회를 위한 기본 클래스 모듈입니다.
모든 메서드는 비동기(async) 환경에 맞게 작성되었습니다.

- CRUDBase: 단건 조회/생성/수정/삭제. AuditMixin(is_deleted) 모델은 소프트 삭제합니다.
- PagedCRUDBase: FieldMap 기반의 필터/정렬/페이지 조회(paged_query)와 도메인 엔티티 변환.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.orm import selectinload
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.mapping import EntityMapper
from fam.core.querying.expressions import Predicate
from fam.core.querying.field_map import FieldMap
from fam.core.querying.paging import PageResult, paged_query

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    @property
    def soft_delete(self) -> bool:
        return hasattr(self.model, "is_deleted")

    def base_criteria(self) -> List[Any]:
        """모든 조회에 적용되는 저장소 측 조건 (소프트 삭제된 행 제외)."""
        if self.soft_delete:
            return [self.model.is_deleted.is_(False)]
        return []

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 단일 레코드를 조회합니다. 소프트 삭제된 레코드는 None 입니다.
        """
        db_obj = await db.get(self.model, id)
        if db_obj is not None and self.soft_delete and db_obj.is_deleted:
            return None
        return db_obj

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value, *self.base_criteria())
        response = await db.execute(statement)
        return response.scalars().first()

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType, **values: Any) -> ModelType:
        """
        새로운 레코드를 생성합니다. ``values`` 는 DTO 에 없는 저장소 전용 값입니다. (예: password_hash)
        """
        db_obj = self.model.model_validate(obj_in, update=values)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]], **values: Any
    ) -> ModelType:
        """
        기존 레코드를 업데이트합니다. 요청에 포함된 필드만 반영합니다.
        """
        update_data = dict(obj_in) if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        update_data.update(values)
        for key, value in update_data.items():
            setattr(db_obj, key, value)
        if hasattr(db_obj, "updated_at"):
            db_obj.updated_at = datetime.now(UTC)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any, deleted_by_id: Optional[int] = None) -> Optional[ModelType]:
        """
        ID를 기준으로 레코드를 삭제합니다. AuditMixin 모델은 is_deleted 플래그만 세웁니다.
        """
        db_obj = await self.get(db, id)
        if db_obj is None:
            return None
        if self.soft_delete:
            db_obj.is_deleted = True
            db_obj.deleted_at = datetime.now(UTC)
            db_obj.deleted_by_id = deleted_by_id
            db.add(db_obj)
        else:
            await db.delete(db_obj)
        await db.commit()
        logger.info("Deleted %s id=%s (soft=%s)", self.model.__name__, id, self.soft_delete)
        return db_obj


class PagedCRUDBase(CRUDBase[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    FieldMap 으로 도메인 엔티티와 연결된 저장소.
    목록 조회는 항상 paged_query 를 통해 DB 에서 필터/정렬/페이지 처리합니다.
    """
    def __init__(self, model: Type[ModelType], field_map: FieldMap):
        if field_map.model is not model:
            raise ValueError(f"{field_map!r} does not map {model.__name__}")
        super().__init__(model)
        self.field_map = field_map
        self.mapper = EntityMapper(field_map.domain, model, rename=field_map.storage_renames)

    def to_domain(self, db_obj: ModelType) -> Any:
        return self.mapper.to_domain(db_obj)

    async def paged_query(
        self,
        db: AsyncSession,
        *,
        filter: Optional[Predicate] = None,
        sort: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
        includes: Optional[Iterable[str]] = None,
    ) -> PageResult:
        return await paged_query(
            db,
            self.field_map,
            filter=filter,
            sort=sort,
            page=page,
            page_size=page_size,
            includes=includes,
            mapper=self.mapper,
            criteria=self.base_criteria(),
        )

    async def get_domain(
        self, db: AsyncSession, id: Any, *, includes: Optional[Iterable[str]] = None
    ) -> Optional[Any]:
        """ID 로 조회한 레코드를 (include 관계와 함께) 도메인 엔티티로 반환합니다."""
        relationships = self.field_map.resolve_includes(includes)
        loaders = [selectinload(getattr(self.model, key)) for key in relationships]
        statement = select(self.model).where(self.field_map.primary_key == id, *self.base_criteria())
        if loaders:
            statement = statement.options(*loaders).execution_options(populate_existing=True)
        result = await db.execute(statement)
        db_obj = result.scalars().first()
        if db_obj is None:
            return None
        return self.mapper.to_domain(db_obj, relationships)
