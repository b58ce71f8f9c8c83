# fam/domains/usr/crud.py

"""
'usr' 도메인 (사용자 및 역할)의 CRUD 및 페이지 조회를 담당하는 모듈입니다.
"""

from typing import Any, Dict, Optional, Union

from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.crud_base import PagedCRUDBase
from fam.core.querying.field_map import FieldMap
from fam.core.security import get_password_hash
from fam.domains.usr import models as usr_models
from fam.domains.usr import schemas as usr_schemas


# =============================================================================
# 도메인 ↔ 저장소 필드 매핑 (모듈 임포트 시 검증)
# =============================================================================
role_field_map = FieldMap(
    usr_schemas.RoleRead,
    usr_models.Role,
    not_sortable=("description",),
    default_sort="rank",
)

user_field_map = FieldMap(
    usr_schemas.UserRead,
    usr_models.User,
    includes=("role",),
    default_sort="-created_at",
)


# =============================================================================
# 1. roles 테이블 CRUD
# =============================================================================
class CRUDRole(PagedCRUDBase[usr_models.Role, usr_schemas.RoleCreate, usr_schemas.RoleUpdate]):
    def __init__(self):
        super().__init__(model=usr_models.Role, field_map=role_field_map)

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[usr_models.Role]:
        return await self.get_by_attribute(db, attribute="code", value=code)


# =============================================================================
# 2. users 테이블 CRUD
# =============================================================================
class CRUDUser(PagedCRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserUpdate]):
    def __init__(self):
        super().__init__(model=usr_models.User, field_map=user_field_map)

    async def get_by_username(self, db: AsyncSession, *, username: str) -> Optional[usr_models.User]:
        return await self.get_by_attribute(db, attribute="username", value=username)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        return await self.get_by_attribute(db, attribute="email", value=email)

    async def create(self, db: AsyncSession, *, obj_in: usr_schemas.UserCreate, **values: Any) -> usr_models.User:
        """비밀번호를 해싱하여 사용자를 생성합니다."""
        return await super().create(db, obj_in=obj_in, password_hash=get_password_hash(obj_in.password), **values)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: usr_models.User,
        obj_in: Union[usr_schemas.UserUpdate, Dict[str, Any]],
        **values: Any,
    ) -> usr_models.User:
        update_data = dict(obj_in) if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)
        if password:
            update_data["password_hash"] = get_password_hash(password)
        return await super().update(db, db_obj=db_obj, obj_in=update_data, **values)


role = CRUDRole()
user = CRUDUser()
