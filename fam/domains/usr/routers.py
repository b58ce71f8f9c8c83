# fam/domains/usr/routers.py

"""
'usr' 도메인 (사용자 및 역할)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import Optional, Union
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core import dependencies as deps
from fam.core.exceptions import QueryError
from fam.core.querying.handler import PagedQueryHandler, parse_includes
from fam.core.querying.schemas import Page, QueryRequest, SelectedItem

from . import crud as usr_crud
from . import schemas as usr_schemas

router = APIRouter(
    tags=["User & Role Management (사용자 및 역할 관리)"],
    responses={404: {"description": "Not found"}},
)

role_query = PagedQueryHandler[usr_schemas.RoleRead](usr_crud.role)
user_query = PagedQueryHandler[usr_schemas.UserRead](usr_crud.user)


# =============================================================================
# 1. 역할 (Role) API
# =============================================================================
@router.post(
    "/roles",
    response_model=usr_schemas.RoleRead,
    status_code=status.HTTP_201_CREATED,
    summary="새 역할 생성",
)
async def create_role(
    role_in: usr_schemas.RoleCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 역할을 생성합니다.
    - **code**: 역할 코드 (필수, 삭제되지 않은 역할 중 고유)
    """
    if await usr_crud.role.get_by_code(db, code=role_in.code):
        raise HTTPException(status_code=400, detail="Role with this code already exists")
    db_role = await usr_crud.role.create(db, obj_in=role_in)
    return usr_crud.role.to_domain(db_role)


@router.get(
    "/roles",
    response_model=Page[Union[usr_schemas.RoleRead, SelectedItem]],
    summary="역할 목록 조회 (필터/정렬/페이지)",
)
async def read_roles(
    query: QueryRequest = Depends(deps.get_query_request),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    역할 목록을 조회합니다. 기본 정렬은 rank 오름차순입니다.
    """
    try:
        return await role_query.handle(db, query)
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/roles/{role_id}", response_model=usr_schemas.RoleRead, summary="특정 역할 조회")
async def read_role(role_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_role = await usr_crud.role.get_domain(db, role_id)
    if db_role is None:
        raise HTTPException(status_code=404, detail="Role not found")
    return db_role


@router.put("/roles/{role_id}", response_model=usr_schemas.RoleRead, summary="역할 정보 수정")
async def update_role(
    role_id: int,
    role_in: usr_schemas.RoleUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_role = await usr_crud.role.get(db, role_id)
    if db_role is None:
        raise HTTPException(status_code=404, detail="Role not found")
    db_role = await usr_crud.role.update(db, db_obj=db_role, obj_in=role_in)
    return usr_crud.role.to_domain(db_role)


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="역할 삭제")
async def delete_role(role_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """
    역할을 소프트 삭제합니다. 시스템 역할은 삭제할 수 없습니다.
    """
    db_role = await usr_crud.role.get(db, role_id)
    if db_role is None:
        raise HTTPException(status_code=404, detail="Role not found")
    if db_role.is_system_role:
        raise HTTPException(status_code=400, detail="System roles cannot be deleted")
    await usr_crud.role.delete(db, id=role_id)


# =============================================================================
# 2. 사용자 (User) API
# =============================================================================
@router.post(
    "/users",
    response_model=usr_schemas.UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="새 사용자 생성",
)
async def create_user(
    user_in: usr_schemas.UserCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    if await usr_crud.user.get_by_username(db, username=user_in.username):
        raise HTTPException(status_code=400, detail="Username already registered")
    if await usr_crud.user.get_by_email(db, email=user_in.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    if user_in.role_id is not None and await usr_crud.role.get(db, user_in.role_id) is None:
        raise HTTPException(status_code=404, detail="Role not found")
    db_user = await usr_crud.user.create(db, obj_in=user_in)
    return usr_crud.user.to_domain(db_user)


@router.get(
    "/users",
    response_model=Page[Union[usr_schemas.UserRead, SelectedItem]],
    summary="사용자 목록 조회 (필터/정렬/페이지)",
)
async def read_users(
    query: QueryRequest = Depends(deps.get_query_request),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    사용자 목록을 조회합니다. 기본 정렬은 생성일 내림차순이며, include=role 로 역할을 함께 받습니다.
    """
    try:
        return await user_query.handle(db, query)
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/users/{user_id}", response_model=usr_schemas.UserRead, summary="특정 사용자 조회")
async def read_user(
    user_id: int,
    include: Optional[str] = Query(None, description="즉시 로딩할 관계 (role)"),
    db: AsyncSession = Depends(deps.get_db_session),
):
    try:
        db_user = await usr_crud.user.get_domain(db, user_id, includes=parse_includes(include))
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


@router.put("/users/{user_id}", response_model=usr_schemas.UserRead, summary="사용자 정보 수정")
async def update_user(
    user_id: int,
    user_in: usr_schemas.UserUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_user = await usr_crud.user.get(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if user_in.email and user_in.email != db_user.email:
        if await usr_crud.user.get_by_email(db, email=user_in.email):
            raise HTTPException(status_code=400, detail="Email already registered")
    db_user = await usr_crud.user.update(db, db_obj=db_user, obj_in=user_in)
    return usr_crud.user.to_domain(db_user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="사용자 삭제")
async def delete_user(user_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_user = await usr_crud.user.get(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    await usr_crud.user.delete(db, id=user_id)
