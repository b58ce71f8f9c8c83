# fam/domains/loc/routers.py

"""
'loc' 도메인 (위치 관리)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import Optional, Union
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core import dependencies as deps
from fam.core.exceptions import QueryError
from fam.core.querying.handler import PagedQueryHandler, parse_includes
from fam.core.querying.schemas import Page, QueryRequest, SelectedItem

from . import crud as loc_crud
from . import schemas as loc_schemas

router = APIRouter(
    tags=["Location Management (위치 관리)"],
    responses={404: {"description": "Not found"}},
)

location_query = PagedQueryHandler[loc_schemas.LocationRead](loc_crud.location)


@router.post(
    "/locations",
    response_model=loc_schemas.LocationRead,
    status_code=status.HTTP_201_CREATED,
    summary="새 위치 생성",
)
async def create_location(
    location_in: loc_schemas.LocationCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 위치를 생성합니다. full_path 는 상위 위치의 경로로부터 계산됩니다.
    """
    if await loc_crud.location.get_by_code(db, code=location_in.code):
        raise HTTPException(status_code=400, detail="Location with this code already exists")
    if location_in.parent_id is not None and await loc_crud.location.get(db, location_in.parent_id) is None:
        raise HTTPException(status_code=404, detail="Parent location not found")
    db_location = await loc_crud.location.create(db, obj_in=location_in)
    return loc_crud.location.to_domain(db_location)


@router.get(
    "/locations",
    response_model=Page[Union[loc_schemas.LocationRead, SelectedItem]],
    summary="위치 목록 조회 (필터/정렬/페이지)",
)
async def read_locations(
    query: QueryRequest = Depends(deps.get_query_request),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    위치 목록을 조회합니다. 기본 정렬은 full_path (계층 순서) 입니다.
    """
    try:
        return await location_query.handle(db, query)
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/locations/{location_id}", response_model=loc_schemas.LocationRead, summary="특정 위치 조회")
async def read_location(
    location_id: int,
    include: Optional[str] = Query(None, description="즉시 로딩할 관계 (parent)"),
    db: AsyncSession = Depends(deps.get_db_session),
):
    try:
        db_location = await loc_crud.location.get_domain(db, location_id, includes=parse_includes(include))
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return db_location


@router.put("/locations/{location_id}", response_model=loc_schemas.LocationRead, summary="위치 정보 수정")
async def update_location(
    location_id: int,
    location_in: loc_schemas.LocationUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_location = await loc_crud.location.get(db, location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    db_location = await loc_crud.location.update(db, db_obj=db_location, obj_in=location_in)
    return loc_crud.location.to_domain(db_location)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT, summary="위치 삭제")
async def delete_location(location_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """
    위치를 소프트 삭제합니다. 하위 위치가 남아 있으면 삭제할 수 없습니다.
    """
    db_location = await loc_crud.location.get(db, location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    if await loc_crud.location.get_by_attribute(db, attribute="parent_id", value=location_id):
        raise HTTPException(status_code=400, detail="Cannot delete location that has child locations")
    await loc_crud.location.delete(db, id=location_id)
