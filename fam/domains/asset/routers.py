# fam/domains/asset/routers.py

"""
'asset' 도메인 (고정자산)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import Optional, Union
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core import dependencies as deps
from fam.core.exceptions import QueryError
from fam.core.querying.handler import PagedQueryHandler, parse_includes
from fam.core.querying.schemas import Page, QueryRequest, SelectedItem
from fam.domains.loc import crud as loc_crud
from fam.domains.usr import crud as usr_crud
from fam.domains.ven import crud as ven_crud

from . import crud as asset_crud
from . import schemas as asset_schemas

router = APIRouter(
    tags=["Asset Management (자산 관리)"],
    responses={404: {"description": "Not found"}},
)

asset_query = PagedQueryHandler[asset_schemas.AssetRead](asset_crud.asset)


async def _check_references(db: AsyncSession, asset_in) -> None:
    """자산이 참조하는 공급업체/제조사/위치/담당자가 (삭제되지 않은 채로) 존재하는지 확인합니다."""
    references = (
        ("supplier_id", ven_crud.supplier, "Supplier not found"),
        ("manufacturer_id", ven_crud.manufacturer, "Manufacturer not found"),
        ("location_id", loc_crud.location, "Location not found"),
        ("owner_id", usr_crud.user, "Owner not found"),
    )
    for attribute, repository, detail in references:
        value = getattr(asset_in, attribute, None)
        if value is not None and await repository.get(db, value) is None:
            raise HTTPException(status_code=404, detail=detail)


@router.post(
    "/assets",
    response_model=asset_schemas.AssetRead,
    status_code=status.HTTP_201_CREATED,
    summary="새 자산 등록",
)
async def create_asset(
    asset_in: asset_schemas.AssetCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 자산을 등록합니다.
    - **asset_tag**: 자산 태그 (필수, 삭제되지 않은 자산 중 고유)
    - **serial_no**: 제조 일련번호 (선택, 고유)
    """
    if await asset_crud.asset.get_by_asset_tag(db, asset_tag=asset_in.asset_tag):
        raise HTTPException(status_code=400, detail="Asset with this tag already exists")
    if asset_in.serial_no and await asset_crud.asset.get_by_serial_no(db, serial_no=asset_in.serial_no):
        raise HTTPException(status_code=400, detail="Asset with this serial number already exists")
    await _check_references(db, asset_in)
    db_asset = await asset_crud.asset.create(db, obj_in=asset_in)
    return asset_crud.asset.to_domain(db_asset)


@router.get(
    "/assets",
    response_model=Page[Union[asset_schemas.AssetRead, SelectedItem]],
    summary="자산 목록 조회 (필터/정렬/페이지)",
)
async def read_assets(
    query: QueryRequest = Depends(deps.get_query_request),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    자산 목록을 조회합니다.
    - **filter**: 예) `status == 'in_service' and purchaseCost >= 1000`
    - **include**: supplier, manufacturer, location, owner
    """
    try:
        return await asset_query.handle(db, query)
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/assets/{asset_id}", response_model=asset_schemas.AssetRead, summary="특정 자산 조회")
async def read_asset(
    asset_id: int,
    include: Optional[str] = Query(None, description="즉시 로딩할 관계 (supplier, manufacturer, location, owner)"),
    db: AsyncSession = Depends(deps.get_db_session),
):
    try:
        db_asset = await asset_crud.asset.get_domain(db, asset_id, includes=parse_includes(include))
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if db_asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return db_asset


@router.put("/assets/{asset_id}", response_model=asset_schemas.AssetRead, summary="자산 정보 수정")
async def update_asset(
    asset_id: int,
    asset_in: asset_schemas.AssetUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_asset = await asset_crud.asset.get(db, asset_id)
    if db_asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    if asset_in.serial_no and asset_in.serial_no != db_asset.serial_no:
        if await asset_crud.asset.get_by_serial_no(db, serial_no=asset_in.serial_no):
            raise HTTPException(status_code=400, detail="Asset with this serial number already exists")
    await _check_references(db, asset_in)
    db_asset = await asset_crud.asset.update(db, db_obj=db_asset, obj_in=asset_in)
    return asset_crud.asset.to_domain(db_asset)


@router.delete("/assets/{asset_id}", status_code=status.HTTP_204_NO_CONTENT, summary="자산 삭제")
async def delete_asset(asset_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """
    자산을 소프트 삭제합니다. 같은 자산 태그로 다시 등록할 수 있습니다.
    """
    db_asset = await asset_crud.asset.delete(db, id=asset_id)
    if db_asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")
