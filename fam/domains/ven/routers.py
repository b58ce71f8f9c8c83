# fam/domains/ven/routers.py

"""
'ven' 도메인 (공급업체 및 제조사)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import Union

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core import dependencies as deps
from fam.core.exceptions import QueryError
from fam.core.querying.handler import PagedQueryHandler
from fam.core.querying.schemas import Page, QueryRequest, SelectedItem

from . import crud as ven_crud
from . import schemas as ven_schemas

router = APIRouter(
    tags=["Vendor Management (공급업체 및 제조사 관리)"],
    responses={404: {"description": "Not found"}},
)

supplier_query = PagedQueryHandler[ven_schemas.SupplierRead](ven_crud.supplier)
manufacturer_query = PagedQueryHandler[ven_schemas.ManufacturerRead](ven_crud.manufacturer)


# =============================================================================
# 1. 공급업체 (Supplier) API
# =============================================================================
@router.post(
    "/suppliers",
    response_model=ven_schemas.SupplierRead,
    status_code=status.HTTP_201_CREATED,
    summary="새 공급업체 생성",
)
async def create_supplier(
    supplier_in: ven_schemas.SupplierCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    새로운 공급업체를 생성합니다.
    - **supplier_code**: 공급업체 코드 (필수, 삭제되지 않은 공급업체 중 고유)
    """
    if await ven_crud.supplier.get_by_code(db, supplier_code=supplier_in.supplier_code):
        raise HTTPException(status_code=400, detail="Supplier with this code already exists")
    db_supplier = await ven_crud.supplier.create(db, obj_in=supplier_in)
    return ven_crud.supplier.to_domain(db_supplier)


@router.get(
    "/suppliers",
    response_model=Page[Union[ven_schemas.SupplierRead, SelectedItem]],
    summary="공급업체 목록 조회 (필터/정렬/페이지)",
)
async def read_suppliers(
    query: QueryRequest = Depends(deps.get_query_request),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    공급업체 목록을 조회합니다.
    - **filter**: 예) `isActive == true and name @contains('acme')`
    - **sort**: 예) `-isPreferred,name` (기본: 생성일 내림차순)
    """
    try:
        return await supplier_query.handle(db, query)
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/suppliers/{supplier_id}", response_model=ven_schemas.SupplierRead, summary="특정 공급업체 조회")
async def read_supplier(supplier_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_supplier = await ven_crud.supplier.get_domain(db, supplier_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return db_supplier


@router.put("/suppliers/{supplier_id}", response_model=ven_schemas.SupplierRead, summary="공급업체 정보 수정")
async def update_supplier(
    supplier_id: int,
    supplier_in: ven_schemas.SupplierUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_supplier = await ven_crud.supplier.get(db, supplier_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    db_supplier = await ven_crud.supplier.update(db, db_obj=db_supplier, obj_in=supplier_in)
    return ven_crud.supplier.to_domain(db_supplier)


@router.delete("/suppliers/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT, summary="공급업체 삭제")
async def delete_supplier(supplier_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """
    공급업체를 소프트 삭제합니다. 같은 코드로 새 공급업체를 다시 등록할 수 있습니다.
    """
    db_supplier = await ven_crud.supplier.delete(db, id=supplier_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")


# =============================================================================
# 2. 제조사 (Manufacturer) API
# =============================================================================
@router.post(
    "/manufacturers",
    response_model=ven_schemas.ManufacturerRead,
    status_code=status.HTTP_201_CREATED,
    summary="새 제조사 생성",
)
async def create_manufacturer(
    manufacturer_in: ven_schemas.ManufacturerCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    if await ven_crud.manufacturer.get_by_name(db, name=manufacturer_in.name):
        raise HTTPException(status_code=400, detail="Manufacturer with this name already exists")
    db_manufacturer = await ven_crud.manufacturer.create(db, obj_in=manufacturer_in)
    return ven_crud.manufacturer.to_domain(db_manufacturer)


@router.get(
    "/manufacturers",
    response_model=Page[Union[ven_schemas.ManufacturerRead, SelectedItem]],
    summary="제조사 목록 조회 (필터/정렬/페이지)",
)
async def read_manufacturers(
    query: QueryRequest = Depends(deps.get_query_request),
    db: AsyncSession = Depends(deps.get_db_session),
):
    try:
        return await manufacturer_query.handle(db, query)
    except QueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get(
    "/manufacturers/{manufacturer_id}",
    response_model=ven_schemas.ManufacturerRead,
    summary="특정 제조사 조회",
)
async def read_manufacturer(manufacturer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_manufacturer = await ven_crud.manufacturer.get_domain(db, manufacturer_id)
    if db_manufacturer is None:
        raise HTTPException(status_code=404, detail="Manufacturer not found")
    return db_manufacturer


@router.put(
    "/manufacturers/{manufacturer_id}",
    response_model=ven_schemas.ManufacturerRead,
    summary="제조사 정보 수정",
)
async def update_manufacturer(
    manufacturer_id: int,
    manufacturer_in: ven_schemas.ManufacturerUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_manufacturer = await ven_crud.manufacturer.get(db, manufacturer_id)
    if db_manufacturer is None:
        raise HTTPException(status_code=404, detail="Manufacturer not found")
    if manufacturer_in.name and manufacturer_in.name != db_manufacturer.name:
        if await ven_crud.manufacturer.get_by_name(db, name=manufacturer_in.name):
            raise HTTPException(status_code=400, detail="Manufacturer with this name already exists")
    db_manufacturer = await ven_crud.manufacturer.update(db, db_obj=db_manufacturer, obj_in=manufacturer_in)
    return ven_crud.manufacturer.to_domain(db_manufacturer)


@router.delete(
    "/manufacturers/{manufacturer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="제조사 삭제",
)
async def delete_manufacturer(manufacturer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_manufacturer = await ven_crud.manufacturer.delete(db, id=manufacturer_id)
    if db_manufacturer is None:
        raise HTTPException(status_code=404, detail="Manufacturer not found")
