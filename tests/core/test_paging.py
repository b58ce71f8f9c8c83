# tests/core/test_paging.py

"""
페이지 조회 오케스트레이터(paged_query)와 PagedQueryHandler 에 대한 테스트입니다.
인메모리 DB 에 데이터를 넣고 필터/정렬/페이지 결과를 확인합니다.
"""

from decimal import Decimal
from typing import List
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.exceptions import (
    FieldSelectionError, IncludeNotAllowedError, PaginationError, QueryError, TranslationError,
)
from fam.core.querying.expressions import predicate
from fam.core.querying.handler import PagedQueryHandler, parse_includes
from fam.core.querying.paging import paged_query
from fam.core.querying.schemas import QueryRequest
from fam.domains.asset import crud as asset_crud
from fam.domains.asset import models as asset_models
from fam.domains.ven import crud as ven_crud
from fam.domains.ven import models as ven_models
from fam.domains.ven.schemas import ManufacturerRead, SupplierRead


@pytest_asyncio.fixture(scope="function")
async def items(db_session: AsyncSession) -> List[ven_models.Manufacturer]:
    """item-00 ~ item-24 이름의 제조사 25건"""
    manufacturers = [
        ven_models.Manufacturer(name=f"item-{i:02d}", is_active=(i % 2 == 0))
        for i in range(25)
    ]
    db_session.add_all(manufacturers)
    await db_session.commit()
    return manufacturers


def _names(result) -> List[str]:
    return [item.name for item in result.items]


@pytest.mark.asyncio
async def test_filter_sort_and_page_example(db_session: AsyncSession, items):
    """startswith 'item-1' 필터, -name 정렬, 1페이지(5건) → item-19 ~ item-15, 전체 10건"""
    print("\n--- Running test_filter_sort_and_page_example ---")
    result = await ven_crud.manufacturer.paged_query(
        db_session,
        filter=predicate(ManufacturerRead, lambda m: m.name.startswith("item-1")),
        sort="-name",
        page=1,
        page_size=5,
    )
    print(f"Result: {_names(result)} total={result.total}")

    assert _names(result) == ["item-19", "item-18", "item-17", "item-16", "item-15"]
    assert result.total == 10
    assert all(isinstance(item, ManufacturerRead) for item in result.items)


@pytest.mark.asyncio
async def test_total_counts_all_matches_independent_of_page(db_session: AsyncSession, items):
    active = predicate(ManufacturerRead, lambda m: m.is_active)
    seen = []
    for page in (1, 2, 3):
        result = await ven_crud.manufacturer.paged_query(db_session, filter=active, page=page, page_size=5)
        assert result.total == 13
        seen.extend(_names(result))

    assert len(seen) == 13
    assert len(set(seen)) == 13
    assert seen == sorted(seen)  # 기본 정렬: name 오름차순


@pytest.mark.asyncio
async def test_last_page_and_past_the_end(db_session: AsyncSession, items):
    last = await ven_crud.manufacturer.paged_query(db_session, page=3, page_size=10)
    assert len(last.items) == 5
    assert last.total == 25

    past = await ven_crud.manufacturer.paged_query(db_session, page=4, page_size=10)
    assert past.items == []
    assert past.total == 25


@pytest.mark.asyncio
async def test_same_query_is_idempotent(db_session: AsyncSession, items):
    kwargs = dict(filter=predicate(ManufacturerRead, lambda m: m.name.contains("-1")), sort="-name", page=2, page_size=3)
    first = await ven_crud.manufacturer.paged_query(db_session, **kwargs)
    second = await ven_crud.manufacturer.paged_query(db_session, **kwargs)

    assert _names(first) == _names(second)
    assert first.total == second.total == 10


@pytest.mark.asyncio
async def test_ascending_and_descending_are_reverses(db_session: AsyncSession, items):
    ascending = await ven_crud.manufacturer.paged_query(db_session, sort="name", page_size=25)
    descending = await ven_crud.manufacturer.paged_query(db_session, sort="-name", page_size=25)

    assert _names(ascending) == list(reversed(_names(descending)))
    assert _names(ascending)[0] == "item-00"


@pytest.mark.asyncio
async def test_unknown_sort_field_falls_back_to_default(db_session: AsyncSession, items):
    default = await ven_crud.manufacturer.paged_query(db_session, page_size=25)
    unknown = await ven_crud.manufacturer.paged_query(db_session, sort="doesNotExist", page_size=25)

    assert _names(unknown) == _names(default)


@pytest.mark.asyncio
async def test_secondary_sort_key(db_session: AsyncSession, items):
    result = await ven_crud.manufacturer.paged_query(db_session, sort="-isActive,name", page_size=25)
    names = _names(result)

    assert names[:3] == ["item-00", "item-02", "item-04"]
    assert names[13:16] == ["item-01", "item-03", "item-05"]


@pytest.mark.asyncio
async def test_soft_deleted_rows_are_excluded(db_session: AsyncSession, items):
    await ven_crud.manufacturer.delete(db_session, id=items[0].id)

    result = await ven_crud.manufacturer.paged_query(db_session, page_size=5)
    assert result.total == 24
    assert "item-00" not in _names(result)


@pytest.mark.asyncio
async def test_without_mapper_returns_storage_entities(db_session: AsyncSession, items):
    result = await paged_query(db_session, ven_crud.manufacturer_field_map, sort="name", page_size=2)
    assert all(isinstance(item, ven_models.Manufacturer) for item in result.items)
    assert result.total == 25


@pytest.mark.asyncio
async def test_includes_eager_load_relationships(
    db_session: AsyncSession,
    test_supplier: ven_models.Supplier,
    test_manufacturer: ven_models.Manufacturer,
):
    asset = asset_models.Asset(
        name="Laptop",
        asset_tag="A-0001",
        purchase_cost=Decimal("1500.00"),
        supplier_id=test_supplier.id,
        manufacturer_id=test_manufacturer.id,
    )
    db_session.add(asset)
    await db_session.commit()

    plain = await asset_crud.asset.paged_query(db_session)
    assert plain.items[0].supplier is None

    loaded = await asset_crud.asset.paged_query(db_session, includes=["supplier", "Manufacturer"])
    assert loaded.items[0].supplier.name == "Acme Supply"
    assert loaded.items[0].manufacturer.name == "Dell"
    assert loaded.items[0].location is None


@pytest.mark.asyncio
async def test_relationships_loaded_earlier_are_not_returned_without_include(
    db_session: AsyncSession,
    test_supplier: ven_models.Supplier,
):
    asset = asset_models.Asset(name="Laptop", asset_tag="A-0002", supplier_id=test_supplier.id)
    db_session.add(asset)
    await db_session.commit()

    loaded = await asset_crud.asset.paged_query(db_session, includes=["supplier"])
    assert loaded.items[0].supplier.name == "Acme Supply"

    plain = await asset_crud.asset.paged_query(db_session)
    assert plain.items[0].supplier is None
    assert plain.items[0].supplier_id == test_supplier.id

    single = await asset_crud.asset.get_domain(db_session, asset.id)
    assert single.supplier is None
    single = await asset_crud.asset.get_domain(db_session, asset.id, includes=["supplier"])
    assert single.supplier.supplier_code == "S-001"


# --- 저장소 호출 이전에 실패해야 하는 경우 (spy 세션) ---
@pytest.mark.asyncio
async def test_translation_error_makes_no_storage_call():
    spy = AsyncMock(spec=AsyncSession)
    with pytest.raises(TranslationError):
        await ven_crud.manufacturer.paged_query(
            spy, filter=predicate(SupplierRead, lambda s: s.name == "x")
        )
    spy.execute.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("page, page_size", [(0, 10), (-1, 10), (1, 0), (1, -5)])
async def test_invalid_page_coordinates_make_no_storage_call(page, page_size):
    spy = AsyncMock(spec=AsyncSession)
    with pytest.raises(PaginationError):
        await ven_crud.manufacturer.paged_query(spy, page=page, page_size=page_size)
    spy.execute.assert_not_called()


@pytest.mark.asyncio
async def test_disallowed_include_makes_no_storage_call():
    spy = AsyncMock(spec=AsyncSession)
    with pytest.raises(IncludeNotAllowedError):
        await asset_crud.asset.paged_query(spy, includes=["warranty"])
    spy.execute.assert_not_called()


# --- PagedQueryHandler ---
@pytest.mark.asyncio
async def test_handler_parses_filter_and_wraps_page(db_session: AsyncSession, items):
    handler = PagedQueryHandler[ManufacturerRead](ven_crud.manufacturer)
    page = await handler.handle(
        db_session,
        QueryRequest(filter="name @startswith('item-1')", sort="-name", page=1, pageSize=5),
    )

    assert [item.name for item in page.items] == ["item-19", "item-18", "item-17", "item-16", "item-15"]
    assert page.total == 10
    assert page.page_size == 5
    assert page.total_pages == 2


@pytest.mark.asyncio
async def test_handler_clamps_page_size(db_session: AsyncSession, items):
    handler = PagedQueryHandler[ManufacturerRead](ven_crud.manufacturer)
    page = await handler.handle(db_session, QueryRequest(page_size=10_000))

    assert page.page_size == 100
    assert len(page.items) == 25


@pytest.mark.asyncio
async def test_handler_selects_requested_fields(db_session: AsyncSession, items):
    handler = PagedQueryHandler[ManufacturerRead](ven_crud.manufacturer)
    page = await handler.handle(
        db_session,
        QueryRequest(filter="isActive", sort="name", pageSize=3, fields="name,isActive, Name"),
    )

    assert page.total == 13
    assert page.items == [
        {"name": "item-00", "is_active": True},
        {"name": "item-02", "is_active": True},
        {"name": "item-04", "is_active": True},
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("fields", ["colour", "name,headquarters"])
async def test_handler_rejects_unknown_fields_before_storage_call(fields):
    spy = AsyncMock(spec=AsyncSession)
    handler = PagedQueryHandler[ManufacturerRead](ven_crud.manufacturer)
    with pytest.raises(FieldSelectionError) as exc_info:
        await handler.handle(spy, QueryRequest(fields=fields))
    assert isinstance(exc_info.value, QueryError)
    spy.execute.assert_not_called()


@pytest.mark.asyncio
async def test_handler_rejects_invalid_filter_before_storage_call():
    spy = AsyncMock(spec=AsyncSession)
    handler = PagedQueryHandler[ManufacturerRead](ven_crud.manufacturer)
    with pytest.raises(QueryError):
        await handler.handle(spy, QueryRequest(filter="name >"))
    spy.execute.assert_not_called()


LONG_AND_CHAIN = " and ".join(["isActive"] * 600)
DEEP_PARENTHESES = "(" * 600 + "isActive" + ")" * 600


@pytest.mark.asyncio
@pytest.mark.parametrize("filter_text", [LONG_AND_CHAIN, DEEP_PARENTHESES], ids=["long-and-chain", "deep-parentheses"])
async def test_handler_rejects_oversized_filter_before_storage_call(filter_text):
    spy = AsyncMock(spec=AsyncSession)
    handler = PagedQueryHandler[ManufacturerRead](ven_crud.manufacturer)
    with pytest.raises(QueryError):
        await handler.handle(spy, QueryRequest(filter=filter_text))
    spy.execute.assert_not_called()


def test_parse_includes():
    assert parse_includes(None) == []
    assert parse_includes(" supplier, Supplier ,,owner ") == ["supplier", "owner"]
    with pytest.raises(QueryError):
        parse_includes("a,b,c", max_count=2)
