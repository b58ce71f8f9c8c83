# fam/core/querying/paging.py

"""
페이지 조회 오케스트레이터.

필터와 정렬을 데이터베이스로 내려보내(push-down) 한 페이지의 항목과 전체 건수를 구합니다.

    1. page / page_size 검증
    2. 필터 변환, include 해석, 정렬 해석 (여기까지 DB 호출 없음)
    3. 같은 모델에 대한 COUNT 문과 데이터 문 구성 (기본 조건 + 필터는 양쪽에, eager-load 는 데이터 문에만)
    4. COUNT 실행 → total
    5. ORDER BY, OFFSET (page-1)*page_size, LIMIT page_size 적용
    6. 데이터 문 실행 후 각 행을 도메인 엔티티로 변환

메모리 내 필터링은 하지 않으며 재시도나 캐시도 없습니다.
"""

import logging
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence

from sqlalchemy.orm import selectinload
from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.exceptions import PaginationError
from fam.core.mapping import EntityMapper
from fam.core.querying.expressions import Predicate
from fam.core.querying.field_map import FieldMap
from fam.core.querying.sorting import SortResolver, apply_ordering
from fam.core.querying.translator import ExpressionTranslator

logger = logging.getLogger(__name__)


class PageResult(NamedTuple):
    items: List[Any]
    total: int


def check_page(page: int, page_size: int) -> None:
    if page < 1:
        raise PaginationError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise PaginationError(f"page_size must be >= 1, got {page_size}")


async def paged_query(
    db: AsyncSession,
    field_map: FieldMap,
    *,
    filter: Optional[Predicate] = None,
    sort: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
    includes: Optional[Iterable[str]] = None,
    mapper: Optional[EntityMapper] = None,
    criteria: Sequence[Any] = (),
) -> PageResult:
    """
    한 페이지의 도메인 엔티티와 (필터 기준) 전체 건수를 반환합니다.

    :param filter: 도메인 엔티티 기준 술어. None 이면 전체.
    :param sort: "name,-createdAt" 형태의 정렬 문자열. 해석 불가 시 기본 정렬.
    :param includes: 즉시 로딩할 관계 이름 (FieldMap 허용 목록 안에서만)
    :param mapper: 저장소 → 도메인 변환기. None 이면 저장소 엔티티를 그대로 반환.
    :param criteria: 필터와 함께 AND 로 적용할 저장소 측 기본 조건 (예: 소프트 삭제 제외)
    """
    check_page(page, page_size)

    model = field_map.model
    conditions = list(criteria)
    if filter is not None:
        conditions.append(ExpressionTranslator(field_map).translate(filter))
    relationships = field_map.resolve_includes(includes)
    loaders = [selectinload(getattr(model, key)) for key in relationships]
    ordering = SortResolver(field_map).resolve(sort)

    count_statement = select(func.count()).select_from(model)
    statement = select(model)
    if conditions:
        count_statement = count_statement.where(*conditions)
        statement = statement.where(*conditions)

    total = (await db.execute(count_statement)).scalar_one()

    if loaders:
        # 세션에 이미 있는 객체에도 include 관계를 채웁니다.
        statement = statement.options(*loaders).execution_options(populate_existing=True)
    statement = apply_ordering(statement, ordering, field_map.primary_key)
    statement = statement.offset((page - 1) * page_size).limit(page_size)
    result = await db.execute(statement)
    records = result.scalars().all()

    logger.debug(
        "Paged query on %s: page=%d size=%d rows=%d total=%d",
        model.__name__, page, page_size, len(records), total,
    )
    if mapper is None:
        return PageResult(list(records), total)
    return PageResult([mapper.to_domain(record, relationships) for record in records], total)
