# fam/core/querying/handler.py

"""
목록 조회 요청 처리기 (애플리케이션 계층).

QueryRequest 를 받아 필터 DSL 파싱/검증, page_size 상한 적용, include / fields 해석 후
저장소(PagedCRUDBase)의 paged_query 를 호출하고 Page 응답으로 감쌉니다.
fields 가 주어지면 각 항목을 요청한 필드(와 include 한 관계)만 담은 dict 로 줄입니다.
"""

import logging
from typing import TYPE_CHECKING, Generic, List, Optional, TypeVar

from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.config import settings
from fam.core.exceptions import QueryError
from fam.core.querying.parsing import parse_filter
from fam.core.querying.schemas import Page, QueryRequest, SelectedItem
from fam.core.querying.validation import validate_predicate

if TYPE_CHECKING:
    from fam.core.crud_base import PagedCRUDBase

logger = logging.getLogger(__name__)

T = TypeVar("T")


def split_names(text: Optional[str]) -> List[str]:
    """'a, B ,,b' 형태의 쉼표 구분 문자열을 (대소문자 무시 중복 제거된) 이름 목록으로 나눕니다."""
    if not text:
        return []
    names: List[str] = []
    for raw in text.split(","):
        name = raw.strip()
        if name and name.lower() not in (n.lower() for n in names):
            names.append(name)
    return names


def parse_includes(include: Optional[str], max_count: Optional[int] = None) -> List[str]:
    """'role, owner' 형태의 include 문자열을 (중복 제거된) 이름 목록으로 나눕니다."""
    names = split_names(include)
    limit = settings.MAX_INCLUDES if max_count is None else max_count
    if len(names) > limit:
        raise QueryError(f"At most {limit} includes are allowed, got {len(names)}")
    return names


class PagedQueryHandler(Generic[T]):
    def __init__(self, repository: "PagedCRUDBase"):
        self.repository = repository

    async def handle(self, db: AsyncSession, request: QueryRequest) -> Page:
        field_map = self.repository.field_map

        predicate = None
        if request.filter and request.filter.strip():
            predicate = parse_filter(
                request.filter,
                field_map,
                max_depth=settings.MAX_FILTER_DEPTH,
                max_nodes=settings.MAX_FILTER_NODES,
            )
            validate_predicate(
                predicate,
                field_map,
                max_depth=settings.MAX_FILTER_DEPTH,
                max_nodes=settings.MAX_FILTER_NODES,
            )

        page_size = min(request.page_size, settings.MAX_PAGE_SIZE)
        includes = parse_includes(request.include)
        fields = field_map.resolve_fields(split_names(request.fields))

        result = await self.repository.paged_query(
            db,
            filter=predicate,
            sort=request.sort,
            page=request.page,
            page_size=page_size,
            includes=includes,
        )
        if not fields:
            page_type = Page[field_map.domain]
            return page_type(items=result.items, page=request.page, page_size=page_size, total=result.total)

        keep = set(fields) | set(field_map.resolve_includes(includes))
        items = [item.model_dump(include=keep) for item in result.items]
        logger.debug("Selected fields %s of %s", sorted(keep), field_map.domain.__name__)
        return Page[SelectedItem](items=items, page=request.page, page_size=page_size, total=result.total)
