# fam/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session)
- 목록 조회 쿼리 파라미터 (get_query_request)
"""

from typing import AsyncGenerator, Optional

from fastapi import Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fam.core.config import settings
from fam.core.database import get_session as get_main_app_session
from fam.core.querying.schemas import QueryRequest


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    fam.core.database.get_session 을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


def get_query_request(
    filter: Optional[str] = Query(None, description="필터 DSL (예: name @contains('acme') and isActive == true)"),
    sort: Optional[str] = Query(None, description="정렬 필드 (쉼표 구분, '-' 접두사는 내림차순)"),
    page: int = Query(1, ge=1, description="페이지 번호 (1부터)"),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, alias="pageSize", description="페이지 크기"),
    fields: Optional[str] = Query(None, description="응답에 담을 필드 (쉼표 구분, 예: id,name)"),
    include: Optional[str] = Query(None, description="즉시 로딩할 관계 (쉼표 구분)"),
) -> QueryRequest:
    return QueryRequest(
        filter=filter, sort=sort, page=page, page_size=page_size, fields=fields, include=include
    )
