# fam/core/querying/schemas.py

"""
목록 조회 API 의 요청/응답 DTO.
"""

import math
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from fam.core.config import settings

T = TypeVar("T")

# fields 로 일부 필드만 고른 항목 ({도메인 필드명: 값})
SelectedItem = Dict[str, Any]


class QueryRequest(BaseModel):
    """목록 조회 쿼리 파라미터 (filter, sort, page, pageSize, fields, include)."""

    model_config = ConfigDict(populate_by_name=True)

    filter: Optional[str] = Field(None, description="Filter DSL, e.g. \"name @contains('acme') and isActive == true\"")
    sort: Optional[str] = Field(None, description="Comma separated fields, '-' prefix for descending")
    page: int = Field(1, ge=1)
    page_size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, alias="pageSize")
    fields: Optional[str] = Field(None, description="Comma separated fields to return, e.g. \"id,name\"")
    include: Optional[str] = Field(None, description="Comma separated relationships to eager-load")


class Page(BaseModel, Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0
