# fam/core/querying/__init__.py

"""
도메인 엔티티 기준 필터/정렬/페이지 조회 엔진.

- expressions: 술어(predicate) 표현식 트리
- field_map:   도메인 ↔ 저장소 필드 매핑 테이블 (시작 시 검증)
- translator:  도메인 술어 → SQLAlchemy WHERE 절
- sorting:     동적 정렬 해석 (허용 목록, 기본 정렬, 보조 정렬키)
- paging:      COUNT + 데이터 조회 오케스트레이터
- parsing / validation: 쿼리 문자열 필터 DSL
- handler:     QueryRequest → Page 응답
"""

from fam.core.querying.expressions import Predicate, predicate
from fam.core.querying.field_map import FieldInfo, FieldMap
from fam.core.querying.handler import PagedQueryHandler, parse_includes
from fam.core.querying.paging import PageResult, paged_query
from fam.core.querying.parsing import parse_filter
from fam.core.querying.schemas import Page, QueryRequest
from fam.core.querying.sorting import Direction, SortKey, SortResolver, apply_ordering
from fam.core.querying.translator import ExpressionTranslator, translate
from fam.core.querying.validation import validate_predicate

__all__ = [
    "Direction",
    "ExpressionTranslator",
    "FieldInfo",
    "FieldMap",
    "Page",
    "PageResult",
    "PagedQueryHandler",
    "Predicate",
    "QueryRequest",
    "SortKey",
    "SortResolver",
    "apply_ordering",
    "paged_query",
    "parse_filter",
    "parse_includes",
    "predicate",
    "translate",
    "validate_predicate",
]
