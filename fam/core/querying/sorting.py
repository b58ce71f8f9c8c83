# fam/core/querying/sorting.py

"""
동적 정렬 해석기.

``"name,-createdAt"`` 형태의 정렬 문자열을 필드 매핑 테이블(FieldMap)에 등록된
정렬 가능 컬럼의 순서 목록(SortKey)으로 바꾸고, SELECT 문에 ORDER BY 로 적용합니다.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from fam.core.querying.field_map import FieldMap

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortKey:
    name: str       # 도메인 필드명
    column: Any     # 저장소 모델의 컬럼 속성 (InstrumentedAttribute)
    direction: Direction = Direction.ASC

    def clause(self):
        return self.column.desc() if self.direction is Direction.DESC else self.column.asc()


def split_sort(sort: Optional[str]) -> List[Tuple[str, Direction]]:
    """
    정렬 문자열을 (필드명, 방향) 목록으로 나눕니다. 필드명은 아직 검증하지 않습니다.
    앞에 '-' 가 붙으면 내림차순, 그 외(또는 '+')는 오름차순입니다.
    """
    if not sort:
        return []
    parts: List[Tuple[str, Direction]] = []
    for raw in sort.split(","):
        token = raw.strip()
        direction = Direction.ASC
        if token.startswith("-"):
            direction = Direction.DESC
            token = token[1:].strip()
        elif token.startswith("+"):
            token = token[1:].strip()
        if token:
            parts.append((token, direction))
    return parts


class SortResolver:
    """
    정렬 문자열을 허용 목록(FieldMap)에 대해 해석합니다.

    - 첫 번째로 해석된 필드가 1차 정렬키, 나머지는 순서대로 보조 정렬키가 됩니다.
    - 알 수 없거나 정렬이 허용되지 않은 필드는 오류 없이 건너뛰고 경고 로그를 남깁니다.
    - 해석된 필드가 하나도 없으면 FieldMap 의 기본 정렬을 사용합니다.
    """

    def __init__(self, field_map: "FieldMap", on_skipped: Optional[Callable[[str], None]] = None):
        self.field_map = field_map
        self.on_skipped = on_skipped

    def resolve(self, sort: Optional[str], on_skipped: Optional[Callable[[str], None]] = None) -> Tuple[SortKey, ...]:
        hook = on_skipped or self.on_skipped
        keys: List[SortKey] = []
        seen = set()
        for name, direction in split_sort(sort):
            info = self.field_map.get(name)
            if info is None or not info.sortable:
                logger.warning(
                    "Ignoring unknown or non-sortable sort field '%s' for %s",
                    name, self.field_map.domain.__name__,
                )
                if hook is not None:
                    hook(name)
                continue
            if info.name in seen:
                continue
            seen.add(info.name)
            keys.append(SortKey(info.name, info.column, direction))

        if not keys:
            return self.field_map.default_ordering
        return tuple(keys)


def apply_ordering(statement, keys: Sequence[SortKey], tiebreaker: Any = None):
    """
    SortKey 목록을 ORDER BY 로 적용합니다.
    ``tiebreaker`` (보통 기본키) 가 주어지면 마지막 정렬키로 오름차순 추가하여 페이지 경계를 고정합니다.
    """
    clauses = [key.clause() for key in keys]
    if tiebreaker is not None and all(key.column.key != tiebreaker.key for key in keys):
        clauses.append(tiebreaker.asc())
    return statement.order_by(*clauses)
