# fam/core/querying/field_map.py

"""
도메인 엔티티(...Read 스키마) ↔ 저장소 엔티티(SQLModel 테이블 모델) 필드 매핑 테이블.

매핑은 모듈 임포트 시점에 한 번 만들어지며, 잘못된 설정(존재하지 않는 컬럼으로의 rename,
정렬 불가 필드를 가리키는 기본 정렬, 없는 관계를 가리키는 include 등)은 그 즉시 FieldMapError 로
드러납니다. 필터 변환과 정렬 해석은 모두 이 테이블만을 통해 저장소 컬럼에 도달합니다.

필드명 조회는 대소문자와 '_' 를 무시합니다. (``createdAt`` == ``created_at`` == ``CREATEDAT``)
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Type

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.types import TypeDecorator

from fam.core.exceptions import FieldMapError, FieldSelectionError, IncludeNotAllowedError
from fam.core.querying.sorting import SortKey, split_sort


def normalize_name(name: str) -> str:
    return name.replace("_", "").lower()


@dataclass(frozen=True)
class FieldInfo:
    name: str           # 도메인 필드명
    storage_name: str   # 저장소 모델 속성명
    column: Any         # InstrumentedAttribute
    python_type: type
    sortable: bool = True
    filterable: bool = True
    selectable: bool = True


def _column_python_type(column_property) -> type:
    sql_type = column_property.columns[0].type
    # SQLModel 의 AutoString 같은 TypeDecorator 는 내부 타입(impl)으로 판단합니다.
    if isinstance(sql_type, TypeDecorator):
        sql_type = sql_type.impl
    try:
        return sql_type.python_type
    except NotImplementedError:
        return object


class FieldMap:
    """
    하나의 (도메인 엔티티, 저장소 엔티티) 쌍에 대한 필드 매핑.

    :param domain: 도메인 엔티티 클래스 (예: SupplierRead)
    :param model: 저장소 엔티티 클래스 (예: Supplier, table=True)
    :param rename: {도메인 필드: 저장소 속성} 이름이 다른 경우만 지정
    :param not_sortable: 정렬을 허용하지 않을 도메인 필드
    :param not_filterable: 필터를 허용하지 않을 도메인 필드
    :param not_selectable: fields 로 골라 받을 수 없는 도메인 필드
    :param includes: 즉시 로딩(eager-load) 힌트로 허용할 관계 이름
    :param default_sort: 요청한 정렬이 하나도 해석되지 않을 때의 정렬 (예: "-created_at")
    """

    def __init__(
        self,
        domain: Type[Any],
        model: Type[Any],
        *,
        rename: Optional[Mapping[str, str]] = None,
        not_sortable: Iterable[str] = (),
        not_filterable: Iterable[str] = (),
        not_selectable: Iterable[str] = (),
        includes: Iterable[str] = (),
        default_sort: Optional[str] = None,
    ):
        self.domain = domain
        self.model = model
        rename = dict(rename or {})
        not_sortable = set(not_sortable)
        not_filterable = set(not_filterable)
        not_selectable = set(not_selectable)

        mapper = sa_inspect(model)
        domain_fields = list(domain.model_fields)

        for name in list(rename) + list(not_sortable) + list(not_filterable) + list(not_selectable):
            if name not in domain_fields:
                raise FieldMapError(f"{domain.__name__} has no field '{name}'")

        self._fields: Dict[str, FieldInfo] = {}
        unmapped: List[str] = []
        for name in domain_fields:
            target = rename.get(name, name)
            if target not in mapper.column_attrs:
                if name in rename:
                    raise FieldMapError(
                        f"{domain.__name__}.{name} is mapped to '{target}', "
                        f"which is not a column of {model.__name__}"
                    )
                unmapped.append(name)
                continue
            key = normalize_name(name)
            if key in self._fields:
                raise FieldMapError(f"{domain.__name__} has ambiguous fields for '{name}'")
            self._fields[key] = FieldInfo(
                name=name,
                storage_name=target,
                column=getattr(model, target),
                python_type=_column_python_type(mapper.column_attrs[target]),
                sortable=name not in not_sortable,
                filterable=name not in not_filterable,
                selectable=name not in not_selectable,
            )
        self.unmapped: FrozenSet[str] = frozenset(unmapped)
        self._unmapped_by_key = {normalize_name(name): name for name in unmapped}

        self._includes: Dict[str, str] = {}
        for include in includes:
            if include not in mapper.relationships:
                raise FieldMapError(f"{model.__name__} has no relationship '{include}' to include")
            self._includes[normalize_name(include)] = include

        pk_column = mapper.primary_key[0]
        self.primary_key = getattr(model, mapper.get_property_by_column(pk_column).key)

        self.default_ordering: Tuple[SortKey, ...] = self._build_default_ordering(default_sort)

    def _build_default_ordering(self, default_sort: Optional[str]) -> Tuple[SortKey, ...]:
        if not default_sort:
            return (SortKey(self.primary_key.key, self.primary_key),)
        keys = []
        for name, direction in split_sort(default_sort):
            info = self.get(name)
            if info is None or not info.sortable:
                raise FieldMapError(
                    f"Default sort field '{name}' is not a sortable field of {self.domain.__name__}"
                )
            keys.append(SortKey(info.name, info.column, direction))
        if not keys:
            raise FieldMapError(f"Default sort '{default_sort}' for {self.domain.__name__} is empty")
        return tuple(keys)

    # --- 조회 ---
    @property
    def fields(self) -> Tuple[FieldInfo, ...]:
        return tuple(self._fields.values())

    @property
    def includes(self) -> Tuple[str, ...]:
        return tuple(self._includes.values())

    @property
    def storage_renames(self) -> Dict[str, str]:
        """{저장소 속성: 도메인 필드} 이름이 다른 필드만"""
        return {info.storage_name: info.name for info in self._fields.values() if info.storage_name != info.name}

    def get(self, name: str) -> Optional[FieldInfo]:
        return self._fields.get(normalize_name(name))

    def canonical_name(self, name: str) -> Optional[str]:
        """매핑 여부와 관계없이 도메인 필드의 실제 이름을 찾습니다."""
        info = self.get(name)
        if info is not None:
            return info.name
        return self._unmapped_by_key.get(normalize_name(name))

    def resolve_includes(self, includes: Optional[Iterable[str]]) -> List[str]:
        """include 이름 목록을 저장소 관계 이름 목록으로 바꿉니다. 허용되지 않은 이름은 거부합니다."""
        resolved: List[str] = []
        for include in includes or ():
            key = self._includes.get(normalize_name(include))
            if key is None:
                raise IncludeNotAllowedError(include, self._includes.values())
            if key not in resolved:
                resolved.append(key)
        return resolved

    def resolve_fields(self, fields: Optional[Iterable[str]]) -> List[str]:
        """fields 로 요청한 이름 목록을 도메인 필드명 목록으로 바꿉니다. 관계는 include 로만 받습니다."""
        resolved: List[str] = []
        for field in fields or ():
            info = self.get(field)
            if info is None:
                if normalize_name(field) in self._unmapped_by_key:
                    raise FieldSelectionError(f"Field '{field}' cannot be selected; use include for relationships")
                raise FieldSelectionError(f"Unknown field '{field}'")
            if not info.selectable:
                raise FieldSelectionError(f"Field '{info.name}' cannot be selected")
            if info.name not in resolved:
                resolved.append(info.name)
        return resolved

    def __repr__(self) -> str:
        return f"FieldMap({self.domain.__name__} -> {self.model.__name__}, fields={len(self._fields)})"
