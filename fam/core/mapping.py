# fam/core/mapping.py

"""
저장소 엔티티(SQLModel 테이블 모델) ↔ 도메인 엔티티(...Read 스키마) 변환기.

비동기 세션에서는 로딩되지 않은 관계(relationship)에 접근하면 지연 로딩(lazy load)이
시도되어 MissingGreenlet 오류가 발생하므로, 이미 로딩된 속성만 복사합니다.
관계는 호출자가 요청한(include) 것만 복사합니다. 세션에 이미 로딩되어 있더라도
요청하지 않은 관계는 응답에 나타나지 않습니다.
"""

from typing import Any, Dict, Generic, Iterable, Mapping, Optional, Type, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlmodel import SQLModel

DomainType = TypeVar("DomainType", bound=SQLModel)
ModelType = TypeVar("ModelType", bound=SQLModel)


def loaded_state(record: Any, relationships: Iterable[str] = ()) -> Dict[str, Any]:
    """
    ORM 객체에서 로딩된 컬럼 속성을 dict 로 꺼냅니다.
    ``relationships`` 에 있는 관계는 로딩된 경우에만, 관계 대상의 컬럼 속성까지 꺼냅니다.
    """
    state = sa_inspect(record)
    unloaded = state.unloaded
    mapper = state.mapper

    data: Dict[str, Any] = {}
    for attr in mapper.column_attrs:
        if attr.key not in unloaded:
            data[attr.key] = getattr(record, attr.key)

    for key in relationships:
        if key not in mapper.relationships or key in unloaded:
            continue
        relationship = mapper.relationships[key]
        value = getattr(record, key)
        if relationship.uselist:
            data[key] = [loaded_state(item) for item in value]
        else:
            data[key] = None if value is None else loaded_state(value)
    return data


class EntityMapper(Generic[DomainType, ModelType]):
    """
    :param rename: {저장소 속성: 도메인 필드} 이름이 다른 경우만 지정
    """
    def __init__(self, domain: Type[DomainType], model: Type[ModelType], rename: Optional[Mapping[str, str]] = None):
        self.domain = domain
        self.model = model
        self.rename = dict(rename or {})

    def to_domain(self, record: ModelType, includes: Iterable[str] = ()) -> DomainType:
        """``includes`` 는 FieldMap.resolve_includes 로 해석된 관계 이름입니다."""
        data = {self.rename.get(key, key): value for key, value in loaded_state(record, includes).items()}
        return self.domain.model_validate(data)
