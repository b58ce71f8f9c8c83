# fam/core/querying/translator.py

"""
도메인 → 저장소 표현식 변환기.

도메인 엔티티 기준으로 작성된 술어(Predicate) 트리를 구조적으로 다시 써서,
FieldMap 에 등록된 저장소 컬럼에 대한 SQLAlchemy 불리언 절(WHERE 절)로 만듭니다.
술어 자체를 평가하지 않으며, 부수 효과나 I/O 가 없습니다.

다음의 경우 저장소 호출 이전에 TranslationError 가 발생합니다.
- 술어의 파라미터가 다른 엔티티 타입인 경우
- 저장소에 대응 컬럼이 없는 멤버를 참조하는 경우
- 술어의 파라미터가 아닌 다른 파라미터의 멤버를 참조하는 경우
"""

from functools import lru_cache
from typing import Any, List

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import and_, false, not_, or_, true

from fam.core.exceptions import FilterValidationError, TranslationError
from fam.core.querying.expressions import (
    MIRRORED_OPS, And, Call, Compare, Expr, Literal, Member, Not, Or, Param, Predicate,
)
from fam.core.querying.field_map import FieldInfo, FieldMap


@lru_cache(maxsize=None)
def _adapter(python_type: type) -> TypeAdapter:
    return TypeAdapter(python_type)


def coerce_value(info: FieldInfo, value: Any) -> Any:
    """리터럴 값을 컬럼의 파이썬 타입으로 변환합니다. (예: ISO 문자열 → date)"""
    if value is None or info.python_type is object:
        return value
    if isinstance(value, info.python_type) and not (isinstance(value, bool) and info.python_type is not bool):
        return value
    try:
        return _adapter(info.python_type).validate_python(value)
    except ValidationError:
        raise FilterValidationError(
            f"Value {value!r} is not valid for field '{info.name}' ({info.python_type.__name__})"
        ) from None


class ExpressionTranslator:
    def __init__(self, field_map: FieldMap):
        self.field_map = field_map

    def translate(self, predicate: Predicate):
        if predicate.entity is not self.field_map.domain:
            raise TranslationError(
                f"Predicate over {predicate.entity.__name__} cannot be translated with the "
                f"{self.field_map.domain.__name__} field map"
            )
        return self._boolean(predicate.body, predicate.param)

    # --- 불리언 위치의 노드 ---
    def _boolean(self, node: Expr, param: Param):
        if isinstance(node, And):
            return and_(self._boolean(node.left, param), self._boolean(node.right, param))
        if isinstance(node, Or):
            return or_(self._boolean(node.left, param), self._boolean(node.right, param))
        if isinstance(node, Not):
            return not_(self._boolean(node.operand, param))
        if isinstance(node, Compare):
            return self._compare(node, param)
        if isinstance(node, Call):
            return self._call(node, param)
        if isinstance(node, Member):
            info = self._member(node, param)
            if info.python_type is not bool:
                raise TranslationError(
                    f"Field '{info.name}' is not boolean and cannot be used as a condition", member=info.name
                )
            return info.column.is_(True)
        if isinstance(node, Literal) and isinstance(node.value, bool):
            return true() if node.value else false()
        raise TranslationError(f"Unsupported expression node {type(node).__name__}")

    def _member(self, node: Member, param: Param) -> FieldInfo:
        if not isinstance(node.target, Param):
            raise TranslationError(f"Nested member access '{node.name}' is not supported", member=node.name)
        if node.target is not param:
            raise TranslationError(
                f"Member '{node.name}' refers to a parameter other than the predicate's own", member=node.name
            )
        info = self.field_map.get(node.name)
        if info is None:
            raise TranslationError(
                f"{self.field_map.domain.__name__}.{node.name} has no counterpart on "
                f"{self.field_map.model.__name__}",
                member=node.name,
            )
        return info

    def _compare(self, node: Compare, param: Param):
        op, left, right = node.op, node.left, node.right
        if not isinstance(left, Member) and isinstance(right, Member):
            op, left, right = MIRRORED_OPS[op], right, left
        if not isinstance(left, Member):
            raise TranslationError("A comparison must reference at least one field")

        info = self._member(left, param)
        column = info.column
        if isinstance(right, Member):
            other: Any = self._member(right, param).column
        elif isinstance(right, Literal):
            other = coerce_value(info, right.value)
        else:
            raise TranslationError(f"Unsupported comparison operand {type(right).__name__}")

        if other is None:
            if op == "==":
                return column.is_(None)
            if op == "!=":
                return column.is_not(None)
            raise TranslationError(f"Operator '{op}' cannot be used with null", member=info.name)

        if op == "==":
            return column == other
        if op == "!=":
            # SQL 에서 NULL != 값 은 참이 아니므로 NULL 을 명시적으로 포함합니다.
            return or_(column.is_(None), column != other)
        if op == ">":
            return column > other
        if op == ">=":
            return column >= other
        if op == "<":
            return column < other
        if op == "<=":
            return column <= other
        raise TranslationError(f"Unknown comparison operator '{op}'")

    def _call(self, node: Call, param: Param):
        if not isinstance(node.target, Member):
            raise TranslationError(f"@{node.op} must be applied to a field")
        info = self._member(node.target, param)
        column = info.column
        values = self._values(node, info)

        if node.op == "isnull":
            return column.is_(None)
        if node.op == "notnull":
            return column.is_not(None)
        if node.op == "contains":
            return column.contains(values[0], autoescape=True)
        if node.op == "ncontains":
            return or_(column.is_(None), not_(column.contains(values[0], autoescape=True)))
        if node.op == "startswith":
            return column.startswith(values[0], autoescape=True)
        if node.op == "endswith":
            return column.endswith(values[0], autoescape=True)
        if node.op == "in":
            return column.in_(values) if values else false()
        if node.op == "nin":
            return or_(column.is_(None), column.not_in(values)) if values else true()
        if node.op == "between":
            return column.between(values[0], values[1])
        if node.op == "containsany":
            if not values:
                return false()
            return or_(*[column.contains(value, autoescape=True) for value in values])
        raise TranslationError(f"Unknown operator '@{node.op}'", member=info.name)

    def _values(self, node: Call, info: FieldInfo) -> List[Any]:
        values = []
        for arg in node.args:
            if not isinstance(arg, Literal):
                raise TranslationError(f"Arguments of @{node.op} must be literal values", member=info.name)
            if node.op in ("contains", "ncontains", "startswith", "endswith", "containsany"):
                if arg.value is None:
                    raise TranslationError(f"@{node.op} cannot match null", member=info.name)
                values.append(str(arg.value))
            else:
                values.append(coerce_value(info, arg.value))
        expected = {"between": 2, "contains": 1, "ncontains": 1, "startswith": 1, "endswith": 1}.get(node.op)
        if expected is not None and len(values) != expected:
            raise TranslationError(f"@{node.op} expects {expected} argument(s), got {len(values)}", member=info.name)
        return values


def translate(field_map: FieldMap, predicate: Predicate):
    return ExpressionTranslator(field_map).translate(predicate)
