# fam/core/querying/validation.py

"""
필터 술어 검증기. 파싱된 필터가 DB 로 내려가기 전에 다음을 검사합니다.

- 트리 깊이와 노드 수 상한
- 참조한 필드가 저장소에 매핑되어 있고 필터가 허용되는지
- 연산자와 필드 타입의 호환성
  (문자열 연산자는 문자열 필드에만, 대소 비교와 @between 은 숫자/날짜 필드에만)
- 비교식은 필드 하나와 리터럴(또는 필드) 하나로 구성되는지
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

from fam.core.exceptions import FilterValidationError
from fam.core.querying.expressions import (
    STRING_CALL_OPS, And, Call, Compare, Expr, Literal, Member, Not, Or, Param, Predicate, children,
)
from fam.core.querying.field_map import FieldInfo, FieldMap

ORDERED_TYPES = (int, float, Decimal, date, datetime, time)


def _depth(root: Expr) -> int:
    # 필드/값은 깊이에 포함하지 않고, 같은 논리 연산자의 연속(a and b and c)은 한 단계로 셉니다.
    deepest = 0
    stack = [(root, type(None), 0)]
    while stack:
        node, parent, depth = stack.pop()
        if isinstance(node, (Member, Literal, Param)):
            continue
        if not (isinstance(node, (And, Or)) and type(node) is parent):
            depth += 1
        deepest = max(deepest, depth)
        stack.extend((kid, type(node), depth) for kid in children(node))
    return deepest


def _count(root: Expr, limit: int) -> int:
    """노드 수. limit 를 넘으면 그 자리에서 멈춥니다."""
    count = 0
    stack = [root]
    while stack and count <= limit:
        node = stack.pop()
        if isinstance(node, Param):
            continue
        count += 1
        stack.extend(children(node))
    return count


def _is_string(info: FieldInfo) -> bool:
    # Enum 컬럼은 정의된 값만 바인딩할 수 있으므로 문자열 연산자를 허용하지 않습니다.
    return issubclass(info.python_type, str) and not issubclass(info.python_type, Enum)


def _is_ordered(info: FieldInfo) -> bool:
    return issubclass(info.python_type, ORDERED_TYPES) and not issubclass(info.python_type, bool)


class FilterValidator:
    def __init__(self, field_map: FieldMap, *, max_depth: int = 10, max_nodes: int = 50):
        self.field_map = field_map
        self.max_depth = max_depth
        self.max_nodes = max_nodes

    def validate(self, predicate: Predicate) -> Predicate:
        body = predicate.body
        if _count(body, self.max_nodes) > self.max_nodes:
            raise FilterValidationError(f"Filter has too many terms (max {self.max_nodes} nodes)")
        if _depth(body) > self.max_depth:
            raise FilterValidationError(f"Filter is nested too deeply (max depth {self.max_depth})")
        self._boolean(body)
        return predicate

    def _field(self, node: Member) -> FieldInfo:
        name = node.name
        if name in self.field_map.unmapped:
            raise FilterValidationError(f"Field '{name}' cannot be used in a filter")
        info = self.field_map.get(name)
        if info is None:
            raise FilterValidationError(f"Unknown field '{name}'")
        if not info.filterable:
            raise FilterValidationError(f"Field '{info.name}' is not filterable")
        return info

    def _boolean(self, node: Expr) -> None:
        if isinstance(node, (And, Or)):
            self._boolean(node.left)
            self._boolean(node.right)
        elif isinstance(node, Not):
            self._boolean(node.operand)
        elif isinstance(node, Compare):
            self._compare(node)
        elif isinstance(node, Call):
            self._call(node)
        elif isinstance(node, Member):
            info = self._field(node)
            if info.python_type is not bool:
                raise FilterValidationError(f"Field '{info.name}' is not boolean and cannot stand alone as a condition")
        elif isinstance(node, Literal) and isinstance(node.value, bool):
            return
        else:
            raise FilterValidationError("Filter must be a boolean condition")

    def _compare(self, node: Compare) -> None:
        members = [side for side in (node.left, node.right) if isinstance(side, Member)]
        literals = [side for side in (node.left, node.right) if isinstance(side, Literal)]
        if not members or len(members) + len(literals) != 2:
            raise FilterValidationError(f"Comparison '{node.op}' must compare a field with a value")
        infos = [self._field(member) for member in members]
        if node.op in ("==", "!="):
            return
        for info in infos:
            if not _is_ordered(info):
                raise FilterValidationError(
                    f"Operator '{node.op}' requires a numeric or date field, '{info.name}' is not"
                )
        if any(literal.value is None for literal in literals):
            raise FilterValidationError(f"Operator '{node.op}' cannot be used with null")

    def _call(self, node: Call) -> None:
        if not isinstance(node.target, Member):
            raise FilterValidationError(f"@{node.op} must be applied to a field")
        info = self._field(node.target)
        if node.op in STRING_CALL_OPS and not _is_string(info):
            raise FilterValidationError(f"@{node.op} requires a text field, '{info.name}' is not")
        if node.op == "between" and not _is_ordered(info):
            raise FilterValidationError(f"@between requires a numeric or date field, '{info.name}' is not")
        if node.op in STRING_CALL_OPS:
            for arg in node.args:
                if not isinstance(arg, Literal) or not isinstance(arg.value, str):
                    raise FilterValidationError(f"@{node.op} arguments must be strings")


def validate_predicate(predicate: Predicate, field_map: FieldMap, *, max_depth: int = 10, max_nodes: int = 50) -> Predicate:
    return FilterValidator(field_map, max_depth=max_depth, max_nodes=max_nodes).validate(predicate)
