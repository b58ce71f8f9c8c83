# fam/core/querying/expressions.py

"""
도메인 엔티티(...Read 스키마)를 대상으로 하는 필터 술어(predicate) 표현식 트리입니다.

표현식은 실행되지 않는 불변 트리이며, 자유 변수는 Param 하나뿐입니다.
파이썬 연산자 오버로딩으로 직접 만들거나 (``predicate(AssetRead, lambda a: a.name.startswith("x"))``)
필터 DSL 파서(parsing.py)가 만들어 냅니다. 저장소(SQL) 로의 변환은 translator.py 가 담당합니다.

    predicate(SupplierRead, lambda s: (s.is_active == True) & s.name.contains("acme"))

파이썬의 and / or / not 은 오버로딩할 수 없으므로 & | ~ 를 사용합니다.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Tuple, Type

COMPARISON_OPS = ("==", "!=", ">", ">=", "<", "<=")
# 좌우를 바꿀 때 사용하는 대칭 연산자
MIRRORED_OPS = {"==": "==", "!=": "!=", ">": "<", ">=": "<=", "<": ">", "<=": ">="}

CALL_OPS = (
    "contains", "ncontains", "startswith", "endswith",
    "in", "nin", "between", "containsany",
    "isnull", "notnull",
)
NULLARY_CALL_OPS = ("isnull", "notnull")
STRING_CALL_OPS = ("contains", "ncontains", "startswith", "endswith", "containsany")


class Expr:
    """모든 표현식 노드의 공통 연산자 오버로딩."""

    def __eq__(self, other: Any) -> "Compare":  # type: ignore[override]
        return Compare("==", self, _wrap(other))

    def __ne__(self, other: Any) -> "Compare":  # type: ignore[override]
        return Compare("!=", self, _wrap(other))

    def __gt__(self, other: Any) -> "Compare":
        return Compare(">", self, _wrap(other))

    def __ge__(self, other: Any) -> "Compare":
        return Compare(">=", self, _wrap(other))

    def __lt__(self, other: Any) -> "Compare":
        return Compare("<", self, _wrap(other))

    def __le__(self, other: Any) -> "Compare":
        return Compare("<=", self, _wrap(other))

    def __and__(self, other: Any) -> "And":
        return And(self, _wrap(other))

    def __or__(self, other: Any) -> "Or":
        return Or(self, _wrap(other))

    def __invert__(self) -> "Not":
        return Not(self)

    def __bool__(self) -> bool:
        raise TypeError("Filter expressions cannot be used as booleans; use &, | and ~ instead of and, or, not")

    __hash__ = object.__hash__

    # --- 호출형 연산자 (@contains, @in, ...) ---
    def contains(self, value: Any) -> "Call":
        return Call("contains", self, (_wrap(value),))

    def not_contains(self, value: Any) -> "Call":
        return Call("ncontains", self, (_wrap(value),))

    def startswith(self, value: Any) -> "Call":
        return Call("startswith", self, (_wrap(value),))

    def endswith(self, value: Any) -> "Call":
        return Call("endswith", self, (_wrap(value),))

    def in_(self, values: Iterable[Any]) -> "Call":
        return Call("in", self, tuple(_wrap(v) for v in values))

    def not_in(self, values: Iterable[Any]) -> "Call":
        return Call("nin", self, tuple(_wrap(v) for v in values))

    def between(self, low: Any, high: Any) -> "Call":
        return Call("between", self, (_wrap(low), _wrap(high)))

    def contains_any(self, values: Iterable[Any]) -> "Call":
        return Call("containsany", self, tuple(_wrap(v) for v in values))

    def is_null(self) -> "Call":
        return Call("isnull", self, ())

    def is_not_null(self) -> "Call":
        return Call("notnull", self, ())


@dataclass(frozen=True, eq=False)
class Param(Expr):
    """술어의 유일한 자유 변수. 도메인 엔티티 클래스로 타입이 정해집니다."""

    # 도메인 필드명(name 등)과 겹치지 않도록 내부 속성은 밑줄로 시작합니다.
    _entity: Type[Any]
    _label: str = "x"

    def __getattr__(self, name: str) -> "Member":
        if name.startswith("_"):
            raise AttributeError(name)
        fields = getattr(self._entity, "model_fields", {})
        if name not in fields:
            raise AttributeError(f"{self._entity.__name__} has no field '{name}'")
        return Member(self, name)


@dataclass(frozen=True, eq=False)
class Member(Expr):
    target: Expr
    name: str


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Any


@dataclass(frozen=True, eq=False)
class Compare(Expr):
    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True, eq=False)
class And(Expr):
    left: Expr
    right: Expr


@dataclass(frozen=True, eq=False)
class Or(Expr):
    left: Expr
    right: Expr


@dataclass(frozen=True, eq=False)
class Not(Expr):
    operand: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    op: str
    target: Expr
    args: Tuple[Expr, ...] = field(default_factory=tuple)


def _wrap(value: Any) -> Expr:
    if isinstance(value, Expr):
        return value
    return Literal(value)


def children(node: Expr) -> Tuple[Expr, ...]:
    """노드의 직계 자식 노드를 반환합니다."""
    if isinstance(node, Member):
        return (node.target,)
    if isinstance(node, (Compare, And, Or)):
        return (node.left, node.right)
    if isinstance(node, Not):
        return (node.operand,)
    if isinstance(node, Call):
        return (node.target, *node.args)
    return ()


def replace_param(node: Expr, old: Param, new: Param) -> Expr:
    """트리 안의 ``old`` 파라미터를 ``new`` 로 바꾼 새 트리를 만듭니다."""
    if node is old:
        return new
    if isinstance(node, Member):
        return Member(replace_param(node.target, old, new), node.name)
    if isinstance(node, Compare):
        return Compare(node.op, replace_param(node.left, old, new), replace_param(node.right, old, new))
    if isinstance(node, And):
        return And(replace_param(node.left, old, new), replace_param(node.right, old, new))
    if isinstance(node, Or):
        return Or(replace_param(node.left, old, new), replace_param(node.right, old, new))
    if isinstance(node, Not):
        return Not(replace_param(node.operand, old, new))
    if isinstance(node, Call):
        return Call(node.op, replace_param(node.target, old, new), tuple(replace_param(a, old, new) for a in node.args))
    return node


@dataclass(frozen=True, eq=False)
class Predicate:
    """
    도메인 엔티티 하나에 대한 불리언 술어.
    & | ~ 로 같은 엔티티의 술어끼리 조합할 수 있습니다.
    """

    param: Param
    body: Expr

    @property
    def entity(self) -> Type[Any]:
        return self.param._entity

    def _combine(self, other: "Predicate", node_type: Type[Expr]) -> "Predicate":
        if other.entity is not self.entity:
            raise TypeError(
                f"Cannot combine predicates over {self.entity.__name__} and {other.entity.__name__}"
            )
        return Predicate(self.param, node_type(self.body, replace_param(other.body, other.param, self.param)))

    def __and__(self, other: "Predicate") -> "Predicate":
        return self._combine(other, And)

    def __or__(self, other: "Predicate") -> "Predicate":
        return self._combine(other, Or)

    def __invert__(self) -> "Predicate":
        return Predicate(self.param, Not(self.body))


def predicate(entity: Type[Any], build: Callable[[Param], Any]) -> Predicate:
    """``build(param)`` 이 만든 표현식으로 술어를 생성합니다. (``lambda x: x.is_active`` 도 허용)"""
    param = Param(entity)
    body = build(param)
    if not isinstance(body, Expr):
        raise TypeError(f"Predicate body must be a filter expression, got {type(body).__name__}")
    return Predicate(param, body)
