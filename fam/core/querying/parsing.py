# fam/core/querying/parsing.py

"""
필터 DSL 토크나이저와 Pratt 파서.

    isActive == true and (name @contains('acme') or supplierCode @startswith("S-"))
    purchaseCost @between(100, 500) and not serialNo @isnull

우선순위 (낮음 → 높음): or(1) < and(2) < not(3) < 비교 연산자(4) < @연산자(5)

- 비교 연산자: == != > >= < <=
- 호출형 연산자: @contains @ncontains @startswith @endswith @in @nin @between @containsany
  (괄호 안의 리터럴 인자 목록을 받습니다. 괄호는 생략할 수 없습니다.)
- 인자 없는 연산자: @isnull @notnull
- 리터럴: '...' 또는 "..." 문자열 (\\ 이스케이프), 정수/소수 (음수 포함), true / false / null
- 키워드는 대소문자를 구분하지 않습니다.

필드 식별자는 FieldMap 의 이름 규칙(대소문자, '_' 무시)으로 도메인 필드명에 맞춥니다.
필드가 존재하는지, 필터가 허용되는지는 validation.py 에서 검사합니다.

파서는 입력 크기도 제한합니다. 토큰 수가 노드 상한의 TOKENS_PER_NODE 배를 넘거나
괄호/not 중첩이 깊이 상한을 넘으면 트리를 만들기 전에 FilterSyntaxError 를 냅니다.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterator, List, Optional

from fam.core.config import settings
from fam.core.exceptions import FilterSyntaxError
from fam.core.querying.expressions import (
    CALL_OPS, COMPARISON_OPS, NULLARY_CALL_OPS,
    And, Call, Compare, Expr, Literal, Member, Not, Or, Param, Predicate,
)
from fam.core.querying.field_map import FieldMap

# 토큰 종류
LPAREN = "LPAREN"
RPAREN = "RPAREN"
COMMA = "COMMA"
STRING = "STRING"
NUMBER = "NUMBER"
IDENT = "IDENT"
OPERATOR = "OPERATOR"
KEYWORD = "KEYWORD"
EOF = "EOF"

KEYWORDS = ("and", "or", "not", "true", "false", "null")

BP_OR = 1
BP_AND = 2
BP_NOT = 3
BP_COMPARE = 4
BP_CALL = 5

# 노드 하나에 붙는 구두점(괄호, 쉼표)까지 감안한 토큰 수 상한 배율
TOKENS_PER_NODE = 4


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    position: int


def tokenize(text: str) -> Iterator[Token]:
    """필터 문자열을 토큰 스트림으로 나눕니다. 마지막 토큰은 항상 EOF 입니다."""
    position = 0
    length = len(text)
    while True:
        while position < length and text[position].isspace():
            position += 1
        if position >= length:
            break

        ch = text[position]
        if ch == "(":
            yield Token(LPAREN, ch, position)
            position += 1
        elif ch == ")":
            yield Token(RPAREN, ch, position)
            position += 1
        elif ch == ",":
            yield Token(COMMA, ch, position)
            position += 1
        elif ch in ("'", '"'):
            start = position
            position += 1
            chars = []
            while position < length and text[position] != ch:
                if text[position] == "\\" and position + 1 < length:
                    position += 1
                chars.append(text[position])
                position += 1
            if position >= length:
                raise FilterSyntaxError("Unterminated string", start)
            position += 1
            yield Token(STRING, "".join(chars), start)
        elif ch.isdigit() or (ch == "-" and position + 1 < length and text[position + 1].isdigit()):
            start = position
            position += 1
            while position < length and (text[position].isdigit() or text[position] == "."):
                position += 1
            yield Token(NUMBER, text[start:position], start)
        elif ch == "@":
            start = position
            position += 1
            while position < length and text[position].isalpha():
                position += 1
            if position == start + 1:
                raise FilterSyntaxError("Expected operator name after '@'", start)
            yield Token(OPERATOR, text[start:position].lower(), start)
        elif ch in "=!<>":
            start = position
            two = text[position:position + 2]
            if two in ("==", "!=", ">=", "<="):
                position += 2
                yield Token(OPERATOR, two, start)
            elif ch in "<>":
                position += 1
                yield Token(OPERATOR, ch, start)
            else:
                raise FilterSyntaxError(f"Unexpected character '{ch}'", start)
        elif ch.isalpha() or ch == "_":
            start = position
            while position < length and (text[position].isalnum() or text[position] == "_"):
                position += 1
            word = text[start:position]
            if word.lower() in KEYWORDS:
                yield Token(KEYWORD, word.lower(), start)
            else:
                yield Token(IDENT, word, start)
        else:
            raise FilterSyntaxError(f"Unexpected character '{ch}'", position)

    yield Token(EOF, "", position)


def _number(token: Token) -> Any:
    # 소수는 Decimal 로 읽습니다.
    try:
        return Decimal(token.value) if "." in token.value else int(token.value)
    except (ValueError, ArithmeticError):
        raise FilterSyntaxError(f"Invalid number '{token.value}'", token.position) from None


class FilterParser:
    """
    Pratt(top-down operator precedence) 파서.
    ``FilterParser(text, field_map).parse()`` 는 field_map.domain 에 대한 Predicate 를 반환합니다.
    """

    def __init__(
        self,
        text: str,
        field_map: FieldMap,
        *,
        max_depth: Optional[int] = None,
        max_nodes: Optional[int] = None,
    ):
        self.text = text
        self.field_map = field_map
        self.param = Param(field_map.domain)
        self.max_depth = settings.MAX_FILTER_DEPTH if max_depth is None else max_depth
        max_nodes = settings.MAX_FILTER_NODES if max_nodes is None else max_nodes
        max_tokens = max_nodes * TOKENS_PER_NODE

        self.tokens: List[Token] = []
        for token in tokenize(text):
            # EOF 는 세지 않습니다.
            if len(self.tokens) >= max_tokens and token.kind != EOF:
                raise FilterSyntaxError(f"Filter has too many terms (max {max_nodes} nodes)", token.position)
            self.tokens.append(token)
        self.index = 0
        self.depth = 0

    # --- 토큰 헬퍼 ---
    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind != EOF:
            self.index += 1
        return token

    def expect(self, kind: str, what: str) -> Token:
        token = self.current
        if token.kind != kind:
            raise FilterSyntaxError(f"Expected {what} but found {self._describe(token)}", token.position)
        return self.advance()

    @staticmethod
    def _describe(token: Token) -> str:
        return "end of input" if token.kind == EOF else f"'{token.value}'"

    # --- 파싱 ---
    def parse(self) -> Predicate:
        if self.current.kind == EOF:
            raise FilterSyntaxError("Filter expression is empty", 0)
        body = self.expression(0)
        if self.current.kind != EOF:
            raise FilterSyntaxError(f"Unexpected {self._describe(self.current)}", self.current.position)
        return Predicate(self.param, body)

    def expression(self, min_bp: int) -> Expr:
        left = self.prefix(self.advance())
        while True:
            token = self.current
            bp = self._infix_bp(token)
            if bp is None or bp <= min_bp:
                return left
            self.advance()
            left = self.infix(token, left, bp)

    def nested(self, token: Token, min_bp: int) -> Expr:
        """괄호나 not 안쪽 식. 중첩 깊이가 상한을 넘으면 더 내려가지 않습니다."""
        if self.depth >= self.max_depth:
            raise FilterSyntaxError(f"Filter is nested too deeply (max depth {self.max_depth})", token.position)
        self.depth += 1
        try:
            return self.expression(min_bp)
        finally:
            self.depth -= 1

    def prefix(self, token: Token) -> Expr:
        if token.kind == KEYWORD:
            if token.value == "not":
                return Not(self.nested(token, BP_NOT))
            if token.value == "true":
                return Literal(True)
            if token.value == "false":
                return Literal(False)
            if token.value == "null":
                return Literal(None)
        if token.kind == LPAREN:
            inner = self.nested(token, 0)
            self.expect(RPAREN, "')'")
            return inner
        if token.kind == IDENT:
            name = self.field_map.canonical_name(token.value) or token.value
            return Member(self.param, name)
        if token.kind == STRING:
            return Literal(token.value)
        if token.kind == NUMBER:
            return Literal(_number(token))
        raise FilterSyntaxError(f"Unexpected {self._describe(token)}", token.position)

    @staticmethod
    def _infix_bp(token: Token) -> Optional[int]:
        if token.kind == KEYWORD and token.value == "or":
            return BP_OR
        if token.kind == KEYWORD and token.value == "and":
            return BP_AND
        if token.kind == OPERATOR and token.value in COMPARISON_OPS:
            return BP_COMPARE
        if token.kind == OPERATOR and token.value.startswith("@"):
            return BP_CALL
        return None

    def infix(self, token: Token, left: Expr, bp: int) -> Expr:
        if token.kind == KEYWORD and token.value == "or":
            return Or(left, self.expression(bp))
        if token.kind == KEYWORD and token.value == "and":
            return And(left, self.expression(bp))
        if token.value in COMPARISON_OPS:
            return Compare(token.value, left, self.expression(bp))

        op = token.value[1:]
        if op not in CALL_OPS:
            raise FilterSyntaxError(f"Unknown operator '{token.value}'", token.position)
        if op in NULLARY_CALL_OPS:
            return Call(op, left, ())
        args = self.arguments(token)
        if op == "between" and len(args) != 2:
            raise FilterSyntaxError("@between expects exactly 2 arguments", token.position)
        if op in ("contains", "ncontains", "startswith", "endswith") and len(args) != 1:
            raise FilterSyntaxError(f"{token.value} expects exactly 1 argument", token.position)
        return Call(op, left, tuple(args))

    def arguments(self, operator: Token) -> List[Literal]:
        if self.current.kind != LPAREN:
            raise FilterSyntaxError(f"{operator.value} requires a parenthesised argument list", self.current.position)
        self.advance()
        args: List[Literal] = []
        if self.current.kind == RPAREN:
            self.advance()
            return args
        while True:
            args.append(self.argument())
            if self.current.kind == COMMA:
                self.advance()
                continue
            self.expect(RPAREN, "')' or ','")
            return args

    def argument(self) -> Literal:
        token = self.advance()
        if token.kind == STRING:
            return Literal(token.value)
        if token.kind == NUMBER:
            return Literal(_number(token))
        if token.kind == KEYWORD and token.value in ("true", "false", "null"):
            return Literal({"true": True, "false": False, "null": None}[token.value])
        raise FilterSyntaxError(f"Expected a literal argument but found {self._describe(token)}", token.position)


def parse_filter(
    text: str, field_map: FieldMap, *, max_depth: Optional[int] = None, max_nodes: Optional[int] = None
) -> Predicate:
    """
    필터 DSL 문자열을 field_map.domain 에 대한 Predicate 로 파싱합니다.
    max_depth / max_nodes 를 주지 않으면 settings 의 MAX_FILTER_DEPTH / MAX_FILTER_NODES 를 씁니다.
    """
    return FilterParser(text, field_map, max_depth=max_depth, max_nodes=max_nodes).parse()
