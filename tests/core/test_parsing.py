# tests/core/test_parsing.py

"""
필터 DSL 토크나이저와 파서에 대한 단위 테스트입니다.
"""

from decimal import Decimal

import pytest

from fam.core.exceptions import FilterSyntaxError, QueryError
from fam.core.querying.expressions import And, Call, Compare, Literal, Member, Not, Or
from fam.core.querying.parsing import EOF, IDENT, KEYWORD, NUMBER, OPERATOR, STRING, parse_filter, tokenize
from fam.domains.ven.crud import supplier_field_map
from fam.domains.ven.schemas import SupplierRead


def test_tokenize_kinds():
    tokens = list(tokenize("isActive == TRUE and name @contains('a\\'b') or -1.5 < 3"))
    kinds = [token.kind for token in tokens]
    assert kinds == [
        IDENT, OPERATOR, KEYWORD, KEYWORD, IDENT, OPERATOR, "LPAREN", STRING, "RPAREN",
        KEYWORD, NUMBER, OPERATOR, NUMBER, EOF,
    ]
    assert tokens[2].value == "true"
    assert tokens[5].value == "@contains"
    assert tokens[7].value == "a'b"
    assert tokens[10].value == "-1.5"


def test_parse_comparison_resolves_field_names():
    predicate = parse_filter("isActive == true", supplier_field_map)

    assert predicate.entity is SupplierRead
    body = predicate.body
    assert isinstance(body, Compare)
    assert body.op == "=="
    assert isinstance(body.left, Member) and body.left.name == "is_active"
    assert body.left.target is predicate.param
    assert isinstance(body.right, Literal) and body.right.value is True


def test_parse_precedence_and_binds_tighter_than_or():
    body = parse_filter("isPreferred or isActive and name == 'x'", supplier_field_map).body

    assert isinstance(body, Or)
    assert isinstance(body.left, Member) and body.left.name == "is_preferred"
    assert isinstance(body.right, And)
    assert isinstance(body.right.right, Compare)


def test_parse_parentheses_and_not():
    body = parse_filter("not (isPreferred or isActive) and name @startswith('S')", supplier_field_map).body

    assert isinstance(body, And)
    assert isinstance(body.left, Not)
    assert isinstance(body.left.operand, Or)
    call = body.right
    assert isinstance(call, Call)
    assert call.op == "startswith"
    assert [arg.value for arg in call.args] == ["S"]


def test_parse_call_arguments():
    body = parse_filter("id @between(1, 2.50) and supplierCode @in('A', \"B\") and email @isnull", supplier_field_map).body

    between = body.left.left
    assert between.op == "between"
    assert [arg.value for arg in between.args] == [1, Decimal("2.50")]
    in_call = body.left.right
    assert in_call.op == "in"
    assert [arg.value for arg in in_call.args] == ["A", "B"]
    assert body.right.op == "isnull"
    assert body.right.args == ()


def test_keywords_and_fields_are_case_insensitive():
    body = parse_filter("NAME == 'x' AND IS_ACTIVE == FALSE", supplier_field_map).body

    assert isinstance(body, And)
    assert body.left.left.name == "name"
    assert body.right.left.name == "is_active"
    assert body.right.right.value is False


def test_unknown_identifier_is_kept_for_validation():
    body = parse_filter("colour == 'red'", supplier_field_map).body
    assert body.left.name == "colour"


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "empty"),
        ("name == 'abc", "Unterminated string"),
        ("name @contains 'x'", "parenthesised"),
        ("name @foo('x')", "Unknown operator"),
        ("id @between(1)", "exactly 2"),
        ("name @contains('a', 'b')", "exactly 1"),
        ("name == 'x')", "Unexpected"),
        ("name = 'x'", "Unexpected character"),
        ("(name == 'x'", "Expected ')'"),
        ("id @in(1, name)", "literal argument"),
        ("id == 1.2.3", "Invalid number"),
        ("name == 'x' and", "Unexpected end of input"),
    ],
)
def test_syntax_errors(text, message):
    with pytest.raises(FilterSyntaxError) as exc_info:
        parse_filter(text, supplier_field_map)
    assert message in exc_info.value.message
    assert isinstance(exc_info.value, QueryError)


def test_syntax_error_reports_position():
    with pytest.raises(FilterSyntaxError) as exc_info:
        parse_filter("name == 'x' # 1", supplier_field_map)
    assert exc_info.value.position == 12


def test_long_filter_is_rejected_before_parsing():
    text = " and ".join(["isActive"] * 600)
    with pytest.raises(FilterSyntaxError) as exc_info:
        parse_filter(text, supplier_field_map, max_nodes=50)
    assert "too many terms" in exc_info.value.message


def test_token_budget_scales_with_node_limit():
    text = " and ".join(["isActive"] * 30)
    with pytest.raises(FilterSyntaxError):
        parse_filter(text, supplier_field_map, max_nodes=10)
    body = parse_filter(text, supplier_field_map, max_nodes=50).body
    assert isinstance(body, And)


@pytest.mark.parametrize(
    "text",
    [
        "((((isActive))))",
        "not not not not isActive",
        "not (isActive and (isPreferred or (name == 'x')))",
    ],
)
def test_nesting_deeper_than_limit_is_rejected(text):
    with pytest.raises(FilterSyntaxError) as exc_info:
        parse_filter(text, supplier_field_map, max_depth=3)
    assert "nested too deeply" in exc_info.value.message
    assert isinstance(exc_info.value, QueryError)


def test_nesting_within_limit_parses():
    body = parse_filter("(((isActive)))", supplier_field_map, max_depth=3).body
    assert isinstance(body, Member) and body.name == "is_active"

    body = parse_filter("not (isActive and not isPreferred)", supplier_field_map, max_depth=3).body
    assert isinstance(body, Not)


def test_deep_parentheses_do_not_exhaust_the_stack():
    text = "(" * 600 + "isActive" + ")" * 600
    with pytest.raises(FilterSyntaxError):
        parse_filter(text, supplier_field_map, max_depth=10, max_nodes=1000)
