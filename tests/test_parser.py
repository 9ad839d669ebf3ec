import pytest
from regexfsm.errors import (
    DanglingQuantifierError,
    ImplicitEmptyError,
    NestingTooDeepError,
    QuantifierRangeError,
    RegexSyntaxError,
    UnknownCharacterError,
    UnmatchedParenError,
)
from regexfsm.regex.nodes import (
    Alternation,
    Character,
    Concat,
    Paren,
    Quantifier,
    VariadicAlternation,
)
from regexfsm.regex.parser import find_parens, parse

a, b, c = Character("a"), Character("b"), Character("c")


def test_literals():
    assert parse("a") == a
    assert parse("ab") == Concat([a, b])
    assert parse("Z9") == Concat([Character("Z"), Character("9")])


def test_precedence():
    assert parse("ab*|c") == Alternation(Concat([a, Quantifier(0, None, b)]), c)
    assert parse("(a|b)c") == Concat([Paren(Alternation(a, b)), c])
    assert parse("ab+") == Concat([a, Quantifier(1, None, b)])
    assert parse("(ab)?") == Quantifier(0, 1, Paren(Concat([a, b])))


def test_alternation_folds_right():
    node = parse("a|b|c")
    assert node == Alternation(a, Alternation(b, c))
    assert node.left == a
    assert isinstance(node.right, Alternation)
    assert node.options() == [a, b, c]
    assert node.pipe_pos == 1
    assert node.right.pipe_pos == 3


def test_variadic_alternatives():
    node = parse("a|b|c", variadic_alternatives=True)
    assert node == VariadicAlternation([a, b, c])
    assert node.pipe_positions == [1, 3]

    node = parse("(a|b)|c", variadic_alternatives=True)
    assert node == VariadicAlternation([Paren(VariadicAlternation([a, b])), c])


def test_stacked_quantifiers():
    assert parse("a**") == Quantifier(0, None, Quantifier(0, None, a))
    assert parse("a+?") == Quantifier(0, 1, Quantifier(1, None, a))


def test_positions():
    node = parse("(ab)*")
    assert (node.start_pos, node.end_pos) == (4, 5)
    assert node.text == "*"
    paren = node.body
    assert (paren.start_pos, paren.end_pos) == (0, 4)
    assert paren.inner.parts[1].start_pos == 2

    node = parse("xy|z")
    assert node.left.start_pos == 0
    assert node.left.end_pos == 2


def test_find_parens():
    assert find_parens("(a(b))") == {0: 5, 5: 0, 2: 4, 4: 2}
    assert find_parens("()(ab)") == {0: 1, 1: 0, 2: 5, 5: 2}
    assert find_parens("ab") == {}


def test_unmatched_parens():
    with pytest.raises(UnmatchedParenError) as excinfo:
        parse("(a")
    assert excinfo.value.position == 0

    with pytest.raises(UnmatchedParenError) as excinfo:
        parse("a)")
    assert excinfo.value.position == 1

    with pytest.raises(UnmatchedParenError) as excinfo:
        parse("(a)(b")
    assert excinfo.value.position == 3


def test_dangling_quantifiers():
    for pattern, position in (("*a", 0), ("a|*", 2), ("(*)", 1), ("+", 0)):
        with pytest.raises(DanglingQuantifierError) as excinfo:
            parse(pattern)
        assert excinfo.value.position == position


def test_unknown_characters():
    for pattern, position in (("a.b", 1), ("a{2}", 1), ("a b", 1), ("[ab]", 0)):
        with pytest.raises(UnknownCharacterError) as excinfo:
            parse(pattern)
        assert excinfo.value.position == position


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse("(")

    try:
        parse("ab)")
    except RegexSyntaxError as e:
        assert str(e).endswith("at position 2")
        assert e.pattern == "ab)"
    else:
        raise AssertionError("Expected a syntax error")


def test_implicit_empty():
    assert parse("") == Concat([])
    assert parse("()") == Paren(Concat([]))
    assert parse("a|") == Alternation(a, Concat([]))
    assert parse("|a") == Alternation(Concat([]), a)


def test_implicit_empty_disallowed():
    for pattern, position in (("", 0), ("a|", 2), ("|a", 0), ("()", 1), ("a||b", 2)):
        with pytest.raises(ImplicitEmptyError) as excinfo:
            parse(pattern, allow_implicit_empty=False)
        assert excinfo.value.position == position

    assert parse("a|b", allow_implicit_empty=False) == Alternation(a, b)


def test_bounded_repetition():
    assert parse("a{2,3}", bounded_repetition=True) == Quantifier(2, 3, a)
    assert parse("a{2}", bounded_repetition=True) == Quantifier(2, 2, a)
    assert parse("a{2,}", bounded_repetition=True) == Quantifier(2, None, a)
    assert parse("a{0,1}b", bounded_repetition=True) == Concat(
        [Quantifier(0, 1, a), b]
    )

    node = parse("(ab){1,2}", bounded_repetition=True)
    assert node.text == "{1,2}"
    assert (node.start_pos, node.end_pos) == (4, 9)


def test_bounded_repetition_errors():
    with pytest.raises(QuantifierRangeError):
        parse("a{3,2}", bounded_repetition=True)

    for pattern in ("a{x}", "a{,2}", "a{1,y}", "a{}"):
        with pytest.raises(RegexSyntaxError) as excinfo:
            parse(pattern, bounded_repetition=True)
        assert excinfo.value.position == 1

    with pytest.raises(RegexSyntaxError):
        parse("a{2", bounded_repetition=True)

    with pytest.raises(DanglingQuantifierError):
        parse("{2}", bounded_repetition=True)


def test_nesting_depth():
    deep = "(" * 150 + "a" + ")" * 150
    with pytest.raises(NestingTooDeepError):
        parse(deep)

    node = parse(deep, max_depth=200)
    assert isinstance(node, Paren)
    assert node.alphabet() == {"a"}

    with pytest.raises(NestingTooDeepError):
        parse("a" + "*" * 40)


def test_str_round_trip():
    for pattern in ("(a|b)*c", "ab|c", "a(b|c)+", "(ab)?c*", "a|b|c"):
        assert str(parse(pattern)) == pattern
