import re
from itertools import product

import pytest
import regexfsm
from loguru import logger
from regexfsm.compiler import Regex, compile
from regexfsm.errors import UnmatchedParenError

PATTERNS = [
    "",
    "a",
    "ab",
    "a|b",
    "a*",
    "a+",
    "a?",
    "(ab)+",
    "(ab)*",
    "(a|b)*abb",
    "(a*b)*",
    "(ab*)*",
    "(a*b*)*",
    "((a|b*)*c)*",
    "a(b|c)*a",
    "(a|)b",
    "a||b",
    "(a?b+)*c?",
    "((ab)|(ba))*",
    "a*b*c*",
    "(a|b|c)+",
    "(a?)*b",
    "c(a|bc)*|b",
]


def all_strings(alphabet, max_length):
    for length in range(max_length + 1):
        for chars in product(alphabet, repeat=length):
            yield "".join(chars)


def check_regex(regex, oracle, alphabet="abc", max_length=6):
    for text in all_strings(alphabet, max_length):
        expected = re.fullmatch(oracle, text) is not None
        assert regex.matches(text) == expected, (regex.pattern, text)


def test_minimal_dfa_matches_re():
    for pattern in PATTERNS:
        check_regex(Regex(pattern), pattern)


def test_examples():
    r = Regex("ab")
    assert len(r.nfa) >= 2
    assert len(r.dfa) == 3
    assert [t for t in all_strings("ab", 4) if r.matches(t)] == ["ab"]

    r = Regex("a*")
    assert all(r.matches(t) for t in ("", "a", "aaaa"))
    assert not any(r.matches(t) for t in ("b", "ab"))

    r = Regex("a|b")
    assert [t for t in all_strings("ab", 4) if r.matches(t)] == ["a", "b"]

    r = Regex("(ab)+")
    assert r.matches("ab")
    assert r.matches("abab")
    assert not r.matches("")
    assert not r.matches("a")


def test_every_stage_agrees():
    for pattern in PATTERNS:
        r = Regex(pattern)
        stages = [r.nfa, r.epsilon_free, r.dfa, r.minimal_dfa]
        for stage in stages:
            assert stage.check_invariants()
        for text in all_strings("abc", 4):
            results = {stage.accepts(text) for stage in stages}
            assert len(results) == 1, (pattern, text)


def test_variadic_alternatives_match_re():
    for pattern in ("a|b|c", "(a|bc|)*", "a(b|c|ab)"):
        check_regex(Regex(pattern, variadic_alternatives=True), pattern)


def test_bounded_repetition_matches_re():
    for pattern in ("a{2,3}", "(ab){1,2}c", "a{2,}b", "(a|b){3}", "(a{0,2}b){2}"):
        check_regex(Regex(pattern, bounded_repetition=True), pattern)


def test_minimal_is_no_larger():
    for pattern in PATTERNS:
        r = Regex(pattern)
        assert len(r.minimal_dfa) <= len(r.dfa)
        assert r.minimal_dfa.is_deterministic()


def test_stages_are_cached():
    r = Regex("(ab)+")
    assert r.ast is r.ast
    assert r.nfa is r.nfa
    assert r.minimal_dfa is r.minimal_dfa
    assert r.matches("abab")
    assert not r.matches("aba")
    assert repr(r) == "Regex('(ab)+')"


def test_compile_parses_eagerly():
    with pytest.raises(UnmatchedParenError):
        compile("(ab")

    r = compile("a{2}", bounded_repetition=True)
    assert r.matches("aa")
    assert not r.matches("a")

    # Without compile() the error only shows up on first use
    r = Regex("(ab")
    with pytest.raises(UnmatchedParenError):
        r.matches("ab")


def test_logging():
    messages = []
    handler = logger.add(messages.append, level="DEBUG", format="{message}")
    logger.enable("regexfsm")
    r = Regex("a|b")
    try:
        r.minimal_dfa
    finally:
        logger.disable("regexfsm")
        logger.remove(handler)

    # The pipeline builds its own NFA without going through the nfa stage
    assert "nfa" not in r.__dict__
    text = "".join(messages)
    assert "Built NFA for 'a|b'" in text
    assert "Eliminated epsilons for 'a|b'" in text
    assert "Minimized 3 states into 2" in text

    messages = []
    handler = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        Regex("a|b").minimal_dfa
    finally:
        logger.remove(handler)
    assert messages == []


def test_version():
    assert regexfsm.versionstring() == "0.1.0"
    assert regexfsm.versionstring(build=False) == "0.1"
