import re
from itertools import product

from regexfsm.automata.fsa import EPSILON
from regexfsm.compiler import Regex
from regexfsm.regex.parser import parse


def all_strings(alphabet, max_length):
    for length in range(max_length + 1):
        for chars in product(alphabet, repeat=length):
            yield "".join(chars)


def check_epsilon_free(pattern, alphabet="abc", max_length=5):
    nfa = parse(pattern).build_automaton()
    fsa = parse(pattern).build_automaton().eliminate_epsilon_transitions()

    assert not fsa.has_epsilon_transitions()
    assert fsa.check_invariants()
    assert fsa.reachable_states() == fsa.states
    for text in all_strings(alphabet, max_length):
        expected = re.fullmatch(pattern, text) is not None
        assert nfa.accepts(text) == expected, (pattern, text)
        assert fsa.accepts(text) == expected, (pattern, text)


def test_concat():
    fsa = parse("ab").build_automaton()
    assert len(fsa) == 4
    assert fsa.has_epsilon_transitions()

    fsa.eliminate_epsilon_transitions()
    assert len(fsa) == 3
    assert fsa.start_state.id == 0
    assert [(s.id, label, d.id) for s, label, d in fsa.triples()] == [
        (0, "a", 1),
        (1, "b", 3),
    ]
    assert fsa.accepts("ab")
    assert not fsa.accepts("a")


def test_alternation():
    fsa = parse("a|b").build_automaton().eliminate_epsilon_transitions()
    assert len(fsa) == 3
    assert set(fsa.start_state.transitions) == {"a", "b"}
    check_epsilon_free("a|b")


def test_star_merges_into_one_state():
    fsa = parse("a*").build_automaton().eliminate_epsilon_transitions()
    assert len(fsa) == 1
    state = fsa.start_state
    assert state.is_accepting_state
    assert state.transitions == {"a": {state}}


def test_returns_self():
    fsa = parse("a?").build_automaton()
    assert fsa.eliminate_epsilon_transitions() is fsa


def test_loop_back_to_start():
    # The start state is only reachable again through the loop, so it must
    # not be merged away
    check_epsilon_free("(ab*)*")
    check_epsilon_free("(a*b)*")
    check_epsilon_free("(ab)*c")


def test_epsilon_cycles():
    check_epsilon_free("(a*b*)*")
    check_epsilon_free("((a|b*)*c)*")
    check_epsilon_free("(a?)*b")
    check_epsilon_free("((a?)(b?))*")


def test_empty_branches():
    check_epsilon_free("")
    check_epsilon_free("()")
    check_epsilon_free("a|")
    check_epsilon_free("(|a)b")
    check_epsilon_free("a||b")


def test_mixed():
    for pattern in ("a(b|c)*a", "(a|b)*abb", "(a?b+)*c?", "((ab)|(ba))*", "a*b*c*"):
        check_epsilon_free(pattern)


def test_compiled_stage_is_separate():
    r = Regex("(ab)+")
    assert r.nfa.has_epsilon_transitions()
    assert not r.epsilon_free.has_epsilon_transitions()
    assert r.nfa is not r.epsilon_free
    assert any(EPSILON in s.transitions for s in r.nfa.states)


def test_long_alternation():
    n = 2000
    fsa = parse("|".join(["ab"] * n)).build_automaton()
    fsa.eliminate_epsilon_transitions()

    assert not fsa.has_epsilon_transitions()
    assert len(fsa.start_state.next_states("a")) == n
    assert len(fsa) == 1 + 2 * n
    assert fsa.accepts("ab")
    assert not fsa.accepts("abab")
