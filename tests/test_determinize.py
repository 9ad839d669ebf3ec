from regexfsm.automata.fsa import Automaton, State, original_states_key
from regexfsm.compiler import Regex
from regexfsm.regex.parser import parse


def test_single_path():
    r = Regex("ab")
    assert len(r.dfa) == 3
    assert r.dfa.is_deterministic()
    assert r.dfa.accepts("ab")
    assert not r.dfa.accepts("abb")


def test_alternation():
    r = Regex("a|b")
    assert len(r.dfa) == 3
    assert len(r.dfa.accepting_states()) == 2


def test_state_sets_are_unique():
    for pattern in ("(a|b)*abb", "(a*b)*", "a(b|c)*a", "((a|b)(a|b))*"):
        dfa = Regex(pattern).dfa
        keys = [state.hash_original_states() for state in dfa.states]
        assert len(keys) == len(set(keys))
        assert all(state.original_states for state in dfa.states)
        assert dfa.check_invariants()


def test_start_state_stands_for_epsilon_closure():
    nfa = parse("a*b").build_automaton()
    dfa = nfa.determinize()
    expected = nfa.epsilon_closure([nfa.start_state])
    assert dfa.start_state.original_states == expected
    assert dfa.start_state.hash_original_states() == original_states_key(expected)


def test_input_is_not_modified():
    fsa = Regex("(a|b)*c").epsilon_free
    before = [(s.id, label, d.id) for s, label, d in fsa.triples()]
    fsa.determinize()
    assert [(s.id, label, d.id) for s, label, d in fsa.triples()] == before


def test_epsilon_nfa_directly():
    r = Regex("(a*b)*")
    dfa = r.nfa.determinize()
    assert dfa.is_deterministic()
    for text in ("", "b", "ab", "aab", "abb", "a", "ba", "bba"):
        assert dfa.accepts(text) == r.nfa.accepts(text)


def test_nondeterministic_choice():
    s0 = State(0, start=True)
    s1 = State(1)
    s2 = State(2, accepting=True)
    fsa = Automaton(s0, [s0, s1, s2], "ab")
    fsa.register_transition(s0, "a", s1)
    fsa.register_transition(s0, "a", s2)
    fsa.register_transition(s1, "b", s2)
    assert not fsa.is_deterministic()

    dfa = fsa.determinize()
    assert dfa.is_deterministic()
    assert sorted(s.hash_original_states() for s in dfa.states) == ["0", "1 2", "2"]
    assert dfa.accepts("a")
    assert dfa.accepts("ab")
    assert not dfa.accepts("b")


def test_original_states_key():
    states = [State(10), State(2), State(7)]
    assert original_states_key(states) == "2 7 10"
    assert original_states_key([]) == ""
