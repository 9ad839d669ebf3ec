# Copyright 2014 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

"""
Mutable automaton graphs.

An :class:`Automaton` owns a set of :class:`State` objects. Every transition
is stored twice, once in the source state's ``transitions`` table and once in
the destination state's ``inverse_transitions`` table, and the destination's
``indegree`` counts the distinct ``(symbol, source)`` pairs pointing at it.
All edits go through the automaton's mutation primitives so the three views
never drift apart, and removing an edge immediately garbage collects any
states it leaves unreachable.

The same class represents epsilon-NFAs, NFAs and DFAs. A DFA is simply an
automaton with no :data:`EPSILON` transitions and at most one destination per
``(state, symbol)`` pair.
"""

import sys
from collections import deque, namedtuple
from itertools import count
from operator import attrgetter

from loguru import logger

from regexfsm.automata.partition import Partition
from regexfsm.errors import AutomatonInvariantError, UnknownSymbolError
from regexfsm.util import live

# Marker constants


class Marker:
    """
    Represents a marker object.

    Markers are used to label special transitions that are not ordinary input
    symbols.

    Attributes:
        name (str): The name of the marker.
    """

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"<{self.name}>"


EPSILON = Marker("EPSILON")

by_id = attrgetter("id")

NodeView = namedtuple(
    "NodeView", "id name is_start is_accepting is_active is_trap layer"
)
EdgeView = namedtuple("EdgeView", "source symbol dest")


def original_states_key(states):
    """
    Returns a canonical key for a set of states: their IDs, sorted and joined
    with spaces.
    """
    return " ".join(str(i) for i in sorted({s.id for s in states}))


def _label_key(symbol):
    # Sorts EPSILON before every ordinary symbol
    return (symbol is not EPSILON, "" if symbol is EPSILON else symbol)


class State:
    """
    A node in an automaton graph.

    States compare by identity. The integer ``id`` is only used to order
    states and to build canonical keys for sets of states.

    Attributes:
        id (int): Identifier, unique within one automaton.
        name (str): Optional human readable label.
        is_start_state (bool): True for the automaton's single start state.
        is_accepting_state (bool): True if reading can stop here.
        is_trap_state (bool): True if this state cannot lead to acceptance.
            This is a display hint, see :meth:`Automaton.mark_trap_states`.
        transitions (dict): Maps each symbol to the set of destination states.
        inverse_transitions (dict): Maps each symbol to the set of states with
            a transition into this state on that symbol.
        indegree (int): Number of distinct ``(symbol, source)`` pairs with a
            transition into this state.
        original_states (frozenset): For states created by subset
            construction or minimization, the states of the input automaton
            this state stands for. Empty otherwise.
    """

    def __init__(self, ident, start=False, accepting=False, name="", trap=False):
        self.id = ident
        self.name = name
        self.is_start_state = start
        self.is_accepting_state = accepting
        self.is_trap_state = trap
        self.transitions = {}
        self.inverse_transitions = {}
        self.indegree = 0
        self.original_states = frozenset()

    def __repr__(self):
        flags = ""
        if self.is_start_state:
            flags += "@"
        if self.is_accepting_state:
            flags += "||"
        label = f" {self.name!r}" if self.name else ""
        return f"<State {self.id}{label}{flags}>"

    def next_states(self, symbol):
        """
        Returns the states reachable from this state by one transition on
        `symbol`, without following epsilon transitions.

        Args:
            symbol: The input symbol, or EPSILON.

        Returns:
            frozenset: The destination states (empty if there are none).
        """
        return frozenset(self.transitions.get(symbol, ()))

    def out_edges(self):
        """
        Yields ``(symbol, dest)`` pairs for every outgoing transition, in a
        stable order.
        """
        for symbol in sorted(self.transitions, key=_label_key):
            for dest in sorted(self.transitions[symbol], key=by_id):
                yield symbol, dest

    def in_edges(self):
        """
        Yields ``(source, symbol)`` pairs for every incoming transition.
        """
        for symbol, sources in self.inverse_transitions.items():
            for src in sources:
                yield src, symbol

    def hash_original_states(self):
        """
        Returns a canonical key for the set of original states this state
        represents.
        """
        return original_states_key(self.original_states)


class Automaton:
    """
    A finite automaton built from mutable :class:`State` objects.

    Construction checks that `start_state` claims to be a start state, so an
    automaton is never observable without a valid start.

    Attributes:
        start_state (State): The start state. Never None.
        states (set): Every live state of the automaton.
        alphabet (set): The input symbols, excluding EPSILON.
        strict (bool): If True, reading a symbol outside the alphabet raises
            UnknownSymbolError. Otherwise the automaton silently moves to the
            empty set of states.
        current_states (set): The active states during simulation.
        visit_history (dict): Maps each visited state to the input position
            where it was first entered since the last reset.
        pumping_interval (tuple or None): ``(i, j)`` once some state has been
            entered at input positions ``i`` and ``j``; the input between
            those positions can be pumped.
        symbol_number (int): Number of symbols read since the last reset.
        discarded (bool): True once this automaton has been spliced into
            another one.
    """

    def __init__(self, start_state, states=(), alphabet=(), strict=False):
        if not start_state.is_start_state:
            raise AutomatonInvariantError(
                f"Start state {start_state!r} is not marked as a start state"
            )

        self.start_state = start_state
        self.states = set(states)
        self.states.add(start_state)
        self.alphabet = set(alphabet)
        self.alphabet.discard(EPSILON)
        self.strict = strict
        self.discarded = False

        self.current_states = set()
        self.visit_history = {}
        self.pumping_interval = None
        self.symbol_number = 0
        self.reset()

    def __len__(self):
        """
        Returns the number of live states.
        """
        return len(self.states)

    def __repr__(self):
        kind = "DFA" if self.is_deterministic() else "NFA"
        return (
            f"<{kind} states={len(self.states)} start={self.start_state!r} "
            f"alphabet={''.join(sorted(self.alphabet))!r}>"
        )

    # Queries

    def sorted_states(self):
        """
        Returns the live states ordered by ID.
        """
        return sorted(self.states, key=by_id)

    def accepting_states(self):
        """
        Returns the set of live accepting states.
        """
        return {state for state in self.states if state.is_accepting_state}

    def triples(self):
        """
        Generates all ``(source state, label, destination state)`` triples in
        the automaton, ordered by source ID.
        """
        for src in self.sorted_states():
            for label, dest in src.out_edges():
                yield src, label, dest

    def has_epsilon_transitions(self):
        return any(EPSILON in state.transitions for state in self.states)

    def is_deterministic(self):
        """
        Checks whether this automaton is a DFA: no epsilon transitions and no
        more than one destination for any ``(state, symbol)`` pair. Missing
        transitions are allowed.

        Returns:
            bool: True if the automaton is deterministic.
        """
        for state in self.states:
            for symbol, dests in state.transitions.items():
                if symbol is EPSILON or len(dests) > 1:
                    return False
        return True

    def reachable_states(self, src=None):
        """
        Returns the set of states that can be reached from `src` (the start
        state by default), following transitions on any symbol including
        EPSILON. The source itself is included.
        """
        src = self.start_state if src is None else src
        reached = {src}
        stack = [src]
        while stack:
            state = stack.pop()
            for dests in state.transitions.values():
                for dest in dests:
                    if dest not in reached:
                        reached.add(dest)
                        stack.append(dest)
        return reached

    def epsilon_closure(self, states):
        """
        Expands the given states by following epsilon transitions.

        Args:
            states (iterable): The states to expand.

        Returns:
            set: A new set containing `states` and every state reachable from
            them through epsilon transitions alone.
        """
        closure = set(states)
        frontier = list(closure)
        while frontier:
            state = frontier.pop()
            for dest in state.transitions.get(EPSILON, ()):
                if dest not in closure:
                    closure.add(dest)
                    frontier.append(dest)
        return closure

    def check_invariants(self):
        """
        Verifies the structural invariants of the graph.

        * exactly one live state is flagged as the start state, and it is
          ``start_state``;
        * every transition points at a live state and is mirrored in the
          destination's ``inverse_transitions``, and vice versa;
        * every ``indegree`` equals the number of distinct ``(symbol, source)``
          pairs with a transition into the state;
        * no transition table holds an empty set;
        * state IDs are unique.

        Returns:
            bool: True. Any violation raises instead.

        Raises:
            AutomatonInvariantError: If an invariant does not hold.
        """
        starts = [state for state in self.states if state.is_start_state]
        if starts != [self.start_state]:
            raise AutomatonInvariantError(
                f"Expected {self.start_state!r} to be the only start state, "
                f"found {starts!r}"
            )

        ids = [state.id for state in self.states]
        if len(set(ids)) != len(ids):
            raise AutomatonInvariantError("State IDs are not unique")

        incoming = {state: 0 for state in self.states}
        for src in self.states:
            for symbol, dests in src.transitions.items():
                if not dests:
                    raise AutomatonInvariantError(
                        f"{src!r} has an empty transition set for {symbol!r}"
                    )
                for dest in dests:
                    if dest not in self.states:
                        raise AutomatonInvariantError(
                            f"{src!r} -{symbol!r}-> {dest!r} leaves the automaton"
                        )
                    if src not in dest.inverse_transitions.get(symbol, ()):
                        raise AutomatonInvariantError(
                            f"{src!r} -{symbol!r}-> {dest!r} has no inverse entry"
                        )
                    incoming[dest] += 1

        for state in self.states:
            if state.indegree != incoming[state]:
                raise AutomatonInvariantError(
                    f"{state!r} has indegree {state.indegree} but "
                    f"{incoming[state]} incoming transitions"
                )
            for symbol, sources in state.inverse_transitions.items():
                if not sources:
                    raise AutomatonInvariantError(
                        f"{state!r} has an empty inverse set for {symbol!r}"
                    )
                for src in sources:
                    if state not in src.transitions.get(symbol, ()):
                        raise AutomatonInvariantError(
                            f"Inverse entry {src!r} -{symbol!r}-> {state!r} "
                            "has no forward transition"
                        )
        return True

    # Mutation primitives

    @live
    def register_transition(self, src, symbol, dest):
        """
        Adds a transition from `src` to `dest` on `symbol`.

        This is idempotent: registering an existing transition again changes
        nothing, in particular ``dest.indegree`` is only incremented the first
        time. Both states become members of the automaton, and a non-epsilon
        symbol joins the alphabet.

        Args:
            src (State): The source state.
            symbol: The input symbol, or EPSILON.
            dest (State): The destination state.
        """
        dests = src.transitions.setdefault(symbol, set())
        sources = dest.inverse_transitions.setdefault(symbol, set())
        if dest not in dests:
            dests.add(dest)
            dest.indegree += 1
        sources.add(src)

        self.states.add(src)
        self.states.add(dest)
        if symbol is not EPSILON:
            self.alphabet.add(symbol)

    def _detach(self, src, symbol, dest):
        # Removes one edge and its mirror without any reachability check
        dests = src.transitions.get(symbol)
        if dests is None or dest not in dests:
            return False

        dests.discard(dest)
        dest.indegree -= 1
        if not dests:
            del src.transitions[symbol]

        sources = dest.inverse_transitions[symbol]
        sources.discard(src)
        if not sources:
            del dest.inverse_transitions[symbol]
        return True

    @live
    def unregister_transition(self, src, symbol, dest):
        """
        Removes the transition from `src` to `dest` on `symbol`, if it exists,
        and then garbage collects `dest` if that left it unreachable.

        Args:
            src (State): The source state.
            symbol: The input symbol, or EPSILON.
            dest (State): The destination state.

        Returns:
            list: The states removed from the automaton as a consequence.
        """
        self._detach(src, symbol, dest)
        return self.cleanup_state(dest)

    @live
    def cleanup_state(self, state):
        """
        Removes `state` from the automaton if it can no longer be reached from
        the start state, cascading to any states that only it led to.

        An unreachable state either has an indegree of zero, or only has
        incoming transitions from other unreachable states. The first case is
        detected from the counter alone. In the second case the state's
        ancestors are walked through ``inverse_transitions``; if the start
        state is not among them, the state and all of its ancestors form an
        unreachable island and are removed together.

        Removal is driven by a worklist, so long chains of unreachable states
        do not grow the call stack.

        Args:
            state (State): The state to check.

        Returns:
            list: The removed states, in removal order.
        """
        removed = []
        worklist = [state]
        while worklist:
            candidate = worklist.pop()
            if candidate not in self.states or candidate.is_start_state:
                continue

            if candidate.indegree == 0:
                doomed = {candidate}
            else:
                doomed = self._unreachable_ancestors(candidate)
                if not doomed:
                    continue

            for dead in sorted(doomed, key=by_id):
                for symbol, dest in list(dead.out_edges()):
                    self._detach(dead, symbol, dest)
                    if dest not in doomed:
                        worklist.append(dest)

            self.states -= doomed
            self.current_states -= doomed
            removed.extend(sorted(doomed, key=by_id))

        if removed:
            logger.trace("Removed unreachable states {}", removed)
        return removed

    def _unreachable_ancestors(self, state):
        # Returns the state and all of its ancestors if none of them is the
        # start state, otherwise an empty set
        seen = {state}
        stack = [state]
        while stack:
            current = stack.pop()
            for src, _ in current.in_edges():
                if src.is_start_state:
                    return set()
                if src not in seen:
                    seen.add(src)
                    stack.append(src)
        return seen

    @live
    def transfer_start_state(self, former, new):
        """
        Moves start state status from `former` to `new`.

        Args:
            former (State): The current start state.
            new (State): The state that should become the start state.

        Raises:
            AutomatonInvariantError: If `former` is not the current start
                state.
        """
        if not former.is_start_state or former is not self.start_state:
            raise AutomatonInvariantError(
                f"Tried to transfer the start state away from {former!r}, "
                "which is not the current start state"
            )

        former.is_start_state = False
        new.is_start_state = True
        self.start_state = new
        self.states.add(new)

    @live
    def merge_states(self, other, target):
        """
        Copies all the outgoing transitions of `other` onto `target`.

        This is intended to be called only when `other` and `target` are
        equivalent (any input leads to the same outcome from either state).
        The accepting flag is merged with OR semantics, a self-loop on `other`
        becomes a self-loop on `target`, and if `other` was the start state
        the start state moves to `target`.

        It is the responsibility of the caller to disconnect `other` from
        `target` afterwards; this method only adds transitions.

        Args:
            other (State): The state being merged away.
            target (State): The state that takes over its transitions.
        """
        if other is target:
            return

        if other.is_accepting_state:
            target.is_accepting_state = True

        for symbol, child in list(other.out_edges()):
            dest = target if child is other else child
            self.register_transition(target, symbol, dest)

        if other.is_start_state:
            self.transfer_start_state(other, target)

    @live
    def absorb_state(self, other, target):
        """
        Copies the outgoing transitions and the accepting flag of `other` onto
        `target`, unchanged.

        Unlike :meth:`merge_states` this only assumes that `target` can do
        everything `other` can, not the reverse, so self-loops on `other`
        still point at `other` and the start state stays where it is. This is
        what removing an epsilon transition ``target -> other`` requires.
        """
        if other is target:
            return

        if other.is_accepting_state:
            target.is_accepting_state = True

        for symbol, child in list(other.out_edges()):
            self.register_transition(target, symbol, child)

    @live
    def splice(self, other):
        """
        Moves the states and alphabet of `other` into this automaton.

        `other` is discarded: its states now belong to this automaton, and
        further calls on `other` raise AutomatonInvariantError. The caller is
        responsible for linking the two graphs and clearing the start flag of
        ``other.start_state``.

        Args:
            other (Automaton): The automaton to absorb.

        Returns:
            State: The former start state of `other`.
        """
        if other is self:
            raise AutomatonInvariantError("Cannot splice an automaton into itself")

        self.states |= other.states
        self.alphabet |= other.alphabet
        other_start = other.start_state
        other.discard()
        return other_start

    def discard(self):
        """
        Marks this automaton as unusable after its states were moved
        elsewhere.
        """
        self.discarded = True
        self.states = set()
        self.current_states = set()

    @live
    def append(self, other):
        """
        Appends another automaton to this one (concatenation).

        Every accepting state of this automaton gets an epsilon transition to
        the start state of `other` and stops accepting; the start state of
        `other` stops being a start state. The accepting states of the result
        are the accepting states of `other`.

        Args:
            other (Automaton): The automaton to append. It is discarded.
        """
        finals = sorted(self.accepting_states(), key=by_id)
        other_start = self.splice(other)
        other_start.is_start_state = False
        for state in finals:
            self.register_transition(state, EPSILON, other_start)
            state.is_accepting_state = False

    # Transformations

    @live
    def eliminate_epsilon_transitions(self):
        """
        Rewrites this automaton in place so it has no epsilon transitions,
        without changing the accepted language.

        States are visited from the highest ID down, so the branching states
        that fragment construction adds last are handled before the states
        they lead to. For every state, each epsilon child is folded into the
        state and the epsilon transition is removed, until the state has no
        epsilon children left. Epsilon transitions copied over from a child
        are handled by later rounds of the same loop. When the epsilon transition
        is the state's only way forward the two states are equivalent and are
        merged with :meth:`merge_states`; otherwise the child's behaviour is
        only added to the state with :meth:`absorb_state`. A child that has
        already been folded into a state is not folded in again, which makes
        epsilon cycles terminate.

        Children left unreachable are garbage collected as their last
        incoming transition disappears.

        Returns:
            Automaton: This automaton, for chaining.
        """
        merged = absorbed = 0
        for state in reversed(self.sorted_states()):
            done = set()
            while state in self.states:
                children = state.transitions.get(EPSILON)
                if not children:
                    break

                child = min(children, key=by_id)
                if child is not state and child not in done:
                    if self._is_epsilon_alias(state, child):
                        self.merge_states(child, state)
                        merged += 1
                    else:
                        self.absorb_state(child, state)
                        absorbed += 1
                    done.add(child)
                self.unregister_transition(state, EPSILON, child)

        logger.debug(
            "Eliminated epsilon transitions ({} merged, {} absorbed), {} states left",
            merged,
            absorbed,
            len(self.states),
        )
        self.reset()
        return self

    @staticmethod
    def _is_epsilon_alias(state, child):
        # True if the epsilon transition to child is the only transition out
        # of state and state accepts nothing child does not
        trans = state.transitions
        if len(trans) != 1 or trans.get(EPSILON) != {child}:
            return False
        return child.is_accepting_state or not state.is_accepting_state

    @live
    def determinize(self):
        """
        Converts this automaton to an equivalent DFA by subset construction.

        Each DFA state stands for a set of states of this automaton, recorded
        in its ``original_states``. DFA states are deduplicated by the sorted
        IDs of their original states, so a given set of states is represented
        by exactly one DFA state. Epsilon closures are taken along the way, so
        this also works on an automaton that still has epsilon transitions.

        This automaton is not modified.

        Returns:
            Automaton: A new deterministic automaton. Only non-empty state
            sets are created, so the DFA may be partial.
        """
        ids = count()
        alphabet = sorted(self.alphabet)

        originals = self.epsilon_closure([self.start_state])
        dfa_start = State(
            next(ids),
            start=True,
            accepting=any(s.is_accepting_state for s in originals),
            name="DFA start",
        )
        dfa_start.original_states = frozenset(originals)
        dfa = Automaton(dfa_start, [dfa_start], alphabet, strict=self.strict)

        table = {dfa_start.hash_original_states(): dfa_start}
        unprocessed = deque([dfa_start])
        while unprocessed:
            current = unprocessed.popleft()
            for symbol in alphabet:
                targets = set()
                for original in current.original_states:
                    targets.update(original.next_states(symbol))
                if not targets:
                    continue

                closure = frozenset(self.epsilon_closure(targets))
                key = original_states_key(closure)
                dest = table.get(key)
                if dest is None:
                    dest = State(
                        next(ids),
                        accepting=any(s.is_accepting_state for s in closure),
                    )
                    dest.original_states = closure
                    table[key] = dest
                    unprocessed.append(dest)
                dfa.register_transition(current, symbol, dest)

        logger.debug(
            "Subset construction turned {} states into {}", len(self.states), len(dfa)
        )
        return dfa

    @live
    def minimize(self):
        """
        Returns an equivalent DFA with the fewest states, using partition
        refinement.

        The states start out split into accepting and non-accepting blocks.
        Each pass gives every state in a block a signature listing the block
        each symbol leads to, and states with different signatures are split
        apart. Passes repeat until nothing splits. A missing transition
        counts as leading nowhere, so two states that both lack a transition
        on a symbol agree on it.

        Each final block becomes one state of the result, which is a start or
        accepting state if any member is. Every transition of this automaton
        is then replayed between the corresponding blocks.

        This automaton is not modified.

        Returns:
            Automaton: The minimized DFA.

        Raises:
            AutomatonInvariantError: If this automaton is not deterministic.
        """
        if not self.is_deterministic():
            raise AutomatonInvariantError(
                "Minimization requires a deterministic automaton"
            )

        alphabet = sorted(self.alphabet)
        partition = Partition(self.sorted_states(), attrgetter("is_accepting_state"))

        passes = 0
        dirty = True
        while dirty:
            dirty = False
            passes += 1
            for block in list(partition):
                if len(block) < 2:
                    continue

                refined = Partition(
                    sorted(block, key=by_id),
                    lambda state: partition.signature(alphabet, state),
                )
                if not refined.is_trivial():
                    dirty = True
                    partition.remove_block(block)
                    for sub_block in refined:
                        partition.add_block(sub_block)
            logger.trace("Refinement pass {}: {} blocks", passes, len(partition))

        ids = count()
        merged = {}
        for block in sorted(partition, key=lambda b: min(s.id for s in b)):
            state = State(
                next(ids),
                start=any(s.is_start_state for s in block),
                accepting=any(s.is_accepting_state for s in block),
                trap=any(s.is_trap_state for s in block),
            )
            state.original_states = frozenset(block)
            merged[block] = state

        def merged_state(state):
            return merged[partition.block_of(state)]

        minimized = Automaton(
            merged_state(self.start_state),
            merged.values(),
            alphabet,
            strict=self.strict,
        )
        for src, symbol, dest in self.triples():
            minimized.register_transition(merged_state(src), symbol, merged_state(dest))

        logger.debug(
            "Minimized {} states into {} after {} passes",
            len(self.states),
            len(minimized),
            passes,
        )
        return minimized

    @live
    def add_trap_state(self):
        """
        Completes the transition function with a trap state.

        Every ``(state, symbol)`` pair without a transition, including those of
        the trap state itself, gets a transition to a new non-accepting state
        flagged with ``is_trap_state``. Nothing is added if the transition
        function is already complete.

        Returns:
            State or None: The new trap state, or None if none was needed.
        """
        missing = [
            (state, symbol)
            for state in self.sorted_states()
            for symbol in sorted(self.alphabet)
            if symbol not in state.transitions
        ]
        if not missing:
            return None

        trap = State(
            max(s.id for s in self.states) + 1, name="trap state", trap=True
        )
        for state, symbol in missing:
            self.register_transition(state, symbol, trap)
        for symbol in self.alphabet:
            self.register_transition(trap, symbol, trap)
        return trap

    @live
    def mark_trap_states(self):
        """
        Sets ``is_trap_state`` on every state with no path to an accepting
        state, and clears it on every other state.

        Returns:
            set: The trap states.
        """
        alive = self.accepting_states()
        stack = list(alive)
        while stack:
            state = stack.pop()
            for src, _ in state.in_edges():
                if src not in alive:
                    alive.add(src)
                    stack.append(src)

        traps = self.states - alive
        for state in self.states:
            state.is_trap_state = state in traps
        return traps

    # Simulation

    @live
    def reset(self):
        """
        Returns the simulation to the epsilon closure of the start state and
        forgets the visit history.
        """
        self.current_states = self.epsilon_closure([self.start_state])
        self.visit_history = {}
        self.pumping_interval = None
        self.symbol_number = 0
        self._record_visits()

    @live
    def read_symbol(self, symbol):
        """
        Reads one input symbol, updating the set of current states.

        Args:
            symbol (str): The input symbol.

        Raises:
            UnknownSymbolError: If `symbol` is not in the alphabet and the
                automaton is strict.
        """
        if symbol not in self.alphabet:
            if self.strict:
                raise UnknownSymbolError(symbol, self.alphabet)
            self.current_states = set()
        else:
            dests = set()
            for state in self.current_states:
                dests.update(state.transitions.get(symbol, ()))
            self.current_states = self.epsilon_closure(dests)

        self.symbol_number += 1
        self._record_visits()

    def _record_visits(self):
        if self.pumping_interval is not None:
            return

        for state in sorted(self.current_states, key=by_id):
            if state in self.visit_history:
                self.pumping_interval = (self.visit_history[state], self.symbol_number)
                return
            self.visit_history[state] = self.symbol_number

    def read(self, symbols):
        """
        Reads every symbol of `symbols` in turn.
        """
        for symbol in symbols:
            self.read_symbol(symbol)

    def is_accepting(self):
        """
        Returns True if any current state is an accepting state.
        """
        return any(state.is_accepting_state for state in self.current_states)

    def accepts(self, string):
        """
        Checks if a given string is accepted by the automaton.

        This resets the simulation, reads the whole string and reports
        whether the automaton ended in an accepting state. The simulation is
        left at the end of the string.

        Args:
            string (str): The string to check.

        Returns:
            bool: True if the string is accepted, False otherwise.
        """
        self.reset()
        self.read(string)
        return self.is_accepting()

    def generate_all(self, max_length):
        """
        Generates every accepted string of at most `max_length` symbols, in
        order of length and then alphabetically.

        This does not disturb the simulation state.

        Args:
            max_length (int): The longest string to generate.

        Yields:
            str: The accepted strings.
        """
        alphabet = sorted(self.alphabet)
        layer = [("", frozenset(self.epsilon_closure([self.start_state])))]
        for length in range(max_length + 1):
            next_layer = []
            for sofar, states in layer:
                if any(state.is_accepting_state for state in states):
                    yield sofar
                if length == max_length:
                    continue
                for symbol in alphabet:
                    dests = set()
                    for state in states:
                        dests.update(state.transitions.get(symbol, ()))
                    if dests:
                        next_layer.append(
                            (sofar + symbol, frozenset(self.epsilon_closure(dests)))
                        )
            layer = next_layer

    # Output

    def topology(self):
        """
        Returns a read-only description of the graph for a layout or drawing
        layer.

        States are grouped into layers by breadth-first distance from the
        start state. States that cannot be reached are put in one final
        layer.

        Returns:
            tuple: ``(nodes, edges)`` where `nodes` is a list of NodeView
            tuples in layer order and `edges` a list of EdgeView tuples using
            state IDs.
        """
        layers = []
        seen = {self.start_state}
        current = [self.start_state]
        while current:
            layers.append(current)
            following = []
            for state in current:
                for _, dest in state.out_edges():
                    if dest not in seen:
                        seen.add(dest)
                        following.append(dest)
            current = following

        leftover = sorted(self.states - seen, key=by_id)
        if leftover:
            layers.append(leftover)

        nodes = [
            NodeView(
                state.id,
                state.name,
                state.is_start_state,
                state.is_accepting_state,
                state in self.current_states,
                state.is_trap_state,
                depth,
            )
            for depth, layer in enumerate(layers)
            for state in layer
        ]
        edges = [
            EdgeView(src.id, symbol, dest.id)
            for layer in layers
            for src in layer
            for symbol, dest in src.out_edges()
        ]
        return nodes, edges

    def dump(self, stream=sys.stdout):
        """
        Prints a textual representation of the automaton to the specified
        stream.

        The start state is marked with ``@`` and accepting destinations with
        ``||``. Example output::

            @ 0
               'a' -> 1
              1
               'b' -> 2||
        """
        for src in self.sorted_states():
            beg = "@" if src is self.start_state else " "
            fin = "||" if src.is_accepting_state else ""
            print(beg, f"{src.id}{fin}", file=stream)
            for label, dest in src.out_edges():
                end = "||" if dest.is_accepting_state else ""
                print("  ", f"{label!r} -> {dest.id}{end}", file=stream)
