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
Abstract syntax tree for regular expressions.

Every node can build an automaton fragment for the language it describes with
:meth:`Node.build_automaton`. Composite nodes build their children's fragments
first and splice them together, so compiling a whole pattern is a bottom-up
fold over the tree.
"""

from itertools import count

from regexfsm.automata.fsa import EPSILON, Automaton, State, by_id
from regexfsm.errors import QuantifierRangeError
from regexfsm.util import make_right_tree


class Node:
    """
    Base class for regular expression AST nodes.

    Attributes:
        start_pos (int or None): Index of the first pattern character this
            node was parsed from.
        end_pos (int or None): Index just after the last such character.
        depth (int): How deeply building this node recurses.
    """

    depth = 1

    def __init__(self, start_pos=None, end_pos=None):
        self.start_pos = start_pos
        self.end_pos = end_pos

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({self._repr_args()})"

    def _key(self):
        raise NotImplementedError

    def _repr_args(self):
        raise NotImplementedError

    def children(self):
        """
        Returns the direct child nodes.
        """
        return ()

    def clone(self):
        """
        Returns a structurally independent copy of this node.
        """
        raise NotImplementedError

    def alphabet(self):
        """
        Returns the set of literal characters used in this subtree.
        """
        chars = set()
        stack = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Character):
                chars.add(node.char)
            stack.extend(node.children())
        return chars

    def build_automaton(self, ids=None):
        """
        Builds a new automaton fragment for this node.

        The fragment has exactly one start state and shares no states with
        any other fragment.

        Args:
            ids (iterator, optional): Source of state IDs. Pass the same
                iterator to all the builds that will be spliced together so
                IDs stay unique. A fresh counter is used if omitted.

        Returns:
            Automaton: The fragment.
        """
        if ids is None:
            ids = count()
        fsa = self._build(ids)
        fsa.reset()
        return fsa

    def _build(self, ids):
        raise NotImplementedError


def _epsilon_fragment(ids):
    # A single state that is both the start and accepting
    state = State(next(ids), start=True, accepting=True)
    return Automaton(state, [state])


def _needs_parens(node):
    if isinstance(node, (Alternation, VariadicAlternation)):
        return True
    return isinstance(node, Concat) and len(node.parts) != 1


class Character(Node):
    """
    Matches a single literal character.
    """

    def __init__(self, char, start_pos=None):
        end_pos = None if start_pos is None else start_pos + 1
        super().__init__(start_pos, end_pos)
        self.char = char

    def __str__(self):
        return self.char

    def _key(self):
        return self.char

    def _repr_args(self):
        return repr(self.char)

    def clone(self):
        return Character(self.char, self.start_pos)

    def _build(self, ids):
        start = State(next(ids), start=True)
        end = State(next(ids), accepting=True)
        fsa = Automaton(start, [start, end], [self.char])
        fsa.register_transition(start, self.char, end)
        return fsa


class Concat(Node):
    """
    Matches its parts one after the other. With no parts it matches only the
    empty string.
    """

    def __init__(self, parts, start_pos=None, end_pos=None):
        super().__init__(start_pos, end_pos)
        self.parts = list(parts)
        self.depth = 1 + max((part.depth for part in self.parts), default=0)

    def __str__(self):
        return "".join(
            f"({part})" if _needs_parens(part) else str(part) for part in self.parts
        )

    def _key(self):
        return tuple(self.parts)

    def _repr_args(self):
        return repr(self.parts)

    def children(self):
        return tuple(self.parts)

    def clone(self):
        return Concat([part.clone() for part in self.parts], self.start_pos, self.end_pos)

    def _build(self, ids):
        if not self.parts:
            return _epsilon_fragment(ids)

        fsa = self.parts[0].build_automaton(ids)
        for part in self.parts[1:]:
            fsa.append(part.build_automaton(ids))
        return fsa


class Paren(Node):
    """
    A parenthesized group. Builds exactly what its inner node builds.
    """

    def __init__(self, inner, start_pos=None, end_pos=None):
        super().__init__(start_pos, end_pos)
        self.inner = inner
        self.depth = inner.depth + 1

    def __str__(self):
        return f"({self.inner})"

    def _key(self):
        return self.inner

    def _repr_args(self):
        return repr(self.inner)

    def children(self):
        return (self.inner,)

    def clone(self):
        return Paren(self.inner.clone(), self.start_pos, self.end_pos)

    def _build(self, ids):
        return self.inner.build_automaton(ids)


def _choice(fragments, ids):
    # New start state with an epsilon transition to the start of every
    # fragment; all the fragments' accepting states are kept
    start = State(next(ids), start=True)
    fsa = Automaton(start, [start])
    for fragment in fragments:
        branch_start = fsa.splice(fragment)
        branch_start.is_start_state = False
        fsa.register_transition(start, EPSILON, branch_start)
    return fsa


class Alternation(Node):
    """
    Matches either the left or the right branch.

    Chains such as ``a|b|c`` are represented as right-leaning trees,
    ``Alternation(a, Alternation(b, c))``. The chain along the right-hand side
    is walked with a loop, so long chains do not need deep recursion.
    """

    def __init__(self, left, right, pipe_pos=None):
        end_pos = None if pipe_pos is None else pipe_pos + 1
        super().__init__(pipe_pos, end_pos)
        self.left = left
        self.right = right
        if isinstance(right, Alternation):
            self.depth = max(left.depth + 1, right.depth)
        else:
            self.depth = max(left.depth, right.depth) + 1

    @property
    def pipe_pos(self):
        return self.start_pos

    def _spine(self):
        # The chain of Alternation nodes down the right-hand side
        spine = [self]
        while isinstance(spine[-1].right, Alternation):
            spine.append(spine[-1].right)
        return spine

    def options(self):
        """
        Returns the branches of the chain rooted at this node, in order.
        """
        spine = self._spine()
        return [node.left for node in spine] + [spine[-1].right]

    def __str__(self):
        return "|".join(str(option) for option in self.options())

    def _key(self):
        return tuple(self.options())

    def _repr_args(self):
        return f"{self.left!r}, {self.right!r}"

    def children(self):
        return (self.left, self.right)

    def clone(self):
        spine = self._spine()
        result = spine[-1].right.clone()
        for node in reversed(spine):
            result = Alternation(node.left.clone(), result, node.pipe_pos)
        return result

    def _build(self, ids):
        options = self.options()
        fragments = [option.build_automaton(ids) for option in options]
        fsa = fragments[-1]
        for fragment in reversed(fragments[:-1]):
            fsa = _choice([fragment, fsa], ids)
        return fsa


class VariadicAlternation(Node):
    """
    Matches any one of several branches, using a single branching state
    instead of a chain of binary alternations.
    """

    def __init__(self, options, pipe_positions=(), start_pos=None, end_pos=None):
        super().__init__(start_pos, end_pos)
        self.options = list(options)
        self.pipe_positions = list(pipe_positions)
        self.depth = 1 + max((option.depth for option in self.options), default=0)

    def __str__(self):
        return "|".join(str(option) for option in self.options)

    def _key(self):
        return tuple(self.options)

    def _repr_args(self):
        return repr(self.options)

    def children(self):
        return tuple(self.options)

    def clone(self):
        return VariadicAlternation(
            [option.clone() for option in self.options],
            self.pipe_positions,
            self.start_pos,
            self.end_pos,
        )

    def _build(self, ids):
        return _choice([option.build_automaton(ids) for option in self.options], ids)


class Quantifier(Node):
    """
    Matches between `minimum` and `maximum` repetitions of `body`.

    Args:
        minimum (int): The least number of repetitions.
        maximum (int or None): The most repetitions, or None for no limit.
        body (Node): The repeated node.
        text (str, optional): The quantifier as written, e.g. ``"+"``.

    Raises:
        QuantifierRangeError: If `minimum` is negative or greater than
            `maximum`.
    """

    def __init__(self, minimum, maximum, body, text=None, start_pos=None, end_pos=None):
        if minimum < 0:
            raise QuantifierRangeError(f"Negative repetition count {minimum}")
        if maximum is not None and maximum < minimum:
            raise QuantifierRangeError(
                f"Quantifier maximum {maximum} is less than minimum {minimum}"
            )

        super().__init__(start_pos, end_pos)
        self.minimum = minimum
        self.maximum = maximum
        self.body = body
        self.text = text if text is not None else _quantifier_text(minimum, maximum)
        self.depth = body.depth + 3

    def __str__(self):
        body = f"({self.body})" if _needs_parens(self.body) else str(self.body)
        return body + self.text

    def _key(self):
        return (self.minimum, self.maximum, self.body)

    def _repr_args(self):
        return f"{self.minimum!r}, {self.maximum!r}, {self.body!r}"

    def children(self):
        return (self.body,)

    def clone(self):
        return Quantifier(
            self.minimum,
            self.maximum,
            self.body.clone(),
            self.text,
            self.start_pos,
            self.end_pos,
        )

    def is_star(self):
        return self.minimum == 0 and self.maximum is None

    def rewrite(self):
        """
        Returns an equivalent tree that only uses concatenation, alternation
        and Kleene star.

        ``x{m,}`` becomes `m` copies of ``x`` followed by ``x*``, and ``x{m,n}``
        becomes `m` copies followed by ``(|x|xx|...)`` with up to ``n - m``
        further copies. Every copy is a separate clone of the body.
        """
        parts = [self.body.clone() for _ in range(self.minimum)]

        if self.maximum is None:
            parts.append(Quantifier(0, None, self.body.clone()))
        elif self.maximum > self.minimum:
            options = [
                Concat([self.body.clone() for _ in range(extra)])
                for extra in range(self.maximum - self.minimum + 1)
            ]
            parts.append(make_right_tree(Alternation, options))

        if len(parts) == 1:
            return parts[0]
        return Concat(parts)

    def _build(self, ids):
        if not self.is_star():
            return self.rewrite().build_automaton(ids)

        fsa = self.body.build_automaton(ids)
        start = fsa.start_state
        # A start state the body can return to must not become accepting
        needs_new_start = start.indegree > 0 and not start.is_accepting_state

        for state in sorted(fsa.accepting_states(), key=by_id):
            fsa.register_transition(state, EPSILON, start)

        if needs_new_start:
            new_start = State(next(ids), accepting=True)
            fsa.register_transition(new_start, EPSILON, start)
            fsa.transfer_start_state(start, new_start)
        else:
            start.is_accepting_state = True
        return fsa


def _quantifier_text(minimum, maximum):
    if (minimum, maximum) == (0, None):
        return "*"
    if (minimum, maximum) == (1, None):
        return "+"
    if (minimum, maximum) == (0, 1):
        return "?"
    if maximum is None:
        return f"{{{minimum},}}"
    if minimum == maximum:
        return f"{{{minimum}}}"
    return f"{{{minimum},{maximum}}}"
