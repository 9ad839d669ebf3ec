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
Parses regular expression patterns into :mod:`regexfsm.regex.nodes` trees.

The supported syntax is literal letters and digits, implicit concatenation,
``|`` for alternation, the quantifiers ``*``, ``+`` and ``?`` and parentheses
for grouping. From tightest to loosest binding: parentheses, quantifiers,
concatenation, alternation. Bounded repetition (``{m}``, ``{m,}``,
``{m,n}``) can be switched on with the `bounded_repetition` option.
"""

import string

from regexfsm.errors import (
    DanglingQuantifierError,
    ImplicitEmptyError,
    NestingTooDeepError,
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

# Characters that stand for themselves
LITERALS = frozenset(string.ascii_letters + string.digits)

# Quantifier characters and the (minimum, maximum) range they stand for
QUANTIFIERS = {
    "+": (1, None),
    "*": (0, None),
    "?": (0, 1),
}

# Deepest allowed nesting of groups and stacked quantifiers
DEFAULT_MAX_DEPTH = 100


def find_parens(text):
    """
    Matches up the parentheses in `text` in a single pass.

    Args:
        text (str): The pattern.

    Returns:
        dict: Maps the index of every opening parenthesis to the index of its
        closing parenthesis, and vice versa.

    Raises:
        UnmatchedParenError: If a parenthesis has no partner.

    Example:
        >>> find_parens("(a(b))")
        {2: 4, 4: 2, 0: 5, 5: 0}
    """
    mapping = {}
    stack = []
    for i, char in enumerate(text):
        if char == "(":
            stack.append(i)
        elif char == ")":
            if not stack:
                raise UnmatchedParenError("Unmatched closing parenthesis", i, text)
            opening = stack.pop()
            mapping[opening] = i
            mapping[i] = opening

    if stack:
        raise UnmatchedParenError(
            "Opening parenthesis was never closed", stack.pop(), text
        )
    return mapping


def parse(
    text,
    allow_implicit_empty=True,
    variadic_alternatives=False,
    bounded_repetition=False,
    max_depth=DEFAULT_MAX_DEPTH,
):
    """
    Parses a regular expression pattern and returns the root of its syntax
    tree.

    Args:
        text (str): The pattern.
        allow_implicit_empty (bool): If False, an empty pattern or an empty
            branch such as the right side of ``a|`` is an error. Otherwise it
            matches the empty string.
        variadic_alternatives (bool): If True, ``a|b|c`` becomes one
            VariadicAlternation instead of nested binary Alternation nodes.
        bounded_repetition (bool): If True, accept ``{m}``, ``{m,}`` and
            ``{m,n}`` quantifiers.
        max_depth (int): The deepest nesting allowed.

    Returns:
        Node: The root node.

    Raises:
        RegexSyntaxError: If the pattern is malformed. The subclass says what
            went wrong and ``position`` says where.

    Example:
        >>> parse("ab*|c")
        Alternation(Concat([Character('a'), Quantifier(0, None, Character('b'))]), Character('c'))
    """
    parser = RegexParser(
        allow_implicit_empty=allow_implicit_empty,
        variadic_alternatives=variadic_alternatives,
        bounded_repetition=bounded_repetition,
        max_depth=max_depth,
    )
    return parser.parse(text)


class RegexParser:
    """
    Recursive descent parser over substrings of the pattern.

    Parenthesis positions are found once up front, so each group is parsed by
    recursing into the index range between its parentheses and then jumping
    past the closing one.
    """

    def __init__(
        self,
        allow_implicit_empty=True,
        variadic_alternatives=False,
        bounded_repetition=False,
        max_depth=DEFAULT_MAX_DEPTH,
    ):
        self.allow_implicit_empty = allow_implicit_empty
        self.variadic_alternatives = variadic_alternatives
        self.bounded_repetition = bounded_repetition
        self.max_depth = max_depth
        self.text = ""
        self.parens = {}

    def parse(self, text):
        self.text = text
        self.parens = find_parens(text)
        return self._parse_range(0, len(text), 1)

    def _error(self, cls, msg, position):
        return cls(msg, position, self.text)

    def _parse_range(self, start, end, depth):
        if depth > self.max_depth:
            raise self._error(
                NestingTooDeepError,
                f"Groups nested more than {self.max_depth} deep",
                start - 1,
            )

        text = self.text
        parts = []
        branches = []
        pipes = []
        branch_start = start

        i = start
        while i < end:
            char = text[i]
            if char == "(":
                close = self.parens[i]
                inner = self._parse_range(i + 1, close, depth + 1)
                parts.append(self._check_depth(Paren(inner, i, close + 1)))
                i = close + 1
                continue
            elif char in LITERALS:
                parts.append(Character(char, i))
            elif char in QUANTIFIERS:
                minimum, maximum = QUANTIFIERS[char]
                self._quantify(parts, minimum, maximum, char, i, i + 1)
            elif char == "{" and self.bounded_repetition:
                close, minimum, maximum = self._parse_braces(i, end)
                self._quantify(parts, minimum, maximum, text[i : close + 1], i, close + 1)
                i = close + 1
                continue
            elif char == "|":
                branches.append(self._concat(parts, branch_start, i))
                pipes.append(i)
                parts = []
                branch_start = i + 1
            else:
                raise self._error(
                    UnknownCharacterError, f"Unknown character {char!r}", i
                )
            i += 1

        last = self._concat(parts, branch_start, end)
        if not branches:
            return last

        branches.append(last)
        if self.variadic_alternatives:
            return VariadicAlternation(branches, pipes, start, end)

        # Fold the branches from the right: a|b|c -> a|(b|c)
        node = branches[-1]
        for branch, pipe in zip(reversed(branches[:-1]), reversed(pipes)):
            node = Alternation(branch, node, pipe)
        return node

    def _quantify(self, parts, minimum, maximum, text, start, end):
        # Replaces the last part with a quantified version of itself
        if not parts:
            raise self._error(
                DanglingQuantifierError,
                f"Quantifier {text!r} is not quantifying over anything",
                start,
            )

        node = Quantifier(minimum, maximum, parts.pop(), text, start, end)
        parts.append(self._check_depth(node))

    def _check_depth(self, node):
        if node.depth > self.max_depth:
            raise self._error(
                NestingTooDeepError,
                f"Expression nested more than {self.max_depth} deep",
                node.start_pos,
            )
        return node

    def _concat(self, parts, start, end):
        if len(parts) == 1:
            return parts[0]
        if not parts and not self.allow_implicit_empty:
            raise self._error(ImplicitEmptyError, "Empty subexpression", start)
        return Concat(parts, start, end)

    def _parse_braces(self, start, end):
        # Parses {m}, {m,} or {m,n} starting at the opening brace; returns
        # the index of the closing brace and the range
        close = self.text.find("}", start, end)
        if close == -1:
            raise self._error(
                RegexSyntaxError, "Repetition range was never closed", start
            )

        body = self.text[start + 1 : close]
        low, comma, high = body.partition(",")
        if not low.isdigit() or (high and not high.isdigit()):
            raise self._error(
                RegexSyntaxError, f"Malformed repetition range {{{body}}}", start
            )

        minimum = int(low)
        if not comma:
            maximum = minimum
        elif high:
            maximum = int(high)
        else:
            maximum = None
        return close, minimum, maximum
