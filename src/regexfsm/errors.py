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
Exception classes raised by the parser and the automaton engine.

Syntax errors describe bad input and are always recoverable: the caller fixes
the pattern and parses again. Invariant errors describe a bug in a preceding
transformation step and should not be caught.
"""


class RegexSyntaxError(ValueError):
    """Base class for errors in a regular expression pattern.

    Attributes:
        position (int or None): Index into the pattern where the problem was
            found.
        pattern (str or None): The pattern being parsed, when known.
    """

    def __init__(self, msg, position=None, pattern=None):
        super().__init__(msg)
        self.msg = msg
        self.position = position
        self.pattern = pattern

    def __str__(self):
        if self.position is None:
            return self.msg
        return f"{self.msg} at position {self.position}"


class UnmatchedParenError(RegexSyntaxError):
    """A parenthesis has no partner."""


class DanglingQuantifierError(RegexSyntaxError):
    """A quantifier has no preceding operand."""


class UnknownCharacterError(RegexSyntaxError):
    """A character outside the supported syntax appears in the pattern."""


class ImplicitEmptyError(RegexSyntaxError):
    """An empty subexpression appears where implicit empties are disallowed."""


class NestingTooDeepError(RegexSyntaxError):
    """Parentheses are nested deeper than the parser allows."""


class QuantifierRangeError(ValueError):
    """A quantifier range is malformed, for example ``max < min``."""


class AutomatonInvariantError(AssertionError):
    """An operation would leave (or found) an automaton in an invalid state."""


class UnknownSymbolError(ValueError):
    """A strict automaton was asked to read a symbol outside its alphabet."""

    def __init__(self, symbol, alphabet=()):
        super().__init__(
            f"Symbol {symbol!r} is not in the alphabet {sorted(alphabet)!r}"
        )
        self.symbol = symbol
