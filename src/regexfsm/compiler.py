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
Compiled patterns.

A :class:`Regex` drives the whole pipeline for one pattern: parse, build the
epsilon-NFA, eliminate epsilon transitions, determinize and minimize. Each
stage is computed the first time it is asked for and then cached, so a
caller that only wants to show the syntax tree never pays for the automata.
"""

from cached_property import cached_property
from loguru import logger

from regexfsm.regex.parser import parse
from regexfsm.util import now


class Regex:
    """
    A regular expression and the automata that recognise it.

    Args:
        pattern (str): The pattern.
        strict (bool): Passed on to every automaton built for the pattern.
            If True, simulating a symbol outside the pattern's alphabet
            raises UnknownSymbolError instead of rejecting.
        **parse_options: Keyword arguments for
            :func:`regexfsm.regex.parser.parse`.

    Example:
        >>> r = Regex("(ab)+")
        >>> r.matches("abab")
        True
        >>> len(r.minimal_dfa)
        3
    """

    def __init__(self, pattern, strict=False, **parse_options):
        self.pattern = pattern
        self.strict = strict
        self.parse_options = parse_options

    def __repr__(self):
        return f"{type(self).__name__}({self.pattern!r})"

    def _build(self):
        # Every stage that needs a fresh epsilon-NFA builds it here
        t = now()
        fsa = self.ast.build_automaton()
        fsa.strict = self.strict
        logger.debug(
            "Built NFA for {!r}: {} states in {:0.6f} s", self.pattern, len(fsa), now() - t
        )
        return fsa

    @cached_property
    def ast(self):
        """The syntax tree. Raises RegexSyntaxError for a bad pattern."""
        return parse(self.pattern, **self.parse_options)

    @cached_property
    def alphabet(self):
        return self.ast.alphabet()

    @cached_property
    def nfa(self):
        """The epsilon-NFA assembled from the syntax tree."""
        return self._build()

    @cached_property
    def epsilon_free(self):
        """A separately built NFA with its epsilon transitions eliminated."""
        t = now()
        fsa = self._build().eliminate_epsilon_transitions()
        logger.debug(
            "Eliminated epsilons for {!r}: {} states in {:0.6f} s",
            self.pattern,
            len(fsa),
            now() - t,
        )
        return fsa

    @cached_property
    def dfa(self):
        """The DFA from subset construction over :attr:`epsilon_free`."""
        t = now()
        fsa = self.epsilon_free.determinize()
        logger.debug(
            "Determinized {!r}: {} states in {:0.6f} s", self.pattern, len(fsa), now() - t
        )
        return fsa

    @cached_property
    def minimal_dfa(self):
        """The minimized :attr:`dfa`."""
        t = now()
        fsa = self.dfa.minimize()
        logger.debug(
            "Minimized {!r}: {} states in {:0.6f} s", self.pattern, len(fsa), now() - t
        )
        return fsa

    def matches(self, text):
        """
        Returns True if the whole of `text` matches the pattern.
        """
        return self.minimal_dfa.accepts(text)


def compile(pattern, **kwargs):
    """
    Returns a :class:`Regex` for `pattern`, parsing it immediately so syntax
    errors surface here rather than on first use.
    """
    regex = Regex(pattern, **kwargs)
    _ = regex.ast
    return regex
