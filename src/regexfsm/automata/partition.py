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


class Partition:
    """
    A partition of a set of states into disjoint blocks.

    Blocks are frozensets. The partition keeps a lookup table from each state
    to its block, so checking whether two states share a block is a constant
    time operation.

    Args:
        states (iterable): The states to partition.
        indicator (callable): Maps a state to a hashable value. States with
            equal values end up in the same block. The indicator is called
            exactly once per state.
    """

    def __init__(self, states=(), indicator=None):
        self._blocks = {}
        self._block_of = {}

        groups = {}
        for state in states:
            key = indicator(state) if indicator is not None else None
            groups.setdefault(key, []).append(state)

        for members in groups.values():
            self.add_block(members)

    def __iter__(self):
        return iter(list(self._blocks))

    def __len__(self):
        return len(self._blocks)

    def __repr__(self):
        return f"<{type(self).__name__} {[sorted(s.id for s in b) for b in self._blocks]}>"

    def add_block(self, members):
        """
        Adds a block to the partition and records the block of each member.

        Returns:
            frozenset: The new block.
        """
        block = frozenset(members)
        self._blocks[block] = None
        for state in block:
            self._block_of[state] = block
        return block

    def remove_block(self, block):
        del self._blocks[block]
        for state in block:
            del self._block_of[state]

    def block_of(self, state):
        """
        Returns the block containing `state`, or None if `state` is None or
        not part of the partition.
        """
        return self._block_of.get(state)

    def signature(self, alphabet, state):
        """
        Returns the blocks that `state` moves to, one entry per symbol of
        `alphabet` in order. A missing transition is recorded as None.

        Two states of the same block belong together after the next
        refinement step exactly when their signatures are equal.
        """
        return tuple(self.block_of(_single_dest(state, symbol)) for symbol in alphabet)

    def can_distinguish(self, alphabet, state_a, state_b):
        """
        Checks whether some symbol takes the two states into different blocks.

        Both states must be deterministic. A missing transition counts as
        leading to no block at all.

        Args:
            alphabet (iterable): The symbols to try.
            state_a (State): The first state.
            state_b (State): The second state.

        Returns:
            bool: True if the states can be told apart in one step.
        """
        alphabet = list(alphabet)
        return self.signature(alphabet, state_a) != self.signature(alphabet, state_b)

    def is_trivial(self):
        """
        Returns True if the partition has fewer than two blocks.
        """
        return len(self._blocks) < 2


def _single_dest(state, symbol):
    dests = state.transitions.get(symbol)
    if not dests:
        return None
    (dest,) = dests
    return dest
