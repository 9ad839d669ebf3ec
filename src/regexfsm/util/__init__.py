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

import time
from functools import wraps

from regexfsm.errors import AutomatonInvariantError

now = time.perf_counter


def make_right_tree(fn, args, **kwargs):
    """Takes a function/class that takes two positional arguments and a list of
    arguments and returns a right-leaning chain of results/instances.

    Args:
        fn (callable): A function or class that takes two positional arguments.
        args (list): A list of arguments to fold together.

    Keyword Args:
        **kwargs: Additional keyword arguments to be passed to `fn`.

    Returns:
        object: The folded result.

    Raises:
        ValueError: If called with an empty list.

    Examples:
        >>> make_right_tree(Alternation, [a, b, c])
        Alternation(a, Alternation(b, c))

    The fold is done with a loop from the right, so very long argument lists do
    not grow the call stack.
    """
    if not args:
        raise ValueError("Called make_right_tree with empty list")

    result = args[-1]
    for arg in reversed(args[:-1]):
        result = fn(arg, result, **kwargs)
    return result


# Decorators


def live(method):
    """
    Decorator to check that an automaton has not been discarded.

    When one automaton is spliced into another, the absorbed automaton gives up
    its states and must never be used again. Methods wrapped with this
    decorator raise an error instead of operating on the stale graph.

    Parameters:
    - method: The method to be wrapped. The parent object must have a
      'discarded' attribute.

    Returns:
    - The wrapped method.
    """

    @wraps(method)
    def live_wrapper(self, *args, **kwargs):
        if self.discarded:
            raise AutomatonInvariantError(
                f"{method.__name__}() called on an automaton that was spliced "
                "into another automaton"
            )
        return method(self, *args, **kwargs)

    return live_wrapper
