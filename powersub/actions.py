"""
Stub behaviors run when a configured call matches.

Every action is a callable taking the CallInfo of the invocation and the
default value of the invoked member, and returning the value handed back to
the caller.
"""

import itertools
from typing import Any, Callable, Sequence

from powersub.exceptions import InvalidSetup
from powersub.member import Member, Ref


class CallInfo:
    """
    An invocation as seen by an action.

    Indexing yields argument values; for an output parameter this is the
    current value of the Ref passed by the caller. Assigning to an index
    writes into the Ref of an output parameter:

        def divide(call):
            call[2] = call[0] % call[1]
            return call[0] // call[1]
    """
    def __init__(self,
                 member: Member,
                 args: Sequence[Any]):
        self.member = member
        self.args = tuple(args)

    def _ref_at(self, index: int) -> Ref:
        if index not in self.member.out_positions:
            raise InvalidSetup('argument %d of %s is not an output parameter'
                               % (index, self.member))
        ref = self.args[index]
        if not isinstance(ref, Ref):
            raise InvalidSetup('output parameter %d of %s was not passed a Ref, got %r'
                               % (index, self.member, ref))
        return ref

    def __getitem__(self, index: int) -> Any:
        value = self.args[index]
        if isinstance(value, Ref):
            return value.value
        return value

    def __setitem__(self, index: int, value: Any):
        self._ref_at(index).value = value

    def __len__(self):
        return len(self.args)

    def __iter__(self):
        return (self[idx] for idx in range(len(self.args)))

    def __repr__(self):
        return 'CallInfo(%s, args=%r)' % (self.member.name, self.args)


class ReturnConstant:
    def __init__(self, value: Any):
        self.value = value

    def __call__(self, call_info: CallInfo, default: Any) -> Any:
        return self.value

    def __repr__(self):
        return 'ReturnConstant(%r)' % (self.value,)


class ReturnComputed:
    def __init__(self, function: Callable[[CallInfo], Any]):
        self.function = function

    def __call__(self, call_info: CallInfo, default: Any) -> Any:
        return self.function(call_info)

    def __repr__(self):
        return 'ReturnComputed(%r)' % (self.function,)


class ReturnSequence:
    """Returns VALUES one by one, then keeps repeating the last one."""
    def __init__(self, values: Sequence[Any]):
        if not values:
            raise InvalidSetup('at least one return value is required')
        self.values = tuple(values)
        self._remaining = itertools.chain(self.values[:-1],
                                          itertools.repeat(self.values[-1]))

    def __call__(self, call_info: CallInfo, default: Any) -> Any:
        return next(self._remaining)

    def __repr__(self):
        return 'ReturnSequence(%r)' % (self.values,)


class Throw:
    """
    Raises ERROR, which may be an exception instance or an exception class.
    Classes are instantiated without arguments each time the action runs.
    """
    def __init__(self, error):
        if not (isinstance(error, BaseException)
                or (isinstance(error, type) and issubclass(error, BaseException))):
            raise InvalidSetup('not an exception: %r' % (error,))
        self.error = error

    def __call__(self, call_info: CallInfo, default: Any) -> Any:
        if isinstance(self.error, type):
            raise self.error()
        raise self.error

    def __repr__(self):
        return 'Throw(%r)' % (self.error,)


class Callback:
    """Calls FUNCTION for its side effects; the caller gets the default value."""
    def __init__(self, function: Callable[[CallInfo], Any]):
        self.function = function

    def __call__(self, call_info: CallInfo, default: Any) -> Any:
        self.function(call_info)
        return default

    def __repr__(self):
        return 'Callback(%r)' % (self.function,)
