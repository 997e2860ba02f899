"""
Argument matchers.

A matcher is a pure predicate over a single argument value. Matchers are used
both when configuring behaviors and when verifying received calls. They are
plain immutable values, so configured behaviors can be stored, compared and
described in error messages.

Examples:
    Arg.any()                   # anything
    Arg.any(int)                # any int
    Arg.eq('HEX')               # equal to 'HEX'
    Arg.is_(lambda b: b % 2 == 0, 'even')
    Arg.regex(r'^de', re.IGNORECASE)
    Arg.in_range(0, 10, inclusive=False)
"""

import re
from typing import Any, Callable, Sequence


class Matcher:
    """Base class for argument matchers."""
    _fields = ()

    def matches(self, value: Any) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def _key(self):
        return tuple(getattr(self, field) for field in self._fields)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        try:
            return hash((type(self), self._key()))
        except TypeError:
            # unhashable literal
            return hash(type(self))

    def __setattr__(self, name, value):
        raise AttributeError('matchers are immutable')

    def _set(self, **fields):
        for name, value in fields.items():
            object.__setattr__(self, name, value)

    def __str__(self):
        return self.describe()

    def __repr__(self):
        return '%s(%s)' % (type(self).__name__,
                           ', '.join('%s=%r' % (f, getattr(self, f)) for f in self._fields))


class AcceptAny(Matcher):
    _fields = ('type',)

    def __init__(self, type: type = None):
        self._set(type=type)

    def matches(self, value):
        return self.type is None or isinstance(value, self.type)

    def describe(self):
        if self.type is None:
            return '<any>'
        return '<any %s>' % (self.type.__name__,)


class AcceptEqual(Matcher):
    _fields = ('literal',)

    def __init__(self, literal: Any):
        self._set(literal=literal)

    def matches(self, value):
        return value == self.literal

    def describe(self):
        return repr(self.literal)


class AcceptPredicate(Matcher):
    _fields = ('function', 'description')

    def __init__(self,
                 function: Callable[[Any], bool],
                 description: str = None):
        self._set(function=function, description=description)

    def matches(self, value):
        return bool(self.function(value))

    def describe(self):
        if self.description:
            return '<%s>' % (self.description,)
        return '<matching %s>' % (getattr(self.function, '__name__', None)
                                  or repr(self.function),)


class AcceptRegex(Matcher):
    _fields = ('pattern', 'flags')

    def __init__(self, pattern: str, flags: int = 0):
        self._set(pattern=pattern, flags=flags)
        self._set(_compiled=re.compile(pattern, flags))

    def matches(self, value):
        return isinstance(value, str) and self._compiled.search(value) is not None

    def describe(self):
        return '<matching /%s/>' % (self.pattern,)


class AcceptInRange(Matcher):
    _fields = ('low', 'high', 'inclusive')

    def __init__(self, low: Any, high: Any, inclusive: bool = True):
        if high < low:
            raise ValueError('empty range: %r > %r' % (low, high))
        self._set(low=low, high=high, inclusive=inclusive)

    def matches(self, value):
        try:
            if self.inclusive:
                return self.low <= value <= self.high
            return self.low < value < self.high
        except TypeError:
            # values not comparable with the range bounds are out of range
            return False

    def describe(self):
        return ('<in %s%r, %r%s>'
                % ('[' if self.inclusive else '(', self.low, self.high,
                   ']' if self.inclusive else ')'))


ANY = AcceptAny()


class Arg:
    """Shorthand constructors for matchers."""
    @staticmethod
    def any(type: type = None) -> Matcher:
        return ANY if type is None else AcceptAny(type)

    @staticmethod
    def eq(literal: Any) -> Matcher:
        return AcceptEqual(literal)

    @staticmethod
    def is_(function: Callable[[Any], bool],
            description: str = None) -> Matcher:
        return AcceptPredicate(function, description)

    @staticmethod
    def regex(pattern: str, flags: int = 0) -> Matcher:
        return AcceptRegex(pattern, flags)

    @staticmethod
    def in_range(low: Any, high: Any, inclusive: bool = True) -> Matcher:
        return AcceptInRange(low, high, inclusive)


def to_matcher(value: Any) -> Matcher:
    """
    Returns VALUE if it is a matcher already, an AcceptEqual for it otherwise.
    """
    if isinstance(value, Matcher):
        return value
    return AcceptEqual(value)


def all_match(matchers: Sequence[Matcher],
              args: Sequence[Any]) -> bool:
    """
    Returns True if every matcher accepts the argument at the same position.
    Matchers are evaluated left to right.
    """
    if len(matchers) != len(args):
        return False
    return all(matcher.matches(arg) for matcher, arg in zip(matchers, args))


def describe_all(matchers: Sequence[Matcher]) -> str:
    return ', '.join(matcher.describe() for matcher in matchers)
