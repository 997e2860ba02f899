"""
Reflection of a capability set into its members.

A capability set is any class: a plain class, an ABC or a typing.Protocol.
Each public method becomes one member; each property becomes a getter member
and, when it has a setter, a setter member of the same name. Members are
identified structurally by name and arity.
"""

import collections
import inspect
import typing
from typing import Any, Generic, List, Mapping, Sequence, Tuple, TypeVar

from powersub.exceptions import InvalidSetup
from powersub.utils import get_public_members


T = TypeVar('T')

NO_DEFAULT = inspect.Parameter.empty

METHOD = 'method'
GETTER = 'getter'
SETTER = 'setter'


class Ref(Generic[T]):
    """
    A mutable box for output-style parameters.

    A member parameter annotated with Ref (or Ref[T]) is an output parameter:
    the caller passes a Ref and reads REF.value after the call returns.
    """
    def __init__(self, value: T = None):
        self.value = value

    def __repr__(self):
        return 'Ref(%r)' % (self.value,)


def is_ref_type(annotation: Any) -> bool:
    return annotation is Ref or getattr(annotation, '__origin__', None) is Ref


class MemberId(collections.namedtuple('MemberId', ['name', 'arity'])):
    def __str__(self):
        return '%s/%d' % self


class Parameter(collections.namedtuple('Parameter', ['name', 'type', 'default', 'is_out'])):
    def __str__(self):
        result = self.name
        if self.type is not NO_DEFAULT:
            result += ': %s' % (getattr(self.type, '__name__', None) or self.type,)
        if self.default is not NO_DEFAULT:
            result += ' = %r' % (self.default,)
        return result


def _resolve_hints(handler) -> Mapping[str, Any]:
    try:
        return typing.get_type_hints(handler)
    except (NameError, TypeError):
        # forward references to names not visible from the handler's module
        return getattr(handler, '__annotations__', {})


class Member:
    """
    One member of a capability set: a method, a property getter or a property
    setter, described by its HANDLER (the function found on the class).
    """
    def __init__(self,
                 name: str,
                 kind: str,
                 handler,
                 has_self: bool = True):
        self.name = name
        self.kind = kind
        self.handler = handler
        self._signature = self._get_signature(has_self)
        hints = _resolve_hints(handler)
        self.parameters = collections.OrderedDict(
            (param.name, Parameter(name=param.name,
                                   type=hints.get(param.name, param.annotation),
                                   default=param.default,
                                   is_out=is_ref_type(hints.get(param.name))))
            for param in self._signature.parameters.values())
        self.return_type = hints.get('return', self._signature.return_annotation)

    def _get_signature(self, has_self: bool) -> inspect.Signature:
        """Returns the signature of the handler, without 'self'."""
        try:
            signature = inspect.signature(self.handler)
        except ValueError as e:
            raise InvalidSetup('unable to inspect member: %s' % (self.name,)) from e

        params = list(signature.parameters.values())
        if has_self and params:
            params = params[1:]  # drop 'self'

        for param in params:
            if param.kind in (inspect.Parameter.VAR_POSITIONAL,
                              inspect.Parameter.VAR_KEYWORD):
                raise InvalidSetup('variadic parameters are not supported: %s(%s)'
                                   % (self.name, param))

        return signature.replace(parameters=params)

    @property
    def id(self) -> MemberId:
        return MemberId(self.name, len(self.parameters))

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def out_positions(self) -> List[int]:
        return [idx for idx, param in enumerate(self.parameters.values())
                if param.is_out]

    @property
    def description(self) -> str:
        return inspect.getdoc(self.handler)

    @property
    def short_description(self) -> str:
        if self.description is not None:
            return self.description.strip().split('\n', maxsplit=1)[0]

    def bind(self,
             args: Sequence[Any],
             kwargs: Mapping[str, Any]) -> Tuple[Any, ...]:
        """
        Binds actual ARGS and KWARGS to the member signature and returns all
        argument values in parameter order, with defaults filled in.

        Raises TypeError if the arguments do not fit the signature.
        """
        bound = self._signature.bind(*args, **kwargs)
        bound.apply_defaults()
        return tuple(bound.arguments.values())

    def __eq__(self, other):
        if not isinstance(other, Member):
            return NotImplemented
        return (self.name, self.kind, self.handler) == (other.name, other.kind, other.handler)

    def __hash__(self):
        return hash((self.name, self.kind))

    def __str__(self):
        return '%s(%s)' % (self.name, ', '.join(str(p) for p in self.parameters.values()))

    def __repr__(self):
        return 'Member(name=%r, kind=%r, arity=%d)' % (self.name, self.kind, self.arity)


class Members(collections.OrderedDict):
    """
    All members of a capability set, keyed by MemberId.
    """
    def named(self, name: str) -> List[Member]:
        return [member for member in self.values() if member.name == name]

    def find(self,
             name: str,
             arity: int = None) -> Member:
        """
        Returns the member called NAME. ARITY is needed only to tell apart a
        property getter and setter.
        """
        candidates = self.named(name)
        if arity is not None:
            candidates = [member for member in candidates if member.arity == arity]
        elif len(candidates) > 1:
            # a bare property name means its getter
            candidates = [member for member in candidates if member.kind == GETTER]

        if not candidates:
            raise InvalidSetup('no such member: %s%s'
                               % (name, '' if arity is None else '/%d' % arity))
        return candidates[0]


def reflect_members(cls: type) -> Members:
    """
    Returns all public methods and properties of CLS as Members.
    """
    members = Members()

    def add(member):
        members[member.id] = member

    for name, value in get_public_members(cls):
        if isinstance(value, property):
            if value.fget is not None:
                add(Member(name, GETTER, value.fget))
            if value.fset is not None:
                add(Member(name, SETTER, value.fset))
        elif isinstance(value, staticmethod):
            add(Member(name, METHOD, value.__func__, has_self=False))
        elif isinstance(value, classmethod):
            add(Member(name, METHOD, value.__func__))
        elif inspect.isfunction(value):
            add(Member(name, METHOD, value))

    return members
