"""
powersub - substitutes for capability sets, configured and verified in plain
Python.

A Substitute stands in for a class (a plain class, an ABC or a Protocol). Its
`object` is an instance of a generated subclass of that class, in which every
public method and property delegates to the substitute:

    class Calculator(abc.ABC):
        @abc.abstractmethod
        def add(self, a: int, b: int) -> int: ...

    sub = Substitute(Calculator)
    sub.setup(lambda calc: calc.add(1, Arg.any())).returns(2)

    assert sub.object.add(1, 5) == 2
    assert sub.object.add(2, 2) == 0      # not configured: default value

    sub.received(1).add(1, 5)
    sub.verify(lambda calc: calc.add(2, Arg.any()), Times.once())

Configuration follows a "last setup wins" policy: if several configured
behaviors accept a call, the most recent one is used. Every call, matched or
not, is recorded in `calls`.
"""

import functools
import logging
from typing import Any, Callable, List, Mapping, Sequence, Tuple, Union

from powersub.actions import (CallInfo, Callback, ReturnComputed, ReturnConstant,
                              ReturnSequence, Throw)
from powersub.behavior_table import NO_MATCH, BehaviorEntry, BehaviorTable
from powersub.call_history import CallHistory
from powersub.defaults import DEFAULT_VALUES, DefaultValues
from powersub.exceptions import InvalidSetup
from powersub.matchers import ANY, Matcher, to_matcher
from powersub.member import (GETTER, METHOD, SETTER, Member, MemberId, Members, Ref,
                             reflect_members)
from powersub.verifier import Times, Verifier

logger = logging.getLogger(__name__)

Dispatch = Callable[[Member, Tuple[Any, ...], Mapping[str, Any]], Any]


def _delegating_method(member: Member, dispatch: Dispatch):
    @functools.wraps(member.handler)
    def delegate(_self, *args, **kwargs):
        return dispatch(member, args, kwargs)

    # wraps() copies __isabstractmethod__ along with __dict__
    delegate.__isabstractmethod__ = False
    return delegate


def _build_adapter(cls: type,
                   members: Members,
                   dispatch: Dispatch,
                   label: str) -> Any:
    """
    Returns an instance of a subclass of CLS whose MEMBERS all call DISPATCH.
    The constructor of CLS is not run.
    """
    namespace = {
        '__module__': cls.__module__,
        '__doc__': cls.__doc__,
        '__repr__': lambda _self: '<%s>' % (label,),
    }

    for name in {member.name for member in members.values()}:
        named = {member.kind: member for member in members.named(name)}
        if GETTER in named or SETTER in named:
            getter = named.get(GETTER)
            setter = named.get(SETTER)
            namespace[name] = property(
                fget=_delegating_method(getter, dispatch) if getter else None,
                fset=_delegating_method(setter, dispatch) if setter else None)
        else:
            namespace[name] = _delegating_method(named[METHOD], dispatch)

    adapter = type(cls)('Substitute%s' % (cls.__name__,), (cls,), namespace)
    # private abstract members are not substituted; they must not block
    # instantiation either
    adapter.__abstractmethods__ = frozenset()
    return object.__new__(adapter)


class SetupBuilder:
    """
    Completes a configuration started with Substitute.setup() or
    Substitute.when(). Each terminal method (returns, returns_computed,
    throws, does) adds one behavior.
    """
    def __init__(self,
                 substitute: 'Substitute',
                 member: Member,
                 matchers: Sequence[Matcher],
                 assignments: Mapping[int, Any]):
        self._substitute = substitute
        self._member = member
        self._matchers = list(matchers)
        self._assignments = dict(assignments)

    def assigns(self, **outs) -> 'SetupBuilder':
        """
        Sets output parameters, given by name, whenever the behavior runs.
        """
        names = list(self._member.parameters)
        for name, value in outs.items():
            if name not in self._member.parameters or not self._member.parameters[name].is_out:
                raise InvalidSetup('%s is not an output parameter of %s'
                                   % (name, self._member))
            self._assignments[names.index(name)] = value
        return self

    def _configure(self, action) -> BehaviorEntry:
        return self._substitute.behaviors.configure(self._member.id,
                                                    self._matchers,
                                                    action,
                                                    self._assignments)

    def returns(self, value: Any, *more: Any) -> BehaviorEntry:
        """
        Returns VALUE. With more values given, successive calls return
        successive values and the last one is repeated afterwards.
        """
        if more:
            return self._configure(ReturnSequence((value,) + more))
        return self._configure(ReturnConstant(value))

    def returns_computed(self, function: Callable[[CallInfo], Any]) -> BehaviorEntry:
        return self._configure(ReturnComputed(function))

    def throws(self, error) -> BehaviorEntry:
        return self._configure(Throw(error))

    def does(self, function: Callable[[CallInfo], Any]) -> BehaviorEntry:
        return self._configure(Callback(function))


class Substitute:
    """
    A substitute for the capability set described by CLS.

    NAME is used in diagnostics only. DEFAULTS decides what unconfigured
    members return; see powersub.defaults.
    """
    def __init__(self,
                 cls: type,
                 name: str = None,
                 defaults: DefaultValues = None):
        if not isinstance(cls, type):
            raise InvalidSetup('a class is required, got %r' % (cls,))

        self.substituted_class = cls
        self.name = name or cls.__name__
        self.members = reflect_members(cls)
        self.behaviors = BehaviorTable()
        self.calls = CallHistory()
        self.verifier = Verifier(self.calls)
        # getter id -> (number of behaviors when assigned, read-back entry)
        self._assigned_properties = {}
        self._defaults = defaults or DEFAULT_VALUES
        self.object = _build_adapter(cls, self.members, self._invoke,
                                     'substitute %s' % (self.name,))

    def __repr__(self):
        return 'Substitute(%s, members=%d, behaviors=%d, calls=%d)' % (
            self.name, len(self.members), len(self.behaviors), len(self.calls))

    def default_for(self, member: Member) -> Any:
        """
        Returns the value MEMBER produces when no behavior matches.
        """
        if member.kind == SETTER:
            return None
        return self._defaults.for_type(member.return_type)

    def _lookup(self, member: Member, values: Tuple[Any, ...]):
        """
        Returns the behavior for a call to MEMBER with VALUES. A property
        reads back its last assigned value unless a behavior was configured
        after the assignment.
        """
        assigned = self._assigned_properties.get(member.id)
        if assigned is None:
            return self.behaviors.lookup(member.id, values)

        since, read_back = assigned
        entry = self.behaviors.lookup(member.id, values, since=since)
        return read_back if entry is NO_MATCH else entry

    def _invoke(self,
                member: Member,
                args: Tuple[Any, ...],
                kwargs: Mapping[str, Any]) -> Any:
        values = member.bind(args, kwargs)
        self.calls.record(member.id, values)

        default = self.default_for(member)
        entry = self._lookup(member, values)
        if entry is NO_MATCH:
            logger.debug('%s: no behavior for %s, returning %r',
                         self.name, member.name, default)
            result = default
        else:
            call_info = CallInfo(member, values)
            for position, value in entry.assignments.items():
                call_info[position] = value
            result = entry.action(call_info, default)

        if member.kind == SETTER:
            getter = self.members.get(MemberId(member.name, 0))
            if getter is not None:
                self._assigned_properties[getter.id] = (
                    len(self.behaviors),
                    BehaviorEntry(getter.id, (), ReturnConstant(values[0]), {}))

        return result

    def _to_matchers(self,
                     member: Member,
                     values: Sequence[Any]) -> Tuple[List[Matcher], Mapping[int, Any]]:
        """
        Turns argument VALUES given at configuration time into matchers.

        Output parameters are never matched: a plain value (or a Ref holding
        one) given for an output parameter is assigned to it instead.
        """
        if len(values) != member.arity:
            raise InvalidSetup('%s expects %d arguments, got %d'
                               % (member, member.arity, len(values)))

        out_positions = member.out_positions
        matchers = []
        assignments = {}
        for position, value in enumerate(values):
            if position not in out_positions:
                matchers.append(to_matcher(value))
                continue

            matchers.append(ANY)
            if isinstance(value, Ref):
                value = value.value
            if value is not None and not isinstance(value, Matcher):
                assignments[position] = value

        return matchers, assignments

    def _capture(self, expression: Callable[[Any], Any]) -> Tuple[Member, Tuple[Any, ...]]:
        """
        Runs EXPRESSION against a recording proxy and returns the only member
        it used, with the bound arguments.
        """
        captured = []

        def record(member, args, kwargs):
            try:
                captured.append((member, member.bind(args, kwargs)))
            except TypeError as e:
                raise InvalidSetup('invalid arguments for %s: %s' % (member, e)) from e

        recorder = _build_adapter(self.substituted_class, self.members, record,
                                  'recorder for %s' % (self.name,))
        expression(recorder)

        if len(captured) != 1:
            raise InvalidSetup('expression must use exactly one member of %s, used %d'
                               % (self.name, len(captured)))
        return captured[0]

    def setup(self, expression: Callable[[Any], Any]) -> SetupBuilder:
        """
        Starts configuring the call made by EXPRESSION, a function taking the
        substitute object, e.g. `lambda calc: calc.add(1, Arg.any())`.
        """
        member, values = self._capture(expression)
        matchers, assignments = self._to_matchers(member, values)
        return SetupBuilder(self, member, matchers, assignments)

    when = setup

    def configure(self,
                  member_name: str,
                  matchers: Sequence[Any],
                  action: Callable[[CallInfo, Any], Any],
                  arity: int = None) -> BehaviorEntry:
        """
        Adds a behavior for MEMBER_NAME. Plain values in MATCHERS are matched
        by equality. ARITY is needed only to choose between a property getter
        (0) and setter (1).
        """
        member = self.members.find(member_name,
                                   len(matchers) if arity is None else arity)
        matchers, assignments = self._to_matchers(member, matchers)
        return self.behaviors.configure(member.id, matchers, action, assignments)

    def expect_calls(self,
                     member_name: str,
                     matchers: Sequence[Any],
                     expected: Union[int, Times],
                     arity: int = None) -> None:
        """
        Raises VerificationError unless MEMBER_NAME was called with arguments
        accepted by MATCHERS the EXPECTED number of times.
        """
        member = self.members.find(member_name,
                                   len(matchers) if arity is None else arity)
        matchers, _ = self._to_matchers(member, matchers)
        self.verifier.expect_calls(member.id, matchers, expected)

    def verify(self,
               expression: Callable[[Any], Any],
               expected: Union[int, Times] = None) -> None:
        """
        Checks that the call made by EXPRESSION was received EXPECTED times,
        at least once if not given.
        """
        member, values = self._capture(expression)
        matchers, _ = self._to_matchers(member, values)
        self.verifier.expect_calls(member.id, matchers,
                                   Times.at_least(1) if expected is None else expected)

    def received(self, expected: Union[int, Times] = None) -> Any:
        """
        Returns a proxy on which using a member checks that it was received
        EXPECTED times (at least once if not given):

            sub.received(2).add(1, Arg.any())
            sub.did_not_receive().mode
        """
        expected = Times.at_least(1) if expected is None else expected

        def check(member, args, kwargs):
            try:
                values = member.bind(args, kwargs)
            except TypeError as e:
                raise InvalidSetup('invalid arguments for %s: %s' % (member, e)) from e
            matchers, _ = self._to_matchers(member, values)
            self.verifier.expect_calls(member.id, matchers, expected)
            return self.default_for(member)

        return _build_adapter(self.substituted_class, self.members, check,
                              'received %s' % (self.name,))

    def did_not_receive(self) -> Any:
        return self.received(Times.never())


def create_substitute(cls: type, **kwargs) -> Substitute:
    """Returns a new Substitute for CLS; KWARGS go to the constructor."""
    return Substitute(cls, **kwargs)
