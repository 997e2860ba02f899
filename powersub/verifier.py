import collections
import logging
from typing import Sequence, Union

from powersub.call_history import CallHistory
from powersub.exceptions import VerificationError
from powersub.matchers import Matcher, describe_all
from powersub.member import MemberId

logger = logging.getLogger(__name__)


class Times(collections.namedtuple('Times', ['low', 'high'])):
    """
    An accepted range of call counts. HIGH is None for unbounded ranges.
    """
    @staticmethod
    def exactly(count: int) -> 'Times':
        if count < 0:
            raise ValueError('call count cannot be negative: %d' % count)
        return Times(count, count)

    @staticmethod
    def once() -> 'Times':
        return Times.exactly(1)

    @staticmethod
    def never() -> 'Times':
        return Times.exactly(0)

    @staticmethod
    def at_least(count: int) -> 'Times':
        return Times(count, None)

    @staticmethod
    def at_most(count: int) -> 'Times':
        return Times(0, count)

    @staticmethod
    def between(low: int, high: int) -> 'Times':
        if high < low:
            raise ValueError('empty range: %d > %d' % (low, high))
        return Times(low, high)

    def accepts(self, count: int) -> bool:
        return self.low <= count and (self.high is None or count <= self.high)

    # an exact range equals its count, so that Times.exactly(1) == 1
    def __eq__(self, other):
        if isinstance(other, int) and not isinstance(other, bool):
            return self.low == self.high == other
        return tuple.__eq__(self, other)

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        if self.low == self.high:
            return hash(self.low)
        return tuple.__hash__(self)

    def __str__(self):
        def times(n):
            return '%d time%s' % (n, '' if n == 1 else 's')

        if self.low == self.high:
            return 'never' if self.low == 0 else 'exactly %s' % times(self.low)
        if self.high is None:
            return 'at least %s' % times(self.low)
        if self.low == 0:
            return 'at most %s' % times(self.high)
        return 'between %d and %d times' % (self.low, self.high)


def to_times(expected: Union[int, Times]) -> Times:
    if isinstance(expected, Times):
        return expected
    return Times.exactly(expected)


class Verifier:
    """
    Checks expectations against a CallHistory. Never modifies the history.
    """
    def __init__(self, history: CallHistory):
        self._history = history

    def count(self,
              member_id: MemberId,
              matchers: Sequence[Matcher]) -> int:
        return len(self._history.matching(member_id, matchers))

    def expect_calls(self,
                     member_id: MemberId,
                     matchers: Sequence[Matcher],
                     expected: Union[int, Times]) -> None:
        """
        Raises VerificationError unless the number of recorded calls to
        MEMBER_ID accepted by MATCHERS is within EXPECTED.
        """
        expected = to_times(expected)
        actual = self.count(member_id, matchers)
        if expected.accepts(actual):
            return

        logger.debug('verification failed: %s(%s) expected %s, got %d',
                     member_id.name, describe_all(matchers), expected, actual)
        raise VerificationError(member=member_id.name,
                                matchers=describe_all(matchers),
                                expected=expected,
                                actual=actual,
                                received=self._history.for_member(member_id))
