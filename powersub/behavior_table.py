import collections
import logging
from typing import Any, Callable, Mapping, Sequence

from powersub.exceptions import InvalidSetup
from powersub.matchers import Matcher, all_match, describe_all
from powersub.member import MemberId

logger = logging.getLogger(__name__)


class BehaviorEntry(collections.namedtuple('BehaviorEntry',
                                           ['member_id', 'matchers', 'action', 'assignments'])):
    """
    A configured behavior: when a call to MEMBER_ID is accepted by all
    MATCHERS, output parameters are set from ASSIGNMENTS (position -> value)
    and ACTION produces the result.
    """
    def accepts(self,
                member_id: MemberId,
                args: Sequence[Any]) -> bool:
        return self.member_id == member_id and all_match(self.matchers, args)

    def __str__(self):
        return '%s(%s) -> %r' % (self.member_id.name, describe_all(self.matchers), self.action)


class NoMatch:
    def __repr__(self):
        return 'NO_MATCH'

    def __bool__(self):
        return False


NO_MATCH = NoMatch()


class BehaviorTable:
    """
    Configured behaviors of a single substitute, in configuration order.
    Lookups prefer the most recently configured entry.
    """
    def __init__(self):
        self._entries = []

    def configure(self,
                  member_id: MemberId,
                  matchers: Sequence[Matcher],
                  action: Callable,
                  assignments: Mapping[int, Any] = None) -> BehaviorEntry:
        if len(matchers) != member_id.arity:
            raise InvalidSetup('%s expects %d matchers, got %d'
                             % (member_id, member_id.arity, len(matchers)))

        entry = BehaviorEntry(member_id=member_id,
                              matchers=tuple(matchers),
                              action=action,
                              assignments=dict(assignments or {}))
        self._entries.append(entry)
        logger.debug('configured %s', entry)
        return entry

    def lookup(self,
               member_id: MemberId,
               args: Sequence[Any],
               since: int = 0):
        """
        Returns the newest entry accepting a call to MEMBER_ID with ARGS, or
        NO_MATCH if there is none. The first SINCE entries are skipped.
        """
        for entry in reversed(self._entries[since:]):
            if entry.accepts(member_id, args):
                return entry
        return NO_MATCH

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
