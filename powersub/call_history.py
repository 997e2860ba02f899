import collections
import itertools
import logging
from typing import Any, Iterator, List, Sequence

from powersub.matchers import Matcher, all_match
from powersub.member import MemberId

logger = logging.getLogger(__name__)


class CallRecord(collections.namedtuple('CallRecord', ['member_id', 'args', 'sequence'])):
    def matches(self,
                member_id: MemberId,
                matchers: Sequence[Matcher]) -> bool:
        return self.member_id == member_id and all_match(matchers, self.args)

    def __str__(self):
        return ('#%d %s(%s)'
                % (self.sequence, self.member_id.name, ', '.join(repr(a) for a in self.args)))


class CallHistory:
    """
    Append-only log of calls received by a substitute.
    """
    def __init__(self):
        self._records = []
        self._sequence = itertools.count(1)

    def record(self,
               member_id: MemberId,
               args: Sequence[Any]) -> CallRecord:
        record = CallRecord(member_id=member_id,
                            args=tuple(args),
                            sequence=next(self._sequence))
        self._records.append(record)
        logger.debug('received %s', record)
        return record

    def matching(self,
                 member_id: MemberId,
                 matchers: Sequence[Matcher]) -> List[CallRecord]:
        return [record for record in self._records
                if record.matches(member_id, matchers)]

    def for_member(self, member_id: MemberId) -> List[CallRecord]:
        return [record for record in self._records if record.member_id == member_id]

    def __len__(self):
        return len(self._records)

    def __iter__(self) -> Iterator[CallRecord]:
        return iter(tuple(self._records))

    def __getitem__(self, index: int) -> CallRecord:
        return self._records[index]

    def __str__(self):
        return ('%d calls:\n%s'
                % (len(self._records),
                   '\n'.join('  %s' % (record,) for record in self._records)))
