"""
Parsing of console command lines.
"""

import collections
import re
from typing import Mapping, Sequence, Union

from powersub.exceptions import InvalidInput
from powersub.member import Member
from powersub.split_list import drop_enclosing_quotes, split_cmdline


NamedArg = collections.namedtuple('NamedArg', ['name', 'value'])
PositionalArg = collections.namedtuple('PositionalArg', ['value'])


class MissingArg:
    def __repr__(self):
        return 'MISSING_ARG'


MISSING_ARG = MissingArg()


class CommandLine:
    """
    A command line split into the command name and its arguments.

    Arguments are either positional (`add 1 2`) or named (`add a=1 b=2`).
    """
    def __init__(self, cmdline: str):
        self.raw_text = cmdline
        self.quoted_words = split_cmdline(cmdline, allow_unmatched=True)

        words = [drop_enclosing_quotes(word) for word in self.quoted_words]

        self.command = words[0] if words else ''
        self.args = []

        for word in words[1:]:
            if re.match(r'^[a-zA-Z0-9_]+=', word):
                name, value = word.split('=', maxsplit=1)
                if name in self.named_args:
                    raise InvalidInput('multiple values for argument: %s' % (name,))
                self.args.append(NamedArg(name, drop_enclosing_quotes(value)))
            else:
                self.args.append(PositionalArg(word))

    def __eq__(self, other):
        return (self.command, self.args) == (other.command, other.args)

    def __repr__(self):
        return ('CommandLine(raw_text=%r, command=%r, args=%r)'
                % (self.raw_text, self.command, self.args))

    @property
    def named_args(self) -> Mapping[str, str]:
        return {arg.name: arg.value for arg in self.args if isinstance(arg, NamedArg)}

    @property
    def free_args(self) -> Sequence[str]:
        return [arg.value for arg in self.args if isinstance(arg, PositionalArg)]

    def assign_args(self,
                    member: Member) -> Mapping[str, Union[str, MissingArg]]:
        """
        Assigns argument strings to parameters of MEMBER: named arguments
        first, then positional ones to the remaining parameters in order.
        Parameters left without a value are mapped to MISSING_ARG.
        """
        named = self.named_args
        unknown = [name for name in named if name not in member.parameters]
        if unknown:
            raise InvalidInput('unrecognized arguments: %s' % (', '.join(unknown),))

        free = list(self.free_args)
        assigned = collections.OrderedDict()
        for name in member.parameters:
            if name in named:
                assigned[name] = named[name]
            elif free:
                assigned[name] = free.pop(0)
            else:
                assigned[name] = MISSING_ARG

        if free:
            raise InvalidInput('too many free arguments: expected at most %d'
                               % (len(member.parameters) - len(named),))
        return assigned
