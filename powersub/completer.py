import enum
from typing import Any, Iterable, Sequence

import prompt_toolkit.completion
from prompt_toolkit.completion import Completion
from prompt_toolkit.completion.base import CompleteEvent
from prompt_toolkit.document import Document

from powersub.member import Member, is_ref_type
from powersub.split_list import split_list
from powersub.utils import is_generic_list, is_generic_tuple, is_optional


def match_prefix(text: str, names: Iterable[str]) -> Sequence[str]:
    """
    Returns NAMES starting with TEXT, sorted. An exact match is returned
    alone.
    """
    names = list(names)
    if text in names:
        return [text]
    return sorted(name for name in names if name.startswith(text))


class ConsoleCompleter(prompt_toolkit.completion.Completer):
    """
    Completes command names, parameter names and some parameter values for a
    SubstituteConsole.
    """
    def __init__(self, console):
        self._console = console

    def _complete_commands(self, incomplete_cmd: str) -> Iterable[Completion]:
        """
        Returns a sequence of command completions matching INCOMPLETE_CMD prefix.
        """
        descriptions = self._console.describe_commands()
        yield from (Completion(name,
                               start_position=-len(incomplete_cmd),
                               display_meta=descriptions[name] or '')
                    for name in match_prefix(incomplete_cmd, descriptions))

    def _complete_params(self, member: Member, incomplete_param: str) -> Iterable[Completion]:
        """
        Returns a sequence of parameter name completions matching INCOMPLETE_PARAM
        prefix for given MEMBER.
        """
        matching_params = (member.parameters[name]
                           for name in match_prefix(incomplete_param, member.parameters))
        yield from (Completion(param.name + '=',
                               start_position=-len(incomplete_param),
                               display_meta=str(param))
                    for param in matching_params)

    def _complete_enum(self,
                       enum_type: type,
                       incomplete_value: str) -> Iterable[Completion]:
        matching_names = match_prefix(incomplete_value, (val.name for val in enum_type))
        yield from (Completion(name,
                               start_position=-len(incomplete_value),
                               display_meta=str(enum_type[name].value))
                    for name in matching_names)

    def _complete_value(self,
                        type_hint: Any,
                        incomplete_value: str) -> Iterable[Completion]:
        """
        Returns a sequence of parameter value completions matching
        INCOMPLETE_VALUE prefix for a parameter of TYPE_HINT.
        """
        if is_ref_type(type_hint) or is_optional(type_hint):
            inner = [arg for arg in getattr(type_hint, '__args__', ()) if arg is not type(None)]
            if not inner:
                return []
            return self._complete_value(inner[0], incomplete_value)
        if is_generic_list(type_hint):
            args = list(split_list(incomplete_value.lstrip('['), allow_unmatched=True))
            return self._complete_value(type_hint.__args__[0], args[-1])
        if is_generic_tuple(type_hint):
            args = list(split_list(incomplete_value.lstrip('('), allow_unmatched=True))
            if len(args) > len(type_hint.__args__):
                return []
            return self._complete_value(type_hint.__args__[len(args) - 1], args[-1])

        if isinstance(type_hint, type) and issubclass(type_hint, enum.Enum):
            return self._complete_enum(type_hint, incomplete_value)
        if type_hint is bool:
            return (Completion(name, start_position=-len(incomplete_value))
                    for name in match_prefix(incomplete_value, ['false', 'true']))
        if hasattr(type_hint, 'powersub_complete'):
            return (Completion(text, start_position=-len(incomplete_value))
                    for text in type_hint.powersub_complete(incomplete_value))

        return []

    def get_completions(self,
                        document: Document,
                        _complete_event: CompleteEvent = None) -> Iterable[Completion]:
        """
        Returns a sequence of completions for given command line.
        """
        incomplete_cmd = ''
        if document.text.strip():
            incomplete_cmd = document.text.strip().split(maxsplit=1)[0]

        start, end = document.find_boundaries_of_current_word(WORD=True)
        start += document.cursor_position
        end += document.cursor_position
        current_word = document.text[start:end]

        current_word_is_command = (document.text[:start].strip() == '')
        if current_word_is_command:
            return self._complete_commands(incomplete_cmd)

        member = self._console.find_member(incomplete_cmd)
        if member is None:
            return []

        if '=' not in current_word:
            return self._complete_params(member, current_word)

        param_name, incomplete_value = current_word.split('=', maxsplit=1)
        param = member.parameters.get(param_name)
        if not param:
            return []

        return self._complete_value(param.type, incomplete_value)
