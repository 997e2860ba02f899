"""
An interactive console for exploring a substitute by hand.

Every method and property of the substituted class becomes a command. Typed
arguments are parsed from text using the parameter annotations:

    class Calculator:
        def add(self, a: int, b: int) -> int: ...
        def divide(self, a: int, b: int, remainder: Ref[float]) -> int: ...

    sub = Substitute(Calculator)
    sub.setup(lambda calc: calc.add(1, Arg.any())).returns(2)
    SubstituteConsole(sub).cmdloop()

    Calculator> add 1 5
    2
    Calculator> add a=2 b=2
    0
    Calculator> history
    2 calls:
      #1 add(1, 5)
      #2 add(2, 2)

Values of parameters without annotations are read as Python literals, falling
back to plain strings. A type may define a static `powersub_parse(text)`
function to control how it is parsed, and `powersub_complete(text)` to offer
completions.
"""

import ast
import enum
import inspect
import logging
import sys
import traceback
from typing import Any, Callable, List, Mapping, Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.styles import Style

from powersub.command_line import MISSING_ARG, CommandLine
from powersub.completer import ConsoleCompleter, match_prefix
from powersub.exceptions import InvalidInput
from powersub.member import GETTER, METHOD, Member, Parameter, Ref, is_ref_type
from powersub.split_list import drop_enclosing_quotes, split_list
from powersub.substitute import Substitute
from powersub.utils import is_generic_list, is_generic_tuple, is_optional

logger = logging.getLogger(__name__)


def _parse_literal(text: str) -> Any:
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return text


def _parse_bool(text: str) -> bool:
    # bool('0') is True, which is not what anyone typing '0' means
    return text not in ('', '0', 'false', 'False')


class SubstituteConsole:
    """
    A line-oriented interpreter calling members of SUBSTITUTE.object.
    """
    def __init__(self, substitute: Substitute):
        self.substitute = substitute
        self._last_exception = None
        self._stop_requested = False
        self._session = None

        self.completer = ConsoleCompleter(self)
        self.prompt = '%s> ' % (substitute.name,)
        self.prompt_style = Style.from_dict({'': 'bold'})

    def get_builtin_commands(self) -> Mapping[str, Callable]:
        """
        Returns a mapping {command name -> handler} of commands that are not
        members of the substitute. Handlers are called with the raw argument
        strings. Built-in commands take precedence over members of the same
        name.
        """
        return {
            'help': self.do_help,
            'history': self.do_history,
            'get_error': self.do_get_error,
            'exit': self.do_exit,
        }

    def get_member_commands(self) -> Mapping[str, Member]:
        """Returns methods and readable properties of the substitute."""
        return {member.name: member for member in self.substitute.members.values()
                if member.kind in (METHOD, GETTER)}

    def describe_commands(self) -> Mapping[str, Optional[str]]:
        """Returns a mapping {command name -> short description}."""
        descriptions = {name: member.short_description
                        for name, member in self.get_member_commands().items()}
        descriptions.update((name, inspect.getdoc(handler).split('\n', maxsplit=1)[0])
                            for name, handler in self.get_builtin_commands().items())
        return descriptions

    def choose_cmd(self, short_cmd: str) -> str:
        """Returns the name of the only command starting with SHORT_CMD."""
        matches = match_prefix(short_cmd, self.describe_commands())

        if not matches:
            raise InvalidInput('no such command: %s' % (short_cmd,))
        if len(matches) > 1:
            raise InvalidInput('ambiguous command: %s (possible: %s)'
                               % (short_cmd, ' '.join(matches)))
        return matches[0]

    def find_member(self, short_cmd: str) -> Optional[Member]:
        """Returns the member chosen by SHORT_CMD, None if there is none."""
        try:
            name = self.choose_cmd(short_cmd)
        except InvalidInput:
            return None
        if name in self.get_builtin_commands():
            return None
        return self.get_member_commands()[name]

    def _get_list_ctor(self, annotation: Any) -> Callable[[str], List]:
        """
        Returns a function that parses a string representation of a list
        defined by ANNOTATION: "[1,2,3]" or "1,2,3" for List[int].
        """
        internal_ctor = self.get_constructor(annotation.__args__[0])

        def construct_list(text):
            if text[:1] == '[' and text[-1:] == ']':
                text = text[1:-1]
            if not text:
                return []
            return [internal_ctor(txt.strip()) for txt in split_list(text)]

        return construct_list

    def _get_tuple_ctor(self, annotation: Any) -> Callable[[str], Tuple]:
        """
        Returns a function that parses a string representation of a tuple
        defined by ANNOTATION: "(1,foo)" for Tuple[int, str].
        """
        internal_types = getattr(annotation, '__args__', None)
        if not internal_types:
            return lambda text: tuple(_parse_literal(text))

        def construct_tuple(text):
            if text[:1] == '(' and text[-1:] == ')':
                text = text[1:-1]

            sub_txts = list(split_list(text))
            if len(sub_txts) != len(internal_types):
                raise InvalidInput('mismatched lengths: %d strings, %d tuple types'
                                   % (len(sub_txts), len(internal_types)))

            return tuple(self.get_constructor(cls)(txt.strip())
                         for cls, txt in zip(internal_types, sub_txts))

        return construct_tuple

    def get_constructor(self, annotation: Any) -> Callable[[str], Any]:
        """
        Returns a callable that parses a string and returns an object of the
        type described by ANNOTATION.
        """
        if annotation is inspect.Parameter.empty or annotation is Any:
            return _parse_literal
        if is_ref_type(annotation):
            inner = getattr(annotation, '__args__', None)
            inner_ctor = self.get_constructor(inner[0] if inner else Any)
            return lambda text: Ref(inner_ctor(drop_enclosing_quotes(text)))
        if is_optional(annotation):
            inner = [arg for arg in annotation.__args__ if arg is not type(None)]
            inner_ctor = self.get_constructor(inner[0])
            return lambda text: None if text == 'None' else inner_ctor(text)
        if is_generic_list(annotation):
            return self._get_list_ctor(annotation)
        if is_generic_tuple(annotation):
            return self._get_tuple_ctor(annotation)
        if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
            # Enum class allows accessing values by string via [] operator
            return annotation.__getitem__
        if hasattr(annotation, 'powersub_parse'):
            return getattr(annotation, 'powersub_parse')
        if annotation is bool:
            return _parse_bool
        if annotation is bytes:
            return lambda text: bytes(text, 'ascii')
        if not callable(annotation):
            raise TypeError('invalid type: %r' % (annotation,))
        return annotation

    def _construct_arg(self, param: Parameter, value: str) -> Any:
        ctor = self.get_constructor(param.type)
        try:
            return ctor(value)
        except (ValueError, KeyError) as e:
            raise InvalidInput('invalid value for %s: %s' % (param.name, value)) from e

    def _construct_args(self, member: Member, cmdline: CommandLine) -> Mapping[str, Any]:
        """
        Parses arguments given in CMDLINE for MEMBER. Output parameters that
        were not given get an empty Ref.
        """
        typed_args = {}
        for name, value in cmdline.assign_args(member).items():
            param = member.parameters[name]
            if value is not MISSING_ARG:
                typed_args[name] = self._construct_arg(param, value)
            elif param.is_out:
                typed_args[name] = Ref()
            elif param.default is inspect.Parameter.empty:
                raise InvalidInput('missing argument: %s' % (name,))

        return typed_args

    def _execute_member(self, member: Member, cmdline: CommandLine) -> Any:
        target = self.substitute.object
        if member.kind == GETTER:
            if cmdline.args:
                raise InvalidInput('%s is a property and takes no arguments' % (member.name,))
            result = getattr(target, member.name)
            print(repr(result))
            return result

        args = self._construct_args(member, cmdline)
        result = getattr(target, member.name)(**args)
        print(repr(result))
        for name, value in args.items():
            if isinstance(value, Ref):
                print('%s = %r' % (name, value.value))
        return result

    def _execute_cmd(self, cmdline: CommandLine) -> Any:
        name = self.choose_cmd(cmdline.command)
        builtin = self.get_builtin_commands().get(name)
        if builtin is not None:
            return builtin(*(arg.value for arg in cmdline.args))
        return self._execute_member(self.get_member_commands()[name], cmdline)

    def do_help(self, topic: str = ''):
        """
        Lists available commands or describes the one given.
        """
        if not topic:
            for name, description in sorted(self.describe_commands().items()):
                print('%-16s %s' % (name, description or ''))
            return

        member = self.find_member(topic)
        if member is None:
            name = self.choose_cmd(topic)
            print(inspect.getdoc(self.get_builtin_commands()[name]))
            return

        print('%s\n\n%s' % (member, member.description or 'No details available.'))

    def do_history(self):
        """
        Prints all calls received by the substitute.
        """
        print(self.substitute.calls)

    def do_get_error(self):
        """
        Displays the exception raised by the last command.
        """
        if self._last_exception is None:
            print('no errors')
        else:
            traceback.print_exception(*self._last_exception, file=sys.stdout)

    def do_exit(self):
        """Terminates the command loop."""
        print('exiting')
        self._stop_requested = True

    def emptyline(self):
        pass

    def onecmd(self, cmdline: str) -> Any:
        """
        Executes CMDLINE. Errors, including exceptions configured to be
        thrown by the substitute, are reported and do not stop the console.
        """
        if not cmdline.strip():
            return self.emptyline()

        try:
            result = self._execute_cmd(CommandLine(cmdline))
        # it's a bit too ruthless to terminate on every single broken command
        # pylint: disable=broad-except
        except Exception as e:
            self._last_exception = sys.exc_info()
            logger.debug('command failed: %s', cmdline, exc_info=True)
            print('%s: %s (try "get_error" for details)' % (type(e).__name__, e))
            return None

        self._last_exception = None
        return result

    def cmdloop(self):
        if self._session is None:
            self._session = PromptSession()

        self._stop_requested = False
        try:
            while not self._stop_requested:
                with patch_stdout():
                    cmdline = self._session.prompt(self.prompt,
                                                   completer=self.completer,
                                                   style=self.prompt_style)
                self.onecmd(cmdline)
        except EOFError:
            print('')
