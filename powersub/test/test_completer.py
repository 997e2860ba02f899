import unittest

from prompt_toolkit.document import Document

from powersub.completer import ConsoleCompleter, match_prefix
from powersub.console import SubstituteConsole
from powersub.substitute import Substitute
from powersub.test import test_utils


class TestMatchPrefix(unittest.TestCase):
    def test_match_prefix(self):
        self.assertEqual(['add'], match_prefix('add', ['add', 'add_all']))
        self.assertEqual(['add', 'add_all'], match_prefix('ad', ['add_all', 'add', 'mode']))
        self.assertEqual([], match_prefix('x', ['add']))
        self.assertEqual(['a', 'b'], match_prefix('', ['b', 'a']))


class TestConsoleCompleter(unittest.TestCase):
    def complete(self, cls, text):
        completer = ConsoleCompleter(SubstituteConsole(Substitute(cls)))
        return [completion.text
                for completion in completer.get_completions(Document(text), None)]

    def test_commands(self):
        self.assertEqual(['add'], self.complete(test_utils.Calculator, 'a'))
        self.assertEqual(['divide'], self.complete(test_utils.Calculator, 'd'))
        self.assertEqual(['help', 'history'], self.complete(test_utils.Calculator, 'h'))

    def test_params(self):
        self.assertEqual(['a=', 'b=', 'remainder='],
                         self.complete(test_utils.Calculator, 'divide '))
        self.assertEqual(['remainder='],
                         self.complete(test_utils.Calculator, 'divide 1 r'))

    def test_unknown_command(self):
        self.assertEqual([], self.complete(test_utils.Calculator, 'multiply '))
        self.assertEqual([], self.complete(test_utils.Calculator, 'history '))

    def test_enum_values(self):
        self.assertEqual(['HEX'], self.complete(test_utils.Converter, 'convert base=H'))
        self.assertEqual(['DEC', 'HEX'], self.complete(test_utils.Converter, 'convert base='))

    def test_bool_values(self):
        self.assertEqual(['true'], self.complete(test_utils.Converter, 'flag enabled=t'))

    def test_no_value_completions(self):
        self.assertEqual([], self.complete(test_utils.Calculator, 'add a=1'))
        self.assertEqual([], self.complete(test_utils.Calculator, 'add c='))
