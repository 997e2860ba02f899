import unittest

from powersub.command_line import MISSING_ARG, CommandLine, NamedArg, PositionalArg
from powersub.exceptions import InvalidInput
from powersub.member import reflect_members
from powersub.test import test_utils


class TestCommandLine(unittest.TestCase):
    def test_parse(self):
        cmdline = CommandLine('')
        self.assertEqual(cmdline.command, '')
        self.assertEqual(cmdline.named_args, {})
        self.assertEqual(cmdline.free_args, [])

        cmdline = CommandLine('foo')
        self.assertEqual(cmdline.command, 'foo')

        cmdline = CommandLine('foo\tbar')
        self.assertEqual(cmdline.command, 'foo')
        self.assertEqual(cmdline.free_args, ['bar'])

        cmdline = CommandLine('foo "bar \tbaz"')
        self.assertEqual(cmdline.free_args, ['bar \tbaz'])

        cmdline = CommandLine('foo \'bar \tbaz\'')
        self.assertEqual(cmdline.free_args, ['bar \tbaz'])

        cmdline = CommandLine('foo bar=baz qux="a b"')
        self.assertEqual(cmdline.named_args, {'bar': 'baz', 'qux': 'a b'})
        self.assertEqual(cmdline.args, [NamedArg('bar', 'baz'), NamedArg('qux', 'a b')])

    def test_duplicate_named_args(self):
        with self.assertRaises(InvalidInput):
            CommandLine('foo a=1 a=2')

    def test_equality(self):
        self.assertEqual(CommandLine('foo  1'), CommandLine('foo 1'))
        self.assertEqual([PositionalArg('1')], CommandLine('foo 1').args)


class TestAssignArgs(unittest.TestCase):
    def setUp(self):
        members = reflect_members(test_utils.Calculator)
        self.add = members.find('add')
        self.divide = members.find('divide')

    def test_free_args(self):
        self.assertEqual({'a': '1', 'b': '2'}, CommandLine('add 1 2').assign_args(self.add))

    def test_named_args(self):
        self.assertEqual({'a': '1', 'b': '2'}, CommandLine('add b=2 a=1').assign_args(self.add))

    def test_mixed_args(self):
        self.assertEqual({'a': '1', 'b': '2'}, CommandLine('add b=2 1').assign_args(self.add))

    def test_missing_args(self):
        self.assertEqual({'a': '12', 'b': '5', 'remainder': MISSING_ARG},
                         CommandLine('divide 12 5').assign_args(self.divide))

    def test_too_many_args(self):
        with self.assertRaises(InvalidInput):
            CommandLine('add 1 2 3').assign_args(self.add)

    def test_unknown_named_arg(self):
        with self.assertRaises(InvalidInput):
            CommandLine('add c=1').assign_args(self.add)
