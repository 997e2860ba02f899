import unittest

from powersub.actions import ReturnConstant
from powersub.behavior_table import NO_MATCH, BehaviorTable
from powersub.exceptions import InvalidSetup
from powersub.matchers import ANY, AcceptEqual, Arg
from powersub.member import MemberId

ADD = MemberId('add', 2)


class TestBehaviorTable(unittest.TestCase):
    def setUp(self):
        self.table = BehaviorTable()

    def test_empty_table_has_no_match(self):
        self.assertIs(NO_MATCH, self.table.lookup(ADD, (1, 1)))
        self.assertFalse(NO_MATCH)

    def test_lookup_requires_all_matchers(self):
        entry = self.table.configure(ADD, [AcceptEqual(1), AcceptEqual(1)], ReturnConstant(2))

        self.assertIs(entry, self.table.lookup(ADD, (1, 1)))
        self.assertIs(NO_MATCH, self.table.lookup(ADD, (1, 2)))

    def test_lookup_requires_same_member(self):
        self.table.configure(ADD, [ANY, ANY], ReturnConstant(2))

        self.assertIs(NO_MATCH, self.table.lookup(MemberId('sub', 2), (1, 1)))
        self.assertIs(NO_MATCH, self.table.lookup(MemberId('add', 3), (1, 1, 1)))

    def test_last_configured_wins(self):
        self.table.configure(ADD, [ANY, ANY], ReturnConstant(1))
        self.table.configure(ADD, [AcceptEqual(1), ANY], ReturnConstant(2))
        self.table.configure(ADD, [ANY, Arg.is_(lambda b: b % 2 == 0)], ReturnConstant(3))

        self.assertEqual(3, self.table.lookup(ADD, (1, 2)).action.value)
        self.assertEqual(2, self.table.lookup(ADD, (1, 1)).action.value)
        self.assertEqual(1, self.table.lookup(ADD, (5, 5)).action.value)

    def test_wrong_number_of_matchers(self):
        with self.assertRaises(InvalidSetup):
            self.table.configure(ADD, [ANY], ReturnConstant(1))

    def test_entries_are_kept_in_configuration_order(self):
        first = self.table.configure(ADD, [ANY, ANY], ReturnConstant(1))
        second = self.table.configure(ADD, [ANY, ANY], ReturnConstant(2))

        self.assertEqual([first, second], list(self.table))
        self.assertEqual(2, len(self.table))

    def test_lookup_skips_older_entries(self):
        self.table.configure(ADD, [ANY, ANY], ReturnConstant(1))
        newer = self.table.configure(ADD, [AcceptEqual(2), ANY], ReturnConstant(2))

        self.assertIs(NO_MATCH, self.table.lookup(ADD, (1, 1), since=1))
        self.assertIs(newer, self.table.lookup(ADD, (2, 1), since=1))
        self.assertIs(NO_MATCH, self.table.lookup(ADD, (2, 1), since=2))
