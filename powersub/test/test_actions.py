import unittest

from powersub.actions import CallInfo, Callback, ReturnComputed, ReturnConstant, ReturnSequence, Throw
from powersub.exceptions import InvalidSetup
from powersub.member import Ref, reflect_members
from powersub.test import test_utils


class TestCallInfo(unittest.TestCase):
    def setUp(self):
        self.divide = reflect_members(test_utils.Calculator).find('divide')
        self.remainder = Ref(0.0)
        self.call_info = CallInfo(self.divide, (12, 5, self.remainder))

    def test_indexing_reads_ref_values(self):
        self.assertEqual(12, self.call_info[0])
        self.assertEqual(0.0, self.call_info[2])
        self.assertEqual([12, 5, 0.0], list(self.call_info))
        self.assertEqual(3, len(self.call_info))

    def test_assigning_output_parameter(self):
        self.call_info[2] = 0.4

        self.assertEqual(0.4, self.remainder.value)

    def test_assigning_input_parameter(self):
        with self.assertRaises(InvalidSetup):
            self.call_info[0] = 1

    def test_output_parameter_without_ref(self):
        call_info = CallInfo(self.divide, (12, 5, None))

        with self.assertRaises(InvalidSetup):
            call_info[2] = 0.4


class TestActions(unittest.TestCase):
    def setUp(self):
        add = reflect_members(test_utils.Calculator).find('add')
        self.call_info = CallInfo(add, (1, 1))

    def test_return_constant(self):
        self.assertEqual(2, ReturnConstant(2)(self.call_info, 0))

    def test_return_computed(self):
        action = ReturnComputed(lambda call: call[0] + call[1] + 1)

        self.assertEqual(3, action(self.call_info, 0))

    def test_return_sequence(self):
        action = ReturnSequence([1, 2, 3])

        self.assertEqual([1, 2, 3, 3], [action(self.call_info, 0) for _ in range(4)])

    def test_return_sequence_requires_values(self):
        with self.assertRaises(InvalidSetup):
            ReturnSequence([])

    def test_throw_instance(self):
        error = ValueError('bad mode')

        with self.assertRaises(ValueError) as cm:
            Throw(error)(self.call_info, 0)
        self.assertIs(error, cm.exception)

    def test_throw_class(self):
        with self.assertRaises(LookupError):
            Throw(LookupError)(self.call_info, 0)

    def test_throw_requires_exception(self):
        with self.assertRaises(InvalidSetup):
            Throw('error')

    def test_callback(self):
        calls = []

        self.assertEqual(0, Callback(calls.append)(self.call_info, 0))
        self.assertEqual([self.call_info], calls)
