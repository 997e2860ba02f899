import unittest

from powersub.call_history import CallHistory
from powersub.exceptions import VerificationError
from powersub.matchers import ANY, AcceptEqual
from powersub.member import MemberId
from powersub.verifier import Times, Verifier

ADD = MemberId('add', 2)
MODE = MemberId('mode', 0)


class TestCallHistory(unittest.TestCase):
    def test_records_in_order(self):
        history = CallHistory()
        first = history.record(ADD, (1, 1))
        second = history.record(MODE, ())

        self.assertEqual([first, second], list(history))
        self.assertEqual(1, first.sequence)
        self.assertEqual(2, second.sequence)
        self.assertEqual((1, 1), history[0].args)

    def test_matching(self):
        history = CallHistory()
        history.record(ADD, (1, 1))
        history.record(ADD, (2, 1))
        history.record(MODE, ())

        self.assertEqual(2, len(history.matching(ADD, [ANY, AcceptEqual(1)])))
        self.assertEqual(1, len(history.matching(ADD, [AcceptEqual(2), ANY])))
        self.assertEqual(1, len(history.for_member(MODE)))

    def test_str(self):
        history = CallHistory()
        history.record(ADD, (1, 'x'))
        history.record(MODE, ())

        self.assertEqual("2 calls:\n  #1 add(1, 'x')\n  #2 mode()", str(history))


class TestTimes(unittest.TestCase):
    def test_accepts(self):
        self.assertTrue(Times.exactly(2).accepts(2))
        self.assertFalse(Times.exactly(2).accepts(1))
        self.assertTrue(Times.never().accepts(0))
        self.assertFalse(Times.once().accepts(0))
        self.assertTrue(Times.at_least(1).accepts(100))
        self.assertFalse(Times.at_most(1).accepts(2))
        self.assertTrue(Times.between(1, 3).accepts(3))
        self.assertFalse(Times.between(1, 3).accepts(4))

    def test_str(self):
        self.assertEqual('never', str(Times.never()))
        self.assertEqual('exactly 1 time', str(Times.once()))
        self.assertEqual('exactly 2 times', str(Times.exactly(2)))
        self.assertEqual('at least 1 time', str(Times.at_least(1)))
        self.assertEqual('at most 3 times', str(Times.at_most(3)))
        self.assertEqual('between 1 and 3 times', str(Times.between(1, 3)))

    def test_exact_count_equals_int(self):
        self.assertEqual(1, Times.once())
        self.assertEqual(Times.never(), 0)
        self.assertNotEqual(2, Times.once())
        self.assertNotEqual(1, Times.at_least(1))
        self.assertNotEqual(True, Times.once())
        self.assertEqual(Times.between(1, 3), Times(1, 3))
        self.assertEqual(hash(2), hash(Times.exactly(2)))

    def test_invalid(self):
        with self.assertRaises(ValueError):
            Times.exactly(-1)
        with self.assertRaises(ValueError):
            Times.between(3, 1)


class TestVerifier(unittest.TestCase):
    def setUp(self):
        self.history = CallHistory()
        self.history.record(ADD, (1, 1))
        self.history.record(ADD, (1, 1))
        self.verifier = Verifier(self.history)

    def test_expected_count(self):
        self.verifier.expect_calls(ADD, [AcceptEqual(1), ANY], 2)
        self.verifier.expect_calls(ADD, [AcceptEqual(1), ANY], Times.at_least(1))
        self.verifier.expect_calls(ADD, [AcceptEqual(2), ANY], Times.never())

    def test_unexpected_count(self):
        with self.assertRaises(VerificationError) as cm:
            self.verifier.expect_calls(ADD, [AcceptEqual(1), ANY], 1)

        self.assertEqual(Times.exactly(1), cm.exception.expected)
        self.assertEqual(2, cm.exception.actual)
        self.assertEqual('add', cm.exception.member)
        self.assertEqual('1, <any>', cm.exception.matchers)
        self.assertIn('expected add(1, <any>) to be called exactly 1 time, '
                      'but it was called 2 times', str(cm.exception))
        self.assertIn('#1 add(1, 1)', str(cm.exception))

    def test_is_an_assertion_error(self):
        with self.assertRaises(AssertionError):
            self.verifier.expect_calls(ADD, [ANY, ANY], Times.never())

    def test_verification_is_idempotent(self):
        for _ in range(2):
            self.verifier.expect_calls(ADD, [ANY, ANY], 2)
            with self.assertRaises(VerificationError):
                self.verifier.expect_calls(ADD, [ANY, ANY], 3)

        self.assertEqual(2, len(self.history))
