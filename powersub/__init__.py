"""
powersub - a small test-double library: substitutes for classes, with
configurable behaviors, argument matchers and call verification.
"""

from powersub.actions import (CallInfo, Callback, ReturnComputed, ReturnConstant,
                              ReturnSequence, Throw)
from powersub.call_history import CallHistory, CallRecord
from powersub.defaults import DefaultValues
from powersub.exceptions import InvalidInput, InvalidSetup, SubstituteError, VerificationError
from powersub.matchers import (ANY, AcceptAny, AcceptEqual, AcceptInRange, AcceptPredicate,
                               AcceptRegex, Arg, Matcher)
from powersub.member import MemberId, Ref
from powersub.substitute import Substitute, create_substitute
from powersub.verifier import Times

__all__ = [
    'ANY', 'AcceptAny', 'AcceptEqual', 'AcceptInRange', 'AcceptPredicate',
    'AcceptRegex', 'Arg', 'CallHistory', 'CallInfo', 'CallRecord', 'Callback',
    'DefaultValues', 'InvalidInput', 'InvalidSetup', 'Matcher', 'MemberId', 'Ref',
    'ReturnComputed', 'ReturnConstant', 'ReturnSequence', 'Substitute',
    'SubstituteError', 'Throw', 'Times', 'VerificationError', 'create_substitute',
]
