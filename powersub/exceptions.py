class SubstituteError(Exception):
    """Base class for all errors raised by powersub itself."""


class InvalidSetup(SubstituteError):
    """
    Raised when a substitute is configured or queried in a way that cannot
    work, e.g. an unknown member name or a wrong number of matchers.
    """


class VerificationError(SubstituteError, AssertionError):
    """
    Raised when the calls recorded by a substitute do not satisfy an
    expectation. Derives from AssertionError, so test runners report it as
    a regular failure.
    """
    def __init__(self, member, matchers, expected, actual, received=()):
        self.member = member
        self.matchers = matchers
        self.expected = expected
        self.actual = actual
        self.received = tuple(received)
        super().__init__(self._format())

    def _format(self):
        message = ('expected %s(%s) to be called %s, but it was called %d time%s'
                   % (self.member, self.matchers, self.expected, self.actual,
                      '' if self.actual == 1 else 's'))
        if self.received:
            message += ('\nreceived calls:\n%s'
                        % '\n'.join('  %s' % (record,) for record in self.received))
        return message


class InvalidInput(SubstituteError):
    """Raised by the console for command lines that cannot be executed."""
