import abc
import logging

from powersub import Arg, Ref, Substitute, Times
from powersub.console import SubstituteConsole


class Calculator(abc.ABC):
    @abc.abstractmethod
    def add(self, a: int, b: int) -> int:
        """Adds two numbers."""

    @abc.abstractmethod
    def divide(self, a: int, b: int, remainder: Ref[float]) -> int:
        """Integer division; the remainder goes to REMAINDER."""

    @abc.abstractmethod
    def set_mode(self, mode: str) -> None:
        """Switches the display mode."""

    @property
    def mode(self) -> str:
        """Current display mode."""
        raise NotImplementedError

    @mode.setter
    def mode(self, value: str):
        raise NotImplementedError


def configure(sub: Substitute):
    # Return values for exact arguments and for matched ones. The most recent
    # matching setup is used.
    sub.setup(lambda calc: calc.add(1, 1)).returns(2)
    sub.setup(lambda calc: calc.add(Arg.any(), Arg.is_(lambda b: b % 2 == 0, 'even'))).returns(3)

    # Output parameters: a value given in the setup is assigned on every call.
    sub.setup(lambda calc: calc.divide(12, 5, Ref(0.4))).returns(2)

    # Results computed from the arguments.
    sub.setup(lambda calc: calc.add(2, 2)).returns_computed(lambda call: call[0] + call[1] + 1)

    # Exceptions.
    sub.when(lambda calc: calc.set_mode('HEX')).throws(ValueError('HEX mode not supported'))

    # Properties keep the last assigned value.
    sub.object.mode = 'DEC'


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    sub = Substitute(Calculator)
    configure(sub)

    calc = sub.object
    remainder = Ref(0.0)
    assert calc.add(1, 1) == 2
    assert calc.add(5, 4) == 3
    assert calc.add(5, 5) == 0
    assert calc.add(2, 2) == 5
    assert calc.divide(12, 5, remainder) == 2 and remainder.value == 0.4

    sub.received(1).add(1, Arg.any())
    sub.verify(lambda c: c.add(Arg.any(), Arg.any()), Times.exactly(4))
    sub.did_not_receive().set_mode(Arg.any())

    SubstituteConsole(sub).cmdloop()


if __name__ == '__main__':
    main()
