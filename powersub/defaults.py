"""
Default values returned by substitute members that have no matching
configuration.

The default is chosen by the return annotation of the member: zero for
numbers, empty for strings and containers, None for anything else. Custom
types can be registered:

    defaults = DefaultValues()
    defaults.register(Decimal, lambda: Decimal('0'))
    sub = Substitute(Calculator, defaults=defaults)
"""

import inspect
from typing import Any, Callable

from powersub.utils import (is_generic_dict, is_generic_list, is_generic_set,
                            is_generic_tuple, is_optional)


_BUILTIN_FACTORIES = {
    int: int,
    float: float,
    complex: complex,
    bool: bool,
    str: str,
    bytes: bytes,
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
}


class DefaultValues:
    def __init__(self):
        self._factories = dict(_BUILTIN_FACTORIES)

    def register(self,
                 annotation: Any,
                 factory: Callable[[], Any]) -> 'DefaultValues':
        """
        Makes members returning ANNOTATION return FACTORY() by default.
        """
        if not callable(factory):
            raise TypeError('factory must be callable, got %r' % (factory,))
        self._factories[annotation] = factory
        return self

    def copy(self) -> 'DefaultValues':
        clone = DefaultValues()
        clone._factories = dict(self._factories)
        return clone

    def for_type(self, annotation: Any) -> Any:
        """
        Returns a fresh default value for the type described by ANNOTATION.
        """
        if annotation is inspect.Parameter.empty or annotation is None:
            return None
        if is_optional(annotation):
            return None

        try:
            factory = self._factories.get(annotation)
        except TypeError:
            # unhashable annotation
            factory = None
        if factory is not None:
            return factory()

        if is_generic_list(annotation):
            return []
        if is_generic_tuple(annotation):
            return ()
        if is_generic_dict(annotation):
            return {}
        if is_generic_set(annotation):
            return set()
        return None


DEFAULT_VALUES = DefaultValues()
