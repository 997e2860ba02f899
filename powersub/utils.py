import inspect
from typing import Any, Dict, List, Set, Tuple, Union


def _origin(annotation: Any):
    return getattr(annotation, '__origin__', None)


def is_generic_list(annotation: Any) -> bool:
    # python<3.7 reports List in __origin__, while python>=3.7 reports list
    return _origin(annotation) in (List, list)


def is_generic_tuple(annotation: Any) -> bool:
    # python<3.7 reports Tuple in __origin__, while python>=3.7 reports tuple
    return _origin(annotation) in (Tuple, tuple)


def is_generic_dict(annotation: Any) -> bool:
    return _origin(annotation) in (Dict, dict)


def is_generic_set(annotation: Any) -> bool:
    return _origin(annotation) in (Set, set)


def is_optional(annotation: Any) -> bool:
    """
    Returns True if ANNOTATION is Optional[x], i.e. a Union including None.
    """
    return (_origin(annotation) is Union
            and type(None) in getattr(annotation, '__args__', ()))


def get_public_members(cls: type):
    """
    Yields (name, value) pairs of public attributes defined by CLS or any of
    its bases other than object. Attributes overridden in a subclass are
    reported once, with the most derived value.

    Values are taken from class __dict__s, so properties and staticmethods
    are returned as descriptor objects.
    """
    seen = set()
    for klass in inspect.getmro(cls):
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name.startswith('_') or name in seen:
                continue
            seen.add(name)
            yield name, value
