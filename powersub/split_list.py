from typing import Callable, Iterator

_DELIMITERS = {
    '(': ')',
    '[': ']',
    '{': '}',
    '"': '"',
    "'": "'",
}


def _split(text: str,
           is_separator: Callable[[str], bool],
           allow_unmatched: bool) -> Iterator[str]:
    stack = []
    start = 0

    for idx, c in enumerate(text):
        if stack:
            if stack[-1] == c:
                stack.pop()
            elif stack[-1] not in '"\'' and c in _DELIMITERS:
                stack.append(_DELIMITERS[c])
        elif c in _DELIMITERS:
            stack.append(_DELIMITERS[c])
        elif is_separator(c):
            yield text[start:idx]
            start = idx + 1

    if stack and not allow_unmatched:
        raise ValueError('text contains unmatched delimiters: %s (text = %s)'
                         % (''.join(stack), text))

    yield text[start:]


def split_list(text: str,
               separator: str = ',',
               allow_unmatched: bool = False) -> Iterator[str]:
    """
    Splits TEXT on SEPARATOR, except for separators enclosed in quotes or
    brackets: 'a,(b,c),"d,e"' -> ['a', '(b,c)', '"d,e"'].
    """
    if len(separator) != 1:
        raise ValueError('only single-character separators are supported')
    if separator in _DELIMITERS:
        raise ValueError('delimiters: %s are not supported'
                         % (''.join(_DELIMITERS),))

    return _split(text, lambda c: c == separator, allow_unmatched)


def split_cmdline(text: str,
                  allow_unmatched: bool = False):
    """
    Splits a command line into words separated by whitespace. Quoted and
    bracketed parts are kept together, quotes included.
    """
    return [word for word in _split(text, str.isspace, allow_unmatched) if word]


def drop_enclosing_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in '"\'':
        return text[1:-1]
    return text
