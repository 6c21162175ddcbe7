"""General utilities, such as exception classes."""


# ratmath-specific exceptions

class RatMathError(ValueError):
    """Base ratmath error."""

class ParseError(RatMathError):
    """Malformed input text, such as an invalid literal or unbalanced parentheses."""

class DomainError(RatMathError):
    """Operation undefined for its arguments, such as division by zero."""

class BaseSystemError(RatMathError):
    """Invalid numeral alphabet for a base system."""


# some common data structures

class ImmutableDict(dict):
    def __delitem__(self, key):
        raise ValueError('ImmutableDict cannot be modified: attempt to delete {}'
                         .format(repr(key)))

    def __setitem__(self, key, value):
        raise ValueError('ImmutableDict cannot be modified: attempt to assign [{}] = {}'
                         .format(repr(key), repr(value)))

    def clear(self):
        raise ValueError('ImmutableDict cannot be modified: attempt to clear')

    def pop(self, key, *args):
        raise ValueError('ImmutableDict cannot be modified: attempt to pop {}'
                         .format(repr(key)))

    def popitem(self):
        raise ValueError('ImmutableDict cannot be modified: attempt to popitem')

    def setdefault(self, key, default=None):
        raise ValueError('ImmutableDict cannot be modified: attempt to setdefault {}, default={}'
                         .format(repr(key), repr(default)))

    def update(self, *args, **kwargs):
        raise ValueError('ImmutableDict cannot be modified: attempt to update')


# Useful things

def compress_runs(digits: str, threshold: int = 7) -> str:
    """Rewrite every run of at least threshold identical characters in digits
    as {d~n}, leaving shorter runs alone.
    """
    out = []
    i = 0
    while i < len(digits):
        d = digits[i]
        j = i
        while j < len(digits) and digits[j] == d:
            j += 1
        n = j - i
        if n >= threshold:
            out.append('{' + d + '~' + str(n) + '}')
        else:
            out.append(d * n)
        i = j
    return ''.join(out)

def expand_runs(s: str) -> str:
    """Inverse of compress_runs: replace every {d~n} with n copies of d."""
    out = []
    i = 0
    while i < len(s):
        if s[i] == '{':
            close = s.find('}', i)
            if close < 0:
                raise ValueError('unterminated run in {}'.format(repr(s)))
            body = s[i+1:close]
            d, sep, n = body.partition('~')
            if len(d) != 1 or sep != '~' or not n.isdigit():
                raise ValueError('invalid run {} in {}'.format(repr(s[i:close+1]), repr(s)))
            out.append(d * int(n))
            i = close + 1
        else:
            out.append(s[i])
            i += 1
    return ''.join(out)
