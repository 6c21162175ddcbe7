"""Positional numeral systems over arbitrary character alphabets."""

from . import utils


# characters with meaning in the expression grammar
RESERVED_SYMBOLS = ('+', '-', '*', '/', '^', '!', '(', ')', '[', ']', ':', '.', '#', '~')


def _expand_sequence(sequence):
    """Expand 'x-y' ranges in a character sequence, so '0-9a-f' gives the hex digits."""
    if not isinstance(sequence, str) or len(sequence) == 0:
        raise utils.BaseSystemError('Character sequence must be a non-empty string')

    chars = []
    i = 0
    while i < len(sequence):
        if i + 2 < len(sequence) and sequence[i + 1] == '-':
            start, end = sequence[i], sequence[i + 2]
            if ord(start) > ord(end):
                raise utils.BaseSystemError(
                    "Invalid range: '{}-{}'. Start character must come before end character."
                    .format(start, end))
            chars.extend(chr(c) for c in range(ord(start), ord(end) + 1))
            i += 3
        else:
            chars.append(sequence[i])
            i += 1

    if len(set(chars)) != len(chars):
        raise utils.BaseSystemError('Character sequence contains duplicate characters')
    if len(chars) < 2:
        raise utils.BaseSystemError('Base system must have at least 2 characters')
    return tuple(chars)


class BaseSystem(object):
    """An ordered alphabet of digit characters. The position of a character
    in the alphabet is its digit value, so the length is the base.
    """

    def __init__(self, sequence, name=None):
        self._characters = _expand_sequence(sequence)
        self._char_map = utils.ImmutableDict((c, i) for i, c in enumerate(self._characters))
        if name is None:
            self._name = 'Base {}'.format(self.base)
        else:
            self._name = name

        conflicts = [c for c in self._characters if c in RESERVED_SYMBOLS]
        if conflicts:
            raise utils.BaseSystemError(
                'Base system characters conflict with parser symbols: {}. Reserved symbols are: {}'
                .format(', '.join(conflicts), ', '.join(RESERVED_SYMBOLS)))

    @property
    def base(self):
        return len(self._characters)

    @property
    def characters(self):
        return self._characters

    @property
    def char_map(self):
        """Character to digit value; immutable."""
        return self._char_map

    @property
    def name(self):
        return self._name

    @property
    def max_digit(self):
        return self._characters[-1]

    @property
    def min_digit(self):
        return self._characters[0]

    def __repr__(self):
        return '{}({}, name={})'.format(type(self).__name__, repr(''.join(self._characters)), repr(self._name))

    def __str__(self):
        if len(self._characters) <= 20:
            preview = ''.join(self._characters)
        else:
            preview = ''.join(self._characters[:10]) + '...' + ''.join(self._characters[-10:])
        return '{} ({})'.format(self._name, preview)

    def __eq__(self, other):
        return isinstance(other, BaseSystem) and self._characters == other._characters

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self._characters)

    def to_decimal(self, s):
        """Read the numeral s, with an optional leading '-', as a python int."""
        if not isinstance(s, str) or len(s) == 0:
            raise utils.ParseError('Input must be a non-empty string')
        negative = s.startswith('-')
        if negative:
            s = s[1:]
        if len(s) == 0:
            raise utils.ParseError('Input must be a non-empty string')

        x = 0
        for c in s:
            digit = self._char_map.get(c)
            if digit is None:
                raise utils.ParseError("Invalid character '{}' for {} (base {})"
                                       .format(c, self._name, self.base))
            x = x * self.base + digit
        return -x if negative else x

    def from_decimal(self, x):
        """Write the integer x as a numeral in this base."""
        x = int(x)
        if x == 0:
            return self._characters[0]
        negative = x < 0
        x = abs(x)
        digits = []
        while x > 0:
            x, d = divmod(x, self.base)
            digits.append(self._characters[d])
        s = ''.join(reversed(digits))
        return '-' + s if negative else s

    def is_valid_string(self, s):
        if not isinstance(s, str):
            return False
        if s.startswith('-'):
            s = s[1:]
        return len(s) > 0 and all(c in self._char_map for c in s)

    @classmethod
    def from_base(cls, base, name=None):
        """The standard alphabet for a radix: digits, then lowercase, then uppercase letters."""
        if not isinstance(base, int) or base < 2:
            raise utils.BaseSystemError('Base must be an integer >= 2')
        if base <= 10:
            sequence = '0-{}'.format(base - 1)
        elif base <= 36:
            sequence = '0-9a-{}'.format(chr(ord('a') + base - 11))
        elif base <= 62:
            sequence = '0-9a-zA-{}'.format(chr(ord('A') + base - 37))
        else:
            raise utils.BaseSystemError('BaseSystem.from_base() only supports bases up to 62, got {}'
                                        .format(base))
        if name is None:
            name = 'Base {}'.format(base)
        return cls(sequence, name)

    @classmethod
    def create_pattern(cls, pattern, size, name=None):
        pattern = pattern.lower()
        if pattern == 'alphanumeric':
            if size > 62:
                raise utils.BaseSystemError('Alphanumeric pattern only supports up to base 62, got {}'
                                            .format(size))
            return cls.from_base(size, name)
        elif pattern == 'digits-only':
            if size > 10:
                raise utils.BaseSystemError('Digits-only pattern only supports up to base 10, got {}'
                                            .format(size))
            return cls('0-{}'.format(size - 1), name or 'Base {} (digits only)'.format(size))
        elif pattern == 'letters-only':
            if size <= 26:
                return cls('a-{}'.format(chr(ord('a') + size - 1)),
                           name or 'Base {} (lowercase letters)'.format(size))
            elif size <= 52:
                return cls('a-zA-{}'.format(chr(ord('A') + size - 27)),
                           name or 'Base {} (mixed case letters)'.format(size))
            else:
                raise utils.BaseSystemError('Letters-only pattern only supports up to base 52, got {}'
                                            .format(size))
        elif pattern == 'uppercase-only':
            if size > 26:
                raise utils.BaseSystemError('Uppercase-only pattern only supports up to base 26, got {}'
                                            .format(size))
            return cls('A-{}'.format(chr(ord('A') + size - 1)),
                       name or 'Base {} (uppercase letters)'.format(size))
        else:
            raise utils.BaseSystemError(
                'Unknown pattern: {}. Supported patterns: alphanumeric, digits-only, letters-only, uppercase-only'
                .format(pattern))

    def with_case_sensitivity(self, case_sensitive):
        """A copy of this system with its letters folded to lowercase when
        case_sensitive is False. Characters that fold together collapse into one.
        """
        if case_sensitive:
            return self
        folded = []
        for c in self._characters:
            if c.lower() not in folded:
                folded.append(c.lower())
        return BaseSystem(''.join(folded), '{} (case-insensitive)'.format(self._name))


BINARY = BaseSystem('0-1', 'Binary')
OCTAL = BaseSystem('0-7', 'Octal')
DECIMAL = BaseSystem('0-9', 'Decimal')
HEXADECIMAL = BaseSystem('0-9a-f', 'Hexadecimal')
BASE36 = BaseSystem('0-9a-z', 'Base 36')
BASE62 = BaseSystem('0-9a-zA-Z', 'Base 62')
BASE60 = BaseSystem('0-9a-zA-X', 'Base 60 (Sexagesimal)')
# a symbol table only: roman numerals are not positional
ROMAN = BaseSystem('IVXLCDM', 'Roman Numerals')
