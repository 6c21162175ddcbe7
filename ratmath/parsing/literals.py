"""Readers for the exact numeric literal notations.

Each reader takes the complete text of one literal and returns a value
from the numeric tower; finding where a literal ends is the parser's job.
"""

import re
from enum import IntFlag

from ..numeric import utils
from ..numeric import integer
from ..numeric import rational
from ..arithmetic import interval


class Hint(IntFlag):
    """How a value was written, for deciding whether to simplify its type."""
    NONE = 0
    EXPLICIT_FRACTION = 1
    EXPLICIT_INTERVAL = 2
    SKIP_PROMOTION = 4


# a decimal digit, or a compressed run {d~n} of one
_digit = r'(?:[0-9]|\{[0-9]~[0-9]+\})'

repeating_re = re.compile(r'-?(?:' + _digit + r'+\.?' + _digit + r'*|\.' + _digit + r'+)#[0-9{}~]*')
decimal_re = re.compile(r'-?' + _digit + r'*\.' + _digit + r'+')
integer_re = re.compile(r'(-?)([0-9]+)')
digits_re = re.compile(r'[0-9]*')
exponent_re = re.compile(r'(-?)([0-9]+)')
cf_re = re.compile(r'(-?[0-9]+)\.~((?:[0-9]+~?)*[0-9]*)')
uncertainty_re = re.compile(r'(-?[0-9]*\.?[0-9]*)\[([^\]]+)\]')
_base_atom = r'(?:[0-9A-Za-z./]|_\^-?|(?<=[Ee])-)'
base_re = re.compile(r'(-?' + _base_atom + r'+(?::-?' + _base_atom + r'+)?)\[([0-9]+)\]')

_number_re = re.compile(r'-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)')
_range_value_re = re.compile(r'[0-9]+(?:\.[0-9]+)?')
_point_base_re = re.compile(r'-?[0-9]+\.')


def _expand(s):
    try:
        return utils.expand_runs(s)
    except ValueError as e:
        raise utils.ParseError(str(e))


#
#   Decimals
#

def read_repeating_decimal(s):
    """Exact value of a repeating decimal such as 0.12#45, where the digits
    after # repeat forever. A period of 0 marks a terminating decimal.
    """
    s = _expand(s.strip())
    negative = s.startswith('-')
    if negative:
        s = s[1:]

    head, sep, period = s.partition('#')
    if not sep or '#' in period:
        raise utils.ParseError('Invalid repeating decimal format. Use format like "0.12#45"')
    if not period or not digits_re.fullmatch(period):
        raise utils.ParseError('Repeating part must contain only digits')

    ipart, _, fpart = head.partition('.')
    if not digits_re.fullmatch(ipart) or not digits_re.fullmatch(fpart):
        raise utils.ParseError('Non-repeating part must contain only digits and at most one decimal point')
    ipart = ipart or '0'

    if int(period) == 0:
        x = rational.Rational(int(ipart + fpart), 10 ** len(fpart))
    else:
        # 0.ab#c == (abc - ab) / (10**len(b) * (10**len(c) - 1))
        n = len(fpart)
        m = len(period)
        x = rational.Rational(int(ipart + fpart + period) - int(ipart + fpart),
                              10 ** n * (10 ** m - 1))
    return x.neg() if negative else x


def read_half_unit_interval(s):
    """A decimal read as a measurement: 1.23 is the interval 1.225:1.235,
    within half a unit of its last digit.
    """
    s = _expand(s)
    negative = s.startswith('-')
    if negative:
        s = s[1:]
    ipart, _, fpart = s.partition('.')
    if not fpart:
        x = rational.Rational(int(ipart or '0'))
        return interval.RationalInterval.point(x.neg() if negative else x)

    c = int((ipart or '0') + fpart) * 10
    scale = 10 ** (len(fpart) + 1)
    if negative:
        return interval.RationalInterval(rational.Rational(-(c + 5), scale),
                                         rational.Rational(-(c - 5), scale))
    else:
        return interval.RationalInterval(rational.Rational(c - 5, scale),
                                         rational.Rational(c + 5, scale))


def read_offset(s):
    """An uncertainty offset: plain or repeating decimal, with optional E exponent."""
    mantissa, e, exp = s.partition('E')
    if e:
        if not exponent_re.fullmatch(exp):
            raise utils.ParseError('E notation exponent must be an integer')
    if '#' in mantissa:
        x = read_repeating_decimal(mantissa)
    elif _number_re.fullmatch(mantissa):
        x = rational.Rational(mantissa)
    elif e:
        raise utils.ParseError('Invalid number format before E notation')
    else:
        raise utils.ParseError('Symmetric notation must have a valid number after +- or -+')
    if e:
        x = x.E(int(exp))
    return x


#
#   Uncertainty brackets
#

def read_decimal_uncertainty(base, bracket):
    """Interval for base[bracket], where bracket is one of
        lo,hi     digits appended to base for each endpoint
        +-d, -+d  symmetric offset
        +d,-d     asymmetric offsets, in either order
    Offsets on a decimal base count in units one place past its last digit.
    A base ending in the decimal point, as in 1.[2,5], takes endpoint digits
    that may repeat, as in 0.[#3,#6].
    """
    symmetric = bracket.startswith('+-') or bracket.startswith('-+')
    if _point_base_re.fullmatch(base) and not symmetric:
        return _read_point_uncertainty(base, bracket)

    if base in ('', '-'):
        raise utils.ParseError('Invalid uncertainty format: {}[{}]'.format(base, bracket))
    center = rational.Rational(base)
    _, point, fpart = base.partition('.')
    places = len(fpart) if point else 0

    if ',' in bracket and '+' not in bracket and '-' not in bracket:
        parts = bracket.split(',')
        if len(parts) != 2:
            raise utils.ParseError('Range notation must have exactly two values separated by comma')
        lo, hi = parts[0].strip(), parts[1].strip()
        if not (_range_value_re.fullmatch(lo) and _range_value_re.fullmatch(hi)):
            raise utils.ParseError('Range values must be valid decimal numbers')
        if places == 0:
            lo_int = lo.partition('.')[0]
            hi_int = hi.partition('.')[0]
            if len(lo_int) != len(hi_int):
                raise utils.ParseError(
                    'Invalid range notation: {}[{},{}] - integer parts of range values must have the same number of digits ({} has {}, {} has {})'
                    .format(base, lo, hi, lo_int, len(lo_int), hi_int, len(hi_int)))
        return interval.RationalInterval(rational.Rational(base + lo), rational.Rational(base + hi))

    if places > 0:
        unit = rational.Rational(1, 10 ** (places + 1))
    else:
        unit = rational.Rational(1)

    if symmetric:
        offset_str = bracket[2:]
        if not offset_str:
            raise utils.ParseError('Symmetric notation must have a valid number after +- or -+')
        offset = read_offset(offset_str).mul(unit)
        return interval.RationalInterval(center.sub(offset), center.add(offset))

    parts = [p.strip() for p in bracket.split(',')]
    if len(parts) != 2:
        raise utils.ParseError('Relative notation must have exactly two values separated by comma')
    above = None
    below = None
    for part in parts:
        if part.startswith('+'):
            if above is not None:
                raise utils.ParseError('Only one positive offset allowed')
            if len(part) == 1:
                raise utils.ParseError('Offset must be a valid number')
            above = read_offset(part[1:])
        elif part.startswith('-'):
            if below is not None:
                raise utils.ParseError('Only one negative offset allowed')
            if len(part) == 1:
                raise utils.ParseError('Offset must be a valid number')
            below = read_offset(part[1:])
        else:
            raise utils.ParseError('Relative notation values must start with + or -')
    if above is None or below is None:
        raise utils.ParseError('Relative notation must have exactly one + and one - value')
    return interval.RationalInterval(center.sub(below.mul(unit)), center.add(above.mul(unit)))


def _read_point_uncertainty(base, bracket):
    if ',' not in bracket:
        raise utils.ParseError('Invalid uncertainty format for decimal point notation')
    parts = bracket.split(',')
    if len(parts) != 2:
        raise utils.ParseError('Range notation must have exactly two values separated by comma')
    endpoints = []
    for part in parts:
        part = part.strip()
        if part.startswith('#'):
            endpoints.append(read_repeating_decimal(base + part))
        elif part.isdigit():
            endpoints.append(rational.Rational(base + part))
        else:
            raise utils.ParseError('Invalid endpoint format: {}'.format(part))
    return interval.RationalInterval(endpoints[0], endpoints[1])


#
#   Continued fractions
#

def read_continued_fraction(s):
    """Value of a continued fraction a0.~a1~a2~..."""
    m = cf_re.fullmatch(s)
    if m is None:
        raise utils.ParseError('Invalid continued fraction format: {}'.format(repr(s)))
    terms = m.group(2)
    if terms == '':
        raise utils.ParseError('Continued fraction must have at least one term after .~')
    if terms.endswith('~'):
        raise utils.ParseError('Continued fraction cannot end with ~')
    return rational.Rational.from_continued_fraction_string(s)


#
#   Arbitrary bases
#

def case_fold(system):
    """The case conversion that maps input letters onto a single-case alphabet,
    or None if the alphabet has both cases or no letters.
    """
    lower = any('a' <= c <= 'z' for c in system.characters)
    upper = any('A' <= c <= 'Z' for c in system.characters)
    if lower and not upper:
        return str.lower
    elif upper and not lower:
        return str.upper
    else:
        return None

def uses_underscore_exponent(system):
    """Alphabets containing E write exponents with _^ instead of E."""
    return 'E' in system.characters or 'e' in system.characters

def _scalar(value):
    if isinstance(value, integer.Integer):
        return value.to_rational()
    elif isinstance(value, rational.Rational):
        return value
    else:
        raise utils.ParseError('E notation can only be applied to simple numbers, not intervals')

def _whole(x, type_aware):
    if type_aware and x.denominator == 1:
        return integer.Integer(x.numerator)
    return x


def read_base_notation(s, system, type_aware=True):
    """Read a numeral written in the digits of system: integer, a.b, a/b,
    a..b/c, lo:hi, each optionally scaled by E (or _^) with the exponent
    also written in the base.

    Returns the pair (value, hint).
    """
    negative = s.startswith('-')
    if negative:
        s = s[1:]

    if uses_underscore_exponent(system):
        mantissa, sep, exp = s.partition('_^')
    else:
        idx = s.upper().find('E')
        if idx < 0:
            mantissa, sep, exp = s, '', ''
        else:
            mantissa, sep, exp = s[:idx], 'E', s[idx+1:]

    if 10 < system.base <= 36:
        fold = case_fold(system)
        if fold is not None:
            mantissa = fold(mantissa)
            exp = fold(exp)

    if sep:
        if not system.is_valid_string(exp):
            raise utils.ParseError('Invalid exponent "{}" for base {}'.format(exp, system.base))
        value, _ = read_base_notation(mantissa, system, type_aware)
        x = _scalar(value).mul(rational.Rational(system.base).pow(system.to_decimal(exp)))
        if negative:
            x = x.neg()
        return _whole(x, type_aware), Hint.NONE

    if ':' in mantissa:
        parts = mantissa.split(':')
        if len(parts) != 2:
            raise utils.ParseError('Base notation intervals must have exactly two endpoints separated by ":"')
        left, _ = read_base_notation(('-' if negative else '') + parts[0], system, type_aware)
        right, _ = read_base_notation(parts[1], system, type_aware)
        ends = []
        for v in (left, right):
            if isinstance(v, interval.RationalInterval):
                raise utils.ParseError('Interval endpoints must be single values, not intervals')
            ends.append(_scalar(v))
        return interval.RationalInterval(ends[0], ends[1]), Hint.EXPLICIT_INTERVAL

    if '..' in mantissa:
        parts = mantissa.split('..')
        if len(parts) != 2:
            raise utils.ParseError('Mixed number notation must have exactly one ".." separator')
        whole, frac = parts
        if '/' not in frac:
            raise utils.ParseError('Mixed number fractional part must contain "/"')
        w = rational.Rational(system.to_decimal(whole))
        f, _ = read_base_notation(frac, system, type_aware)
        if isinstance(f, interval.RationalInterval):
            raise utils.ParseError('Mixed number fractional part must be a simple fraction')
        x = w.add(_scalar(f))
        if negative:
            x = x.neg()
        return _whole(x, type_aware), Hint.NONE

    if '/' in mantissa:
        parts = mantissa.split('/')
        if len(parts) != 2:
            raise utils.ParseError('Fraction notation must have exactly one "/" separator')
        n = system.to_decimal(parts[0])
        d = system.to_decimal(parts[1])
        if d == 0:
            raise utils.DomainError('Denominator cannot be zero')
        x = rational.Rational(n, d)
        if negative:
            x = x.neg()
        return x, Hint.EXPLICIT_FRACTION

    if '.' in mantissa:
        parts = mantissa.split('.')
        if len(parts) != 2:
            raise utils.ParseError('Decimal notation must have exactly one "." separator')
        ipart, fpart = parts
        if fpart == '':
            raise utils.ParseError('Decimal point must be followed by fractional digits')
        if not system.is_valid_string(ipart + fpart):
            raise utils.ParseError('String "{}" contains characters not valid for {}'
                                   .format(mantissa, system.name))
        scale = system.base ** len(fpart)
        i = system.to_decimal(ipart) if ipart else 0
        x = rational.Rational(i * scale + system.to_decimal(fpart), scale)
        if negative:
            x = x.neg()
        return _whole(x, type_aware), Hint.NONE

    if not system.is_valid_string(mantissa):
        raise utils.ParseError('String "{}" contains characters not valid for {}'
                               .format(mantissa, system.name))
    n = system.to_decimal(mantissa)
    if negative:
        n = -n
    if type_aware:
        return integer.Integer(n), Hint.NONE
    else:
        return rational.Rational(n), Hint.NONE
