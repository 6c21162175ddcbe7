"""Exact rational numbers in canonical form,
with decimal-expansion and continued-fraction analysis.
"""

import re
import typing
import gmpy2 as gmp

from . import utils
from . import gmpmath
from . import integer
from ..arithmetic import interval


_mpz_type = type(gmp.mpz(0))

_int_re = re.compile(r'-?[0-9]+')
_frac_re = re.compile(r'(-?[0-9]+)/(-?[0-9]+)')
_mixed_re = re.compile(r'(-?[0-9]+)\.\.([0-9]+)/([0-9]+)')
_dec_re = re.compile(r'(-?)([0-9]*)\.([0-9]*)')
_cf_re = re.compile(r'(-?[0-9]+)\.~(.*)')


class DecimalExpansion(typing.NamedTuple):
    """Decimal digits of |x|: whole_part . initial_segment (period_digits)*

    The initial segment splits into initial_leading_zeros zeros followed by
    initial_rest, and the computed period digits split the same way.
    period_length is 0 for terminating expansions and -1 when the period
    was too long to determine.
    """
    whole_part: int
    initial_segment: str
    initial_leading_zeros: int
    initial_rest: str
    period_digits: str
    period_length: int
    period_leading_zeros: int
    period_rest: str
    is_terminating: bool


_zero_expansion = DecimalExpansion(0, '', 0, '', '', 0, 0, '', True)


def _read_string(s):
    """Decode the plain rational text forms: integer, a/b, a..b/c and a.b"""
    s = s.strip()
    if _int_re.fullmatch(s):
        return int(s), 1

    m = _frac_re.fullmatch(s)
    if m:
        return int(m.group(1)), int(m.group(2))

    m = _mixed_re.fullmatch(s)
    if m:
        whole, n, d = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if m.group(1).startswith('-'):
            return -(-whole * d + n), d
        else:
            return whole * d + n, d

    if '.' in s:
        try:
            expanded = utils.expand_runs(s)
        except ValueError:
            raise utils.ParseError('Invalid decimal format: {}'.format(repr(s)))
        m = _dec_re.fullmatch(expanded)
        if m is None or (m.group(2) == '' and m.group(3) == ''):
            raise utils.ParseError('Invalid decimal format: {}'.format(repr(s)))
        sign, ipart, fpart = m.groups()
        scale = 10 ** len(fpart)
        n = int(ipart or '0') * scale + int(fpart or '0')
        return (-n if sign else n), scale

    raise utils.ParseError("Invalid rational format. Use 'a/b', 'a', or 'a..b/c': {}"
                           .format(repr(s)))


class Rational(object):

    # always reduced, with a positive denominator
    _n : int = 0
    _d : int = 1

    # private decimal-expansion cache, replaced only by a larger computation
    _expansion = None
    _expansion_digits : int = -1

    def __init__(self, numerator=0, denominator=1):
        if isinstance(numerator, Rational):
            n, d = numerator._n, numerator._d * int(denominator)
        elif isinstance(numerator, integer.Integer):
            n, d = numerator.value, int(denominator)
        elif isinstance(numerator, str):
            n, d = _read_string(numerator)
            d *= int(denominator)
        elif isinstance(numerator, int) or isinstance(numerator, _mpz_type):
            n = int(numerator)
            if isinstance(denominator, integer.Integer):
                d = denominator.value
            else:
                d = int(denominator)
        else:
            raise ValueError('cannot construct {} from {}'.format(type(self).__name__, repr(numerator)))

        if d == 0:
            raise utils.DomainError('Denominator cannot be zero')
        if d < 0:
            n, d = -n, -d
        if n == 0:
            d = 1
        else:
            g = gmpmath.gcd(n, d)
            n, d = n // g, d // g
        self._n = n
        self._d = d

    @property
    def numerator(self):
        return self._n

    @property
    def denominator(self):
        return self._d

    def __repr__(self):
        return '{}({}, {})'.format(type(self).__name__, repr(self._n), repr(self._d))

    def __str__(self):
        if self._d == 1:
            return str(self._n)
        else:
            return '{}/{}'.format(self._n, self._d)

    def __hash__(self):
        if self._d == 1:
            return hash(self._n)
        else:
            return hash((self._n, self._d))

    # tower dispatch

    def _widen(self, other):
        if isinstance(other, int) or isinstance(other, integer.Integer):
            return Rational(other)
        elif isinstance(other, (Rational, interval.RationalInterval)):
            return other
        else:
            raise ValueError('unsupported operand {}'.format(repr(other)))

    def add(self, other):
        other = self._widen(other)
        if isinstance(other, Rational):
            return Rational(self._n * other._d + other._n * self._d, self._d * other._d)
        else:
            return interval.RationalInterval.point(self).add(other)

    def sub(self, other):
        other = self._widen(other)
        if isinstance(other, Rational):
            return Rational(self._n * other._d - other._n * self._d, self._d * other._d)
        else:
            return interval.RationalInterval.point(self).sub(other)

    def mul(self, other):
        other = self._widen(other)
        if isinstance(other, Rational):
            return Rational(self._n * other._n, self._d * other._d)
        else:
            return interval.RationalInterval.point(self).mul(other)

    def div(self, other):
        other = self._widen(other)
        if isinstance(other, Rational):
            if other._n == 0:
                raise utils.DomainError('Division by zero')
            return Rational(self._n * other._d, self._d * other._n)
        else:
            return interval.RationalInterval.point(self).div(other)

    def neg(self):
        return Rational(-self._n, self._d)

    def abs(self):
        return Rational(abs(self._n), self._d)

    def reciprocal(self):
        if self._n == 0:
            raise utils.DomainError('Cannot take reciprocal of zero')
        return Rational(self._d, self._n)

    def pow(self, n):
        n = int(n)
        if self._n == 0:
            if n == 0:
                raise utils.DomainError('Zero cannot be raised to the power of zero')
            elif n < 0:
                raise utils.DomainError('Zero cannot be raised to a negative power')
        if n < 0:
            return self.reciprocal().pow(-n)
        return Rational(gmpmath.ipow(self._n, n), gmpmath.ipow(self._d, n))

    def E(self, exp):
        """Scale by 10**exp."""
        exp = int(exp)
        if exp >= 0:
            return Rational(self._n * gmpmath.ipow(10, exp), self._d)
        else:
            return Rational(self._n, self._d * gmpmath.ipow(10, -exp))

    def floor(self):
        return integer.Integer(gmpmath.floor_div(self._n, self._d))

    def ceil(self):
        return integer.Integer(gmpmath.ceil_div(self._n, self._d))

    def is_zero(self):
        return self._n == 0

    def is_negative(self):
        return self._n < 0

    def is_integer(self):
        return self._d == 1

    # comparison

    def compareto(self, other):
        """Compare to another number. The ordering returned is:
            -1 iff self < other
             0 iff self = other
             1 iff self > other
          None iff other is not a scalar number
        """
        if isinstance(other, int) or isinstance(other, integer.Integer):
            other = Rational(other)
        if not isinstance(other, Rational):
            return None
        lhs = self._n * other._d
        rhs = other._n * self._d
        if lhs < rhs:
            return -1
        elif lhs > rhs:
            return 1
        else:
            return 0

    def __lt__(self, other):
        order = self.compareto(other)
        return order is not None and order < 0

    def __le__(self, other):
        order = self.compareto(other)
        return order is not None and order <= 0

    def __eq__(self, other):
        order = self.compareto(other)
        return order is not None and order == 0

    def __ne__(self, other):
        order = self.compareto(other)
        return order is None or order != 0

    def __ge__(self, other):
        order = self.compareto(other)
        return order is not None and order >= 0

    def __gt__(self, other):
        order = self.compareto(other)
        return order is not None and order > 0

    # python operators

    def __neg__(self):
        return self.neg()

    def __abs__(self):
        return self.abs()

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return Rational(other).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return Rational(other).sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return Rational(other).mul(self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return Rational(other).div(self)

    def __pow__(self, n):
        return self.pow(n)

    # decimal expansion

    def decimal_metadata(self, max_period_digits=gmpmath.DEFAULT_PERIOD_DIGITS):
        """Analyze the decimal expansion of |self|, generating at most
        max_period_digits digits of the period (capped at MAX_PERIOD_DIGITS).
        """
        if self._n == 0:
            return _zero_expansion
        max_period_digits = min(max_period_digits, gmpmath.MAX_PERIOD_DIGITS)
        if self._expansion is None or self._expansion_digits < max_period_digits:
            self._expansion = self._compute_expansion(max_period_digits)
            self._expansion_digits = max_period_digits
        return self._expansion

    def _compute_expansion(self, max_period_digits):
        whole, r = divmod(abs(self._n), self._d)

        reduced, twos, fives = gmpmath.split_decimal_denominator(self._d)
        initial_length = max(twos, fives)
        initial, r = gmpmath.long_division(r, self._d, initial_length)

        if reduced == 1:
            period_length = 0
            period = ''
        else:
            period_length = gmpmath.order_of_ten(reduced)
            if period_length < 0:
                ndigits = max_period_digits
            else:
                ndigits = min(period_length, max_period_digits)
            period, _ = gmpmath.long_division(r, self._d, ndigits)

        initial_zeros = gmpmath.leading_zeros(initial)
        period_zeros = gmpmath.leading_zeros(period)
        return DecimalExpansion(
            whole_part=whole,
            initial_segment=initial,
            initial_leading_zeros=initial_zeros,
            initial_rest=initial[initial_zeros:],
            period_digits=period,
            period_length=period_length,
            period_leading_zeros=period_zeros,
            period_rest=period[period_zeros:],
            is_terminating=(reduced == 1),
        )

    def extract_period_segment(self, initial_segment, period_length, digits):
        """The first digits digits of the period, skipping the initial segment."""
        if period_length <= 0:
            return ''
        r = abs(self._n) % self._d
        for _ in range(len(initial_segment)):
            r = (r * 10) % self._d
        segment, _ = gmpmath.long_division(r, self._d, min(digits, period_length))
        return segment

    def to_mixed_string(self):
        if self._d == 1:
            return str(self._n)
        whole, r = divmod(abs(self._n), self._d)
        sign = '-' if self._n < 0 else ''
        if whole == 0:
            return '{}{}/{}'.format(sign, r, self._d)
        else:
            return '{}{}..{}/{}'.format(sign, whole, r, self._d)

    def to_decimal(self):
        """Truncated decimal with at most 20 fractional digits."""
        whole, r = divmod(abs(self._n), self._d)
        sign = '-' if self._n < 0 else ''
        if r == 0:
            return str(self._n)
        digits, _ = gmpmath.long_division(r, self._d, 20)
        return '{}{}.{}'.format(sign, whole, digits)

    def to_repeating_decimal_with_period(self, use_repeat_notation=True):
        """Exact decimal in whole.initial#period notation.

        Returns the pair (decimal, period_length).
        """
        if self._n == 0:
            return '0', 0

        exp = self.decimal_metadata(100 if use_repeat_notation else gmpmath.DEFAULT_PERIOD_DIGITS)
        s = '{}{}'.format('-' if self._n < 0 else '', exp.whole_part)

        if use_repeat_notation:
            initial = utils.compress_runs(exp.initial_segment)
        else:
            initial = exp.initial_segment

        if exp.is_terminating:
            if exp.initial_segment:
                s += '.' + initial + '#0'
            return s, 0

        period = exp.period_digits
        if exp.period_length > 0 and len(period) < exp.period_length:
            period = self.extract_period_segment(exp.initial_segment, exp.period_length, exp.period_length)
        if use_repeat_notation:
            period = utils.compress_runs(period)

        s = s + '.' + initial + '#' + period
        if exp.period_length < 0:
            # period beyond MAX_PERIOD_CHECK, only a prefix is known
            s += '...'
        return s, exp.period_length

    def to_repeating_decimal(self, use_repeat_notation=True):
        decimal, _ = self.to_repeating_decimal_with_period(use_repeat_notation)
        return decimal

    def _period_info(self):
        exp = self.decimal_metadata(100)
        if exp.is_terminating:
            return ''
        info = []
        if exp.initial_leading_zeros > 0:
            info.append('initial: {} zeros'.format(exp.initial_leading_zeros))
        if exp.period_leading_zeros > 0:
            info.append('period starts: +{} zeros'.format(exp.period_leading_zeros))
        if exp.period_length < 0:
            info.append('period: >10^7')
        else:
            info.append('period: {}'.format(exp.period_length))
        return ' {' + ', '.join(info) + '}'

    def to_scientific_notation(self, use_repeat_notation=True, precision=11, show_period_info=False):
        """Normalized mantissa, 1 <= |m| < 10, followed by E and the exponent.

        A repeating mantissa is written exactly in # notation; a terminating
        one is truncated to precision significant digits.
        """
        if self._n == 0:
            return '0'

        a = self.abs()
        exp = len(str(a._n)) - len(str(a._d))
        m = a.E(-exp)
        if m < 1:
            exp -= 1
            m = m.E(1)

        mantissa, period = m.to_repeating_decimal_with_period(use_repeat_notation)
        if period == 0:
            mantissa = mantissa[:-2] if mantissa.endswith('#0') else mantissa
            if '.' in mantissa:
                whole, frac = mantissa.split('.')
                frac = utils.expand_runs(frac)[:max(precision - 1, 0)].rstrip('0')
                mantissa = whole + '.' + frac if frac else whole

        s = '{}{}E{}'.format('-' if self._n < 0 else '', mantissa, exp)
        if show_period_info:
            s += self._period_info()
        return s

    # continued fractions

    @classmethod
    def from_continued_fraction(cls, terms):
        """Evaluate [a0; a1, a2, ...] with the convergent recurrence."""
        return cls._convergents_of(terms)[-1]

    @classmethod
    def _convergents_of(cls, terms):
        terms = list(terms)
        if len(terms) == 0:
            raise utils.DomainError('Continued fraction array cannot be empty')
        cf = []
        for a in terms:
            if isinstance(a, integer.Integer):
                cf.append(a.value)
            elif isinstance(a, int) or isinstance(a, _mpz_type):
                cf.append(int(a))
            else:
                raise ValueError('Invalid continued fraction term: {}'.format(repr(a)))
        for a in cf[1:]:
            if a <= 0:
                raise utils.DomainError('Continued fraction terms must be positive: {}'.format(a))

        p_prev, p = 1, cf[0]
        q_prev, q = 0, 1
        convergents = [cls(p, q)]
        for a in cf[1:]:
            p_prev, p = p, a * p + p_prev
            q_prev, q = q, a * q + q_prev
            convergents.append(cls(p, q))
        return convergents

    def to_continued_fraction(self, max_terms=gmpmath.DEFAULT_CF_LIMIT):
        if self._d == 1:
            return [self._n]

        n, d = self._n, self._d
        whole = gmpmath.floor_div(n, d)
        n = n - whole * d
        cf = [whole]
        while n != 0 and len(cf) < max_terms:
            q, r = divmod(d, n)
            cf.append(q)
            d, n = n, r

        if n == 0 and len(cf) > 1 and cf[-1] == 1:
            cf.pop()
            cf[-1] += 1
        return cf

    def to_continued_fraction_string(self):
        cf = self.to_continued_fraction()
        if len(cf) == 1:
            return '{}.~0'.format(cf[0])
        return '{}.~{}'.format(cf[0], '~'.join(str(a) for a in cf[1:]))

    @classmethod
    def from_continued_fraction_string(cls, s):
        m = _cf_re.fullmatch(s.strip())
        if m is None:
            raise utils.ParseError('Invalid continued fraction format: {}'.format(repr(s)))
        whole, rest = int(m.group(1)), m.group(2)
        if rest == '0':
            return cls(whole)
        if rest == '':
            raise utils.ParseError('Continued fraction must have at least one term after .~')
        if rest.endswith('~'):
            raise utils.ParseError('Continued fraction cannot end with ~')
        if '~~' in rest:
            raise utils.ParseError('Invalid continued fraction format: double tilde')
        terms = [whole]
        for term in rest.split('~'):
            if not term.isdigit():
                raise utils.ParseError('Invalid continued fraction term: {}'.format(term))
            if int(term) <= 0:
                raise utils.DomainError('Continued fraction terms must be positive integers: {}'.format(term))
            terms.append(int(term))
        return cls.from_continued_fraction(terms)

    def convergents(self, max_count=gmpmath.DEFAULT_CF_LIMIT):
        return type(self)._convergents_of(self.to_continued_fraction(max_count))[:max_count]

    def get_convergent(self, n):
        convergents = self.convergents()
        if n < 0 or n >= len(convergents):
            raise ValueError('Convergent index {} out of range [0, {}]'.format(n, len(convergents) - 1))
        return convergents[n]

    @classmethod
    def convergents_from_cf(cls, cf, max_count=gmpmath.DEFAULT_CF_LIMIT):
        if isinstance(cf, str):
            x = cls.from_continued_fraction_string(cf)
        else:
            x = cls.from_continued_fraction(cf)
        return x.convergents(max_count)

    def approximation_error(self, target):
        if not isinstance(target, Rational):
            raise ValueError('Target must be a Rational, got {}'.format(repr(target)))
        return self.sub(target).abs()

    def best_approximation(self, max_denominator):
        """The last convergent whose denominator does not exceed max_denominator."""
        best = Rational(self.floor())
        for c in self.convergents():
            if c.denominator <= max_denominator:
                best = c
            else:
                break
        return best
