"""Closed intervals with exact rational endpoints."""

import random

from ..numeric import utils
from ..numeric import gmpmath
from ..numeric import integer
from ..numeric import rational


def _to_rational(x):
    if isinstance(x, rational.Rational):
        return x
    elif isinstance(x, (int, str, integer.Integer)):
        return rational.Rational(x)
    else:
        raise ValueError('invalid interval endpoint: {}'.format(repr(x)))

def _ceil(x):
    return gmpmath.ceil_div(x.numerator, x.denominator)

def _floor(x):
    return gmpmath.floor_div(x.numerator, x.denominator)


class RationalInterval(object):
    """The set of rationals x with low <= x <= high.
    The endpoints are sorted on construction.
    """

    def __init__(self, low, high):
        low = _to_rational(low)
        high = _to_rational(high)
        if high < low:
            low, high = high, low
        self._low = low
        self._high = high

    @property
    def low(self):
        return self._low

    @property
    def high(self):
        return self._high

    @property
    def is_point(self):
        return self._low == self._high

    @classmethod
    def point(cls, x):
        x = _to_rational(x)
        return cls(x, x)

    @classmethod
    def from_string(cls, s):
        parts = s.split(':')
        if len(parts) != 2:
            raise utils.ParseError("Invalid interval format. Use 'a:b', got {}".format(repr(s)))
        return cls(parts[0], parts[1])

    def __repr__(self):
        return '{}({}, {})'.format(type(self).__name__, repr(self._low), repr(self._high))

    def __str__(self):
        return '{}:{}'.format(str(self._low), str(self._high))

    def __eq__(self, other):
        return (isinstance(other, RationalInterval)
                and self._low == other._low and self._high == other._high)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self._low, self._high))

    def _widen(self, other):
        if isinstance(other, RationalInterval):
            return other
        elif isinstance(other, (int, integer.Integer, rational.Rational)):
            return type(self).point(other)
        else:
            raise ValueError('unsupported operand {}'.format(repr(other)))

    #
    #   Arithmetic
    #

    def add(self, other):
        other = self._widen(other)
        return type(self)(self._low.add(other._low), self._high.add(other._high))

    def sub(self, other):
        other = self._widen(other)
        return type(self)(self._low.sub(other._high), self._high.sub(other._low))

    def mul(self, other):
        other = self._widen(other)
        products = [
            self._low.mul(other._low),
            self._low.mul(other._high),
            self._high.mul(other._low),
            self._high.mul(other._high),
        ]
        return type(self)(min(products), max(products))

    def div(self, other):
        if not isinstance(other, RationalInterval) and _to_rational(other).is_zero():
            raise utils.DomainError('Division by zero')
        other = self._widen(other)
        if other._low.is_zero() and other._high.is_zero():
            raise utils.DomainError('Division by zero')
        if other.contains_zero():
            raise utils.DomainError('Cannot divide by an interval containing zero')
        quotients = [
            self._low.div(other._low),
            self._low.div(other._high),
            self._high.div(other._low),
            self._high.div(other._high),
        ]
        return type(self)(min(quotients), max(quotients))

    def reciprocal(self):
        if self.contains_zero():
            raise utils.DomainError('Cannot reciprocate an interval containing zero')
        return type(self)(self._high.reciprocal(), self._low.reciprocal())

    def neg(self):
        return type(self)(self._high.neg(), self._low.neg())

    def pow(self, n):
        """Analytic power: the image of the interval under x -> x**n."""
        n = int(n)
        if n == 0:
            if self._low.is_zero() and self._high.is_zero():
                raise utils.DomainError('Zero cannot be raised to the power of zero')
            if self.contains_zero():
                raise utils.DomainError('Cannot raise an interval containing zero to the power of zero')
            return type(self).point(1)

        if n < 0:
            if self.contains_zero():
                raise utils.DomainError('Cannot raise an interval containing zero to a negative power')
            return self.pow(-n).reciprocal()

        if n % 2 == 0:
            if self.contains_zero():
                return type(self)(0, max(self._low.abs().pow(n), self._high.abs().pow(n)))
            elif self._high.is_negative():
                return type(self)(self._high.pow(n), self._low.pow(n))
        return type(self)(self._low.pow(n), self._high.pow(n))

    def mpow(self, n):
        """Multiplicative power: the product of n copies of the interval,
        each varying independently, so (-1:2).mpow(2) is -2:4.
        """
        n = int(n)
        if n == 0:
            raise utils.DomainError('Multiplicative exponentiation requires at least one factor')
        if n < 0:
            return self.reciprocal().mpow(-n)
        result = self
        for _ in range(n - 1):
            result = result.mul(self)
        return result

    def E(self, exp):
        """Scale both endpoints by 10**exp."""
        return type(self)(self._low.E(exp), self._high.E(exp))

    #
    #   Set operations
    #

    def contains_zero(self):
        return self._low.numerator <= 0 <= self._high.numerator

    def contains_value(self, x):
        x = _to_rational(x)
        return self._low <= x <= self._high

    def contains(self, other):
        """True if other lies entirely within this interval."""
        return self._low <= other._low and other._high <= self._high

    def overlaps(self, other):
        return not (self._high < other._low or other._high < self._low)

    def intersection(self, other):
        if not self.overlaps(other):
            return None
        return type(self)(max(self._low, other._low), min(self._high, other._high))

    def union(self, other):
        """The smallest interval covering both, or None if they are
        disjoint and do not share an endpoint.
        """
        adjacent = self._high == other._low or other._high == self._low
        if not self.overlaps(other) and not adjacent:
            return None
        return type(self)(min(self._low, other._low), max(self._high, other._high))

    #
    #   Representative points
    #

    def midpoint(self):
        return self._low.add(self._high).div(2)

    def mediant(self):
        return rational.Rational(self._low.numerator + self._high.numerator,
                                 self._low.denominator + self._high.denominator)

    def shortest_decimal(self, base=10):
        """The point of the interval with the smallest power of base as its denominator.

        For a point interval, None is returned if no power up to base**50 works.
        """
        if base <= 1:
            raise ValueError('Base must be greater than 1')

        if self.is_point:
            scale = 1
            for _ in range(51):
                scaled = self._low.mul(scale)
                if scaled.is_integer():
                    return rational.Rational(scaled.numerator, scale)
                scale *= base
            return None

        # a step of base**-k fits once base**k >= 1/length; allow two more
        length = self._high.sub(self._low)
        k_fit = 0
        scale = 1
        while scale * length.numerator < length.denominator:
            scale *= base
            k_fit += 1
        max_k = k_fit + 2

        scale = 1
        for _ in range(max_k + 1):
            lo = _ceil(self._low.mul(scale))
            hi = _floor(self._high.mul(scale))
            if lo <= hi:
                return rational.Rational(lo, scale)
            scale *= base
        raise utils.DomainError('Failed to find shortest decimal representation (exceeded theoretical bound)')

    def random_rational(self, max_denominator=1000):
        """A uniformly chosen reduced fraction in the interval with
        denominator at most max_denominator, or the midpoint if there is none.
        """
        if max_denominator <= 0:
            raise ValueError('max_denominator must be positive')
        candidates = []
        for d in range(1, max_denominator + 1):
            for n in range(_ceil(self._low.mul(d)), _floor(self._high.mul(d)) + 1):
                if gmpmath.gcd(n, d) == 1:
                    candidates.append(rational.Rational(n, d))
        if not candidates:
            return self.midpoint()
        return random.choice(candidates)

    def _shortest_precise_decimal(self):
        # fewest decimal places, then closest to the midpoint, then smallest
        mid = self.midpoint()
        for places in range(21):
            scale = 10 ** places
            lo = _ceil(self._low.mul(scale))
            hi = _floor(self._high.mul(scale))
            if lo <= hi:
                candidates = [rational.Rational(n, scale) for n in range(lo, hi + 1)]
                return min(candidates, key=lambda c: (c.sub(mid).abs(), c))
        return mid

    #
    #   Formatting
    #

    def to_mixed_string(self):
        return '{}:{}'.format(self._low.to_mixed_string(), self._high.to_mixed_string())

    def to_repeating_decimal(self, use_repeat_notation=True):
        return '{}:{}'.format(self._low.to_repeating_decimal(use_repeat_notation),
                              self._high.to_repeating_decimal(use_repeat_notation))

    def compacted_decimal_interval(self):
        """Factor the common leading digits out of both truncated decimals,
        as in 1.2[34,56], when the remaining digit strings have equal length.
        """
        lo = self._low.to_decimal()
        hi = self._high.to_decimal()
        fallback = '{}:{}'.format(lo, hi)

        common = 0
        while common < min(len(lo), len(hi)) and lo[common] == hi[common]:
            common += 1
        prefix = lo[:common]
        if len(prefix) <= 1 or (prefix.startswith('-') and len(prefix) <= 2):
            return fallback

        lo_rest = lo[common:]
        hi_rest = hi[common:]
        if not lo_rest or len(lo_rest) != len(hi_rest):
            return fallback
        if not (lo_rest.isdigit() and hi_rest.isdigit()):
            return fallback
        return '{}[{},{}]'.format(prefix, lo_rest, hi_rest)

    def relative_mid_decimal_interval(self):
        mid = self.midpoint()
        return '{}[+-{}]'.format(mid.to_decimal(), self._high.sub(mid).to_decimal())

    def relative_decimal_interval(self):
        """The shortest decimal in the interval with its offsets to each endpoint,
        written in units of one place past its last digit.
        """
        center = self._shortest_precise_decimal()
        below = center.sub(self._low)
        above = self._high.sub(center)

        text = center.to_decimal()
        places = len(text.split('.')[1]) if '.' in text else 0
        if places > 0:
            scale = 10 ** (places + 1)
            scaled_below = below.mul(scale)
            scaled_above = above.mul(scale)
        else:
            scaled_below = below
            scaled_above = above

        if below.sub(above).abs() < rational.Rational(1, 10 ** 6):
            avg = scaled_below.add(scaled_above).div(2)
            return '{}[+-{}]'.format(text, avg.to_decimal())
        else:
            return '{}[+{},-{}]'.format(text, scaled_above.to_decimal(), scaled_below.to_decimal())

    # python operators

    def __neg__(self):
        return self.neg()

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return self._widen(other).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return self._widen(other).sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return self._widen(other).mul(self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return self._widen(other).div(self)

    def __pow__(self, n):
        return self.pow(n)
