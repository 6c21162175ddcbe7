"""Arbitrary-precision signed integers, the bottom of the exact numeric tower."""

import re
import gmpy2 as gmp

from . import utils
from . import gmpmath
from . import rational
from ..arithmetic import interval


_mpz_type = type(gmp.mpz(0))
_integer_re = re.compile(r'-?[0-9]+')


class Integer(object):

    _value : int = 0

    def __init__(self, x=0):
        if isinstance(x, int) or isinstance(x, _mpz_type):
            self._value = int(x)
        elif isinstance(x, Integer):
            self._value = x._value
        elif isinstance(x, str):
            s = x.strip()
            if not _integer_re.fullmatch(s):
                raise utils.ParseError('Invalid integer format. Must be a whole number, got {}'
                                       .format(repr(x)))
            self._value = int(s)
        else:
            raise ValueError('cannot construct {} from {}'.format(type(self).__name__, repr(x)))

    @property
    def value(self):
        """The value as a python int."""
        return self._value

    def __int__(self):
        return self._value

    def __index__(self):
        return self._value

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, repr(self._value))

    def __str__(self):
        return str(self._value)

    def __hash__(self):
        return hash(self._value)

    # conversions

    def to_rational(self):
        return rational.Rational(self._value, 1)

    @classmethod
    def from_rational(cls, r):
        if r.denominator != 1:
            raise utils.DomainError('Rational is not a whole number: {}'.format(str(r)))
        return cls(r.numerator)

    # tower dispatch: the narrower operand widens to the type of the wider one

    def _widen(self, other):
        if isinstance(other, int):
            return Integer(other)
        elif isinstance(other, (Integer, rational.Rational, interval.RationalInterval)):
            return other
        else:
            raise ValueError('unsupported operand {}'.format(repr(other)))

    def add(self, other):
        other = self._widen(other)
        if isinstance(other, Integer):
            return Integer(self._value + other._value)
        elif isinstance(other, rational.Rational):
            return self.to_rational().add(other)
        else:
            return interval.RationalInterval.point(self).add(other)

    def sub(self, other):
        other = self._widen(other)
        if isinstance(other, Integer):
            return Integer(self._value - other._value)
        elif isinstance(other, rational.Rational):
            return self.to_rational().sub(other)
        else:
            return interval.RationalInterval.point(self).sub(other)

    def mul(self, other):
        other = self._widen(other)
        if isinstance(other, Integer):
            return Integer(self._value * other._value)
        elif isinstance(other, rational.Rational):
            return self.to_rational().mul(other)
        else:
            return interval.RationalInterval.point(self).mul(other)

    def div(self, other):
        """Exact division. The result is an Integer when the division is even,
        and a Rational otherwise.
        """
        other = self._widen(other)
        if isinstance(other, Integer):
            if other._value == 0:
                raise utils.DomainError('Division by zero')
            q, r = divmod(self._value, other._value)
            if r == 0:
                return Integer(q)
            else:
                return rational.Rational(self._value, other._value)
        elif isinstance(other, rational.Rational):
            return self.to_rational().div(other)
        else:
            return interval.RationalInterval.point(self).div(other)

    def mod(self, other):
        other = self._widen(other)
        if not isinstance(other, Integer):
            raise ValueError('modulo requires an integer, got {}'.format(repr(other)))
        if other._value == 0:
            raise utils.DomainError('Modulo by zero')
        _, r = gmpmath.trunc_divmod(self._value, other._value)
        return Integer(r)

    def neg(self):
        return Integer(-self._value)

    def abs(self):
        return Integer(abs(self._value))

    def sign(self):
        if self._value > 0:
            return Integer(1)
        elif self._value < 0:
            return Integer(-1)
        else:
            return Integer(0)

    def pow(self, n):
        n = int(n)
        if self._value == 0:
            if n == 0:
                raise utils.DomainError('Zero cannot be raised to the power of zero')
            elif n < 0:
                raise utils.DomainError('Zero cannot be raised to a negative power')
        if n < 0:
            return rational.Rational(1, self._pow_nonneg(-n))
        return Integer(self._pow_nonneg(n))

    def _pow_nonneg(self, n):
        # square and multiply
        result = 1
        base = self._value
        while n > 0:
            if n & 1:
                result *= base
            base *= base
            n >>= 1
        return result

    def E(self, exp):
        """Scale by 10**exp."""
        exp = int(exp)
        if exp >= 0:
            return Integer(self._value * gmpmath.ipow(10, exp))
        else:
            return rational.Rational(self._value, gmpmath.ipow(10, -exp))

    def factorial(self):
        if self._value < 0:
            raise utils.DomainError('Factorial is not defined for negative integers')
        return Integer(gmpmath.factorial(self._value))

    def double_factorial(self):
        if self._value < 0:
            raise utils.DomainError('Double factorial is not defined for negative integers')
        return Integer(gmpmath.double_factorial(self._value))

    def gcd(self, other):
        return Integer(gmpmath.gcd(self._value, int(Integer(other))))

    def lcm(self, other):
        return Integer(gmpmath.lcm(self._value, int(Integer(other))))

    def is_zero(self):
        return self._value == 0

    def is_positive(self):
        return self._value > 0

    def is_negative(self):
        return self._value < 0

    def is_even(self):
        return self._value % 2 == 0

    def is_odd(self):
        return self._value % 2 != 0

    # comparison

    def compareto(self, other):
        """Compare to another number. The ordering returned is:
            -1 iff self < other
             0 iff self = other
             1 iff self > other
          None iff other is not a scalar number
        """
        if isinstance(other, int):
            other = Integer(other)
        if isinstance(other, Integer):
            if self._value < other._value:
                return -1
            elif self._value > other._value:
                return 1
            else:
                return 0
        elif isinstance(other, rational.Rational):
            return self.to_rational().compareto(other)
        else:
            return None

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
        return Integer(other).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return Integer(other).sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return Integer(other).mul(self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return Integer(other).div(self)

    def __mod__(self, other):
        return self.mod(other)

    def __pow__(self, n):
        return self.pow(n)
