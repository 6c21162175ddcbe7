"""Number theory used by the exact numeric types,
implemented with GMP as a backend.

Everything here takes and returns plain Python ints.
"""


import gmpy2 as gmp


# ceilings for the decimal analysis

MAX_PERIOD_CHECK = 10 ** 7
DEFAULT_PERIOD_DIGITS = 20
MAX_PERIOD_DIGITS = 1000
DEFAULT_CF_LIMIT = 1000

_mpz_2 = gmp.mpz(2)
_mpz_5 = gmp.mpz(5)
_mpz_10 = gmp.mpz(10)


def gcd(a, b):
    return int(gmp.gcd(a, b))

def lcm(a, b):
    if a == 0 or b == 0:
        return 0
    return int(abs(gmp.lcm(a, b)))

def floor_div(n, d):
    return int(gmp.f_div(n, d))

def ceil_div(n, d):
    return int(gmp.c_div(n, d))

def trunc_divmod(n, d):
    """Division rounding toward zero; the remainder takes the sign of n."""
    return int(gmp.t_div(n, d)), int(gmp.t_mod(n, d))

def factorial(n):
    return int(gmp.fac(n))

def double_factorial(n):
    return int(gmp.double_fac(n))

def ipow(x, n):
    """x**n for integer x and non-negative n."""
    return int(gmp.mpz(x) ** n)


def split_decimal_denominator(d):
    """Factor a positive denominator as d == (2**twos) * (5**fives) * rest,
    with rest coprime to 10.
    """
    d2, twos = gmp.remove(gmp.mpz(d), _mpz_2)
    rest, fives = gmp.remove(d2, _mpz_5)
    return int(rest), int(twos), int(fives)


def order_of_ten(d, limit=MAX_PERIOD_CHECK):
    """Multiplicative order of 10 modulo d, for d coprime to 10.

    Returns 0 when d == 1 (the expansion terminates)
    and -1 if the order exceeds limit.
    """
    if d == 1:
        return 0
    d = gmp.mpz(d)
    r = _mpz_10 % d
    k = 1
    while r != 1:
        if k >= limit:
            return -1
        r = (r * _mpz_10) % d
        k += 1
    return k


def long_division(r, d, ndigits):
    """Produce up to ndigits decimal digits of the fraction r/d, with 0 <= r < d,
    stopping early if the division terminates.

    Returns the digit string and the remainder left after the last digit.
    """
    digits = []
    r = gmp.mpz(r)
    d = gmp.mpz(d)
    for _ in range(ndigits):
        if r == 0:
            break
        q, r = gmp.f_divmod(r * _mpz_10, d)
        digits.append(str(int(q)))
    return ''.join(digits), int(r)


def leading_zeros(digits):
    return len(digits) - len(digits.lstrip('0'))
