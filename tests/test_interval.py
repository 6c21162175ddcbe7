import random

import pytest

from ratmath import Integer, Rational, RationalInterval, ParseError, DomainError


def iv(lo, hi):
    return RationalInterval(Rational(lo), Rational(hi))


class TestConstruction:

    def test_endpoints_are_sorted(self):
        rng = random.Random(3)
        for _ in range(100):
            a = Rational(rng.randint(-100, 100), rng.randint(1, 20))
            b = Rational(rng.randint(-100, 100), rng.randint(1, 20))
            x = RationalInterval(a, b)
            assert x.low <= x.high
            assert x == RationalInterval(b, a)

    def test_point(self):
        x = RationalInterval.point(Integer(3))
        assert x.is_point
        assert x.low == 3 and x.high == 3

    def test_from_string(self):
        assert RationalInterval.from_string('3/4:1/2') == iv('1/2', '3/4')
        with pytest.raises(ParseError, match='Invalid interval format'):
            RationalInterval.from_string('1:2:3')

    def test_str_repr(self):
        assert str(iv('1/2', '3/4')) == '1/2:3/4'
        assert repr(iv(0, 1)) == 'RationalInterval(Rational(0, 1), Rational(1, 1))'

    def test_not_equal_to_scalars(self):
        assert iv(1, 1) != Rational(1)


class TestArithmetic:

    def test_add_sub(self):
        assert iv(1, 2).add(iv(3, 5)) == iv(4, 7)
        assert iv(1, 2).sub(iv(3, 5)) == iv(-4, -1)
        assert iv(1, 2).add(Integer(1)) == iv(2, 3)

    def test_mul_takes_all_corners(self):
        assert iv(-1, 2).mul(iv(3, 4)) == iv(-4, 8)
        assert iv(-2, -1).mul(iv(-3, 4)) == iv(-8, 6)

    def test_div(self):
        assert iv(1, 2).div(iv(4, 8)) == iv('1/8', '1/2')
        assert iv(1, 2).div(Rational(2)) == iv('1/2', 1)

    def test_div_by_zero(self):
        with pytest.raises(DomainError, match='Division by zero'):
            iv(1, 2).div(0)
        with pytest.raises(DomainError, match='Division by zero'):
            iv(1, 2).div(iv(0, 0))
        with pytest.raises(DomainError, match='containing zero'):
            iv(1, 2).div(iv(-1, 1))

    def test_reciprocal(self):
        assert iv(2, 4).reciprocal() == iv('1/4', '1/2')
        with pytest.raises(DomainError):
            iv(-1, 1).reciprocal()

    @pytest.mark.parametrize('x, n, expected', [
        (iv(-2, 3), 2, iv(0, 9)),
        (iv(-3, -2), 2, iv(4, 9)),
        (iv(-2, 3), 3, iv(-8, 27)),
        (iv(1, 2), -1, iv('1/2', 1)),
        (iv(1, 2), 0, iv(1, 1)),
    ])
    def test_pow(self, x, n, expected):
        assert x.pow(n) == expected

    def test_pow_errors(self):
        with pytest.raises(DomainError, match='power of zero'):
            iv(0, 0).pow(0)
        with pytest.raises(DomainError):
            iv(-1, 1).pow(-1)

    def test_mpow_multiplies_independently(self):
        assert iv(-1, 2).mpow(2) == iv(-2, 4)
        assert iv(-1, 2).pow(2) == iv(0, 4)
        with pytest.raises(DomainError):
            iv(1, 2).mpow(0)

    def test_scaling_and_negation(self):
        assert iv(1, 2).E(1) == iv(10, 20)
        assert iv(1, 2).neg() == iv(-2, -1)

    def test_python_operators(self):
        assert iv(1, 2) + 1 == iv(2, 3)
        assert 1 - iv(1, 2) == iv(-1, 0)
        assert -iv(1, 2) == iv(-2, -1)
        assert iv(1, 2) * iv(2, 3) == iv(2, 6)


class TestSets:

    def test_containment(self):
        x = iv(1, 3)
        assert x.contains_value(Rational(5, 2))
        assert not x.contains_value(4)
        assert x.contains(iv(2, 3))
        assert not x.contains(iv(2, 4))
        assert iv(-1, 1).contains_zero()
        assert not iv('1/2', 1).contains_zero()

    def test_intersection(self):
        assert iv(1, 3).intersection(iv(2, 4)) == iv(2, 3)
        assert iv(1, 2).intersection(iv(3, 4)) is None

    def test_union(self):
        assert iv(1, 3).union(iv(2, 4)) == iv(1, 4)
        assert iv(1, 2).union(iv(2, 3)) == iv(1, 3)
        assert iv(1, 2).union(iv(3, 4)) is None


class TestRepresentatives:

    def test_midpoint_and_mediant(self):
        assert iv(1, 2).midpoint() == Rational(3, 2)
        assert iv('1/2', '2/3').mediant() == Rational(3, 5)

    def test_shortest_decimal(self):
        assert iv('1/3', '1/2').shortest_decimal() == Rational(2, 5)
        assert iv(1, 2).shortest_decimal() == 1
        assert iv('1/4', '1/4').shortest_decimal() == Rational(1, 4)
        assert iv('1/3', '1/3').shortest_decimal() is None
        assert iv('1/3', '1/2').shortest_decimal(base=2) == Rational(1, 2)

    def test_random_rational(self):
        random.seed(5)
        x = iv('1/3', '1/2')
        for _ in range(20):
            r = x.random_rational(10)
            assert x.contains_value(r)
            assert r.denominator <= 10

    def test_random_rational_falls_back_to_midpoint(self):
        x = iv('1/1000', '1/999')
        assert x.random_rational(10) == x.midpoint()


class TestFormatting:

    def test_decimal_forms(self):
        assert iv('1/3', '1/2').to_repeating_decimal() == '0.#3:0.5#0'
        assert iv('7/4', 2).to_mixed_string() == '1..3/4:2'

    def test_compacted(self):
        assert iv('1.234', '1.256').compacted_decimal_interval() == '1.2[34,56]'
        assert iv(1, 2).compacted_decimal_interval() == '1:2'

    def test_relative(self):
        assert iv('1.47', '1.53').relative_mid_decimal_interval() == '1.5[+-0.03]'
        assert iv('1.47', '1.53').relative_decimal_interval() == '1.5[+-3]'
        assert iv('1.48', '1.53').relative_decimal_interval() == '1.5[+3,-2]'
