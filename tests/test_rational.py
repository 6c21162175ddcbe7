import math
import random

import pytest

from ratmath import Integer, Rational, RationalInterval, ParseError, DomainError, parse
from ratmath.numeric import gmpmath


class TestNormalForm:

    def test_reduced_with_positive_denominator(self):
        rng = random.Random(7)
        for _ in range(200):
            n = rng.randint(-10**6, 10**6)
            d = rng.choice([-1, 1]) * rng.randint(1, 10**6)
            x = Rational(n, d)
            assert x.denominator > 0
            assert math.gcd(abs(x.numerator), x.denominator) == 1
            assert x.numerator * d == n * x.denominator

    def test_zero(self):
        assert Rational(0, -5).denominator == 1
        assert Rational(0).is_zero()

    def test_zero_denominator(self):
        with pytest.raises(DomainError, match='Denominator cannot be zero'):
            Rational(1, 0)

    @pytest.mark.parametrize('s, n, d', [
        ('3/4', 3, 4),
        ('-6/8', -3, 4),
        ('5', 5, 1),
        ('1..3/4', 7, 4),
        ('-1..1/2', -3, 2),
        ('1.25', 5, 4),
        ('-.5', -1, 2),
        ('0.{0~3}1', 1, 10000),
    ])
    def test_from_string(self, s, n, d):
        x = Rational(s)
        assert (x.numerator, x.denominator) == (n, d)

    def test_bad_string(self):
        with pytest.raises(ParseError):
            Rational('1/2/3')

    def test_str_repr(self):
        assert str(Rational(-3, 6)) == '-1/2'
        assert str(Rational(4, 2)) == '2'
        assert repr(Rational(1, 3)) == 'Rational(1, 3)'


class TestArithmetic:

    def test_field_operations(self):
        a = Rational(1, 2)
        b = Rational(1, 3)
        assert a.add(b) == Rational(5, 6)
        assert a.sub(b) == Rational(1, 6)
        assert a.mul(b) == Rational(1, 6)
        assert a.div(b) == Rational(3, 2)
        with pytest.raises(DomainError, match='Division by zero'):
            a.div(Rational(0))

    def test_reciprocal_and_power(self):
        assert Rational(-2, 3).reciprocal() == Rational(-3, 2)
        with pytest.raises(DomainError, match='reciprocal of zero'):
            Rational(0).reciprocal()
        assert Rational(2, 3).pow(2) == Rational(4, 9)
        assert Rational(2, 3).pow(-2) == Rational(9, 4)
        with pytest.raises(DomainError, match='power of zero'):
            Rational(0).pow(0)

    def test_scaling(self):
        assert Rational(3, 2).E(3) == 1500
        assert Rational(3, 2).E(-2) == Rational(3, 200)

    def test_floor_ceil(self):
        assert Rational(-7, 2).floor() == Integer(-4)
        assert Rational(-7, 2).ceil() == Integer(-3)
        assert Rational(7, 2).floor() == 3

    def test_interval_widening(self):
        assert Rational(1, 2).add(RationalInterval(0, 1)) == RationalInterval(Rational(1, 2), Rational(3, 2))

    def test_comparisons(self):
        assert Rational(1, 3) < Rational(1, 2)
        assert Rational(2, 1) == Integer(2)
        assert Rational(1, 2) > 0
        assert Rational(1, 2).compareto(RationalInterval(0, 1)) is None

    def test_hash_agrees_with_integers(self):
        assert hash(Rational(4, 2)) == hash(Integer(2))


class TestDecimals:

    def test_one_third(self):
        assert Rational(1, 3).to_repeating_decimal_with_period() == ('0.#3', 1)

    @pytest.mark.parametrize('x, s', [
        (Rational(1, 4), '0.25#0'),
        (Rational(1, 6), '0.1#6'),
        (Rational(1, 7), '0.#142857'),
        (Rational(-22, 7), '-3.#142857'),
        (Rational(5), '5'),
        (Rational(0), '0'),
        (Rational(1, 10**9), '0.{0~8}1#0'),
    ])
    def test_repeating_decimal(self, x, s):
        assert x.to_repeating_decimal() == s

    def test_without_run_compression(self):
        assert Rational(1, 10**9).to_repeating_decimal(False) == '0.000000001#0'

    def test_metadata(self):
        meta = Rational(1, 12).decimal_metadata()
        assert meta.whole_part == 0
        assert meta.initial_segment == '08'
        assert meta.initial_leading_zeros == 1
        assert meta.initial_rest == '8'
        assert meta.period_digits == '3'
        assert meta.period_length == 1
        assert not meta.is_terminating

    def test_metadata_terminating(self):
        meta = Rational(3, 8).decimal_metadata()
        assert meta.initial_segment == '375'
        assert meta.period_length == 0
        assert meta.is_terminating

    def test_metadata_period_budget(self):
        x = Rational(1, 97)
        short = x.decimal_metadata(10)
        assert short.period_length == 96
        assert len(short.period_digits) == 10
        assert len(x.decimal_metadata(200).period_digits) == 96

    def test_order_of_ten_ceiling(self):
        assert gmpmath.order_of_ten(7) == 6
        assert gmpmath.order_of_ten(7, limit=3) == -1
        assert gmpmath.order_of_ten(1) == 0

    def test_long_period_sentinel(self, monkeypatch):
        monkeypatch.setattr(gmpmath, 'order_of_ten', lambda d: -1)
        x = Rational(1, 7)
        meta = x.decimal_metadata(30)
        assert meta.period_length == -1
        assert len(meta.period_digits) == 30
        assert x.to_scientific_notation(show_period_info=True).endswith('{period: >10^7}')
        assert x.to_repeating_decimal().endswith('...')

    def test_periods_longer_than_the_display_cap(self):
        x = Rational(1, 1019)
        s, period = x.to_repeating_decimal_with_period()
        assert period == 1018
        assert parse(s) == x

    def test_period_info(self):
        s = Rational(1, 3).to_scientific_notation(show_period_info=True)
        assert s == '3.#3E-1 {period: 1}'

    def test_truncated_decimal(self):
        assert Rational(1, 3).to_decimal() == '0.' + '3' * 20
        assert Rational(-5, 4).to_decimal() == '-1.25'
        assert Rational(7).to_decimal() == '7'

    def test_mixed_string(self):
        assert Rational(7, 4).to_mixed_string() == '1..3/4'
        assert Rational(-7, 4).to_mixed_string() == '-1..3/4'
        assert Rational(3, 4).to_mixed_string() == '3/4'

    @pytest.mark.parametrize('x, s', [
        (Rational(1500), '1.5E3'),
        (Rational(1, 3), '3.#3E-1'),
        (Rational(-1, 400), '-2.5E-3'),
        (Rational(1), '1E0'),
    ])
    def test_scientific(self, x, s):
        assert x.to_scientific_notation() == s


class TestContinuedFractions:

    def test_round_trip(self):
        rng = random.Random(11)
        for _ in range(200):
            x = Rational(rng.randint(-10**5, 10**5) or 1, rng.randint(1, 10**5))
            assert Rational.from_continued_fraction(x.to_continued_fraction()) == x

    def test_known_expansions(self):
        assert Rational(355, 113).to_continued_fraction() == [3, 7, 16]
        assert Rational(-7, 3).to_continued_fraction() == [-3, 1, 2]
        assert Rational(5).to_continued_fraction() == [5]

    def test_string_forms(self):
        assert Rational(355, 113).to_continued_fraction_string() == '3.~7~16'
        assert Rational.from_continued_fraction_string('3.~7~15~1') == Rational(355, 113)
        assert Rational.from_continued_fraction_string('4.~0') == 4
        assert Rational(4).to_continued_fraction_string() == '4.~0'

    @pytest.mark.parametrize('s, message', [
        ('3.~', 'at least one term'),
        ('3.~7~', 'cannot end with ~'),
        ('3.~7~~2', 'double tilde'),
        ('3.7', 'Invalid continued fraction format'),
    ])
    def test_bad_strings(self, s, message):
        with pytest.raises(ParseError, match=message):
            Rational.from_continued_fraction_string(s)

    def test_bad_terms(self):
        with pytest.raises(DomainError):
            Rational.from_continued_fraction([1, 0, 2])
        with pytest.raises(DomainError):
            Rational.from_continued_fraction([])

    def test_convergents(self):
        pi_ish = Rational.from_continued_fraction([3, 7, 15, 1, 292])
        assert pi_ish.convergents() == [Rational(3), Rational(22, 7), Rational(333, 106),
                                        Rational(355, 113), Rational(103993, 33102)]
        assert pi_ish.get_convergent(1) == Rational(22, 7)
        with pytest.raises(ValueError, match='out of range'):
            pi_ish.get_convergent(5)
        assert Rational.convergents_from_cf('3.~7~15', 2) == [Rational(3), Rational(22, 7)]

    def test_best_approximation(self):
        pi_ish = Rational(314159265, 100000000)
        assert pi_ish.best_approximation(10) == Rational(22, 7)
        assert pi_ish.best_approximation(200) == Rational(355, 113)
        error = Rational(22, 7).approximation_error(pi_ish)
        assert error == Rational(22, 7).sub(pi_ish)
