"""Recursive-descent evaluator for exact arithmetic expressions.

Grammar, loosest binding first:

    expression : term (('+' | '-') term)*
    term       : factor (('*' | '/' | 'E') factor)*
    factor     : '-' factor
               | ('(' expression ')' | literal) postfix
    postfix    : [E exp] ['!!' | '!'] ['^' exp | '**' exp]

Evaluation happens during the descent. Every production returns a
triple (value, hint, rest), where rest is the unconsumed text and hint
records how the value was written.
"""

import re

from ..numeric import utils
from ..numeric import integer
from ..numeric import rational
from ..numeric import basesys
from ..arithmetic import interval
from . import literals
from .literals import Hint


_exponent_re = re.compile(r'(TE|E)(-?[0-9]+)')
_endpoint_exponent_re = re.compile(r'E(-?[0-9]+)(?=:)')


class Parser(object):
    """Evaluates expressions over the exact numeric tower.

    With type_aware set (the default), results are simplified to the
    narrowest type that holds them: point intervals to their value and
    whole rationals to Integer, unless they were written explicitly as an
    interval or a fraction. Otherwise every result is a RationalInterval,
    and plain decimals like 1.5 are read as measurements, 1.45:1.55.

    input_base is a BaseSystem used to read literals without an explicit
    [base] suffix.
    """

    def __init__(self, type_aware=True, input_base=None):
        self.type_aware = type_aware
        if input_base is None or input_base == basesys.DECIMAL:
            self.input_base = None
            self._fold = None
            self._exp_marker = None
        else:
            self.input_base = input_base
            self._fold = literals.case_fold(input_base)
            if literals.uses_underscore_exponent(input_base):
                self._exp_marker = '_^'
            else:
                self._exp_marker = 'E'

    @classmethod
    def parse(cls, text, type_aware=True, input_base=None):
        return cls(type_aware=type_aware, input_base=input_base).evaluate(text)

    def evaluate(self, text):
        if text is None or text.strip() == '':
            raise utils.ParseError('Expression cannot be empty')

        # a spaced E scales everything to its left; a spaced / ends a fraction
        text = text.replace(' E', 'TE').replace('/ ', '/S')
        text = ''.join(text.split())

        value, hint, rest = self._expression(text)
        if rest:
            raise utils.ParseError('Unexpected token at end: {}'.format(rest))

        if not self.type_aware and not isinstance(value, interval.RationalInterval):
            value = interval.RationalInterval.point(value)
        return value

    # type simplification

    def _promote(self, value, hint):
        if not self.type_aware or hint & Hint.SKIP_PROMOTION:
            return value
        if (isinstance(value, interval.RationalInterval) and value.is_point
                and not hint & Hint.EXPLICIT_INTERVAL):
            value = value.low
        if (isinstance(value, rational.Rational) and value.denominator == 1
                and not hint & Hint.EXPLICIT_FRACTION):
            value = integer.Integer(value.numerator)
        return value

    def _in_base(self, c):
        system = self.input_base
        if c in system.char_map:
            return True
        return self._fold is not None and self._fold(c) in system.char_map

    def _starts_literal(self, c):
        if c.isdigit() or c == '.':
            return True
        return self.input_base is not None and self._in_base(c)

    #
    #   Productions
    #

    def _expression(self, text):
        value, hint, rest = self._term(text)
        while rest and rest[0] in '+-':
            op = rest[0]
            rhs, _, rest = self._term(rest[1:])
            if op == '+':
                value = value.add(rhs)
            else:
                value = value.sub(rhs)
            hint = Hint.NONE
        return self._promote(value, hint), hint, rest

    def _term(self, text):
        value, hint, rest = self._factor(text)
        while rest:
            if rest.startswith('TE'):
                op = 'E'
                rest = rest[2:]
            elif rest[0] == '*':
                op = '*'
                rest = rest[1:]
            elif rest[0] == '/':
                op = '/'
                rest = rest[1:]
                if rest.startswith('S'):
                    rest = rest[1:]
            elif rest[0] == 'E' and self._exp_marker != '_^':
                op = 'E'
                rest = rest[1:]
            else:
                break

            rhs, _, rest = self._factor(rest)
            if op == '*':
                value = value.mul(rhs)
            elif op == '/':
                value = value.div(rhs)
            else:
                value = value.E(self._integer_value(rhs))
            hint = Hint.NONE
        return self._promote(value, hint), hint, rest

    def _factor(self, text):
        if not text:
            raise utils.ParseError('Unexpected end of expression')

        if text[0] == '(':
            value, hint, rest = self._expression(text[1:])
            if not rest.startswith(')'):
                raise utils.ParseError('Missing closing parenthesis')
            return self._postfix(value, hint, rest[1:])

        if '[' in text:
            m = literals.base_re.match(text)
            if m:
                value, hint = self._base_literal(m)
                return self._postfix(value, hint, text[m.end():])
            m = literals.uncertainty_re.match(text)
            if m and m.group(1) not in ('', '-'):
                value = literals.read_decimal_uncertainty(m.group(1), m.group(2))
                return self._postfix(value, Hint.NONE, text[m.end():])

        if text[0] == '-':
            # -2:3 is the interval from -2 to 3 and -4.~1~6 is [-4; 1, 6],
            # but -2^2 is -(2^2)
            if len(text) > 1 and self._starts_literal(text[1]):
                value, hint, rest = self._interval(text)
                if hint & Hint.EXPLICIT_INTERVAL or literals.cf_re.match(text):
                    return self._postfix(value, hint, rest)
            value, hint, rest = self._factor(text[1:])
            return value.neg(), hint & (Hint.EXPLICIT_FRACTION | Hint.EXPLICIT_INTERVAL), rest

        value, hint, rest = self._interval(text)
        return self._postfix(value, hint, rest)

    def _postfix(self, value, hint, rest):
        scaled = self._read_exponent_suffix(rest, allow_spaced=True)
        if scaled is not None:
            exp, rest = scaled
            value = self._scale(value, exp)
            hint = Hint.NONE
            value = self._promote(value, hint)

        if rest.startswith('!!'):
            value = self._factorial(value, double=True)
            rest = rest[2:]
            hint = Hint.NONE
        elif rest.startswith('!'):
            value = self._factorial(value)
            rest = rest[1:]
            hint = Hint.NONE

        if rest.startswith('**'):
            n, rest = self._read_power(rest[2:])
            if not isinstance(value, interval.RationalInterval):
                value = interval.RationalInterval.point(value)
            value = value.mpow(n)
            hint = Hint.SKIP_PROMOTION
        elif rest.startswith('^'):
            n, rest = self._read_power(rest[1:])
            value = value.pow(n)
            hint = Hint.NONE

        return value, hint, rest

    #
    #   Literals
    #

    def _continued_fraction(self, text):
        m = literals.cf_re.match(text)
        if m is None:
            return None
        return literals.read_continued_fraction(m.group(0)), Hint.NONE, text[m.end():]

    def _interval(self, text):
        cf = self._continued_fraction(text)
        if cf is not None:
            first, hint, rest = cf
        else:
            if not self.type_aware:
                m = literals.decimal_re.match(text)
                if m and not text[m.end():m.end()+1] in ('#', ':'):
                    return literals.read_half_unit_interval(m.group(0)), Hint.NONE, text[m.end():]

            first, hint, rest = self._rational(text)

            if self.input_base is None:
                m = _endpoint_exponent_re.match(rest)
                if m:
                    first = first.E(int(m.group(1)))
                    rest = rest[m.end():]

        if not rest.startswith(':'):
            return first, hint, rest

        cf = self._continued_fraction(rest[1:])
        if cf is not None:
            second, _, rest = cf
        else:
            second, _, rest = self._rational(rest[1:])
        scaled = self._read_exponent_suffix(rest, allow_spaced=False)
        if scaled is not None:
            exp, rest = scaled
            second = self._scale(second, exp)
        return interval.RationalInterval(first, second), Hint.EXPLICIT_INTERVAL, rest

    def _rational(self, text):
        if self.input_base is not None:
            literal = self._scan_input_base(text)
            if literal is not None:
                try:
                    value, hint = literals.read_base_notation(literal, self.input_base, self.type_aware)
                    return value, hint, text[len(literal):]
                except (utils.ParseError, utils.BaseSystemError):
                    # not a numeral in the input base, read it as decimal
                    pass

        m = literals.repeating_re.match(text)
        if m:
            try:
                value = literals.read_repeating_decimal(m.group(0))
            except utils.ParseError as e:
                raise utils.ParseError('Invalid repeating decimal: {}'.format(e)) from e
            return value, Hint.NONE, text[m.end():]

        m = literals.decimal_re.match(text)
        if m:
            return rational.Rational(m.group(0)), Hint.NONE, text[m.end():]

        m = literals.integer_re.match(text)
        if m is None:
            raise utils.ParseError('Invalid rational number format')
        whole = int(m.group(0))
        rest = text[m.end():]

        if rest.startswith('..'):
            m = literals.integer_re.match(rest, 2)
            if m is None or m.group(1):
                raise utils.ParseError('Invalid mixed number format: missing numerator after ".."')
            n = int(m.group(2))
            rest = rest[m.end():]
            if not rest.startswith('/') or rest[1:2] in ('S', '('):
                raise utils.ParseError('Invalid mixed number format: missing denominator')
            d, rest = self._read_denominator(rest[1:])
            if rest.startswith('E'):
                raise utils.ParseError('E notation not allowed directly after mixed number without parentheses')
            if whole < 0 or text.startswith('-'):
                value = rational.Rational(-(abs(whole) * d + n), d)
            else:
                value = rational.Rational(whole * d + n, d)
            return value, Hint.NONE, rest

        if rest.startswith('/') and rest[1:2] not in ('S', '('):
            d, rest = self._read_denominator(rest[1:])
            if rest.startswith('E'):
                raise utils.ParseError('E notation not allowed directly after fraction without parentheses')
            return rational.Rational(whole, d), Hint.EXPLICIT_FRACTION, rest

        return integer.Integer(whole), Hint.NONE, rest

    def _read_denominator(self, text):
        m = literals.digits_re.match(text)
        if not m.group(0):
            raise utils.ParseError('Invalid rational number format')
        d = int(m.group(0))
        if d == 0:
            raise utils.DomainError('Denominator cannot be zero')
        return d, text[m.end():]

    def _scan_input_base(self, text):
        """The longest prefix of text shaped like a numeral in the input base,
        or None if there is none.
        """
        i = 1 if text.startswith('-') else 0
        start = i
        seen_point = seen_mixed = seen_slash = False
        while i < len(text):
            c = text[i]
            if self._in_base(c):
                i += 1
            elif (text.startswith('..', i) and not (seen_point or seen_mixed or seen_slash)
                  and i + 2 < len(text) and self._in_base(text[i+2])):
                seen_mixed = True
                i += 2
            elif (c == '.' and not (seen_point or seen_mixed or seen_slash)
                  and i + 1 < len(text) and self._in_base(text[i+1])):
                seen_point = True
                i += 1
            elif (c == '/' and not seen_slash
                  and i + 1 < len(text) and self._in_base(text[i+1])):
                seen_slash = True
                i += 1
            else:
                break
        if i == start:
            return None
        return text[:i]

    def _base_literal(self, m):
        base = int(m.group(2))
        if not 2 <= base <= 62:
            raise utils.ParseError('Base {} is not supported. Base must be between 2 and 62.'
                                   .format(base))
        system = basesys.BaseSystem.from_base(base)
        try:
            return literals.read_base_notation(m.group(1), system, self.type_aware)
        except utils.RatMathError as e:
            raise utils.ParseError('Invalid base notation {}: {}'.format(m.group(0), e)) from e

    #
    #   Exponents and postfix operators
    #

    def _read_exponent_suffix(self, text, allow_spaced):
        """Match an E exponent at the start of text, as (exponent, rest),
        or return None. Exponents are written in the input base.
        """
        if self.input_base is None:
            m = _exponent_re.match(text)
            if m is None or (m.group(1) == 'TE' and not allow_spaced):
                return None
            return int(m.group(2)), text[m.end():]

        if self._exp_marker == '_^':
            if not text.startswith('_^'):
                return None
            i = 2
        elif text.startswith('E') or text.startswith('e'):
            i = 1
        elif allow_spaced and text.startswith('TE'):
            i = 2
        else:
            return None

        j = i + 1 if text.startswith('-', i) else i
        k = j
        while k < len(text) and self._in_base(text[k]):
            k += 1
        if k == j:
            if self._exp_marker == '_^':
                raise utils.ParseError('Invalid exponent')
            return None
        digits = text[j:k]
        if self._fold is not None:
            digits = self._fold(digits)
        exp = self.input_base.to_decimal(digits)
        return (-exp if j > i else exp), text[k:]

    def _scale(self, value, exp):
        """Multiply by radix**exp, the radix being that of the input base."""
        if self.input_base is None:
            return value.E(exp)
        scale = rational.Rational(self.input_base.base).pow(exp)
        return value.mul(scale)

    def _read_power(self, text):
        m = literals.exponent_re.match(text)
        if m is None:
            raise utils.ParseError('Invalid exponent')
        n = int(m.group(2))
        return (-n if m.group(1) else n), text[m.end():]

    def _integer_value(self, value):
        if isinstance(value, interval.RationalInterval):
            if not value.is_point:
                raise utils.DomainError('E notation exponent must be an integer')
            value = value.low
        if isinstance(value, rational.Rational):
            if value.denominator != 1:
                raise utils.DomainError('E notation exponent must be an integer')
            return value.numerator
        return value.value

    def _factorial(self, value, double=False):
        as_point = isinstance(value, interval.RationalInterval)
        x = value
        if as_point:
            if not value.is_point:
                raise utils.DomainError('Factorial requires an integer operand')
            x = value.low
        if isinstance(x, rational.Rational):
            if x.denominator != 1:
                raise utils.DomainError('Factorial requires an integer operand')
            x = integer.Integer(x.numerator)

        if double:
            result = x.double_factorial()
        else:
            result = x.factorial()

        if as_point:
            return interval.RationalInterval.point(result)
        elif isinstance(value, rational.Rational):
            return result.to_rational()
        else:
            return result


def parse(text, type_aware=True, input_base=None):
    """Evaluate the expression text exactly. See Parser."""
    return Parser.parse(text, type_aware=type_aware, input_base=input_base)
