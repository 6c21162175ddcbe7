from .numeric import utils, gmpmath, integer, rational, basesys
from .arithmetic import interval
from .parsing import literals, parser

Integer = integer.Integer
Rational = rational.Rational
RationalInterval = interval.RationalInterval
BaseSystem = basesys.BaseSystem

Parser = parser.Parser
parse = parser.parse

RatMathError = utils.RatMathError
ParseError = utils.ParseError
DomainError = utils.DomainError
BaseSystemError = utils.BaseSystemError
