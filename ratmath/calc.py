"""Command-line calculator: evaluate exact expressions and print the results.

    python -m ratmath.calc '1/3 + 1/6' '(-2:3)^2'
    echo '0.#3 * 3' | python -m ratmath.calc --format repeating
"""

import sys
import argparse

from .numeric import utils
from .numeric import integer
from .numeric import basesys
from .arithmetic import interval
from .parsing import parser


formats = ('plain', 'mixed', 'decimal', 'repeating', 'scientific', 'cf')


def describe(value, fmt='plain'):
    """Render a parsed value in one of the output formats."""
    if fmt == 'plain' or isinstance(value, integer.Integer):
        return str(value)

    if isinstance(value, interval.RationalInterval):
        if fmt == 'mixed':
            return value.to_mixed_string()
        elif fmt in ('decimal', 'repeating', 'scientific'):
            return value.to_repeating_decimal()
        else:
            return '{}:{}'.format(value.low.to_continued_fraction_string(),
                                  value.high.to_continued_fraction_string())

    if fmt == 'mixed':
        return value.to_mixed_string()
    elif fmt == 'decimal':
        return value.to_decimal()
    elif fmt == 'repeating':
        return value.to_repeating_decimal()
    elif fmt == 'scientific':
        return value.to_scientific_notation()
    else:
        return value.to_continued_fraction_string()


def evaluate_all(exprs, type_aware=True, input_base=None, fmt='plain', out=None):
    """Evaluate each expression in turn, stopping at the first error."""
    if out is None:
        out = sys.stdout
    for expr in exprs:
        value = parser.Parser.parse(expr, type_aware=type_aware, input_base=input_base)
        print(describe(value, fmt), file=out)


def main(argv=None):
    argparser = argparse.ArgumentParser(prog='ratmath.calc',
                                        description='exact rational and interval calculator')
    argparser.add_argument('exprs', nargs='*',
                           help='expressions to evaluate; read one per line from stdin if none are given')
    argparser.add_argument('--interval', action='store_true',
                           help='evaluate over intervals, reading plain decimals as measurements')
    argparser.add_argument('--base', type=int, default=10,
                           help='radix for literals without an explicit [base] suffix')
    argparser.add_argument('--format', choices=formats, default='plain',
                           help='how to print results')
    args = argparser.parse_args(argv)

    if args.exprs:
        exprs = args.exprs
    else:
        exprs = [line for line in (l.strip() for l in sys.stdin) if line]

    try:
        if args.base == 10:
            input_base = None
        else:
            input_base = basesys.BaseSystem.from_base(args.base)
        evaluate_all(exprs, type_aware=not args.interval, input_base=input_base, fmt=args.format)
    except utils.RatMathError as e:
        print('error: {}'.format(e), file=sys.stderr, flush=True)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
