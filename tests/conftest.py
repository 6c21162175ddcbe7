import pytest

from ratmath import Parser, BaseSystem


@pytest.fixture
def parser():
    """Type-aware parser with decimal input."""
    return Parser()

@pytest.fixture
def interval_parser():
    """Parser that evaluates everything as intervals."""
    return Parser(type_aware=False)

@pytest.fixture
def ternary():
    return Parser(input_base=BaseSystem.from_base(3))
