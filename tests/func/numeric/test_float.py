from decimal import Decimal

import pytest  # noqa
from parlang import Cursor, ParseError, InvalidFloatError, signed, \
    float_literal, float_parts, compute_float, value
from parlang.numeric.types import DECIMAL, I32, U64


def test_float_values():
    parser = float_literal().complete()
    assert parser.parse('123.456e2') == pytest.approx(12345.6)
    assert parser.parse('0.001') == pytest.approx(0.001)
    assert parser.parse('0') == 0.0
    assert parser.parse('42') == 42.0
    assert parser.parse('2.5E+3') == 2500.0
    assert parser.parse('25e-1') == pytest.approx(2.5)

    assert signed(float_literal).complete().parse('-1e10') == -1e10
    assert signed(float_literal, plus_sign=True).parse('+0.5') == 0.5


def test_float_parts():
    parser = float_parts().complete()
    assert parser.parse('123.456e2') == (123456, -1)
    assert parser.parse('0.001') == (1, -3)
    assert parser.parse('1E+3') == (1, 3)
    assert parser.parse('1e-3') == (1, -3)
    assert parser.parse('10.0') == (100, -1)


def test_float_optional_parts_are_not_consumed():
    cursor = Cursor('1.')
    assert float_parts().parse_at(cursor) == (1, 0)
    assert cursor.position == 1

    cursor = Cursor('1e+')
    assert float_parts().parse_at(cursor) == (1, 0)
    assert cursor.position == 1

    cursor = Cursor('1.5.')
    assert float_parts().parse_at(cursor) == (15, -1)
    assert cursor.position == 3


def test_float_leading_zeros():
    with pytest.raises(ParseError):
        float_literal().complete().parse('01.5')


def test_float_requires_integer_part():
    with pytest.raises(ParseError) as e:
        float_literal().parse('.5')
    assert e.value.location.start_position == 0


def test_mantissa_overflow():
    assert float_parts().parse('99999999999999999999') == (U64.max, 0)

    # Fraction is not parsed after the integer part overflowed.
    cursor = Cursor('99999999999999999999.5')
    assert float_parts().parse_at(cursor) == (U64.max, 0)
    assert cursor.position == 20

    # Overflow in the fraction freezes the count of fractional digits.
    assert float_parts().parse('1.0000000000000000000001') == (U64.max, -19)


def test_exponent_saturation():
    assert float_parts().parse('1e99999999999') == (1, I32.max)
    assert float_parts().parse('1e-99999999999') == (1, I32.min)
    assert float_parts().parse('1.5e99999999999') == (15, I32.max)
    assert float_parts().parse('0.5e-2147483648') == (5, I32.min)
    assert float_parts().parse('1e2147483647') == (1, I32.max)
    assert float_parts().parse('1.0e2147483647') == (10, I32.max - 1)


def test_invalid_float():
    with pytest.raises(InvalidFloatError) as e:
        float_literal().parse('1e400')
    assert e.value.expected == {'a valid float'}
    assert e.value.location.end_position == 5

    with pytest.raises(InvalidFloatError):
        float_literal().parse('2e308')

    assert float_literal().parse('1e308') == pytest.approx(1e308)
    assert float_literal().parse('1e-400') == 0.0


def test_decimal_floats():
    parser = float_literal(floattype=DECIMAL).complete()
    assert parser.parse('123.456e2') == Decimal('12345.6')
    assert parser.parse('0.001') == Decimal('0.001')
    assert signed(lambda neg: float_literal(neg, DECIMAL)).parse('-7.25') \
        == Decimal('-7.25')


def test_compute_float_custom_parts():
    assert compute_float(value((5, 2))).parse('') == 500.0
    assert compute_float(value((5, 2)), neg=True).parse('') == -500.0
    with pytest.raises(InvalidFloatError):
        compute_float(value((1, I32.max))).parse('')


def test_float_bytes_input():
    assert float_literal().complete().parse(b'1.25e2') == 125.0
