"""Parsers for floating point decimals."""
from parlang.character import character
from parlang.combinators import value
from parlang.exceptions import InvalidFloatError, TryMapError
from parlang.numeric.integer import (digits, digits_trailing_zeros,
                                     fold_digits)
from parlang.numeric.sign import signed
from parlang.numeric.types import F64, I32, U64

VALID_FLOAT = "a valid float"


def float_literal(neg=False, floattype=F64):
    """
    A floating point number.

    This parser requires an integer part, but a decimal part and an exponent
    are optional. For different rules build a `(mantissa, exponent)` parser
    and pass it to `compute_float`.

    Infinities and NaNs are not supported.
    """
    return compute_float(float_parts(), neg, floattype)


def compute_float(parser, neg=False, floattype=F64):
    """
    Takes a parser returning `(mantissa, exponent)` and computes
    `mantissa * 10 ** exponent` in the given float type.

    This is a plain multiplication, not a correctly rounded conversion. Results
    for long mantissas or large exponents may differ from `float(literal)` in
    the last bits.
    """
    def compute(parts):
        mantissa, exponent = parts
        m = floattype.from_int(mantissa)
        ten = floattype.from_int(10)
        if m is None or ten is None:
            raise TryMapError(VALID_FLOAT, InvalidFloatError)
        scale = floattype.power(ten, exponent)
        n = None if scale is None else floattype.multiply(m, scale)
        if n is None:
            raise TryMapError(VALID_FLOAT, InvalidFloatError)
        return floattype.negate(n) if neg else n

    return parser.try_map(compute)


def _fraction(integer_part):
    mantissa, _, overflowed = integer_part
    if overflowed:
        # Too many digits already, the fraction can't make a difference.
        return value((mantissa, 0, True))
    return character('.').expect("a decimal point") \
        .prefix(fold_digits(digits_trailing_zeros(10), mantissa, 10,
                            numtype=U64)) \
        .or_(value((mantissa, 0, False)))


def _exponent():
    return character('e').or_(character('E')).expect("an exponent mark") \
        .prefix(signed(lambda neg: fold_digits(digits_trailing_zeros(10), 0,
                                               10, neg, I32),
                       plus_sign=True)) \
        .or_(value((0, 0, False)))


def _combine(parts):
    (mantissa, count, man_overflowed), (exp, _, exp_overflowed) = parts
    if man_overflowed:
        mantissa = U64.max
    if exp_overflowed:
        exponent = I32.min if exp < 0 else I32.max
    else:
        exponent = I32.saturating_sub(exp, count)
    return mantissa, exponent


def float_parts():
    """
    Parses `integer ('.' digits)? (('e' | 'E') sign? digits)?` into a
    `(mantissa, exponent)` pair where mantissa is an u64 and exponent an i32.

    The mantissa saturates to the u64 maximum on overflow. The exponent
    saturates to the i32 minimum or maximum by the sign of the written
    exponent.
    """
    return fold_digits(digits(10), 0, 10, numtype=U64) \
        .then(_fraction) \
        .and_(_exponent()) \
        .map(_combine)
