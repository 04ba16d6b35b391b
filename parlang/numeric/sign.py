"""
Sign handling for numeric literals.

Numeric parsers are built by factories taking a `neg` flag. The sign is parsed
once by `signed` and the digits are accumulated directly as negative numbers,
so that the minimum of a signed type (e.g. `-128` for `i8`) is accepted.
"""
from parlang.combinators import char_is_some


def sign(plus_sign=False):
    """
    Parses a sign. Returns True for a minus sign and False for a plus sign,
    which is only accepted if `plus_sign` is True.
    """
    def is_sign(chars, c):
        if chars.is_minus(c):
            return True
        if plus_sign and chars.is_plus(c):
            return False
        return None

    return char_is_some(is_sign, "a plus or minus sign" if plus_sign
                        else "a minus sign")


def signed(factory, plus_sign=False):
    """
    Takes a function returning a number parser, returns a parser of signed
    numbers.

    The taken function must return a parser of negative numbers if the
    argument is True, and vice versa. If `plus_sign` is True, plus signs are
    allowed besides minus signs and have no effect.
    """
    positive = factory(False)
    negative = factory(True)
    return sign(plus_sign).opt() \
        .then(lambda neg: negative if neg else positive) \
        .expect("a signed number")


def unsigned(factory):
    """
    Parser of unsigned numbers. For symmetry with `signed`.
    """
    return factory(False)
