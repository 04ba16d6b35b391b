"""Parsers for integers."""
from parlang.character import check_radix
from parlang.combinators import Parser, char_is
from parlang.exceptions import NumberOverflowError, TryMapError
from parlang.numeric.types import I64

NOT_TOO_LARGE = "a not too large number"


def digit(radix):
    """
    Parses a digit with given radix.
    """
    check_radix(radix)
    return char_is(lambda chars, c: chars.is_digit(c, radix),
                   f"a digit with radix {radix}")


def non_zero_digit(radix):
    """
    Parses a non-zero digit with given radix.
    """
    check_radix(radix)
    return char_is(lambda chars, c: chars.is_digit(c, radix)
                   and not chars.is_zero(c),
                   f"a non-zero digit with radix {radix}")


def zero():
    return char_is(lambda chars, c: chars.is_zero(c), "zero")


def digits(radix):
    """
    Streams digits of a number without leading zeros: either a single zero or a
    non-zero digit followed by any digits.
    """
    return non_zero_digit(radix).once().chain(digit(radix).repeat()) \
        .or_(zero().once())


def digits_trailing_zeros(radix):
    """
    Streams one or more digits, leading zeros allowed.
    """
    return digit(radix).repeat(1)


def digits_fixed(length, radix):
    """
    Streams exactly `length` digits.
    """
    return digit(radix).times(length)


class FoldDigits(Parser):
    """
    Takes a streamed parser of digits and folds them into `acc` as following
    digits of a number.

    The output is a tuple `(value, count, overflowed)` where `count` is the
    number of digits folded before an overflow. Once overflowed, the rest of
    the digits is still consumed but no longer folded. If the radix is not
    representable in the numeric type the number is overflowed from the
    start.
    """
    __slots__ = ['streamed', 'acc', 'radix', 'neg', 'numtype']

    def __init__(self, streamed, acc, radix, neg=False, numtype=I64):
        check_radix(radix)
        self.streamed = streamed
        self.acc = acc
        self.radix = radix
        self.neg = neg
        self.numtype = numtype

    def parse_at(self, cursor):
        numtype = self.numtype
        radix = self.radix
        n_radix = numtype.from_int(radix)
        acc, count, overflowed = self.acc, 0, n_radix is None
        to_digit = cursor.chars.to_digit
        for c in self.streamed.iter_at(cursor):
            if overflowed:
                continue
            d = numtype.from_int(to_digit(c, radix))
            if d is not None and self.neg:
                d = numtype.checked_neg(d)
            shifted = numtype.checked_mul(acc, n_radix)
            res = None if shifted is None or d is None \
                else numtype.checked_add(shifted, d)
            if res is None:
                overflowed = True
            else:
                acc = res
                count += 1
        return acc, count, overflowed


def fold_digits(streamed, acc, radix, neg=False, numtype=I64):
    return FoldDigits(streamed, acc, radix, neg, numtype)


def check_overflow(result):
    acc, _, overflowed = result
    if overflowed:
        raise TryMapError(NOT_TOO_LARGE, NumberOverflowError)
    return acc


def integer(radix, neg=False, numtype=I64):
    """
    An integer with given radix which has no leading zeros.
    """
    return fold_digits(digits(radix), numtype.zero(), radix, neg, numtype) \
        .try_map(check_overflow) \
        .expect(f"an integer with radix {radix}")


def integer_trailing_zeros(radix, neg=False, numtype=I64):
    """
    An integer with given radix which allows leading zeros. Used after radix
    prefixes like `0x`.
    """
    return fold_digits(digits_trailing_zeros(radix), numtype.zero(), radix,
                       neg, numtype) \
        .try_map(check_overflow) \
        .expect(f"an integer with radix {radix}")


def integer_fixed(length, radix, neg=False, numtype=I64):
    """
    A fixed-length integer with given radix, e.g. the four hex digits of an
    `\\uXXXX` escape.
    """
    return fold_digits(digits_fixed(length, radix), numtype.zero(), radix,
                       neg, numtype) \
        .try_map(check_overflow)
