"""
Parsers for numeric literals.
"""
import logging
from collections.abc import Mapping

from parlang.character import check_radix
from parlang.combinators import choice, tag
from parlang.numeric.floating import compute_float, float_literal, float_parts
from parlang.numeric.integer import (digit, digits, digits_fixed,
                                     digits_trailing_zeros, fold_digits,
                                     integer, integer_fixed,
                                     integer_trailing_zeros, non_zero_digit)
from parlang.numeric.sign import sign, signed, unsigned
from parlang.numeric.types import I64

logger = logging.getLogger(__name__)


class IntParser:
    """
    Integer parser factory dispatching on literal prefixes.

    Args:
    prefixes: An ordered mapping or a list of `(prefix, radix)` pairs. The
        prefixes are tried in order. After a matching prefix the digits may
        have leading zeros and the parser is committed to that radix.
    default_radix(int): Radix of literals without a prefix. These may not have
        leading zeros.
    numtype(NumericType): The target integer type.

    Calling the instance with the `neg` flag returns the parser, so instances
    can be passed to `signed`:

        signed(IntParser([('0x', 16), ('0o', 8), ('0b', 2)], 10),
               plus_sign=True)
    """
    def __init__(self, prefixes=(), default_radix=10, numtype=I64):
        if isinstance(prefixes, Mapping):
            prefixes = prefixes.items()
        self.prefixes = tuple((prefix, radix) for prefix, radix in prefixes)
        for prefix, radix in self.prefixes:
            if not prefix:
                raise ValueError("Radix prefix must not be empty.")
            check_radix(radix)
        check_radix(default_radix)
        self.default_radix = default_radix
        self.numtype = numtype
        logger.debug("Integer parser: prefixes %s, default radix %d, "
                     "type %s", self.prefixes, default_radix, numtype)

    def __call__(self, neg=False):
        alternatives = [
            tag(prefix).prefix(
                integer_trailing_zeros(radix, neg, self.numtype).commit())
            for prefix, radix in self.prefixes]
        alternatives.append(integer(self.default_radix, neg, self.numtype))
        return choice(*alternatives)

    def __repr__(self):
        return f"IntParser({list(self.prefixes)!r}, {self.default_radix})"


__all__ = ['sign', 'signed', 'unsigned', 'IntParser', 'digit',
           'non_zero_digit', 'digits', 'digits_trailing_zeros',
           'digits_fixed', 'fold_digits', 'integer', 'integer_trailing_zeros',
           'integer_fixed', 'float_literal', 'float_parts', 'compute_float']
