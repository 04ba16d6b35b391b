# -*- coding: utf-8 -*-
# flake8: NOQA
from parlang.cursor import Cursor
from parlang.common import Location
from parlang.character import Character, TEXT, BYTES, character
from parlang.combinators import Parser, StreamedParser, is_, is_some, \
    char_is, char_is_some, token, one_of, none_of, any_item, tag, eof, \
    value, value_fn, lazy, forward, choice, seq, chain
from parlang.numeric import sign, signed, unsigned, IntParser, integer, \
    integer_trailing_zeros, integer_fixed, fold_digits, float_literal, \
    float_parts, compute_float
from parlang.infix import infix, ExpressionBuilder, Prefix, PrefixOnce, \
    Postfix, PostfixOnce, Binary, Left, Right
from parlang.identifier import identifier, standard_identifier
from parlang.tokens import Token, TokenSet
from parlang.exceptions import ParlangError, ParseError, \
    NumberOverflowError, InvalidFloatError, GrammarError, \
    LayerConfigurationError, LayerInvariantError, TryMapError

from .version import __version__
