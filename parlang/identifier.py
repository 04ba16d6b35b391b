"""Parsers for identifiers."""
from parlang.combinators import Parser, char_is


class Identifier(Parser):
    """
    One `start` item followed by any number of `rest` items, joined into a
    string for text input and into bytes for bytes input.
    """
    __slots__ = ['items']

    def __init__(self, start, rest):
        self.items = start.once().chain(rest.repeat())

    def parse_at(self, cursor):
        return cursor.chars.join(self.items.iter_at(cursor))


def identifier(start, rest):
    return Identifier(start, rest)


def standard_identifier():
    """
    Parses standard identifiers which start with a letter and the rest are
    letters, digits or underscores.
    """
    return identifier(
        char_is(lambda chars, c: chars.is_letter(c), "a letter"),
        char_is(lambda chars, c: chars.is_letter(c) or chars.is_digit(c, 10)
                or chars.eq_byte(c, 0x5F))) \
        .expect("an identifier")
