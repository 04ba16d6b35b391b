"""
Abstractions for characters.

Parsers in parlang run over text (items are one character strings) and over
bytes (items are ints). A `Character` instance answers questions about a single
input item so that numeric and identifier parsers work the same for both.
"""

DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def check_radix(radix):
    if not 2 <= radix <= 36:
        raise ValueError(f"Radix must be in range of 2 to 36, got {radix}.")


class Character:
    """
    Base class for character capabilities. Subclasses must implement
    `eq_byte`, `is_letter` and `to_digit`.
    """
    name = None

    def eq_byte(self, c, byte):
        """
        Checks if the character equals to an ascii `byte` (0x00..0x7F).
        """
        raise NotImplementedError()

    def is_letter(self, c):
        """
        Checks if the character is a lower or upper case ascii letter.
        """
        raise NotImplementedError()

    def to_digit(self, c, radix):
        """
        Converts the character into its digit value or returns None if it is
        not a digit with the given radix.

        Raises ValueError if radix is not in range of 2 to 36.
        """
        raise NotImplementedError()

    def is_digit(self, c, radix):
        return self.to_digit(c, radix) is not None

    def is_zero(self, c):
        return self.eq_byte(c, 0x30)

    def is_point(self, c):
        return self.eq_byte(c, 0x2E)

    def is_exp(self, c):
        return self.eq_byte(c, 0x65) or self.eq_byte(c, 0x45)

    def is_plus(self, c):
        return self.eq_byte(c, 0x2B)

    def is_minus(self, c):
        return self.eq_byte(c, 0x2D)

    def literal(self, value):
        """
        Converts a literal to the sequence of items used by this kind of input.
        """
        return value

    def join(self, items):
        return list(items)

    def __repr__(self):
        return f"<Character {self.name}>"


class TextCharacter(Character):
    name = 'text'

    def eq_byte(self, c, byte):
        return isinstance(c, str) and len(c) == 1 and ord(c) == byte

    def is_letter(self, c):
        return isinstance(c, str) and len(c) == 1 \
            and c.isascii() and c.isalpha()

    def to_digit(self, c, radix):
        check_radix(radix)
        if not isinstance(c, str) or len(c) != 1 or not c.isascii():
            return None
        d = DIGITS.find(c.lower())
        return d if 0 <= d < radix else None

    def literal(self, value):
        if isinstance(value, (bytes, bytearray)):
            return value.decode('ascii')
        return value

    def join(self, items):
        return ''.join(items)


class ByteCharacter(Character):
    name = 'bytes'

    def eq_byte(self, c, byte):
        return c == byte

    def is_letter(self, c):
        return isinstance(c, int) and (0x41 <= c <= 0x5A or 0x61 <= c <= 0x7A)

    def to_digit(self, c, radix):
        check_radix(radix)
        if not isinstance(c, int) or not 0 <= c < 0x80:
            return None
        d = DIGITS.find(chr(c).lower())
        return d if 0 <= d < radix else None

    def literal(self, value):
        if isinstance(value, str):
            return value.encode('ascii')
        return value

    def join(self, items):
        return bytes(items)


TEXT = TextCharacter()
BYTES = ByteCharacter()


def character_for(input):
    """
    Returns the character capability suitable for the given input.
    """
    if isinstance(input, (bytes, bytearray, memoryview)):
        return BYTES
    return TEXT


def character(byte):
    """
    A parser for a single ascii character given as a one character string or
    as an int.
    """
    from parlang.combinators import char_is
    if isinstance(byte, str):
        byte = ord(byte)
    if not 0 <= byte < 0x80:
        raise ValueError(f"Not an ascii character: {byte!r}")
    return char_is(lambda chars, c: chars.eq_byte(c, byte),
                   repr(chr(byte)))
