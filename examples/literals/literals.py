"""
Parses comma separated integer and float literals from bytes. Integers may be
given in hex, octal or binary.
"""
from parlang import IntParser, ParseError, character, float_literal, one_of, \
    signed
from parlang.numeric.types import I32

INTEGERS = b'0xDEADb33f, -0o755, +0b00001111, -425'
FLOATS = b'2.5e3, -0.125, 1e-3'


def comma_separated(parser):
    ws = one_of(b' ').repeat()
    return parser.sep_by(character(',').between(ws, ws)).complete()


def main(debug=False):
    integers = comma_separated(
        signed(IntParser([('0x', 16), ('0o', 8), ('0b', 2)], 10),
               plus_sign=True))
    res = integers.parse(INTEGERS)
    assert res == [0xDEADB33F, -0o755, 15, -425]
    print("Integers = ", res)

    floats = comma_separated(signed(float_literal, plus_sign=True))
    res = floats.parse(FLOATS)
    assert all(abs(a - b) < 1e-12 for a, b in zip(res, [2500., -0.125, 1e-3]))
    print("Floats = ", res)

    try:
        signed(IntParser(numtype=I32)).parse(b'3000000000')
    except ParseError as e:
        print(e)


if __name__ == "__main__":
    main(debug=True)
