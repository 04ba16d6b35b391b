"""
Numeric types targeted by the literal parsers.

Python ints never overflow, so bounded machine integers are modelled by
`IntType` instances doing range checked arithmetic. Every operation returns
None when the result is not representable.
"""
import decimal
import math


class NumericType:
    """
    The capability set required by the digit accumulator: a zero value,
    checked multiplication, addition and negation and construction from a
    small unsigned magnitude.
    """
    name = None

    def zero(self):
        return 0

    def from_int(self, n):
        raise NotImplementedError()

    def checked_mul(self, a, b):
        raise NotImplementedError()

    def checked_add(self, a, b):
        raise NotImplementedError()

    def checked_neg(self, a):
        raise NotImplementedError()

    def __repr__(self):
        return self.name


class IntType(NumericType):
    """
    A fixed width two's complement (signed) or unsigned integer.
    """
    def __init__(self, bits, signed=True, name=None):
        if bits < 1:
            raise ValueError("Integer type must have at least one bit.")
        self.bits = bits
        self.signed = signed
        if signed:
            self.min = -(1 << (bits - 1))
            self.max = (1 << (bits - 1)) - 1
        else:
            self.min = 0
            self.max = (1 << bits) - 1
        self.name = name or f"{'i' if signed else 'u'}{bits}"

    def contains(self, n):
        return self.min <= n <= self.max

    def _checked(self, n):
        return n if self.min <= n <= self.max else None

    def from_int(self, n):
        return self._checked(n)

    def checked_mul(self, a, b):
        return self._checked(a * b)

    def checked_add(self, a, b):
        return self._checked(a + b)

    def checked_neg(self, a):
        return self._checked(-a)

    def saturate(self, n):
        return max(self.min, min(self.max, n))

    def saturating_sub(self, a, b):
        return self.saturate(a - b)


class BigIntType(NumericType):
    """
    Python's arbitrary precision int. Never overflows.
    """
    name = 'bigint'

    def from_int(self, n):
        return n

    def checked_mul(self, a, b):
        return a * b

    def checked_add(self, a, b):
        return a + b

    def checked_neg(self, a):
        return -a


I8 = IntType(8)
I16 = IntType(16)
I32 = IntType(32)
I64 = IntType(64)
I128 = IntType(128)
U8 = IntType(8, signed=False)
U16 = IntType(16, signed=False)
U32 = IntType(32, signed=False)
U64 = IntType(64, signed=False)
U128 = IntType(128, signed=False)
BIGINT = BigIntType()


class FloatType:
    """
    Target of float reconstruction. `from_int` and `power` return None when
    the value is not representable.
    """
    name = None

    def from_int(self, n):
        raise NotImplementedError()

    def power(self, base, exponent):
        raise NotImplementedError()

    def multiply(self, a, b):
        raise NotImplementedError()

    def negate(self, a):
        return -a

    def __repr__(self):
        return self.name


class BinaryFloatType(FloatType):
    """
    Python's float (IEEE 754 double).
    """
    name = 'f64'

    def from_int(self, n):
        try:
            return float(n)
        except OverflowError:
            return None

    def power(self, base, exponent):
        try:
            return base ** exponent
        except OverflowError:
            return None

    def multiply(self, a, b):
        result = a * b
        return result if math.isfinite(result) else None


class DecimalFloatType(FloatType):
    """
    `decimal.Decimal` computed in the given context (the current thread's
    context if not given).
    """
    name = 'decimal'

    def __init__(self, context=None):
        self.context = context

    def _context(self):
        return self.context or decimal.getcontext()

    def from_int(self, n):
        return decimal.Decimal(n)

    def power(self, base, exponent):
        try:
            return self._context().power(base, exponent)
        except decimal.Overflow:
            return None

    def multiply(self, a, b):
        try:
            return self._context().multiply(a, b)
        except decimal.Overflow:
            return None


F64 = BinaryFloatType()
DECIMAL = DecimalFloatType()
