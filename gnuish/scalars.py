"""
Fixed-width numeric scalars.

Python integers and floats are unbounded/double precision; command handlers that need
the classic byte/short/int/long/float widths declare these types instead. Each one is a
real subclass of int/float, so handler code uses the values as ordinary numbers, and its
constructor rejects anything that does not fit the width with a ValueError (the same
failure a malformed literal produces, so conversion reports both alike).

    >>> int8("127")
    127
    >>> int8("128")
    Traceback (most recent call last):
    ...
    ValueError: 128 is out of range for int8 [-128, 127]
"""
import math
import struct


class _FixedInteger(int):
    bits = 0
    MIN = 0
    MAX = 0

    def __init_subclass__(cls, /, bits, **options):
        super().__init_subclass__(**options)
        cls.bits = bits
        cls.MIN = -(1 << (bits - 1))
        cls.MAX = (1 << (bits - 1)) - 1

    def __new__(cls, value=0, /, *args):
        self = super().__new__(cls, value, *args)
        if not cls.MIN <= self <= cls.MAX:
            raise ValueError("%d is out of range for %s [%d, %d]" % (self, cls.__name__, cls.MIN, cls.MAX))
        return self

    def __repr__(self):
        return int.__repr__(self)


class int8(_FixedInteger, bits=8): ...
class int16(_FixedInteger, bits=16): ...
class int32(_FixedInteger, bits=32): ...
class int64(_FixedInteger, bits=64): ...


class float32(float):
    """
    single-precision float: the value is rounded to the nearest float32.

    finite values beyond the float32 range are rejected; inf and nan pass through.
    """
    MAX = struct.unpack("<f", b"\xff\xff\x7f\x7f")[0]
    MIN = -MAX

    def __new__(cls, value=0.0, /):
        number = float(value)
        if math.isfinite(number) and abs(number) > cls.MAX:
            raise ValueError("%r is out of range for float32" % number)
        return super().__new__(cls, struct.unpack("<f", struct.pack("<f", number))[0])

    def __repr__(self):
        return float.__repr__(self)


__all__ = (
    "int8",
    "int16",
    "int32",
    "int64",
    "float32",
)
