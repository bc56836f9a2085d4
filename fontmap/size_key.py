"""Exact-bits float wrapper used to key font sizes."""

import struct
from typing import Union


class SizeKey:
    """
    Hashable font size compared by its IEEE-754 bit pattern.

    Two keys are equal only when the packed binary64 representations of
    their values are identical. This is not numeric equality:

    - 12.0 and 11.999999999 are distinct keys
    - 0.0 and -0.0 are distinct keys even though 0.0 == -0.0
    - a NaN key equals another NaN key only if both share the same bits

    Callers must not rely on numerically close sizes sharing a cache slot.
    """

    __slots__ = ("_value", "_bits")

    def __init__(self, value: Union[float, int]):
        value = float(value)
        self._value = value
        self._bits = struct.unpack(">Q", struct.pack(">d", value))[0]

    @property
    def value(self) -> float:
        return self._value

    @property
    def bits(self) -> int:
        return self._bits

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SizeKey):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self) -> int:
        return hash(self._bits)

    def __repr__(self) -> str:
        return f"SizeKey({self._value!r})"
