from __future__ import annotations

from typing import Union


def mask(nbits: int) -> int:
    return (1 << nbits) - 1


def sext(v: int, nbits: int) -> int:
    return (v & ((1 << (nbits - 1)) - 1)) - (v & (1 << (nbits - 1)))


def s2u(v: int, nbits: int) -> int:
    if v < 0:
        return (1 << nbits) + v
    return v


class Int(int):
    """
    Fixed-width integer. The value is always kept unsigned, reduced mod 2**width;
    the signed view is available through u2s().
    """

    width: int

    def __new__(cls, value: int, width: int):
        assert width > 0, f"bad width {width}"
        res = int.__new__(cls, int(value) & mask(width))
        res.width = width
        return res

    def __getnewargs__(self):
        return int(self), self.width

    @classmethod
    def ones(cls, width: int) -> Int:
        return cls(mask(width), width)

    @classmethod
    def zeros(cls, width: int) -> Int:
        return cls(0, width)

    def __repr__(self) -> str:
        return f"Int({int(self):#x}, {self.width})"

    def __str__(self) -> str:
        return f"{int(self):0{self.width}b}"

    def _other(self, other: Union[int, Int]) -> int:
        if isinstance(other, Int):
            assert other.width == self.width, f"width mismatch {self.width} vs {other.width}"
        return int(other)

    def __and__(self, other: Union[int, Int]) -> Int:
        return type(self)(int(self) & self._other(other), self.width)

    __rand__ = __and__

    def __or__(self, other: Union[int, Int]) -> Int:
        return type(self)(int(self) | self._other(other), self.width)

    __ror__ = __or__

    def __xor__(self, other: Union[int, Int]) -> Int:
        return type(self)(int(self) ^ self._other(other), self.width)

    __rxor__ = __xor__

    def __invert__(self) -> Int:
        return type(self)(~int(self), self.width)

    def __lshift__(self, nbits: int) -> Int:
        return type(self)(int(self) << int(nbits), self.width)

    def __rshift__(self, nbits: int) -> Int:
        # logical
        return type(self)(int(self) >> int(nbits), self.width)

    def bit(self, idx: int) -> bool:
        assert 0 <= idx < self.width, f"bit {idx} out of range for width {self.width}"
        return bool((int(self) >> idx) & 1)

    def set_bit(self, idx: int) -> Int:
        assert 0 <= idx < self.width, f"bit {idx} out of range for width {self.width}"
        return type(self)(int(self) | (1 << idx), self.width)

    def clear_bit(self, idx: int) -> Int:
        assert 0 <= idx < self.width, f"bit {idx} out of range for width {self.width}"
        return type(self)(int(self) & ~(1 << idx), self.width)

    def popcount(self) -> int:
        return bin(int(self)).count("1")

    def u2s(self) -> int:
        return sext(int(self), self.width)

    def asr(self, nbits: int) -> Int:
        return type(self)(self.u2s() >> int(nbits), self.width)

    def trunc(self, width: int) -> Int:
        assert width <= self.width
        return type(self)(self, width)

    def zext(self, width: int) -> Int:
        assert width >= self.width
        return type(self)(self, width)

    def sext(self, width: int) -> Int:
        assert width >= self.width
        return type(self)(s2u(self.u2s(), width), width)
