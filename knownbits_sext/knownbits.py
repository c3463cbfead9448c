from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Sequence

from bidict import bidict
from more_itertools import powerset

from .bits import Int

# 3**20 abstract values is already a few billion
MAX_ENUM_WIDTH: Final[int] = 20
MAX_CONCRETIZE_UNKNOWN: Final[int] = 24


class InvalidFieldWidth(ValueError):
    def __init__(self, field_width: int, width: int):
        super().__init__(
            f"illegal sext-in-register: field width {field_width} for a {width} bit value"
        )
        self.field_width = field_width
        self.width = width


class KnownBitsConflict(AssertionError):
    pass


class WidthTooLarge(ValueError):
    pass


class Trit(Enum):
    ZERO = 0
    ONE = 1
    UNKNOWN = 2


char2trit = bidict({"0": Trit.ZERO, "1": Trit.ONE, "?": Trit.UNKNOWN})


@dataclass(frozen=True)
class KnownBits:
    """
    Three-valued abstraction of a set of width-bit integers.

    A bit set in ``zero`` is known to be 0, a bit set in ``one`` is known to be 1
    and a bit set in neither is unknown. Plain ints passed for the masks are
    converted to ``Int`` of the given width.
    """

    width: int
    zero: Int = 0
    one: Int = 0

    def __post_init__(self):
        if self.width <= 0:
            raise ValueError(f"bit width must be positive, got {self.width}")
        for name in ("zero", "one"):
            m = getattr(self, name)
            if isinstance(m, Int):
                assert m.width == self.width, f"{name} mask width {m.width} != {self.width}"
            else:
                object.__setattr__(self, name, Int(m, self.width))
        if self.zero & self.one:
            raise KnownBitsConflict(
                f"bits {str(self.zero & self.one)} are both known zero and known one"
            )

    @classmethod
    def unknown(cls, width: int) -> KnownBits:
        return cls(width)

    @classmethod
    def from_constant(cls, v: int, width: int) -> KnownBits:
        c = Int(v, width)
        return cls(width, zero=~c, one=c)

    @classmethod
    def from_trits(cls, trits: Sequence[Trit]) -> KnownBits:
        """Build from per-bit trits, index 0 being the least significant bit."""
        width = len(trits)
        zero = one = 0
        for i, t in enumerate(trits):
            if t is Trit.ZERO:
                zero |= 1 << i
            elif t is Trit.ONE:
                one |= 1 << i
        return cls(width, zero=zero, one=one)

    @classmethod
    def from_str(cls, s: str) -> KnownBits:
        """Parse an MSB-first string of '0', '1' and '?', e.g. ``"??01"``."""
        try:
            trits = [char2trit[c] for c in reversed(s)]
        except KeyError as e:
            raise ValueError(f"bad known-bits character {e.args[0]!r} in {s!r}") from None
        return cls.from_trits(trits)

    @classmethod
    def from_index(cls, idx: int, width: int) -> KnownBits:
        """
        Decode the idx-th abstract value of the given width: idx is read as a
        base-3 number whose least significant digit describes bit 0.
        """
        assert 0 <= idx < 3**width
        trits = []
        for _ in range(width):
            idx, rem = divmod(idx, 3)
            trits.append(Trit(rem))
        return cls.from_trits(trits)

    def __getitem__(self, idx: int) -> Trit:
        if self.zero.bit(idx):
            return Trit.ZERO
        if self.one.bit(idx):
            return Trit.ONE
        return Trit.UNKNOWN

    def __str__(self) -> str:
        return "".join(char2trit.inverse[t] for t in reversed(self.trits))

    @property
    def trits(self) -> tuple[Trit, ...]:
        return tuple(self[i] for i in range(self.width))

    @property
    def unknown_mask(self) -> Int:
        return ~(self.zero | self.one)

    @property
    def num_unknown(self) -> int:
        return self.unknown_mask.popcount()

    @property
    def is_constant(self) -> bool:
        return self.num_unknown == 0

    @property
    def constant(self) -> Int:
        assert self.is_constant, f"{self} is not a constant"
        return self.one

    def contains(self, v: int) -> bool:
        v = Int(v, self.width)
        return not (v & self.zero) and (v & self.one) == self.one

    def __le__(self, other: KnownBits) -> bool:
        """self is at least as precise as other."""
        assert self.width == other.width
        return (other.zero & ~self.zero) == 0 and (other.one & ~self.one) == 0

    def __or__(self, other: KnownBits) -> KnownBits:
        """Join: keep only what both sides know and agree on."""
        assert self.width == other.width
        return KnownBits(self.width, zero=self.zero & other.zero, one=self.one & other.one)


def enumerate_known_bits(width: int) -> list[KnownBits]:
    if width <= 0:
        raise ValueError(f"bit width must be positive, got {width}")
    if width > MAX_ENUM_WIDTH:
        raise WidthTooLarge(f"refusing to enumerate 3**{width} abstract values")
    return [KnownBits.from_index(i, width) for i in range(3**width)]


def concretize(kb: KnownBits) -> set[Int]:
    unknown_bits = [i for i in range(kb.width) if kb[i] is Trit.UNKNOWN]
    if len(unknown_bits) > MAX_CONCRETIZE_UNKNOWN:
        raise WidthTooLarge(
            f"refusing to concretize {kb.width} bit value with {len(unknown_bits)} unknown bits"
        )
    res = set()
    for subset in powerset(unknown_bits):
        v = kb.one
        for bit in subset:
            v = v.set_bit(bit)
        res.add(v)
    return res


def abstract(values: Iterable[int], width: int) -> KnownBits:
    consts = []
    for v in values:
        if isinstance(v, Int) and v.width != width:
            raise ValueError(f"{v!r} is not a {width} bit value")
        consts.append(KnownBits.from_constant(v, width))
    if not consts:
        return KnownBits.unknown(width)
    return functools.reduce(KnownBits.__or__, consts)
