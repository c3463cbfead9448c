from __future__ import annotations

from typing import Callable

from bidict import bidict

from .bits import Int
from .knownbits import InvalidFieldWidth, KnownBits

TransferFunc = Callable[[KnownBits, int], KnownBits]


def sext_in_reg(v: Int, field_width: int) -> Int:
    """Concrete semantics: keep the low field_width bits and sign extend them back to v.width."""
    if not 0 < field_width <= v.width:
        raise InvalidFieldWidth(field_width, v.width)
    return v.trunc(field_width).sext(v.width)


def check_field_width(kb: KnownBits, field_width: int) -> None:
    if not 0 < field_width <= kb.width:
        raise InvalidFieldWidth(field_width, kb.width)


def sext_in_reg_composite(kb: KnownBits, field_width: int) -> KnownBits:
    check_field_width(kb, field_width)
    if field_width == kb.width:
        return kb

    ext_bits = kb.width - field_width
    return KnownBits(
        kb.width,
        zero=(kb.zero << ext_bits).asr(ext_bits),
        one=(kb.one << ext_bits).asr(ext_bits),
    )


def sext_in_reg_decomposed(kb: KnownBits, field_width: int) -> KnownBits:
    check_field_width(kb, field_width)
    if field_width == kb.width:
        return kb

    trits = [kb[i] for i in range(field_width)]
    sign = trits[field_width - 1]
    # an unknown sign bit leaves every extended bit unknown
    trits += [sign] * (kb.width - field_width)
    return KnownBits.from_trits(trits)


TRANSFER_FUNCTIONS: bidict[str, TransferFunc] = bidict(
    {
        "composite": sext_in_reg_composite,
        "decomposed": sext_in_reg_decomposed,
    }
)
