from __future__ import annotations

from enum import Enum
from typing import AbstractSet, Optional

from .bits import Int
from .knownbits import KnownBits, concretize, enumerate_known_bits
from .transfer import (
    TransferFunc,
    sext_in_reg,
    sext_in_reg_composite,
    sext_in_reg_decomposed,
)
from .utils import first_where


class Precision(Enum):
    EQUAL = "equal"
    COMPOSITE_MORE_PRECISE = "composite"
    DECOMPOSED_MORE_PRECISE = "decomposed"
    INCOMPARABLE = "incomparable"

    @property
    def label(self) -> str:
        return {
            Precision.EQUAL: "Equal Precision",
            Precision.COMPOSITE_MORE_PRECISE: "Composite More Precise",
            Precision.DECOMPOSED_MORE_PRECISE: "Decomposed More Precise",
            Precision.INCOMPARABLE: "Incomparable Results",
        }[self]


def classify(composite: AbstractSet[int], decomposed: AbstractSet[int]) -> Precision:
    if composite == decomposed:
        return Precision.EQUAL
    if composite <= decomposed:
        return Precision.COMPOSITE_MORE_PRECISE
    if decomposed <= composite:
        return Precision.DECOMPOSED_MORE_PRECISE
    return Precision.INCOMPARABLE


def compare(kb: KnownBits, field_width: int) -> Precision:
    composite = concretize(sext_in_reg_composite(kb, field_width))
    decomposed = concretize(sext_in_reg_decomposed(kb, field_width))
    return classify(composite, decomposed)


def check_soundness(transfer: TransferFunc, kb: KnownBits, field_width: int) -> set[Int]:
    """
    Return the concrete sext-in-register results of kb's members that the
    abstract result of ``transfer`` fails to cover. Empty means sound.
    """
    out = transfer(kb, field_width)
    return {
        r
        for r in (sext_in_reg(v, field_width) for v in concretize(kb))
        if not out.contains(r)
    }


def unsound_inputs(
    transfer: TransferFunc, width: int, field_width: int
) -> list[tuple[KnownBits, set[Int]]]:
    res = []
    for kb in enumerate_known_bits(width):
        missing = check_soundness(transfer, kb, field_width)
        if missing:
            res.append((kb, missing))
    return res


def find_witness(width: int, field_width: int, precision: Precision) -> Optional[KnownBits]:
    return first_where(
        enumerate_known_bits(width), lambda kb: compare(kb, field_width) is precision
    )
