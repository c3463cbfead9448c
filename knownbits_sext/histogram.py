from __future__ import annotations

from collections import defaultdict
from typing import Mapping

from .compare import Precision


class PrecisionHistogram(defaultdict):
    def __init__(self, counts: Mapping[Precision, int] = None):
        super().__init__(int)
        if counts:
            self.merge(counts)

    def merge(self, other: Mapping[Precision, int]) -> PrecisionHistogram:
        for k, n in other.items():
            self[Precision(k)] += n
        return self

    @property
    def total(self) -> int:
        return sum(self.values())

    def as_dict(self) -> dict[Precision, int]:
        return {p: self[p] for p in Precision}

    @staticmethod
    def block_str(percentage: float, width: int = 80):
        full_width = width * 8
        num_blk = int(percentage * full_width)
        full_blks = num_blk // 8
        partial_blks = num_blk % 8
        return "█" * full_blks + ("", "▏", "▎", "▍", "▌", "▋", "▊", "▉")[partial_blks]

    def ascii_histogram(self, width=60):
        res = ""
        max_num = max(self.values(), default=0)
        for p in Precision:
            n = self[p]
            bar = self.block_str(n / max_num, width=width) if max_num else ""
            res += f"{p.label:24s} {n:8d} {bar}\n"
        return res
