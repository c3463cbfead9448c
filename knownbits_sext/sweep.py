from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from more_itertools import chunked

from .compare import Precision, compare
from .histogram import PrecisionHistogram
from .knownbits import MAX_ENUM_WIDTH, KnownBits, WidthTooLarge, enumerate_known_bits

real_print = print
null_print = lambda *args, **kwargs: None

dprint = null_print

DEFAULT_CHUNK_SIZE = 729


@dataclass
class SweepResult:
    width: int
    field_width: int
    counts: PrecisionHistogram = field(default_factory=PrecisionHistogram)

    @property
    def total(self) -> int:
        return self.counts.total

    def __getitem__(self, p: Precision) -> int:
        return self.counts[p]


def _sweep_chunk(width: int, field_width: int, indices: Sequence[int]) -> dict[str, int]:
    counts = PrecisionHistogram()
    for idx in indices:
        counts[compare(KnownBits.from_index(idx, width), field_width)] += 1
    return {p.value: n for p, n in counts.items()}


def sweep(
    width: int,
    field_width: int,
    jobs: int = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> SweepResult:
    if width > MAX_ENUM_WIDTH:
        raise WidthTooLarge(f"refusing to sweep 3**{width} abstract values")
    res = SweepResult(width, field_width)
    if jobs <= 1:
        for kb in enumerate_known_bits(width):
            res.counts[compare(kb, field_width)] += 1
    else:
        chunks = list(chunked(range(3**width), chunk_size))
        dprint(
            f"sweep width: {width} field width: {field_width} chunks: {len(chunks)} jobs: {jobs}"
        )
        with ProcessPoolExecutor(max_workers=jobs) as pool:
            futs = [pool.submit(_sweep_chunk, width, field_width, c) for c in chunks]
            for i, fut in enumerate(futs):
                res.counts.merge(fut.result())
                dprint(f"  chunk {i + 1}/{len(chunks)} done")
    assert res.total == 3**width, f"swept {res.total} of {3**width} values"
    dprint(f"sweep width: {width} field width: {field_width} -> {res.counts.as_dict()}")
    return res


def sweep_widths(
    min_width: int = 4,
    max_width: int = 8,
    field_widths: Optional[Sequence[int]] = None,
    jobs: int = 1,
) -> Iterator[SweepResult]:
    for width in range(min_width, max_width + 1):
        if field_widths is None:
            fws = range(1, width + 1)
        else:
            fws = sorted(fw for fw in set(field_widths) if 0 < fw <= width)
        for fw in fws:
            yield sweep(width, fw, jobs=jobs)
