import pytest

from knownbits_sext.bits import Int
from knownbits_sext.compare import (
    Precision,
    check_soundness,
    classify,
    compare,
    find_witness,
    unsound_inputs,
)
from knownbits_sext.knownbits import InvalidFieldWidth, KnownBits, enumerate_known_bits
from knownbits_sext.transfer import TRANSFER_FUNCTIONS


def _bad_transfer(kb: KnownBits, field_width: int) -> KnownBits:
    # claims every result is zero
    return KnownBits.from_constant(0, kb.width)


class TestClassify:
    def test_equal(self):
        assert classify({1, 2}, {2, 1}) is Precision.EQUAL

    def test_composite_more_precise(self):
        assert classify({1}, {1, 2}) is Precision.COMPOSITE_MORE_PRECISE

    def test_decomposed_more_precise(self):
        assert classify({1, 2, 3}, {3}) is Precision.DECOMPOSED_MORE_PRECISE

    def test_incomparable(self):
        assert classify({1, 2}, {2, 3}) is Precision.INCOMPARABLE
        assert classify({1}, {2}) is Precision.INCOMPARABLE

    def test_exactly_one_label(self):
        universe = [0, 1, 2]
        subsets = [
            {x for i, x in enumerate(universe) if mask >> i & 1} for mask in range(1, 8)
        ]
        for a in subsets:
            for b in subsets:
                labels = [
                    a == b,
                    a < b,
                    b < a,
                    not (a <= b) and not (b <= a),
                ]
                assert labels.count(True) == 1
                expected = list(Precision)[labels.index(True)]
                assert classify(a, b) is expected


class TestCompare:
    def test_all_unknown_width4_field1(self):
        assert compare(KnownBits.unknown(4), 1) is Precision.EQUAL

    def test_known_positive_field(self):
        assert compare(KnownBits.from_str("??01"), 2) is Precision.EQUAL

    def test_invalid_field_width(self):
        with pytest.raises(InvalidFieldWidth):
            compare(KnownBits.unknown(4), 0)
        with pytest.raises(InvalidFieldWidth):
            compare(KnownBits.unknown(4), 5)

    @pytest.mark.parametrize("width", [1, 2, 3, 4])
    def test_variants_agree(self, width):
        for kb in enumerate_known_bits(width):
            for fw in range(1, width + 1):
                assert compare(kb, fw) is Precision.EQUAL


class TestSoundness:
    @pytest.mark.parametrize("name", ["composite", "decomposed"])
    def test_no_unsound_inputs(self, name):
        transfer = TRANSFER_FUNCTIONS[name]
        for fw in range(1, 5):
            assert unsound_inputs(transfer, 4, fw) == []

    def test_detects_unsound(self):
        missing = check_soundness(_bad_transfer, KnownBits.from_str("0001"), 1)
        assert missing == {Int(0b1111, 4)}

    def test_unsound_inputs_lists_offenders(self):
        bad = unsound_inputs(_bad_transfer, 2, 1)
        offenders = {str(kb) for kb, _ in bad}
        # every input that may have bit 0 set
        assert offenders == {"01", "0?", "11", "1?", "?1", "??"}


class TestWitness:
    def test_equal_witness(self):
        assert find_witness(3, 2, Precision.EQUAL) == enumerate_known_bits(3)[0]

    def test_no_witness(self):
        assert find_witness(3, 2, Precision.INCOMPARABLE) is None
