import pytest

from knownbits_sext import sweep as sweep_mod
from knownbits_sext.tools import knownbits_sext_tool as tool


class TestTool:
    def test_plain_report(self, capsys):
        assert tool.main(["--min-width", "4", "--max-width", "4", "-f", "1", "--plain"]) == 0
        out = capsys.readouterr().out
        assert "BitWidth: 4, SrcBitWidth: 1" in out
        assert "Total Values: 81" in out
        assert "Equal Precision: 81" in out
        assert "Composite More Precise: 0" in out
        assert "Decomposed More Precise: 0" in out
        assert "Incomparable Results: 0" in out

    def test_every_field_width(self, capsys):
        assert tool.main(["--min-width", "3", "--max-width", "3", "--plain"]) == 0
        out = capsys.readouterr().out
        for fw in range(1, 4):
            assert f"BitWidth: 3, SrcBitWidth: {fw}" in out
        assert out.count("Total Values: 27") == 3

    def test_table_report(self, capsys):
        assert tool.main(["--min-width", "2", "--max-width", "3"]) == 0
        assert "27" in capsys.readouterr().out

    def test_soundness_and_histogram(self, capsys):
        argv = ["--min-width", "3", "--max-width", "3", "--soundness", "--histogram", "--witnesses"]
        assert tool.main(argv + ["--plain"]) == 0
        captured = capsys.readouterr()
        assert "unsound" not in captured.err
        assert "Equal Precision" in captured.out

    def test_verbose(self, capsys, monkeypatch):
        monkeypatch.setattr(sweep_mod, "dprint", sweep_mod.null_print)
        assert tool.main(["--min-width", "2", "--max-width", "2", "-f", "1", "-v", "--plain"]) == 0
        assert "sweep width: 2 field width: 1" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "argv",
        [
            ["--min-width", "5", "--max-width", "4"],
            ["--min-width", "0"],
            ["--max-width", "21"],
            ["-f", "0"],
            ["-j", "0"],
        ],
    )
    def test_bad_args(self, argv):
        with pytest.raises(SystemExit) as e:
            tool.main(argv)
        assert e.value.code == 2
