import argparse
import os

from rich import print as rprint
from rich.console import Console
from rich.table import Table

from knownbits_sext import sweep as sweep_mod
from knownbits_sext.compare import Precision, find_witness, unsound_inputs
from knownbits_sext.knownbits import MAX_ENUM_WIDTH
from knownbits_sext.sweep import SweepResult, sweep_widths
from knownbits_sext.transfer import TRANSFER_FUNCTIONS

econsole = Console(stderr=True)


def print_plain(res: SweepResult):
    print(f"BitWidth: {res.width}, SrcBitWidth: {res.field_width}")
    print(f"Total Values: {res.total}")
    for p in Precision:
        print(f"{p.label}: {res[p]}")
    print()


def results_table(results: list[SweepResult]) -> Table:
    table = Table(title="sext-in-register: composite vs decomposed")
    table.add_column("Width", justify="right")
    table.add_column("Field", justify="right")
    table.add_column("Total", justify="right")
    for p in Precision:
        table.add_column(p.label, justify="right")
    for res in results:
        cells = [str(res.width), str(res.field_width), str(res.total)]
        for p in Precision:
            n = res[p]
            if n and p is not Precision.EQUAL:
                cells.append(f"[bold red]{n}[/bold red]")
            else:
                cells.append(str(n))
        table.add_row(*cells)
    return table


def real_main(args) -> int:
    if args.verbose:
        sweep_mod.dprint = rprint

    failed = False
    results = []
    for res in sweep_widths(
        args.min_width, args.max_width, field_widths=args.field_width, jobs=args.jobs
    ):
        results.append(res)
        if args.plain:
            print_plain(res)
        if args.histogram:
            print(f"width {res.width} field width {res.field_width}:")
            print(res.counts.ascii_histogram())
        if res[Precision.INCOMPARABLE]:
            failed = True
        if args.witnesses:
            for p in Precision:
                if p is Precision.EQUAL or not res[p]:
                    continue
                kb = find_witness(res.width, res.field_width, p)
                print(f"width {res.width} field width {res.field_width} {p.label}: {kb}")
        if args.soundness:
            for name, transfer in TRANSFER_FUNCTIONS.items():
                bad = unsound_inputs(transfer, res.width, res.field_width)
                for kb, missing in bad:
                    econsole.print(
                        f"[red]unsound[/red] {name} width {res.width} field width "
                        f"{res.field_width} input {kb}: misses {sorted(map(str, missing))}"
                    )
                if bad:
                    failed = True

    if not args.plain:
        rprint(results_table(results))
    return 1 if failed else 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Exhaustively compare the composite and decomposed known-bits "
        "sext-in-register transfer functions"
    )
    parser.add_argument(
        "--min-width", type=int, default=4, help="Smallest bit width", metavar="N"
    )
    parser.add_argument(
        "--max-width", type=int, default=8, help="Largest bit width", metavar="N"
    )
    parser.add_argument(
        "-f",
        "--field-width",
        type=int,
        action="append",
        help="Field width to sign extend from (default: all)",
        metavar="S",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=int(os.getenv("KNOWNBITS_SEXT_JOBS", "1")),
        help="Worker processes per sweep",
        metavar="JOBS",
    )
    parser.add_argument(
        "--soundness",
        action="store_true",
        help="Also check both transfer functions against the concrete semantics",
    )
    parser.add_argument(
        "--witnesses",
        action="store_true",
        help="Print an example input for every non-equal classification",
    )
    parser.add_argument(
        "--histogram", action="store_true", help="Print ASCII histograms of the counts"
    )
    parser.add_argument(
        "--plain", action="store_true", help="Plain text report instead of a table"
    )
    parser.add_argument(
        "-v", "--verbose", default=False, help="Debug output", action="store_true"
    )
    args = parser.parse_args(argv)
    if not 0 < args.min_width <= args.max_width:
        parser.error(f"bad width range {args.min_width}..{args.max_width}")
    if args.max_width > MAX_ENUM_WIDTH:
        parser.error(f"max width {args.max_width} exceeds {MAX_ENUM_WIDTH}")
    if args.field_width and any(fw <= 0 for fw in args.field_width):
        parser.error("field widths must be positive")
    if args.jobs <= 0:
        parser.error("jobs must be positive")
    return real_main(args)


if __name__ == "__main__":
    raise SystemExit(main())
