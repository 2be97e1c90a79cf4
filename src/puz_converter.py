#!/usr/bin/env python3
"""CLI entry point: convert an ipuz crossword to a ``.puz`` file.

Optionally also writes a puzzle/answer SVG pair, a printable PDF and an
XLSX clue sheet into an ``output`` folder beside the ``.puz`` file.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from models import Crossword, CrosswordError
from multi_error import MultiError

PUZ_VERSIONS = {
    "1.2": b"1.2\0",
    "2.0": b"2.0\0",
}


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Convert an ipuz crossword to Across Lite .puz."
    )
    p.add_argument("input", help="Path to the .ipuz file")
    p.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output .puz path (default: input with .puz extension)",
    )
    p.add_argument("--puz-version", choices=sorted(PUZ_VERSIONS), default="2.0",
                   help="1.2 writes Windows-1252 text, 2.0 writes UTF-8 (default: 2.0)")
    p.add_argument("--svg", action="store_true",
                   help="Also write puzzle and answer SVGs")
    p.add_argument("--pdf", action="store_true",
                   help="Also write a printable PDF with answer key")
    p.add_argument("--xlsx", action="store_true",
                   help="Also write an XLSX clue sheet")
    return p


def main(argv: list[str] | None = None) -> None:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    t0 = time.time()

    try:
        _run(args, t0)
    except CrosswordError as e:
        if isinstance(e, MultiError):
            print("Error: the puzzle is invalid", file=sys.stderr)
            for section, message in e.to_dict().items():
                print(f"  {section}: {message}", file=sys.stderr)
        else:
            print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _run(args, t0: float) -> None:
    from ipuz_codec import read_ipuz
    from puz_writer import write_puz

    input_path = Path(args.input)
    output_path = args.output or str(input_path.with_suffix(".puz"))

    crossword = read_ipuz(input_path)
    print(
        f"Read {crossword.width}x{crossword.height} crossword, "
        f"{len(crossword.across_clues)} across / {len(crossword.down_clues)} down clues",
        file=sys.stderr,
    )

    write_puz(crossword, output_path, PUZ_VERSIONS[args.puz_version])
    print(f"Output: {output_path}", file=sys.stderr)

    if args.svg or args.pdf or args.xlsx:
        _output_extras(crossword, output_path, args.svg, args.pdf, args.xlsx)

    elapsed = time.time() - t0
    print(f"Done in {elapsed:.1f}s", file=sys.stderr)


def _output_extras(
    crossword: Crossword,
    output_path: str,
    svg: bool,
    pdf: bool,
    xlsx: bool,
) -> None:
    """Write the requested extra files into an 'output' folder."""
    stem = Path(output_path).stem
    out_dir = Path(output_path).parent / "output"
    out_dir.mkdir(exist_ok=True)

    written: list[str] = []
    if svg:
        from svg_renderer import render_answer_svg, render_puzzle_svg

        puzzle_svg_path = str(out_dir / f"{stem}_puzzle.svg")
        answer_svg_path = str(out_dir / f"{stem}_answer.svg")
        render_puzzle_svg(crossword, puzzle_svg_path)
        render_answer_svg(crossword, answer_svg_path)
        written += [puzzle_svg_path, answer_svg_path]
    if pdf:
        from pdf_renderer import render_pdf

        pdf_path = str(out_dir / f"{stem}.pdf")
        render_pdf(crossword, pdf_path)
        written.append(pdf_path)
    if xlsx:
        from xlsx_writer import write_clues_xlsx

        xlsx_path = str(out_dir / f"{stem}_clues.xlsx")
        write_clues_xlsx(crossword, xlsx_path)
        written.append(xlsx_path)

    for path in written:
        print(f"Output: {path}", file=sys.stderr)


if __name__ == "__main__":
    main()
