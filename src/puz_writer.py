"""Write a validated Crossword as an Across Lite ``.puz`` file.

Layout: 52-byte header, solution bytes, shape bytes, NUL-terminated
strings (title, author, copyright, clues in number order, notes), then the
optional GRBS/RTBL rebus sections. Every checksum uses the same rolling
16-bit ``cksum_region``.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TypeVar

from models import CellKind, Crossword, EncodingError

logger = logging.getLogger(__name__)

ClueT = TypeVar("ClueT", bound=tuple)

VERSION_1_2 = b"1.2\0"
VERSION_2_0 = b"2.0\0"

# 1.2 and 2.0 share a layout and differ only in text encoding.
ENCODINGS = {
    VERSION_1_2: "cp1252",
    VERSION_2_0: "utf-8",
}

FILE_MAGIC = b"ACROSS&DOWN\0"
MASK = b"ICHEATED"
# Solution byte written for a cell with no fill. Provisional.
EMPTY_CELL_LETTER = b"A"

HEADER = struct.Struct("<H12sH8s4sHH12sBBHHH")
HEADER_SIZE = HEADER.size  # 52
CIB_SLICE = slice(0x2C, 0x34)

UNKNOWN_BITMASK = 1
SCRAMBLED_TAG = 0


@dataclass
class PreserializedCrossword:
    """The crossword's fields as the bytes that go into the file."""

    width: int
    height: int
    solution: bytes
    shape: bytes
    clues: list[bytes]
    title: bytes
    author: bytes
    copyright: bytes
    notes: bytes
    version: bytes


def cksum_region(data: bytes, cksum: int = 0) -> int:
    """Fold *data* into a running 16-bit checksum (rotate right, then add)."""
    for byte in data:
        if cksum & 1:
            cksum = (cksum >> 1) + 0x8000
        else:
            cksum >>= 1
        cksum = (cksum + byte) & 0xFFFF
    return cksum


def merge_clues(
    across: Sequence[ClueT], down: Sequence[ClueT]
) -> list[ClueT]:
    """Merge two number-sorted clue lists into one; across wins ties."""
    merged: list[ClueT] = []
    i = j = 0
    while i < len(across) and j < len(down):
        if down[j][0] < across[i][0]:
            merged.append(down[j])
            j += 1
        else:
            merged.append(across[i])
            i += 1
    merged.extend(across[i:])
    merged.extend(down[j:])
    return merged


def meta_checksum(xword: PreserializedCrossword, cksum: int = 0) -> int:
    """Checksum the text section.

    Title, author, copyright and notes count only when non-empty and then
    include their NUL terminator; clue text never includes it.
    """
    for text in (xword.title, xword.author, xword.copyright):
        if text:
            cksum = cksum_region(text + b"\0", cksum)
    for clue in xword.clues:
        cksum = cksum_region(clue, cksum)
    if xword.notes:
        cksum = cksum_region(xword.notes + b"\0", cksum)
    return cksum


def build_header(xword: PreserializedCrossword) -> bytes:
    """Pack the 52-byte header with the file checksum and masked checksums."""
    packed = _pack_header(xword, checksum=0, cib_checksum=0, masked=MASK)

    cib = cksum_region(packed[CIB_SLICE])
    solution = cksum_region(xword.solution)
    shape = cksum_region(xword.shape)
    meta = meta_checksum(xword)

    cksum = cksum_region(xword.solution, cib)
    cksum = cksum_region(xword.shape, cksum)
    cksum = meta_checksum(xword, cksum)

    parts = (cib, solution, shape, meta)
    low = bytes(m ^ (c & 0xFF) for m, c in zip(MASK[:4], parts))
    high = bytes(m ^ (c >> 8) for m, c in zip(MASK[4:], parts))
    return _pack_header(xword, checksum=cksum, cib_checksum=cib, masked=low + high)


def _pack_header(
    xword: PreserializedCrossword, checksum: int, cib_checksum: int, masked: bytes
) -> bytes:
    return HEADER.pack(
        checksum,
        FILE_MAGIC,
        cib_checksum,
        masked,
        xword.version,
        0,  # reserved
        0,  # scrambled checksum
        bytes(12),
        xword.width,
        xword.height,
        len(xword.clues),
        UNKNOWN_BITMASK,
        SCRAMBLED_TAG,
    )


def preserialize(crossword: Crossword, version: bytes) -> PreserializedCrossword:
    """Encode every text field, raising EncodingError on the first that fails."""
    try:
        encoding = ENCODINGS[version]
    except KeyError:
        raise ValueError(f"Unsupported .puz version tag: {version!r}") from None

    solution = bytearray()
    for cell in crossword.cells:
        if cell.kind == CellKind.WALL:
            solution += b"."
        elif cell.kind == CellKind.EMPTY:
            solution += EMPTY_CELL_LETTER
        else:
            solution += _encode(cell.text, encoding, "grid")[:1]

    shape = b"".join(b"." if cell.is_wall else b"-" for cell in crossword.cells)

    across = [(n, text, f"clue {n}A") for n, text in crossword.across_clues]
    down = [(n, text, f"clue {n}D") for n, text in crossword.down_clues]
    clues = [
        _encode(text, encoding, field)
        for _, text, field in merge_clues(across, down)
    ]

    return PreserializedCrossword(
        width=crossword.width,
        height=crossword.height,
        solution=bytes(solution),
        shape=shape,
        clues=clues,
        title=_encode(crossword.title, encoding, "title"),
        author=_encode(crossword.author, encoding, "author"),
        copyright=_encode(crossword.copyright, encoding, "copyright"),
        notes=_encode(crossword.notes, encoding, "notes"),
        version=version,
    )


def to_binary(crossword: Crossword, version: bytes = VERSION_2_0) -> bytes:
    """Return the complete ``.puz`` file for *crossword*."""
    xword = preserialize(crossword, version)
    encoding = ENCODINGS[version]

    out = bytearray(build_header(xword))
    out += xword.solution
    out += xword.shape
    for line in [xword.title, xword.author, xword.copyright, *xword.clues, xword.notes]:
        out += line
        out += b"\0"
    out += build_rebus_sections(crossword, encoding)

    logger.debug(
        "Encoded %dx%d crossword (%d clues) as %d bytes, version %r",
        xword.width, xword.height, len(xword.clues), len(out), version,
    )
    return bytes(out)


def write_puz(crossword: Crossword, path: str | Path, version: bytes = VERSION_2_0) -> None:
    """Encode *crossword* and write it to *path*."""
    data = to_binary(crossword, version)
    Path(path).write_bytes(data)


def build_rebus_sections(crossword: Crossword, encoding: str = "utf-8") -> bytes:
    """GRBS (per-cell rebus index) and RTBL (index table); empty without rebuses."""
    seen: dict[str, int] = {}
    table = bytearray()
    grid = bytearray()

    for cell in crossword.cells:
        if cell.kind != CellKind.REBUS:
            grid.append(0)
            continue
        if cell.text not in seen:
            key = len(seen)
            table += f"{key:>2}:".encode("ascii")
            table += _encode(cell.text, encoding, "grid")
            table += b";"
            seen[cell.text] = key + 1
        grid.append(seen[cell.text])

    if not seen:
        return b""
    logger.debug("Writing %d rebus entries", len(seen))
    return extra_section(b"GRBS", bytes(grid)) + extra_section(b"RTBL", bytes(table))


def extra_section(title: bytes, data: bytes) -> bytes:
    """Tag, little-endian length and checksum, the data, then a NUL."""
    return (
        title
        + struct.pack("<HH", len(data), cksum_region(data))
        + data
        + b"\0"
    )


def _encode(text: str, encoding: str, field: str) -> bytes:
    try:
        return text.encode(encoding)
    except UnicodeEncodeError:
        raise EncodingError(field, encoding) from None
