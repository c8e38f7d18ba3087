from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

import pysam

from samtofasta.constants import (
    BAM_SUFFIX,
    CIGAR_OP_CODES,
    SAM_SUFFIX,
    SAMTOOLS_BACKENDS,
    UNAVAILABLE_SEQUENCE,
)
from samtofasta.errors import AlignmentReadError, UnsupportedContainerError
from samtofasta.logging_utils import get_logger

logger = get_logger(__name__)

_CIGAR_TOKEN_RE = re.compile(r"(\d+)(\D)")
_CIGAR_FULL_RE = re.compile(r"(?:\d+\D)+")


@dataclass(frozen=True)
class AlignmentRecord:
    """A decoded alignment line, reduced to what gapped reconstruction needs.

    Attributes:
        read_name: Query template name.
        sequence: Raw read bases, or ``"*"`` when the record carries none.
        reference_name: Contig the read is aligned to, ``None`` when unmapped.
        alignment_start: 1-based leftmost mapping position, ``None`` when unplaced.
        cigar: Ordered ``(op, length)`` pairs using SAM op characters.
    """

    read_name: str
    sequence: str
    reference_name: Optional[str]
    alignment_start: Optional[int]
    cigar: Tuple[Tuple[str, int], ...] = ()

    @property
    def has_sequence(self) -> bool:
        return bool(self.sequence) and self.sequence != UNAVAILABLE_SEQUENCE


def resolve_container(path: str | Path) -> str:
    """Return the container variant for an alignment input path.

    Dispatch is on the file suffix, case-insensitive. Only SAM is readable.

    Raises:
        UnsupportedContainerError: For BAM input or an unrecognized suffix.
    """
    suffix = Path(path).suffix.lower()
    if suffix == SAM_SUFFIX:
        return "sam"
    if suffix == BAM_SUFFIX:
        raise UnsupportedContainerError(f"Not supported yet: {path}")
    raise UnsupportedContainerError(
        f"We expect a file ending with .sam or .bam as input, we saw: {path}"
    )


def _resolve_samtools_backend(backend: str | None) -> str:
    """Resolve backend choice for reading alignment records.

    Args:
        backend: One of {"auto", "python", "cli"} (case-insensitive).

    Returns:
        Resolved backend string ("python" or "cli").
    """
    choice = (backend or "auto").strip().lower()
    if choice not in SAMTOOLS_BACKENDS:
        raise ValueError("samtools_backend must be one of: auto, python, cli")

    have_samtools = shutil.which("samtools") is not None

    if choice == "python":
        return "python"
    if choice == "cli":
        if not have_samtools:
            raise RuntimeError("samtools_backend=cli requires samtools in PATH.")
        return "cli"

    if have_samtools:
        return "cli"
    return "python"


def parse_cigar_string(cigar: str) -> Tuple[Tuple[str, int], ...]:
    """Split a SAM CIGAR string into ``(op, length)`` pairs.

    ``"*"`` (no CIGAR) gives an empty tuple. Op characters are passed through
    unchecked so that unsupported operations surface when the record is walked.
    """
    if cigar == "*" or cigar == "":
        return ()
    if not _CIGAR_FULL_RE.fullmatch(cigar):
        raise AlignmentReadError(f"Malformed CIGAR string: {cigar}")
    return tuple((op, int(length)) for length, op in _CIGAR_TOKEN_RE.findall(cigar))


def parse_sam_line(line: str) -> AlignmentRecord:
    """Decode one tab-separated SAM alignment line."""
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) < 11:
        raise AlignmentReadError(
            f"Expected at least 11 SAM columns, found {len(fields)}: {line.strip()[:80]}"
        )
    read_name = fields[0]
    rname = fields[2]
    try:
        pos = int(fields[3])
    except ValueError as e:
        raise AlignmentReadError(f"Invalid POS '{fields[3]}' for read {read_name}") from e
    return AlignmentRecord(
        read_name=read_name,
        sequence=fields[9] or UNAVAILABLE_SEQUENCE,
        reference_name=None if rname == "*" else rname,
        alignment_start=pos if pos > 0 else None,
        cigar=parse_cigar_string(fields[5]),
    )


def _record_from_pysam(read) -> AlignmentRecord:
    """Convert a ``pysam.AlignedSegment`` into an AlignmentRecord."""
    cigartuples = read.cigartuples or []
    try:
        cigar = tuple((CIGAR_OP_CODES[code], length) for code, length in cigartuples)
    except IndexError as e:
        raise AlignmentReadError(f"Unknown CIGAR code in read {read.query_name}") from e
    start = read.reference_start
    return AlignmentRecord(
        read_name=read.query_name,
        sequence=read.query_sequence or UNAVAILABLE_SEQUENCE,
        reference_name=read.reference_name,
        alignment_start=start + 1 if start is not None and start >= 0 else None,
        cigar=cigar,
    )


def _iter_records_from_text(sam_path: Path) -> Iterator[AlignmentRecord]:
    try:
        with sam_path.open("r") as handle:
            yield from iter_sam_lines(handle)
    except OSError as e:
        raise AlignmentReadError(f"Failed reading {sam_path}: {e}") from e


def _iter_records_with_pysam(sam_path: Path) -> Iterator[AlignmentRecord]:
    logger.debug("Reading alignment records using pysam")
    try:
        sam = pysam.AlignmentFile(str(sam_path), "r", check_sq=False)
    except ValueError as e:
        if "header" not in str(e):
            raise AlignmentReadError(f"Failed reading {sam_path}: {e}") from e
        logger.debug("pysam could not read a header from %s, decoding SAM text directly", sam_path)
        yield from _iter_records_from_text(sam_path)
        return
    except OSError as e:
        raise AlignmentReadError(f"Failed reading {sam_path}: {e}") from e

    with sam:
        # htslib cannot place reads without @SQ lines; RNAME is kept as text instead
        if sam.nreferences == 0:
            logger.debug("%s has no @SQ header lines, decoding SAM text directly", sam_path)
            yield from _iter_records_from_text(sam_path)
            return
        try:
            for read in sam:
                yield _record_from_pysam(read)
        except (OSError, ValueError) as e:
            raise AlignmentReadError(f"Failed reading {sam_path}: {e}") from e


def _iter_records_with_samtools(sam_path: Path) -> Iterator[AlignmentRecord]:
    cmd = ["samtools", "view", str(sam_path)]
    logger.debug("Reading alignment records using samtools: %s", " ".join(cmd))
    proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    assert proc.stdout is not None
    finished = False
    try:
        yield from iter_sam_lines(proc.stdout)
        finished = True
    finally:
        # stopped early, e.g. a record failed to walk
        if not finished and proc.poll() is None:
            proc.kill()
        rc = proc.wait()
        stderr = proc.stderr.read() if proc.stderr else ""
        proc.stdout.close()
        if proc.stderr:
            proc.stderr.close()
    if rc != 0:
        raise AlignmentReadError(f"samtools view failed (exit {rc}):\n{stderr}")


def iter_sam_lines(lines: Iterable[str]) -> Iterator[AlignmentRecord]:
    """Decode SAM text, skipping header and blank lines."""
    for line in lines:
        if not line.strip() or line.startswith("@"):
            continue
        yield parse_sam_line(line)


def iter_alignment_records(
    sam_path: str | Path, samtools_backend: str | None = "auto"
) -> Iterator[AlignmentRecord]:
    """Yield decoded alignment records from a SAM file in file order.

    Args:
        sam_path: Path to the SAM file.
        samtools_backend: Reader backend, ``auto``, ``python`` (pysam) or ``cli`` (samtools).

    Raises:
        UnsupportedContainerError: If the path is not a SAM file.
        AlignmentReadError: If a record cannot be decoded.
    """
    sam_path = Path(sam_path)
    resolve_container(sam_path)
    backend = _resolve_samtools_backend(samtools_backend)
    if backend == "python":
        yield from _iter_records_with_pysam(sam_path)
    else:
        yield from _iter_records_with_samtools(sam_path)
