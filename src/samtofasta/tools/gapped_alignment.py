from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

import numpy as np

from samtofasta.constants import (
    CIGAR_CONSUMES,
    CIGAR_DELETION,
    CIGAR_INSERTION,
    CIGAR_MATCH,
    CIGAR_SOFT_CLIP,
    GAP_CHAR,
    SUPPORTED_CIGAR_OPS,
)
from samtofasta.errors import (
    AlignmentReadError,
    QueryBoundsError,
    ReferenceBoundsError,
    ReferenceReadError,
    UnsupportedOperationError,
)
from samtofasta.informatics.sam_functions import AlignmentRecord

_GAP_BYTE = ord(GAP_CHAR)
_ALIGNED_OPS = frozenset({CIGAR_MATCH, CIGAR_INSERTION, CIGAR_DELETION})


@dataclass(frozen=True)
class AlignedPair:
    """Reference and read blocks of one reconstructed alignment.

    Both blocks always have the same length; gaps are written as ``-``.
    """

    reference_name: str
    reference_block: str
    read_name: str
    read_block: str

    def __post_init__(self) -> None:
        if len(self.reference_block) != len(self.read_block):
            raise ValueError(
                f"Reference block ({len(self.reference_block)}) and read block "
                f"({len(self.read_block)}) differ in length for read {self.read_name}"
            )

    @property
    def length(self) -> int:
        return len(self.reference_block)


def ineligibility_reason(record: AlignmentRecord, references: Mapping[str, str]) -> Optional[str]:
    """Return why a record cannot be reconstructed, or ``None`` if it can.

    These are ordinary skips, not errors: unmapped reads, reads on contigs
    missing from the reference, reads without bases and unplaced reads.
    """
    if record.reference_name is None:
        return "no reference name"
    if record.reference_name not in references:
        return f"reference {record.reference_name} not loaded"
    if not record.has_sequence:
        return "sequence unavailable"
    if record.alignment_start is None:
        return "no alignment start"
    return None


def _planned_length(
    cigar: Sequence[Tuple[str, int]],
    ref_start: int,
    reference_length: int,
    read_length: int,
    full_reference: bool,
    read_name: str,
) -> int:
    """Check every operation against the contig and read, returning the block length.

    Raises before any base is copied, so a failing record never produces a
    partial pair.
    """
    if ref_start < 0 or ref_start > reference_length:
        raise ReferenceBoundsError(
            f"Read {read_name} starts at {ref_start + 1}, outside a contig of length {reference_length}"
        )
    ref_pos = ref_start
    read_pos = 0
    aligned = 0
    for op, length in cigar:
        if op not in SUPPORTED_CIGAR_OPS:
            raise UnsupportedOperationError(op, read_name)
        if length < 0:
            raise ValueError(f"Negative CIGAR length {length}{op} in read {read_name}")
        consumes_reference, consumes_read = CIGAR_CONSUMES[op]
        if consumes_reference:
            ref_pos += length
            if ref_pos > reference_length:
                raise ReferenceBoundsError(
                    f"{length}{op} in read {read_name} runs to reference position {ref_pos}, "
                    f"past the end of a contig of length {reference_length}"
                )
        if consumes_read:
            read_pos += length
            if read_pos > read_length:
                raise QueryBoundsError(
                    f"{length}{op} in read {read_name} runs to read position {read_pos}, "
                    f"past the end of a {read_length} base read"
                )
        if op in _ALIGNED_OPS:
            aligned += length

    if full_reference:
        # prefix before the mapping + aligned columns + suffix after it
        return ref_start + aligned + (reference_length - ref_pos)
    return aligned


def _as_bytes(seq: str) -> np.ndarray:
    return np.frombuffer(seq.encode("ascii"), dtype=np.uint8)


def reconstruct_alignment(
    record: AlignmentRecord,
    references: Mapping[str, str],
    full_reference: bool = False,
) -> Optional[AlignedPair]:
    """Rebuild the gapped reference/read pair described by a record's CIGAR.

    Walks the CIGAR from the record's 1-based alignment start. Matches copy
    bases from both sequences, insertions put gaps in the reference block,
    deletions put gaps in the read block. Soft clips advance through the read
    without emitting anything and hard clips are ignored, since those bases are
    not in the raw read.

    Both output buffers are sized up front and pre-filled with the gap byte,
    so only consumed bases are copied in.

    Args:
        record: Decoded alignment record.
        references: Contig name to full sequence, e.g. a ``ReferenceStore``.
        full_reference: Extend the pair to cover the whole contig, padding the
            read block with gaps before and after the mapped region.

    Returns:
        The reconstructed ``AlignedPair``, or ``None`` when the record is
        unmapped, on an unknown contig, has no sequence or has no start.

    Raises:
        UnsupportedOperationError: For any CIGAR op other than M, I, D, S or H.
        ReferenceBoundsError: If the alignment runs past the end of the contig.
        QueryBoundsError: If the CIGAR consumes more bases than the read holds.
        ReferenceReadError: If the contig holds non-ASCII characters.
        AlignmentReadError: If the read holds non-ASCII characters.
    """
    if ineligibility_reason(record, references) is not None:
        return None

    sequence = references[record.reference_name]
    read_sequence = record.sequence
    if not sequence.isascii():
        raise ReferenceReadError(f"Contig {record.reference_name} contains non-ASCII characters")
    if not read_sequence.isascii():
        raise AlignmentReadError(f"Read {record.read_name} contains non-ASCII characters")
    ref_pos = record.alignment_start - 1
    read_pos = 0

    total = _planned_length(
        record.cigar,
        ref_pos,
        len(sequence),
        len(read_sequence),
        full_reference,
        record.read_name,
    )
    reference_block = np.full(total, _GAP_BYTE, dtype=np.uint8)
    read_block = np.full(total, _GAP_BYTE, dtype=np.uint8)
    out = 0

    if full_reference and ref_pos:
        reference_block[:ref_pos] = _as_bytes(sequence[:ref_pos])
        out = ref_pos

    for op, length in record.cigar:
        if not length:
            continue
        if op == CIGAR_MATCH:
            reference_block[out : out + length] = _as_bytes(sequence[ref_pos : ref_pos + length])
            read_block[out : out + length] = _as_bytes(read_sequence[read_pos : read_pos + length])
            ref_pos += length
            read_pos += length
            out += length
        elif op == CIGAR_INSERTION:
            read_block[out : out + length] = _as_bytes(read_sequence[read_pos : read_pos + length])
            read_pos += length
            out += length
        elif op == CIGAR_DELETION:
            reference_block[out : out + length] = _as_bytes(sequence[ref_pos : ref_pos + length])
            ref_pos += length
            out += length
        elif op == CIGAR_SOFT_CLIP:
            read_pos += length
        # hard clipped bases are already gone from the read

    if full_reference:
        remaining = len(sequence) - ref_pos
        if remaining:
            reference_block[out : out + remaining] = _as_bytes(sequence[ref_pos:])
            out += remaining

    return AlignedPair(
        reference_name=record.reference_name,
        reference_block=reference_block.tobytes().decode("ascii"),
        read_name=record.read_name,
        read_block=read_block.tobytes().decode("ascii"),
    )
