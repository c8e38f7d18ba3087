from .fasta_functions import ReferenceStore, load_reference_sequences
from .sam_functions import (
    AlignmentRecord,
    iter_alignment_records,
    parse_cigar_string,
    parse_sam_line,
    resolve_container,
)

__all__ = [
    "AlignmentRecord",
    "ReferenceStore",
    "iter_alignment_records",
    "load_reference_sequences",
    "parse_cigar_string",
    "parse_sam_line",
    "resolve_container",
]
