from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Final, Mapping


## Helpers ##
def _deep_freeze(obj: Any) -> Any:
    """Recursively freeze common containers. Use for constant exports."""
    if isinstance(obj, dict):
        return MappingProxyType({k: _deep_freeze(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(_deep_freeze(v) for v in obj)
    if isinstance(obj, set):
        return frozenset(_deep_freeze(v) for v in obj)
    return obj


## Constants ##
GAP_CHAR: Final[str] = "-"
UNAVAILABLE_SEQUENCE: Final[str] = "*"

SAM_SUFFIX: Final[str] = ".sam"
BAM_SUFFIX: Final[str] = ".bam"

# Index i of this string is the op character for BAM/htslib CIGAR code i.
CIGAR_OP_CODES: Final[str] = "MIDNSHP=XB"

CIGAR_MATCH: Final[str] = "M"
CIGAR_INSERTION: Final[str] = "I"
CIGAR_DELETION: Final[str] = "D"
CIGAR_SOFT_CLIP: Final[str] = "S"
CIGAR_HARD_CLIP: Final[str] = "H"

_private_cigar_names: Dict[str, str] = {
    CIGAR_MATCH: "Match",
    CIGAR_INSERTION: "Insertion",
    CIGAR_DELETION: "Deletion",
    CIGAR_SOFT_CLIP: "SoftClip",
    CIGAR_HARD_CLIP: "HardClip",
}
SUPPORTED_CIGAR_OPS: Final[Mapping[str, str]] = _deep_freeze(_private_cigar_names)

# (consumes reference, consumes read) for each supported op
_private_cigar_consumes: Dict[str, tuple] = {
    CIGAR_MATCH: (True, True),
    CIGAR_INSERTION: (False, True),
    CIGAR_DELETION: (True, False),
    CIGAR_SOFT_CLIP: (False, True),
    CIGAR_HARD_CLIP: (False, False),
}
CIGAR_CONSUMES: Final[Mapping[str, tuple]] = _deep_freeze(_private_cigar_consumes)

SAMTOOLS_BACKENDS: Final[tuple] = ("auto", "python", "cli")
