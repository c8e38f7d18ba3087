"""Exception types raised by samtofasta.

Every error here is fatal once it reaches the command line: the run stops
rather than writing a possibly corrupt alignment.
"""

from __future__ import annotations


class SamToFastaError(Exception):
    """Base class for all samtofasta failures."""


class ConfigError(SamToFastaError):
    """A required argument is missing or a path cannot be used."""


class UnsupportedContainerError(SamToFastaError):
    """The alignment input is not a container variant we can read."""


class ReferenceReadError(SamToFastaError):
    """The reference FASTA could not be opened or parsed."""


class AlignmentReadError(SamToFastaError):
    """An alignment record could not be decoded."""


class WalkError(SamToFastaError):
    """Reconstructing the gapped alignment of one record failed."""


class UnsupportedOperationError(WalkError):
    """A CIGAR operation outside M, I, D, S and H was found in a record."""

    def __init__(self, kind: str, read_name: str | None = None):
        self.kind = kind
        self.read_name = read_name
        where = f" in read {read_name}" if read_name else ""
        super().__init__(f"Unsupported CIGAR operation '{kind}'{where}")


class ReferenceBoundsError(WalkError):
    """An operation consumes reference bases past the end of the contig."""


class QueryBoundsError(WalkError):
    """An operation consumes read bases past the end of the raw sequence."""


class WriteError(SamToFastaError):
    """The output destination refused a write."""
