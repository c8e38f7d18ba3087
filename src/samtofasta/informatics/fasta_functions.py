from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from Bio import SeqIO

from samtofasta.errors import ReferenceReadError
from samtofasta.logging_utils import get_logger

logger = get_logger(__name__)


def load_reference_sequences(fasta_file: str | Path) -> Dict[str, str]:
    """Return contig sequences from a FASTA file keyed by record name.

    Sequences are kept exactly as written in the FASTA (no case folding). When
    a name occurs more than once the last record wins.

    Args:
        fasta_file: Path to the FASTA file.

    Returns:
        dict[str, str]: Mapping of record ID to sequence.

    Raises:
        ReferenceReadError: If the file cannot be opened or a record is malformed.
    """
    fasta_file = Path(fasta_file)
    logger.info("Loading reference sequences from %s...", fasta_file)
    record_dict: Dict[str, str] = {}
    try:
        with fasta_file.open("r") as f:
            for rec in SeqIO.parse(f, "fasta"):
                if rec.id in record_dict:
                    logger.debug("Duplicate contig %s in %s, keeping the later record", rec.id, fasta_file)
                record_dict[rec.id] = str(rec.seq)
    except OSError as e:
        raise ReferenceReadError(f"Could not open reference {fasta_file}: {e}") from e
    except ValueError as e:
        raise ReferenceReadError(f"Malformed FASTA record in {fasta_file}: {e}") from e
    logger.info("Loaded %d reference sequences...", len(record_dict))
    return record_dict


class ReferenceStore:
    """Read-only lookup of contig name to full base sequence."""

    def __init__(self, sequences: Mapping[str, str]):
        self._sequences = MappingProxyType(dict(sequences))

    @classmethod
    def from_fasta(cls, fasta_file: str | Path) -> "ReferenceStore":
        return cls(load_reference_sequences(fasta_file))

    @property
    def sequences(self) -> Mapping[str, str]:
        return self._sequences

    def get(self, name: Optional[str]) -> Optional[str]:
        if name is None:
            return None
        return self._sequences.get(name)

    def __getitem__(self, name: str) -> str:
        return self._sequences[name]

    def __contains__(self, name: object) -> bool:
        return name in self._sequences

    def __len__(self) -> int:
        return len(self._sequences)

    def __iter__(self) -> Iterator[str]:
        return iter(self._sequences)
