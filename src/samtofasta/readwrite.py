from __future__ import annotations

from pathlib import Path
from typing import IO

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from .errors import ConfigError, WriteError
from .logging_utils import get_logger
from .tools.gapped_alignment import AlignedPair

logger = get_logger(__name__)


def open_output(output_path: str | Path) -> IO[str]:
    """Create or truncate the FASTA output file.

    Raises:
        ConfigError: If the file cannot be created.
    """
    output_path = Path(output_path)
    try:
        return output_path.open("w")
    except OSError as e:
        raise ConfigError(f"couldn't create {output_path}: {e}") from e


def aligned_pair_to_records(pair: AlignedPair) -> list[SeqRecord]:
    """Return the reference entry and the read entry for one pair, in that order."""
    return [
        SeqRecord(Seq(pair.reference_block), id=pair.reference_name, description=""),
        SeqRecord(Seq(pair.read_block), id=pair.read_name, description=""),
    ]


class AlignedPairWriter:
    """Append reconstructed pairs to a FASTA handle, one unwrapped line per block.

    Each pair becomes four lines: ``>reference``, reference block, ``>read``,
    read block. Pairs are written strictly in the order they are given.
    """

    def __init__(self, handle: IO[str]):
        self.handle = handle
        self.written = 0

    def write(self, pair: AlignedPair) -> None:
        try:
            SeqIO.write(aligned_pair_to_records(pair), self.handle, "fasta-2line")
        except OSError as e:
            raise WriteError(f"failed to write alignment for read {pair.read_name}: {e}") from e
        self.written += 1
