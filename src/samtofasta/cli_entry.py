from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import ConversionConfig
from .constants import SAMTOOLS_BACKENDS
from .errors import SamToFastaError
from .logging_utils import setup_logging
from .cli.sam_to_fasta import sam_to_fasta


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="samtofasta")
@click.option(
    "--input",
    "-i",
    "input_path",
    required=True,
    metavar="FILE",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
    help="An input SAM/BAM file containing reads already aligned to the reference.",
)
@click.option(
    "--ref",
    "-r",
    "reference_path",
    required=True,
    metavar="FILE",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
    help="The reference the reads were aligned to, can have multiple contigs.",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    required=True,
    metavar="FILE",
    type=click.Path(dir_okay=False, path_type=Path),
    help="The FASTA alignment output file.",
)
@click.option(
    "--full_reference",
    "-f",
    "full_reference",
    is_flag=True,
    help="Output the full alignment, i.e. gaps in the read from the beginning of the contig to the end.",
)
@click.option(
    "--samtools-backend",
    type=click.Choice(SAMTOOLS_BACKENDS, case_sensitive=False),
    default="auto",
    show_default=True,
    help="Read SAM records with pysam (python) or the samtools executable (cli).",
)
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write the log to this file.",
)
@click.option("--progress", is_flag=True, help="Show a progress bar while reading records.")
def cli(
    input_path: Path,
    reference_path: Path,
    output_path: Path,
    full_reference: bool,
    samtools_backend: str,
    log_level: str,
    log_file: Optional[Path],
    progress: bool,
):
    """Convert a SAM file to a FASTA alignment file, given a reference.

    Each aligned read is written as a gapped pair of FASTA entries: the
    reference span it covers, then the read itself.
    """
    setup_logging(level=log_level, log_file=log_file, reconfigure=True)

    cfg = ConversionConfig.from_paths(
        input_path,
        reference_path,
        output_path,
        full_reference=full_reference,
        samtools_backend=samtools_backend.lower(),
        log_level=log_level,
        log_file=log_file,
        show_progress=progress,
    )

    try:
        sam_to_fasta(cfg)
    except (SamToFastaError, RuntimeError) as e:
        raise click.ClickException(str(e)) from e
