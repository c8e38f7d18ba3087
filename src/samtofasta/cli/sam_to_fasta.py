from __future__ import annotations

from contextlib import closing
from typing import Dict, Iterable, Mapping

from tqdm import tqdm

from samtofasta.config import ConversionConfig
from samtofasta.informatics.fasta_functions import ReferenceStore
from samtofasta.informatics.sam_functions import (
    AlignmentRecord,
    iter_alignment_records,
    resolve_container,
)
from samtofasta.logging_utils import get_logger
from samtofasta.readwrite import AlignedPairWriter, open_output
from samtofasta.tools.gapped_alignment import ineligibility_reason, reconstruct_alignment

logger = get_logger(__name__)


def process_records(
    records: Iterable[AlignmentRecord],
    references: Mapping[str, str],
    writer: AlignedPairWriter,
    full_reference: bool = False,
) -> Dict[str, int]:
    """Reconstruct and write every eligible record, in input order.

    Ineligible records are skipped silently. Any walk or write failure is
    raised immediately and nothing after the failing record is processed.

    Returns:
        dict with ``records`` seen, pairs ``written`` and ``skipped`` records.
    """
    seen = 0
    skipped = 0
    written_before = writer.written
    for record in records:
        seen += 1
        reason = ineligibility_reason(record, references)
        if reason is not None:
            logger.debug("Skipping read %s: %s", record.read_name, reason)
            skipped += 1
            continue
        pair = reconstruct_alignment(record, references, full_reference=full_reference)
        writer.write(pair)
        logger.debug("Wrote read %s (%d alignment columns)", pair.read_name, pair.length)
    return {"records": seen, "written": writer.written - written_before, "skipped": skipped}


def sam_to_fasta(cfg: ConversionConfig) -> Dict[str, int]:
    """
    Convert a SAM file of aligned reads into a FASTA of gapped reference/read pairs.
    Command line accesses this through samtofasta --input <sam> --ref <fasta> --output <fasta>.

    Parameters:
        cfg (ConversionConfig): Settings for the run.

    Returns:
        dict: Summary counts (``records``, ``written``, ``skipped``, ``references``).
    """
    cfg.validate(require_paths=True, raise_on_error=True)

    # Fail on the container variant before touching the reference or output
    resolve_container(cfg.input_path)

    with open_output(cfg.output_path) as handle:
        store = ReferenceStore.from_fasta(cfg.reference_path)

        logger.info("Processing reads from %s...", cfg.input_path)
        writer = AlignedPairWriter(handle)
        records = iter_alignment_records(cfg.input_path, samtools_backend=cfg.samtools_backend)
        # closed on abort as well as on exhaustion
        with closing(records):
            if cfg.show_progress:
                with tqdm(records, desc="Reads", unit="read") as progress:
                    summary = process_records(progress, store, writer, full_reference=cfg.full_reference)
            else:
                summary = process_records(records, store, writer, full_reference=cfg.full_reference)

    summary["references"] = len(store)
    logger.info(
        "Wrote %d alignments to %s (%d records read, %d skipped)",
        summary["written"],
        cfg.output_path,
        summary["records"],
        summary["skipped"],
    )
    return summary
