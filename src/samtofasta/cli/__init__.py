from .sam_to_fasta import process_records, sam_to_fasta

__all__ = ["process_records", "sam_to_fasta"]
