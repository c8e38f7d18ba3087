from .gapped_alignment import AlignedPair, ineligibility_reason, reconstruct_alignment

__all__ = ["AlignedPair", "ineligibility_reason", "reconstruct_alignment"]
