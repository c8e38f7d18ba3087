from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .constants import SAMTOOLS_BACKENDS
from .errors import ConfigError
from .logging_utils import resolve_log_level


@dataclass(frozen=True)
class ConversionConfig:
    """Settings for one SAM to FASTA conversion run.

    Built once at startup and passed explicitly to the record processor.

    Attributes:
        input_path: SAM file holding reads already aligned to the reference.
        reference_path: FASTA file with one or more reference contigs.
        output_path: Destination FASTA alignment file, created or truncated.
        full_reference: Pad every pair out to the full contig length.
        samtools_backend: One of ``auto``, ``python`` or ``cli``.
        log_level: Logging level name for the package logger.
        log_file: Optional file that receives a copy of the log.
        show_progress: Show a tqdm progress bar while reading records.
    """

    input_path: Path
    reference_path: Path
    output_path: Path
    full_reference: bool = False
    samtools_backend: str = "auto"
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    show_progress: bool = False

    @classmethod
    def from_paths(
        cls,
        input_path: Union[str, Path],
        reference_path: Union[str, Path],
        output_path: Union[str, Path],
        **kwargs: Any,
    ) -> "ConversionConfig":
        log_file = kwargs.pop("log_file", None)
        return cls(
            input_path=Path(input_path),
            reference_path=Path(reference_path),
            output_path=Path(output_path),
            log_file=Path(log_file) if log_file is not None else None,
            **kwargs,
        )

    def validate(self, require_paths: bool = True, raise_on_error: bool = True) -> List[str]:
        """
        Validate the config. If require_paths is True, the input and reference files
        must exist and the output's parent directory must be present.
        Returns a list of error messages (empty if none). Raises ConfigError if
        raise_on_error is True and anything is wrong.
        """
        errors: List[str] = []
        if require_paths:
            if not self.input_path.is_file():
                errors.append(f"input_path does not exist: {self.input_path}")
            if not self.reference_path.is_file():
                errors.append(f"reference_path does not exist: {self.reference_path}")
            out_dir = self.output_path.parent
            if not out_dir.is_dir():
                errors.append(f"output directory does not exist: {out_dir}")

        if (self.samtools_backend or "auto").strip().lower() not in SAMTOOLS_BACKENDS:
            errors.append(
                f"samtools_backend must be one of: {', '.join(SAMTOOLS_BACKENDS)}; "
                f"got {self.samtools_backend}"
            )
        try:
            resolve_log_level(self.log_level)
        except ValueError as e:
            errors.append(str(e))

        if raise_on_error and errors:
            raise ConfigError("ConversionConfig validation failed:\n  " + "\n  ".join(errors))
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {k: (str(v) if isinstance(v, Path) else v) for k, v in asdict(self).items()}
