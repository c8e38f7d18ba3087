"""samtofasta"""

from importlib.metadata import version

from . import cli, informatics, tools
from .config import ConversionConfig
from .errors import SamToFastaError
from .informatics import AlignmentRecord, ReferenceStore
from .tools import AlignedPair, reconstruct_alignment

package_name = "samtofasta"
__version__ = version(package_name)

__all__ = [
    "AlignedPair",
    "AlignmentRecord",
    "ConversionConfig",
    "ReferenceStore",
    "SamToFastaError",
    "cli",
    "informatics",
    "reconstruct_alignment",
    "tools",
]
