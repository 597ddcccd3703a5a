"""Services module - Diff pipeline and configuration"""

from .tokenizer import DOUBLE_SPACE, LINE_BREAK, detokenize, tokenize
from .edit_script import Chunk, Delta, DeltaKind, DiffError, DiffFailed, diff
from .change_merger import ChangeMerger, ContractViolation, MergeMode, merge
from .diff_generator import DiffGenerator, change_count, has_changes, render_diff
from .config_manager import ConfigManager

__all__ = [
    # Tokenizer
    "DOUBLE_SPACE",
    "LINE_BREAK",
    "tokenize",
    "detokenize",
    # Edit script
    "Chunk",
    "Delta",
    "DeltaKind",
    "DiffError",
    "DiffFailed",
    "diff",
    # Change merger
    "ChangeMerger",
    "ContractViolation",
    "MergeMode",
    "merge",
    # Facade
    "DiffGenerator",
    "render_diff",
    "has_changes",
    "change_count",
    "ConfigManager",
]
