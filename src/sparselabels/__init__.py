from .errors import (
    LabelIndexError,
    DuplicateLabel,
    DuplicateCategory,
    UnknownCategory,
    CategoryMismatch,
    CategoryConflict,
    ShapeMismatch,
    LossyConversion,
    InvalidRecord,
    NOT_FOUND,
)
from .config import LabelsConfig, DEFAULT_CONFIG
from .diagnostics import log_event, print_sink, collecting_sink
from .catalog import Catalog
from .base import CategoricalIndex
from .sparse import SparseLabels
from .dense import DenseLabels
from .codec import construct, to_bitmap, to_dense, to_record, from_record
from .display import counts, describe

__version__ = "0.1.0"

__all__ = [
    "LabelIndexError",
    "DuplicateLabel",
    "DuplicateCategory",
    "UnknownCategory",
    "CategoryMismatch",
    "CategoryConflict",
    "ShapeMismatch",
    "LossyConversion",
    "InvalidRecord",
    "NOT_FOUND",
    "LabelsConfig",
    "DEFAULT_CONFIG",
    "log_event",
    "print_sink",
    "collecting_sink",
    "Catalog",
    "CategoricalIndex",
    "SparseLabels",
    "DenseLabels",
    "construct",
    "to_bitmap",
    "to_dense",
    "to_record",
    "from_record",
    "counts",
    "describe",
]
