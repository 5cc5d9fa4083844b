"""Service layer: snapshot loading, scoring, ranking and report rendering."""

from .config import ConfigurationService, ValidationResult
from .displacement import DisplacementDetector, displacement_note
from .errors import (
    AppError,
    ArgumentError,
    ConfigurationError,
    EncodingError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    FileSystemError,
    ParseError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
)
from .parser import parse_record
from .ranking import filter_pairs, history_sort_key, pair_sort_key, rank_games
from .report import ReportRenderer
from .snapshot_loader import SnapshotLoaderService, parse_snapshot_date
from .timeseries import build_history, join_pair

__all__ = [
    "AppError",
    "ArgumentError",
    "ConfigurationError",
    "ConfigurationService",
    "DisplacementDetector",
    "EncodingError",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FileSystemError",
    "ParseError",
    "ReportRenderer",
    "SnapshotLoaderService",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "build_history",
    "displacement_note",
    "filter_pairs",
    "get_error_service",
    "history_sort_key",
    "join_pair",
    "pair_sort_key",
    "parse_record",
    "parse_snapshot_date",
    "rank_games",
]
