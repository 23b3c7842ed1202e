"""Upload module for paired flight-log files.

- File validation (count, size, format)
- Pairing of .data and .log files by base name
- Upload progress tracking through a pluggable transport
- Aggregate upload and pair status
"""

from ppz_logalyzer.upload.models import (
    UploadStatus,
    PairStatus,
    FileRole,
    ValidationErrorCode,
    UploadConfig,
    FileHandle,
    FileUploadResponse,
    UploadItem,
    FilePair,
    CreateSessionRequest,
    ValidationResult,
    UploadSummary,
)
from ppz_logalyzer.upload.validator import (
    FileValidator,
    split_file_name,
    format_file_size,
)
from ppz_logalyzer.upload.pairing import (
    build_file_pairs,
    derive_pair_status,
    filter_ready_pairs,
    pair_id_for,
)
from ppz_logalyzer.upload.transport import UploadTransport, SimulatedTransport
from ppz_logalyzer.upload.status_tracker import build_upload_summary
from ppz_logalyzer.upload.orchestrator import UploadOrchestrator

__all__ = [
    # Models
    "UploadStatus",
    "PairStatus",
    "FileRole",
    "ValidationErrorCode",
    "UploadConfig",
    "FileHandle",
    "FileUploadResponse",
    "UploadItem",
    "FilePair",
    "CreateSessionRequest",
    "ValidationResult",
    "UploadSummary",
    # Validation
    "FileValidator",
    "split_file_name",
    "format_file_size",
    # Pairing
    "build_file_pairs",
    "derive_pair_status",
    "filter_ready_pairs",
    "pair_id_for",
    # Transport and status
    "UploadTransport",
    "SimulatedTransport",
    "build_upload_summary",
    # Orchestration
    "UploadOrchestrator",
]
