"""Data models for log/data file pairing and upload tracking.

Covers:
- Upload items and derived file pairs
- Upload configuration (accepted formats, size and count limits)
- Validation results and the backend upload response contract
- Aggregate upload summaries and session hand-off requests
"""

import mimetypes
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ppz_logalyzer.core.errors import ConfigurationError


class UploadStatus(str, Enum):
    """Lifecycle status of a single upload item."""
    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    ERROR = "error"


class PairStatus(str, Enum):
    """Derived status of a data/log file pair."""
    INCOMPLETE = "incomplete"
    READY = "ready"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    ERROR = "error"


class FileRole(str, Enum):
    """Role a file plays inside a pair."""
    DATA = "data"
    LOG = "log"


class ValidationErrorCode(str, Enum):
    """Reasons a file or batch is rejected."""
    BATCH_TOO_LARGE = "batch_too_large"
    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_FORMAT = "unsupported_format"


DEFAULT_ACCEPT = ".log,.data"
DEFAULT_MAX_FILE_SIZE_MB = 500
DEFAULT_MAX_FILES = 40


def _default_role_extensions() -> dict[FileRole, str]:
    return {FileRole.DATA: ".data", FileRole.LOG: ".log"}


class UploadConfig(BaseModel):
    """Options supplied when constructing an upload orchestrator.

    Raises ConfigurationError for values that would make the limits
    meaningless (non-positive counts or sizes, nothing accepted, or a
    role bound to an extension that is not accepted).
    """
    model_config = ConfigDict(frozen=True)

    accept: str = Field(default=DEFAULT_ACCEPT, description="Comma-separated accepted extensions")
    max_file_size_mb: float = Field(default=DEFAULT_MAX_FILE_SIZE_MB, description="Per-file size ceiling in MB")
    max_files: int = Field(default=DEFAULT_MAX_FILES, description="Ceiling on total managed files")
    role_extensions: dict[FileRole, str] = Field(
        default_factory=_default_role_extensions,
        description="Extension that marks each pair role",
    )

    @model_validator(mode="after")
    def _check_limits(self) -> "UploadConfig":
        if self.max_files <= 0:
            raise ConfigurationError(
                "max_files must be positive", option="max_files", value=self.max_files
            )
        if self.max_file_size_mb <= 0:
            raise ConfigurationError(
                "max_file_size_mb must be positive",
                option="max_file_size_mb",
                value=self.max_file_size_mb,
            )
        if not self.accepted_extensions:
            raise ConfigurationError(
                "accept must list at least one extension", option="accept", value=self.accept
            )
        for role, extension in self.role_extensions.items():
            if _normalize_extension(extension) not in self.accepted_extensions:
                raise ConfigurationError(
                    f"Extension {extension} for role {role.value} is not accepted",
                    option="role_extensions",
                    value=extension,
                )
        return self

    @property
    def accepted_extensions(self) -> tuple[str, ...]:
        """Accepted extensions, lowercased with a leading dot, in declared order."""
        extensions = []
        for raw in self.accept.split(","):
            extension = _normalize_extension(raw)
            if extension and extension not in extensions:
                extensions.append(extension)
        return tuple(extensions)

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)

    def role_for_extension(self, extension: str) -> Optional[FileRole]:
        """Resolve the pair role for an extension, or None if it has no role."""
        normalized = _normalize_extension(extension)
        for role, role_extension in self.role_extensions.items():
            if _normalize_extension(role_extension) == normalized:
                return role
        return None

    @classmethod
    def from_env(cls) -> "UploadConfig":
        """Build a config from PPZ_UPLOAD_* environment variables, falling back to defaults."""
        return cls(
            accept=os.environ.get("PPZ_UPLOAD_ACCEPT", DEFAULT_ACCEPT),
            max_file_size_mb=float(
                os.environ.get("PPZ_UPLOAD_MAX_FILE_SIZE_MB", DEFAULT_MAX_FILE_SIZE_MB)
            ),
            max_files=int(os.environ.get("PPZ_UPLOAD_MAX_FILES", DEFAULT_MAX_FILES)),
        )


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


class FileHandle(BaseModel):
    """Handle to a user-selected file: name, byte size and MIME type."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="File name including extension")
    size: int = Field(..., ge=0, description="File size in bytes")
    content_type: str = Field(default="", description="MIME type")
    path: Optional[str] = Field(None, description="Local path when read from disk")

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileHandle":
        """Create a handle for a file on the local filesystem."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            size=path.stat().st_size,
            content_type=content_type or "application/octet-stream",
            path=str(path),
        )


class FileUploadResponse(BaseModel):
    """Per-file result returned by the backend's POST /api/files/upload."""
    file_id: str = Field(..., description="Backend file identifier")
    original_filename: str = Field(..., description="Name the file was uploaded with")
    file_size: int = Field(..., description="File size in bytes")
    upload_timestamp: datetime = Field(..., description="Time the backend stored the file")
    content_type: str = Field(..., description="MIME type recorded by the backend")
    processing_status: Optional[str] = Field(None, description="Backend processing status")
    file_pair_id: Optional[str] = Field(None, description="Pair the backend grouped the file into")
    base_filename: Optional[str] = Field(None, description="File name without extension")
    file_extension: Optional[str] = Field(None, description="Extension including the dot")


class UploadItem(BaseModel):
    """One user-selected file under lifecycle management.

    Items are immutable snapshots; the orchestrator replaces them with
    ``model_copy(update=...)`` on every state change.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique item identifier")
    file: FileHandle = Field(..., description="The underlying file reference")
    base_name: str = Field(..., description="File name without extension")
    extension: str = Field(..., description="Lowercased extension including the dot")
    role: Optional[FileRole] = Field(None, description="Pair role resolved from the extension")
    progress: float = Field(default=0.0, ge=0.0, le=100.0, description="Upload progress percent")
    status: UploadStatus = Field(default=UploadStatus.PENDING, description="Current status")
    error_message: Optional[str] = Field(None, description="Error details if failed")
    response: Optional[FileUploadResponse] = Field(None, description="Backend result once completed")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def file_name(self) -> str:
        return self.file.name

    @property
    def is_finished(self) -> bool:
        return self.status in (UploadStatus.COMPLETED, UploadStatus.ERROR)


class CreateSessionRequest(BaseModel):
    """Request body for creating an analysis session from an uploaded pair."""
    file_id: Optional[str] = Field(None, description="Backend file the session analyses")
    template_id: Optional[str] = Field(None, description="Optional analysis template")
    session_name: Optional[str] = Field(None, description="Human-readable session name")
    session_config: dict[str, Any] = Field(default_factory=dict, description="Analysis configuration")


class FilePair(BaseModel):
    """Derived grouping of a data-role and log-role item sharing a base name."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Pair identifier derived from the base name")
    base_name: str = Field(..., description="Shared base name")
    data_item: Optional[UploadItem] = Field(None, description="Data-role member")
    log_item: Optional[UploadItem] = Field(None, description="Log-role member")
    status: PairStatus = Field(default=PairStatus.INCOMPLETE, description="Derived status")
    shadowed_item_ids: tuple[str, ...] = Field(
        default=(), description="Same-role items overwritten by a later item"
    )

    @property
    def member_ids(self) -> tuple[str, ...]:
        return tuple(
            item.id for item in (self.data_item, self.log_item) if item is not None
        )

    def to_session_request(self, template_id: Optional[str] = None) -> CreateSessionRequest:
        """Build the session-creation request for a completed pair.

        Raises:
            ValueError: If the pair has not completed or a member has no backend response.
        """
        if self.status != PairStatus.COMPLETED:
            raise ValueError(f"Pair {self.id} is {self.status.value}, not completed")
        data_response = self.data_item.response if self.data_item else None
        log_response = self.log_item.response if self.log_item else None
        if data_response is None or log_response is None:
            raise ValueError(f"Pair {self.id} has no backend file ids")

        return CreateSessionRequest(
            file_id=data_response.file_id,
            template_id=template_id,
            session_name=self.base_name,
            session_config={
                "parameters": {
                    "data_file_id": data_response.file_id,
                    "log_file_id": log_response.file_id,
                    "file_pair_id": self.id,
                },
            },
        )


class ValidationResult(BaseModel):
    """Result of validating a file or an incoming batch."""
    valid: bool = Field(..., description="Whether validation passed")
    error_code: Optional[ValidationErrorCode] = Field(None, description="Rejection reason if invalid")
    error_message: Optional[str] = Field(None, description="Human-readable error if invalid")
    file_name: Optional[str] = Field(None, description="File the result refers to")
    file_size: Optional[int] = Field(None, description="File size in bytes")


class UploadSummary(BaseModel):
    """Aggregate counts over the current items and pairs."""
    total_files: int = Field(default=0, description="Items under management")
    pending: int = Field(default=0, description="Items pending")
    uploading: int = Field(default=0, description="Items uploading")
    completed: int = Field(default=0, description="Items completed")
    error: int = Field(default=0, description="Items failed")
    total_pairs: int = Field(default=0, description="Pairs in the pairing view")
    incomplete_pairs: int = Field(default=0, description="Pairs missing a member")
    ready_pairs: int = Field(default=0, description="Pairs with both members, not yet uploading")
    uploading_pairs: int = Field(default=0, description="Pairs with a member uploading")
    completed_pairs: int = Field(default=0, description="Pairs with both members completed")
    error_pairs: int = Field(default=0, description="Pairs with a failed member")
    overall_progress: float = Field(default=0.0, description="Mean progress over all items")
