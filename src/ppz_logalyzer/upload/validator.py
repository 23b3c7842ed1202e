"""File validation for log/data uploads.

Covers:
- Batch count limit (whole-batch rejection)
- Per-file size limit
- Per-file extension allow-list
"""

from typing import Optional

from ppz_logalyzer.upload.models import (
    FileHandle,
    UploadConfig,
    ValidationErrorCode,
    ValidationResult,
)


def split_file_name(file_name: str) -> tuple[str, str]:
    """Split a file name at its last dot into (base name, extension).

    The extension keeps its leading dot and original case. A name without
    a dot has an empty extension.
    """
    index = file_name.rfind(".")
    if index == -1:
        return file_name, ""
    return file_name[:index], file_name[index:]


def format_file_size(size: int) -> str:
    """Render a byte count for display, e.g. ``1.5 MB``."""
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    index = 0
    while size >= 1024 ** (index + 1) and index < len(units) - 1:
        index += 1
    value = round(size / 1024 ** index, 2)
    return f"{value:g} {units[index]}"


def describe_formats(extensions: tuple[str, ...]) -> str:
    """Join extensions for an error message: ``.log and .data``."""
    if len(extensions) <= 1:
        return "".join(extensions)
    return ", ".join(extensions[:-1]) + " and " + extensions[-1]


class FileValidator:
    """Validates selected files against the configured limits.

    Validation never raises; each check returns a ValidationResult
    carrying the rejection reason and a message suitable for display.
    """

    def __init__(self, config: Optional[UploadConfig] = None):
        self.config = config or UploadConfig()

    def validate_batch(self, current_count: int, incoming_count: int) -> ValidationResult:
        """Check that an incoming batch fits under the total file limit.

        Args:
            current_count: Files already under management
            incoming_count: Files in the new selection

        Returns:
            ValidationResult; invalid results reject the whole batch
        """
        max_files = self.config.max_files
        if current_count + incoming_count > max_files:
            return ValidationResult(
                valid=False,
                error_code=ValidationErrorCode.BATCH_TOO_LARGE,
                error_message=(
                    f"Maximum {max_files} files allowed. "
                    f"Current: {current_count}, Adding: {incoming_count}"
                ),
            )
        return ValidationResult(valid=True)

    def validate(self, file: FileHandle) -> ValidationResult:
        """Validate a single file's size and extension.

        Size is checked first, so an oversized file with an unsupported
        extension is reported as too large.

        Args:
            file: Handle of the file to validate

        Returns:
            ValidationResult with validation status and details
        """
        if file.size > self.config.max_file_size_bytes:
            return ValidationResult(
                valid=False,
                error_code=ValidationErrorCode.FILE_TOO_LARGE,
                error_message=(
                    f'File "{file.name}" is too large. '
                    f"Maximum size is {self.config.max_file_size_mb:g}MB."
                ),
                file_name=file.name,
                file_size=file.size,
            )

        extension = split_file_name(file.name)[1].lower()
        accepted = self.config.accepted_extensions
        if extension not in accepted:
            return ValidationResult(
                valid=False,
                error_code=ValidationErrorCode.UNSUPPORTED_FORMAT,
                error_message=(
                    f'File "{file.name}" has an unsupported format. '
                    f"Only {describe_formats(accepted)} files are accepted."
                ),
                file_name=file.name,
                file_size=file.size,
            )

        return ValidationResult(valid=True, file_name=file.name, file_size=file.size)
