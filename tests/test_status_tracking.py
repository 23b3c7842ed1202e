"""Tests for aggregate upload status summaries."""

from ppz_logalyzer.upload.models import (
    FileHandle,
    FileRole,
    UploadItem,
    UploadStatus,
)
from ppz_logalyzer.upload.pairing import build_file_pairs
from ppz_logalyzer.upload.status_tracker import build_upload_summary


def make_item(item_id, name, status, progress):
    base_name, extension = name.rsplit(".", 1)
    return UploadItem(
        id=item_id,
        file=FileHandle(name=name, size=100),
        base_name=base_name,
        extension="." + extension,
        role=FileRole.DATA if extension == "data" else FileRole.LOG,
        progress=progress,
        status=status,
    )


class TestBuildUploadSummary:
    """Tests for build_upload_summary."""

    def test_empty_summary(self):
        summary = build_upload_summary([], [])

        assert summary.total_files == 0
        assert summary.total_pairs == 0
        assert summary.overall_progress == 0.0

    def test_counts_items_and_pairs_by_status(self):
        items = [
            make_item("1", "done.data", UploadStatus.COMPLETED, 100.0),
            make_item("2", "done.log", UploadStatus.COMPLETED, 100.0),
            make_item("3", "busy.data", UploadStatus.UPLOADING, 40.0),
            make_item("4", "busy.log", UploadStatus.PENDING, 0.0),
            make_item("5", "bad.data", UploadStatus.ERROR, 20.0),
            make_item("6", "bad.log", UploadStatus.COMPLETED, 100.0),
            make_item("7", "ready.data", UploadStatus.PENDING, 0.0),
            make_item("8", "ready.log", UploadStatus.PENDING, 0.0),
            make_item("9", "lone.log", UploadStatus.UPLOADING, 60.0),
        ]

        summary = build_upload_summary(items, build_file_pairs(items))

        assert summary.total_files == 9
        assert summary.pending == 3
        assert summary.uploading == 2
        assert summary.completed == 3
        assert summary.error == 1
        assert summary.total_pairs == 5
        assert summary.completed_pairs == 1
        assert summary.uploading_pairs == 1
        assert summary.error_pairs == 1
        assert summary.ready_pairs == 1
        assert summary.incomplete_pairs == 1
        assert summary.overall_progress == round(420.0 / 9, 2)
