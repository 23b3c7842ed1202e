"""Aggregate status over upload items and their pairs.

Feeds the dashboard header ("N completed, N ready, N incomplete") and
overall progress bar.
"""

from typing import Sequence

from ppz_logalyzer.upload.models import (
    FilePair,
    PairStatus,
    UploadItem,
    UploadStatus,
    UploadSummary,
)


def build_upload_summary(
    items: Sequence[UploadItem],
    pairs: Sequence[FilePair],
) -> UploadSummary:
    """Count items and pairs per status.

    Args:
        items: Current upload items
        pairs: Pairing view derived from the same items

    Returns:
        UploadSummary; overall_progress is the mean item progress, 0 when empty
    """
    item_counts = {status: 0 for status in UploadStatus}
    for item in items:
        item_counts[item.status] += 1

    pair_counts = {status: 0 for status in PairStatus}
    for pair in pairs:
        pair_counts[pair.status] += 1

    overall_progress = 0.0
    if items:
        overall_progress = sum(item.progress for item in items) / len(items)

    return UploadSummary(
        total_files=len(items),
        pending=item_counts[UploadStatus.PENDING],
        uploading=item_counts[UploadStatus.UPLOADING],
        completed=item_counts[UploadStatus.COMPLETED],
        error=item_counts[UploadStatus.ERROR],
        total_pairs=len(pairs),
        incomplete_pairs=pair_counts[PairStatus.INCOMPLETE],
        ready_pairs=pair_counts[PairStatus.READY],
        uploading_pairs=pair_counts[PairStatus.UPLOADING],
        completed_pairs=pair_counts[PairStatus.COMPLETED],
        error_pairs=pair_counts[PairStatus.ERROR],
        overall_progress=round(overall_progress, 2),
    )
