"""Pairing of data and log upload items by shared base name.

Everything here is a pure function of the items passed in; the
orchestrator recomputes the pairing view after each state change.
"""

from typing import Iterable, Optional

from ppz_logalyzer.upload.models import (
    FilePair,
    FileRole,
    PairStatus,
    UploadItem,
    UploadStatus,
)

PAIR_ID_PREFIX = "pair_"

# Pair statuses handed to the pairs-ready callback
DELIVERABLE_PAIR_STATUSES = frozenset({PairStatus.READY, PairStatus.COMPLETED})


def pair_id_for(base_name: str) -> str:
    return f"{PAIR_ID_PREFIX}{base_name}"


def derive_pair_status(
    data_item: Optional[UploadItem],
    log_item: Optional[UploadItem],
) -> PairStatus:
    """Derive a pair's status from its members.

    Args:
        data_item: Data-role member, if present
        log_item: Log-role member, if present

    Returns:
        INCOMPLETE unless both members are present; otherwise ERROR if
        either failed, COMPLETED if both completed, UPLOADING if either
        is uploading, and READY for anything else (both pending, or a
        pending/completed mix).
    """
    if data_item is None or log_item is None:
        return PairStatus.INCOMPLETE

    statuses = (data_item.status, log_item.status)
    if UploadStatus.ERROR in statuses:
        return PairStatus.ERROR
    if all(status == UploadStatus.COMPLETED for status in statuses):
        return PairStatus.COMPLETED
    if UploadStatus.UPLOADING in statuses:
        return PairStatus.UPLOADING
    return PairStatus.READY


def build_file_pairs(items: Iterable[UploadItem]) -> list[FilePair]:
    """Group items into pairs by base name.

    Items whose extension has no role still create their base name's
    group but fill neither slot. When two items in a group share a role,
    the later one takes the slot and the earlier id is recorded in
    ``shadowed_item_ids``.

    Args:
        items: Current upload items, in insertion order

    Returns:
        Pairs sorted by base name
    """
    groups: dict[str, dict] = {}

    for item in items:
        group = groups.setdefault(
            item.base_name,
            {FileRole.DATA: None, FileRole.LOG: None, "shadowed": []},
        )
        if item.role is None:
            continue
        previous = group[item.role]
        if previous is not None:
            group["shadowed"].append(previous.id)
        group[item.role] = item

    pairs = []
    for base_name in sorted(groups):
        group = groups[base_name]
        data_item = group[FileRole.DATA]
        log_item = group[FileRole.LOG]
        pairs.append(
            FilePair(
                id=pair_id_for(base_name),
                base_name=base_name,
                data_item=data_item,
                log_item=log_item,
                status=derive_pair_status(data_item, log_item),
                shadowed_item_ids=tuple(group["shadowed"]),
            )
        )
    return pairs


def filter_ready_pairs(pairs: Iterable[FilePair]) -> list[FilePair]:
    """Keep the pairs that are ready or completed."""
    return [pair for pair in pairs if pair.status in DELIVERABLE_PAIR_STATUSES]
