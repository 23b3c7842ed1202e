"""Tests for pairing data and log items by base name."""

import pytest

from ppz_logalyzer.upload.models import (
    FileHandle,
    FileRole,
    PairStatus,
    UploadItem,
    UploadStatus,
)
from ppz_logalyzer.upload.pairing import (
    build_file_pairs,
    derive_pair_status,
    filter_ready_pairs,
    pair_id_for,
)

ROLE_BY_EXTENSION = {".data": FileRole.DATA, ".log": FileRole.LOG}


def make_item(item_id: str, name: str, status: UploadStatus = UploadStatus.PENDING) -> UploadItem:
    base_name, extension = name.rsplit(".", 1)
    extension = "." + extension
    return UploadItem(
        id=item_id,
        file=FileHandle(name=name, size=1024),
        base_name=base_name,
        extension=extension,
        role=ROLE_BY_EXTENSION.get(extension),
        progress=100.0 if status == UploadStatus.COMPLETED else 0.0,
        status=status,
    )


class TestDerivePairStatus:
    """Tests for derive_pair_status."""

    @pytest.mark.parametrize(
        "data_status,log_status,expected",
        [
            (UploadStatus.PENDING, UploadStatus.PENDING, PairStatus.READY),
            (UploadStatus.PENDING, UploadStatus.COMPLETED, PairStatus.READY),
            (UploadStatus.UPLOADING, UploadStatus.PENDING, PairStatus.UPLOADING),
            (UploadStatus.UPLOADING, UploadStatus.COMPLETED, PairStatus.UPLOADING),
            (UploadStatus.COMPLETED, UploadStatus.UPLOADING, PairStatus.UPLOADING),
            (UploadStatus.COMPLETED, UploadStatus.COMPLETED, PairStatus.COMPLETED),
            (UploadStatus.ERROR, UploadStatus.COMPLETED, PairStatus.ERROR),
            (UploadStatus.UPLOADING, UploadStatus.ERROR, PairStatus.ERROR),
        ],
    )
    def test_status_from_both_members(self, data_status, log_status, expected):
        data = make_item("d", "f.data", data_status)
        log = make_item("l", "f.log", log_status)

        assert derive_pair_status(data, log) == expected

    def test_missing_member_is_incomplete(self):
        """Test that a lone member is incomplete, even when it failed."""
        failed = make_item("d", "f.data", UploadStatus.ERROR)

        assert derive_pair_status(failed, None) == PairStatus.INCOMPLETE
        assert derive_pair_status(None, make_item("l", "f.log")) == PairStatus.INCOMPLETE
        assert derive_pair_status(None, None) == PairStatus.INCOMPLETE


class TestBuildFilePairs:
    """Tests for build_file_pairs."""

    def test_empty(self):
        assert build_file_pairs([]) == []

    def test_matching_base_names_pair_up(self):
        data = make_item("d1", "flight001.data")
        log = make_item("l1", "flight001.log")

        pairs = build_file_pairs([data, log])

        assert len(pairs) == 1
        pair = pairs[0]
        assert pair.id == "pair_flight001"
        assert pair.base_name == "flight001"
        assert pair.data_item == data
        assert pair.log_item == log
        assert pair.status == PairStatus.READY

    def test_lone_log_is_incomplete(self):
        pairs = build_file_pairs([make_item("l1", "a.log")])

        assert len(pairs) == 1
        assert pairs[0].status == PairStatus.INCOMPLETE
        assert pairs[0].data_item is None
        assert filter_ready_pairs(pairs) == []

    def test_pairs_sorted_by_base_name(self):
        items = [
            make_item("1", "zulu.log"),
            make_item("2", "alpha.data"),
            make_item("3", "mike.log"),
            make_item("4", "alpha.log"),
        ]

        pairs = build_file_pairs(items)

        assert [pair.base_name for pair in pairs] == ["alpha", "mike", "zulu"]
        assert [pair.status for pair in pairs] == [
            PairStatus.READY,
            PairStatus.INCOMPLETE,
            PairStatus.INCOMPLETE,
        ]

    def test_base_name_match_is_case_sensitive(self):
        pairs = build_file_pairs([make_item("1", "Flight.data"), make_item("2", "flight.log")])

        assert len(pairs) == 2

    def test_item_without_role_creates_empty_group(self):
        """Test that an accepted extension without a role fills no slot."""
        notes = UploadItem(
            id="t1",
            file=FileHandle(name="flight001.txt", size=10),
            base_name="flight001",
            extension=".txt",
            role=None,
        )

        pairs = build_file_pairs([notes])

        assert len(pairs) == 1
        assert pairs[0].member_ids == ()
        assert pairs[0].status == PairStatus.INCOMPLETE

    def test_later_same_role_item_shadows_earlier(self):
        first = make_item("d1", "flight001.data")
        second = make_item("d2", "flight001.data")
        log = make_item("l1", "flight001.log")

        pair = build_file_pairs([first, log, second])[0]

        assert pair.data_item.id == "d2"
        assert pair.shadowed_item_ids == ("d1",)
        assert pair.member_ids == ("d2", "l1")

    def test_does_not_mutate_input(self):
        items = [make_item("d1", "x.data"), make_item("l1", "x.log")]
        snapshot = list(items)

        build_file_pairs(items)

        assert items == snapshot


class TestFilterReadyPairs:
    """Tests for filter_ready_pairs."""

    def test_keeps_ready_and_completed(self):
        items = [
            make_item("1", "ready.data"),
            make_item("2", "ready.log"),
            make_item("3", "done.data", UploadStatus.COMPLETED),
            make_item("4", "done.log", UploadStatus.COMPLETED),
            make_item("5", "busy.data", UploadStatus.UPLOADING),
            make_item("6", "busy.log"),
            make_item("7", "broken.data", UploadStatus.ERROR),
            make_item("8", "broken.log", UploadStatus.COMPLETED),
            make_item("9", "lonely.log"),
        ]

        ready = filter_ready_pairs(build_file_pairs(items))

        assert [pair.id for pair in ready] == ["pair_done", "pair_ready"]


def test_pair_id_for():
    assert pair_id_for("flight001") == "pair_flight001"
