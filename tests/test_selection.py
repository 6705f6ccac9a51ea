"""Tests for wallsync.uploaders.selection.FileSelection."""

from __future__ import annotations

from wallsync.core.output import NotificationLevel, RecordingNotifier
from wallsync.uploaders.selection import FileSelection
from wallsync.uploaders.validation import ValidationRules

MB = 1024 * 1024


class TestFileSelectionAdd:
    """Tests for admitting selections."""

    def test_adds_paths(self, make_image, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        added = selection.add([make_image("a.jpg"), make_image("b.png", 2048)])

        assert [c.name for c in added] == ["a.jpg", "b.png"]
        assert added[1].mime_type == "image/png"
        assert len(selection) == 2
        assert notifier.messages(NotificationLevel.SUCCESS) == ["Added 2 file(s) for upload"]

    def test_rejected_files_excluded(self, make_image, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(max_size_bytes=1 * MB), notifier)
        added = selection.add(
            [make_image("ok.jpg"), make_image("big.jpg", MB + 1), make_image("doc.txt")]
        )

        assert [c.name for c in added] == ["ok.jpg"]
        errors = notifier.messages(NotificationLevel.ERROR)
        assert 'File "big.jpg" is too large. Maximum size is 1MB' in errors
        assert 'File "doc.txt" is not an accepted file type' in errors

    def test_whole_selection_rejected_over_max(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(max_files=3), notifier)
        added = selection.add([make_candidate(f"{i}.jpg") for i in range(4)])

        assert added == []
        assert len(selection) == 0
        assert notifier.messages() == ["Maximum 3 files allowed"]

    def test_single_mode(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(allow_multiple=False), notifier)
        assert selection.add([make_candidate("a.jpg"), make_candidate("b.jpg")]) == []
        assert notifier.messages() == ["Only one file can be selected"]

    def test_large_selection_notices(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate(f"{i}.jpg") for i in range(25)])

        assert notifier.notifications[0].message == "Processing 25 files..."
        assert notifier.messages(NotificationLevel.SUCCESS) == ["Added 25 file(s) for upload"]

    def test_large_selection_nothing_valid(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate(f"{i}.txt", mime_type="text/plain") for i in range(21)])

        assert notifier.notifications[-1].message == "No valid files found"
        assert len(notifier.messages(NotificationLevel.ERROR)) == 22

    def test_admission_tiers(self, make_candidate):
        notifier = RecordingNotifier()
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate(f"a{i}.jpg") for i in range(60)])
        assert notifier.notifications[-1].level is NotificationLevel.INFO

        selection.add([make_candidate(f"b{i}.jpg") for i in range(30)])
        assert notifier.notifications[-1].level is NotificationLevel.WARNING
        assert len(selection) == 90

    def test_dedup_against_pending(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate("a.jpg", 10)])
        added = selection.add([make_candidate("a.jpg", 10), make_candidate("b.jpg", 10)])

        assert [c.name for c in added] == ["b.jpg"]
        assert "Removed 1 duplicate files" in notifier.messages(NotificationLevel.INFO)

    def test_all_duplicates_admit_nothing(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate("a.jpg", 10)])
        assert selection.add([make_candidate("a.jpg", 10)]) == []
        assert len(selection) == 1

    def test_lookalike_warning(self, make_image, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_image("one.jpg", 64, b"a")])
        selection.add([make_image("copy.jpg", 64, b"a")])

        assert notifier.messages(NotificationLevel.WARNING) == [
            '"copy.jpg" looks identical to "one.jpg"'
        ]
        assert len(selection) == 2

    def test_missing_path(self, temp_dir, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        assert selection.add([temp_dir / "missing.jpg"]) == []
        assert notifier.messages(NotificationLevel.ERROR)[0].endswith("missing.jpg - does not exist")

    def test_directory_rejected(self, temp_dir, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        assert selection.add([temp_dir]) == []
        assert notifier.messages(NotificationLevel.ERROR)[0].endswith("not a file")


class TestFileSelectionLifecycle:
    """Tests for remove, clear and completion history."""

    def test_remove(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate("a.jpg"), make_candidate("b.jpg")])

        assert selection.remove("a.jpg") is True
        assert selection.remove("a.jpg") is False
        assert [c.name for c in selection.candidates] == ["b.jpg"]

    def test_clear(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate("a.jpg")])
        selection.clear()
        assert len(selection) == 0

    def test_completed_file_reselected_is_duplicate(
        self, make_candidate, notifier: RecordingNotifier
    ):
        selection = FileSelection(ValidationRules(), notifier)
        first = make_candidate("a.jpg", 10)
        selection.add([first])
        selection.mark_completed([first])
        assert len(selection) == 0

        assert selection.add([make_candidate("a.jpg", 10)]) == []
        assert notifier.messages()[-1] == "Removed 1 duplicate files"

    def test_cleared_file_can_be_reselected(self, make_candidate, notifier: RecordingNotifier):
        selection = FileSelection(ValidationRules(), notifier)
        selection.add([make_candidate("a.jpg", 10)])
        selection.clear()
        assert len(selection.add([make_candidate("a.jpg", 10)])) == 1
