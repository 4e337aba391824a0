"""
Tests for DeletionService: preview and the guarded commit of the deletion set.
"""
from unittest import mock

from conftest import write_track
from onetrack.core.models import (
    CounterSnapshot,
    DeletionCandidate,
    DeletionReason,
    RunContext,
    RunReport,
)
from onetrack.services.deletion_service import DeletionService
from onetrack.services.file_service import FileService


def make_report(root, candidates):
    return RunReport(root_dir=str(root), counters=CounterSnapshot(), deletions=list(candidates))


def small(path, size=100):
    return DeletionCandidate(path=str(path), reason=DeletionReason.TOO_SMALL, size=size)


class TestPreview:

    def test_limits_shown_paths(self, tmp_path):
        report = make_report(tmp_path, [small(tmp_path / f"{i}.mp3") for i in range(7)])

        shown, hidden = DeletionService.preview(report, RunContext())

        assert shown == [str(tmp_path / f"{i}.mp3") for i in range(5)]
        assert hidden == 2

    def test_short_list_has_nothing_hidden(self, tmp_path):
        report = make_report(tmp_path, [small(tmp_path / "a.mp3")])
        assert DeletionService.preview(report, RunContext()) == ([str(tmp_path / "a.mp3")], 0)

    def test_shows_paths_after_renaming(self, tmp_path):
        context = RunContext()
        context.tracker.record_file(str(tmp_path / "a b" / "song.mp3"), str(tmp_path / "a b" / "Song.mp3"))
        context.tracker.record_directory(str(tmp_path / "a b"), str(tmp_path / "A B"))
        report = make_report(tmp_path, [small(tmp_path / "a b" / "song.mp3"), small(tmp_path / "x.mp3")])

        shown, hidden = DeletionService.preview(report, context)

        assert shown == [str(tmp_path / "A B" / "Song.mp3"), str(tmp_path / "x.mp3")]
        assert hidden == 0


class TestCommit:

    def test_moves_every_candidate_to_trash(self, tmp_path):
        paths = [write_track(tmp_path / f"{i}.mp3", size=100) for i in range(3)]
        report = make_report(tmp_path, [small(p) for p in paths])

        with mock.patch.object(FileService, "move_to_trash") as mock_trash:
            result = DeletionService.commit(report, RunContext())

        assert [call.args[0] for call in mock_trash.call_args_list] == [str(p) for p in paths]
        assert result.deleted == 3
        assert result.bytes_freed == 300
        assert result.succeeded

    def test_resolves_paths_moved_by_renaming(self, tmp_path):
        context = RunContext()
        old = tmp_path / "song.mp3"
        new = write_track(tmp_path / "Song.mp3", size=100)
        context.tracker.record_file(str(old), str(new))
        report = make_report(tmp_path, [small(old)])

        with mock.patch.object(FileService, "move_to_trash") as mock_trash:
            DeletionService.commit(report, context)

        mock_trash.assert_called_once_with(str(new))

    def test_failure_does_not_stop_the_batch(self, tmp_path):
        paths = [write_track(tmp_path / f"{i}.mp3", size=100) for i in range(3)]
        report = make_report(tmp_path, [small(p) for p in paths])

        def flaky(path):
            if path.endswith("1.mp3"):
                raise RuntimeError("Failed to move to trash: locked")

        with mock.patch.object(FileService, "move_to_trash", side_effect=flaky):
            result = DeletionService.commit(report, RunContext())

        assert result.deleted == 2
        assert result.failed == [(str(paths[1]), "Failed to move to trash: locked")]
        assert not result.succeeded

    def test_duplicate_is_kept_when_survivor_vanished(self, tmp_path):
        dup = write_track(tmp_path / "a.mp3")
        candidate = DeletionCandidate(
            path=str(dup), reason=DeletionReason.DUPLICATE, size=40000,
            survivor=str(tmp_path / "gone" / "a.mp3"),
        )
        report = make_report(tmp_path, [candidate])

        with mock.patch.object(FileService, "move_to_trash") as mock_trash:
            result = DeletionService.commit(report, RunContext())

        mock_trash.assert_not_called()
        assert result.deleted == 0
        assert "survivor no longer exists" in result.failed[0][1]
        assert dup.exists()

    def test_permanent_unlinks_and_prunes(self, tmp_path):
        junk = write_track(tmp_path / "Junk" / "tiny.mp3", size=100)
        report = make_report(tmp_path, [small(junk)])

        result = DeletionService.commit(report, RunContext(), permanent=True)

        assert not junk.exists()
        assert not (tmp_path / "Junk").exists()
        assert result.removed_directories == [str(tmp_path / "Junk")]

    def test_reports_progress(self, tmp_path):
        paths = [write_track(tmp_path / f"{i}.mp3", size=100) for i in range(2)]
        report = make_report(tmp_path, [small(p) for p in paths])
        calls = []

        with mock.patch.object(FileService, "move_to_trash"):
            DeletionService.commit(report, RunContext(), progress_callback=lambda d, t: calls.append((d, t)))

        assert calls == [(1, 2), (2, 2)]
