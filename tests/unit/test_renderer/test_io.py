"""Tests for atomic report and dashboard writes."""

import hashlib
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from chainbench.renderer.io import AtomicWriter


class TestDashboardLayout:
    """Tests for writes into dashboard subdirectories."""

    def test_nested_run_file(self, tmp_path: Path) -> None:
        """A run file lands in a fresh subdirectory with a relative path."""
        writer = AtomicWriter(tmp_path, run_id="run-1")
        target = tmp_path / "chains" / "runs" / "run-2026-01-01.json"

        generated = writer.write_json(target, {"runId": "run-1"})

        assert target.parent.is_dir()
        assert generated.path == "chains/runs/run-2026-01-01.json"
        assert generated.absolute_path == str(target)

    def test_export_outside_base_dir(self, tmp_path: Path) -> None:
        """A path outside the base directory is reported unchanged."""
        writer = AtomicWriter(tmp_path / "reports")
        target = tmp_path / "dashboard" / "latest.json"

        generated = writer.write(target, "{}")

        assert generated.path == str(target)


class TestReplace:
    """Tests for replacing files readers may hold open."""

    def test_index_rewritten_in_place(self, tmp_path: Path) -> None:
        """Rewriting runs.json swaps content and leaves no temp file."""
        writer = AtomicWriter(tmp_path)
        index = tmp_path / "runs.json"
        writer.write_json(index, [{"runId": "old"}])

        writer.write_json(index, [{"runId": "new"}, {"runId": "old"}])

        assert json.loads(index.read_text(encoding="utf-8"))[0]["runId"] == "new"
        assert not (tmp_path / "runs.json.tmp").exists()

    def test_stale_temp_file_is_reused(self, tmp_path: Path) -> None:
        """A temp file left by an interrupted export does not block the next one."""
        (tmp_path / "latest.json.tmp").write_text("{trunc", encoding="utf-8")
        writer = AtomicWriter(tmp_path)

        writer.write(tmp_path / "latest.json", "{}")

        assert (tmp_path / "latest.json").read_text(encoding="utf-8") == "{}"
        assert not (tmp_path / "latest.json.tmp").exists()

    def test_failed_rename_keeps_previous_file(self, tmp_path: Path) -> None:
        """If the rename fails, readers still see the last complete file."""
        writer = AtomicWriter(tmp_path)
        target = tmp_path / "latest.json"
        writer.write(target, '{"version": 1}')

        with (
            patch.object(Path, "replace", side_effect=OSError("disk full")),
            pytest.raises(OSError, match="disk full"),
        ):
            writer.write(target, '{"version": 2}')

        assert target.read_text(encoding="utf-8") == '{"version": 1}'


class TestWriteJson:
    """Tests for JSON payloads."""

    def test_unicode_kept_and_checksum_matches_bytes(self, tmp_path: Path) -> None:
        """Non-ASCII text is written raw and hashed as written."""
        writer = AtomicWriter(tmp_path)
        target = tmp_path / "data.json"

        generated = writer.write_json(target, {"label": "Base → Arbitrum ×2"})

        raw = target.read_bytes()
        assert "→".encode() in raw
        assert generated.bytes_written == len(raw)
        assert generated.sha256 == hashlib.sha256(raw).hexdigest()

    def test_two_space_indent(self, tmp_path: Path) -> None:
        """Payloads are pretty-printed for diffable dashboards."""
        writer = AtomicWriter(tmp_path)
        target = tmp_path / "data.json"

        writer.write_json(target, {"n": [1]})

        assert target.read_text(encoding="utf-8") == '{\n  "n": [\n    1\n  ]\n}'
