"""Unit tests for the flat-file result store."""

import json
from pathlib import Path

from chainbench.store.json_store import (
    RESPONSES_FILE,
    RESULTS_FILE,
    ResultStore,
    create_run_dir,
    load_responses,
    load_responses_or_results,
    load_results,
    record_filename,
    run_dir_name,
)
from tests.helpers.factories import make_raw, make_result
from tests.helpers.time import FIXED_NOW, FIXED_SAFE


class TestRunDirectories:
    """Tests for run directory naming."""

    def test_standard_name(self) -> None:
        """Standard runs end with -standard."""
        assert run_dir_name(now=FIXED_NOW) == f"run-{FIXED_SAFE}-standard"

    def test_web_search_name(self) -> None:
        """Web search runs end with -web-search."""
        assert run_dir_name(True, FIXED_NOW) == f"run-{FIXED_SAFE}-web-search"

    def test_create_run_dir(self, tmp_path: Path) -> None:
        """The directory is created under the base directory."""
        run_dir = create_run_dir(tmp_path / "results", now=FIXED_NOW)

        assert run_dir.is_dir()
        assert run_dir.parent == tmp_path / "results"

    def test_record_filename(self) -> None:
        """Files are named after run, prompt and model."""
        assert record_filename(make_raw()) == "run-1-0_token-launch_claude-opus-4-6.json"


class TestResultStore:
    """Tests for ResultStore writes."""

    def test_save_result_writes_file_and_jsonl(self, tmp_path: Path) -> None:
        """A result lands in its own file and in results.jsonl."""
        store = ResultStore(tmp_path)
        result = make_result()

        path = store.save_result(result)

        assert path.exists()
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["promptId"] == "token-launch"
        assert document["analysis"]["detection"]["network"] == "Base"
        lines = (tmp_path / RESULTS_FILE).read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1

    def test_save_appends(self, tmp_path: Path) -> None:
        """Each save appends a line to the aggregate."""
        store = ResultStore(tmp_path)

        store.save_result(make_result(run_id="run-1-0"))
        store.save_result(make_result(run_id="run-1-1"))

        lines = (tmp_path / RESULTS_FILE).read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2

    def test_save_response_uses_responses_jsonl(self, tmp_path: Path) -> None:
        """Raw responses go to responses.jsonl."""
        ResultStore(tmp_path).save_response(make_raw())

        assert (tmp_path / RESPONSES_FILE).exists()
        assert not (tmp_path / RESULTS_FILE).exists()


class TestLoadResults:
    """Tests for loading stored results."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """Saved results load back equal."""
        store = ResultStore(tmp_path)
        results = [make_result(run_id="run-1-0"), make_result(run_id="run-1-1")]
        for result in results:
            store.save_result(result)

        assert load_results([tmp_path]) == results

    def test_truncated_last_line_skipped(self, tmp_path: Path) -> None:
        """A torn final line is skipped and earlier lines still load."""
        store = ResultStore(tmp_path)
        store.save_result(make_result())
        with (tmp_path / RESULTS_FILE).open("a", encoding="utf-8") as f:
            f.write('{"promptId": "token-la')

        assert len(load_results([tmp_path])) == 1

    def test_last_line_torn_inside_multibyte_character(self, tmp_path: Path) -> None:
        """A final line cut mid-character is skipped like any torn line."""
        store = ResultStore(tmp_path)
        store.save_result(make_result())
        store.save_result(make_result(run_id="run-1-1"))
        torn = '{"promptId": "p1", "response": {"content": "café'.encode()[:-1]
        with (tmp_path / RESULTS_FILE).open("ab") as f:
            f.write(torn)

        assert len(load_results([tmp_path])) == 2

    def test_non_ascii_content_round_trips(self, tmp_path: Path) -> None:
        """Arrows, multiplication signs and line separators stay on one line."""
        analysis = make_result().analysis
        content = "Deploy → Base × 2\u2028done 🚀"
        result = make_raw(content=content).with_analysis(analysis)
        ResultStore(tmp_path).save_result(result)

        assert load_results([tmp_path]) == [result]

    def test_undecodable_individual_file_skipped(self, tmp_path: Path) -> None:
        """A torn individual file does not stop the fallback scan."""
        store = ResultStore(tmp_path)
        store.save_result(make_result())
        (tmp_path / RESULTS_FILE).unlink()
        (tmp_path / "torn.json").write_bytes('{"promptId": "é'.encode()[:-1])

        assert len(load_results([tmp_path])) == 1

    def test_blank_lines_ignored(self, tmp_path: Path) -> None:
        """Blank lines in the aggregate are ignored."""
        result = make_result()
        line = json.dumps(result.to_json_dict())
        (tmp_path / RESULTS_FILE).write_text(f"\n{line}\n\n", encoding="utf-8")

        assert load_results([tmp_path]) == [result]

    def test_falls_back_to_individual_files(self, tmp_path: Path) -> None:
        """Without results.jsonl, analyzed JSON files are read."""
        store = ResultStore(tmp_path)
        store.save_result(make_result())
        (tmp_path / RESULTS_FILE).unlink()
        (tmp_path / "notes.json").write_text("not json", encoding="utf-8")

        results = load_results([tmp_path])

        assert len(results) == 1
        assert results[0].analysis.detection.network == "Base"

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Missing directories are skipped."""
        assert load_results([tmp_path / "missing"]) == []

    def test_multiple_directories(self, tmp_path: Path) -> None:
        """Results from several directories are concatenated in order."""
        first, second = tmp_path / "a", tmp_path / "b"
        ResultStore(first).save_result(make_result(network="Base"))
        ResultStore(second).save_result(make_result(network="Solana"))

        networks = [
            r.analysis.detection.network for r in load_results([first, second])
        ]

        assert networks == ["Base", "Solana"]


class TestLoadResponses:
    """Tests for loading responses for classification."""

    def test_load_responses(self, tmp_path: Path) -> None:
        """Collected responses load from responses.jsonl."""
        raw = make_raw()
        ResultStore(tmp_path).save_response(raw)

        assert load_responses([tmp_path]) == [raw]

    def test_load_responses_skips_results_in_files(self, tmp_path: Path) -> None:
        """File fallback ignores documents that carry an analysis."""
        store = ResultStore(tmp_path)
        store.save_response(make_raw(run_id="run-1-0"))
        store.save_result(make_result(run_id="run-1-1"))
        (tmp_path / RESPONSES_FILE).unlink()

        responses = load_responses([tmp_path])

        assert [r.run_id for r in responses] == ["run-1-0"]

    def test_results_read_as_responses(self, tmp_path: Path) -> None:
        """Result directories can be reclassified."""
        ResultStore(tmp_path).save_result(make_result())

        responses = load_responses_or_results([tmp_path])

        assert len(responses) == 1
        assert type(responses[0]).__name__ == "RawResponse"
        assert responses[0].response.content == "Deploy to Base with Hardhat."

    def test_prefers_responses_jsonl(self, tmp_path: Path) -> None:
        """responses.jsonl wins over results.jsonl in the same directory."""
        store = ResultStore(tmp_path)
        store.save_response(make_raw(run_id="run-raw"))
        store.save_result(make_result(run_id="run-classified"))

        responses = load_responses_or_results([tmp_path])

        assert [r.run_id for r in responses] == ["run-raw"]

    def test_file_fallback_requires_content(self, tmp_path: Path) -> None:
        """Individual files without response content are skipped."""
        ResultStore(tmp_path).save_response(make_raw(content=""))
        (tmp_path / RESPONSES_FILE).unlink()

        assert load_responses_or_results([tmp_path]) == []
