"""Flat-file storage for collected responses and benchmark results.

Each record is written twice: once as its own pretty-printed JSON file
and once as a line appended to a JSONL aggregate. Every JSONL line is a
complete document, so a run that stops half way still leaves a loadable
aggregate; a torn final line is skipped with a warning.
"""

import json
import threading
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import TypeVar

import structlog
from pydantic import ValidationError

from chainbench.data_model.base import CamelModel
from chainbench.data_model.timestamps import safe_timestamp
from chainbench.store.models import BenchmarkResult, RawResponse


logger = structlog.get_logger()

RESULTS_FILE = "results.jsonl"
RESPONSES_FILE = "responses.jsonl"

RecordT = TypeVar("RecordT", bound=CamelModel)


def run_dir_name(web_search: bool = False, now: datetime | None = None) -> str:
    """Build a run directory name like ``run-2026-01-31T12-00-00-standard``.

    Args:
        web_search: Whether the run used provider web search.
        now: Timestamp to embed (defaults to now).

    Returns:
        Directory name.
    """
    stamp = safe_timestamp(now)
    suffix = "web-search" if web_search else "standard"
    return f"run-{stamp}-{suffix}"


def create_run_dir(
    base_dir: Path, web_search: bool = False, now: datetime | None = None
) -> Path:
    """Create a timestamped run directory under ``base_dir``.

    Args:
        base_dir: Parent directory.
        web_search: Whether the run used provider web search.
        now: Timestamp to embed (defaults to now).

    Returns:
        Path of the created directory.
    """
    run_dir = base_dir / run_dir_name(web_search, now)
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def record_filename(record: RawResponse) -> str:
    """Return ``<runId>_<promptId>_<modelId>.json`` for a record."""
    return f"{record.run_id}_{record.prompt_id}_{record.model.id}.json"


class ResultStore:
    """Appends responses and results to a run directory.

    Safe to share between runner threads: writes are serialized.
    """

    def __init__(self, output_dir: Path) -> None:
        """Initialize the store.

        Args:
            output_dir: Run directory receiving the records.
        """
        self._output_dir = output_dir
        self._lock = threading.Lock()
        self._log = logger.bind(component="store", output_dir=str(output_dir))

    @property
    def output_dir(self) -> Path:
        """Get the run directory."""
        return self._output_dir

    def save_result(self, result: BenchmarkResult) -> Path:
        """Persist a classified result.

        Args:
            result: Result to write.

        Returns:
            Path of the individual JSON file.
        """
        return self._save(result, RESULTS_FILE)

    def save_response(self, response: RawResponse) -> Path:
        """Persist a collected, unclassified response.

        Args:
            response: Response to write.

        Returns:
            Path of the individual JSON file.
        """
        return self._save(response, RESPONSES_FILE)

    def _save(self, record: RawResponse, aggregate_name: str) -> Path:
        payload = record.to_json_dict()
        path = self._output_dir / record_filename(record)

        with self._lock:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), "utf-8")
            with (self._output_dir / aggregate_name).open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + "\n")

        self._log.debug(
            "record_saved",
            path=path.name,
            prompt_id=record.prompt_id,
            model_id=record.model.id,
        )
        return path


def _read_jsonl(path: Path, model: type[RecordT]) -> list[RecordT]:
    """Parse a JSONL file, skipping blank and unparseable lines.

    Lines are decoded one at a time so a write torn inside a multi-byte
    character only loses that line.
    """
    records: list[RecordT] = []
    lines = path.read_bytes().splitlines()
    for line_number, raw_line in enumerate(lines, start=1):
        if not raw_line.strip():
            continue
        try:
            records.append(model.model_validate_json(raw_line.decode("utf-8")))
        except UnicodeDecodeError:
            _log_skipped_line(path, line_number, len(lines), error_count=1)
        except ValidationError as e:
            _log_skipped_line(path, line_number, len(lines), e.error_count())
    return records


def _log_skipped_line(
    path: Path, line_number: int, line_count: int, error_count: int
) -> None:
    logger.warning(
        "jsonl_line_skipped",
        component="store",
        path=str(path),
        line_number=line_number,
        is_last_line=line_number == line_count,
        error_count=error_count,
    )


def _read_json_files(directory: Path) -> list[tuple[Path, dict[str, object]]]:
    """Read every individual ``*.json`` record in a directory."""
    documents: list[tuple[Path, dict[str, object]]] = []
    for path in sorted(directory.glob("*.json")):
        if path.name.startswith("."):
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("json_file_skipped", component="store", path=str(path))
            continue
        if isinstance(data, dict):
            documents.append((path, data))
    return documents


def _has_content(document: dict[str, object]) -> bool:
    response = document.get("response")
    return isinstance(response, dict) and bool(response.get("content"))


def _validate_documents(
    documents: Iterable[tuple[Path, dict[str, object]]], model: type[RecordT]
) -> list[RecordT]:
    records: list[RecordT] = []
    for path, document in documents:
        try:
            records.append(model.model_validate(document))
        except ValidationError:
            logger.warning("json_file_skipped", component="store", path=str(path))
    return records


def _existing_dirs(dirs: Iterable[Path]) -> list[Path]:
    found: list[Path] = []
    for directory in dirs:
        resolved = directory.resolve()
        if resolved.is_dir():
            found.append(resolved)
        else:
            logger.warning("directory_not_found", component="store", path=str(resolved))
    return found


def load_results(dirs: Iterable[Path]) -> list[BenchmarkResult]:
    """Load benchmark results from run directories.

    Reads ``results.jsonl`` when present, otherwise every individual JSON
    file that carries an analysis.

    Args:
        dirs: Run directories.

    Returns:
        Results in file order.
    """
    results: list[BenchmarkResult] = []
    for directory in _existing_dirs(dirs):
        jsonl_path = directory / RESULTS_FILE
        if jsonl_path.exists():
            results.extend(_read_jsonl(jsonl_path, BenchmarkResult))
            continue
        documents = [
            (path, doc) for path, doc in _read_json_files(directory) if "analysis" in doc
        ]
        results.extend(_validate_documents(documents, BenchmarkResult))
    return results


def load_responses(dirs: Iterable[Path]) -> list[RawResponse]:
    """Load unclassified responses from collection directories.

    Args:
        dirs: Collection directories.

    Returns:
        Responses in file order.
    """
    responses: list[RawResponse] = []
    for directory in _existing_dirs(dirs):
        jsonl_path = directory / RESPONSES_FILE
        if jsonl_path.exists():
            responses.extend(_read_jsonl(jsonl_path, RawResponse))
            continue
        documents = [
            (path, doc)
            for path, doc in _read_json_files(directory)
            if _has_content(doc) and "analysis" not in doc
        ]
        responses.extend(_validate_documents(documents, RawResponse))
    return responses


def load_responses_or_results(dirs: Iterable[Path]) -> list[RawResponse]:
    """Load responses for (re)classification from either kind of directory.

    Tries ``responses.jsonl``, then ``results.jsonl`` (dropping analyses),
    then individual JSON files.

    Args:
        dirs: Collection or result directories.

    Returns:
        Responses ready to classify.
    """
    responses: list[RawResponse] = []
    for directory in _existing_dirs(dirs):
        for aggregate_name in (RESPONSES_FILE, RESULTS_FILE):
            jsonl_path = directory / aggregate_name
            if jsonl_path.exists():
                # RawResponse ignores the analysis key of result lines
                responses.extend(_read_jsonl(jsonl_path, RawResponse))
                break
        else:
            documents = [
                (path, doc)
                for path, doc in _read_json_files(directory)
                if _has_content(doc)
            ]
            responses.extend(_validate_documents(documents, RawResponse))
    return responses
