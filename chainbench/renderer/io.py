"""I/O utilities for the renderer module.

Provides atomic file writing so readers such as the dashboard never see
partially written files.
"""

import hashlib
import json
from pathlib import Path

import structlog

from chainbench.renderer.models import GeneratedFile


logger = structlog.get_logger()


class AtomicWriter:
    """Writes files via a temporary file and a rename."""

    def __init__(self, base_dir: Path, run_id: str | None = None) -> None:
        """Initialize the atomic writer.

        Args:
            base_dir: Base directory for relative path calculation.
            run_id: Optional run ID for logging context.
        """
        self._base_dir = base_dir
        self._log = logger.bind(component="renderer", subcomponent="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def write(self, path: Path, content: str) -> GeneratedFile:
        """Write content to file with atomic semantics.

        Args:
            path: Target file path. Parent directories are created.
            content: Content to write (encoded as UTF-8).

        Returns:
            GeneratedFile with path, checksum, and size information.
        """
        content_bytes = content.encode("utf-8")
        sha256 = hashlib.sha256(content_bytes).hexdigest()

        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_bytes(content_bytes)
        temp_path.replace(path)

        try:
            relative_path = str(path.relative_to(self._base_dir))
        except ValueError:
            relative_path = str(path)

        self._log.debug(
            "file_written",
            path=relative_path,
            bytes=len(content_bytes),
            sha256=sha256[:12],
        )

        return GeneratedFile(
            path=relative_path,
            absolute_path=str(path),
            bytes_written=len(content_bytes),
            sha256=sha256,
        )

    def write_json(self, path: Path, payload: object) -> GeneratedFile:
        """Write a JSON document with two-space indentation."""
        return self.write(path, json.dumps(payload, indent=2, ensure_ascii=False))
