"""LLM client that shells out to the ``claude`` CLI.

The response text is piped via stdin and the classification instruction
is passed with ``-p``, so no shell escaping is involved.
"""

import subprocess

import structlog

from chainbench.features.llm.errors import LlmApiError


logger = structlog.get_logger()

DEFAULT_TIMEOUT_S = 60.0


class ClaudeCliClient:
    """Runs ``claude -p`` in print mode with structured JSON output."""

    def __init__(
        self,
        model: str | None = None,
        json_schema: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        executable: str = "claude",
    ) -> None:
        """Initialize the client.

        Args:
            model: Model passed with ``--model``; the CLI default when None.
            json_schema: JSON schema string for ``--json-schema``.
            timeout: Seconds before the process is killed.
            executable: CLI binary name or path.
        """
        self.model = model
        self._json_schema = json_schema
        self._timeout = timeout
        self._executable = executable
        self._log = logger.bind(component="llm", subcomponent="claude_cli")

    def build_args(self, system_instruction: str) -> list[str]:
        """Build the command line for one call."""
        args = [
            self._executable,
            "-p",
            system_instruction,
            "--output-format",
            "json",
        ]
        if self._json_schema:
            args.extend(["--json-schema", self._json_schema])
        args.append("--no-session-persistence")
        if self.model:
            args.extend(["--model", self.model])
        return args

    def generate_content(
        self,
        prompt: str,
        system_instruction: str | None = None,
    ) -> str:
        """Run the CLI and return its stdout.

        Args:
            prompt: Text piped to the CLI on stdin.
            system_instruction: Instruction passed with ``-p``.

        Returns:
            Raw stdout, a JSON envelope.

        Raises:
            LlmApiError: If the CLI is missing, times out or exits non-zero.
        """
        args = self.build_args(system_instruction or "")
        try:
            completed = subprocess.run(  # noqa: S603
                args,
                input=prompt,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            msg = f"claude CLI not found: {self._executable}"
            raise LlmApiError(msg) from exc
        except subprocess.TimeoutExpired as exc:
            msg = f"claude CLI timed out after {self._timeout:.0f}s"
            raise LlmApiError(msg) from exc

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            self._log.warning(
                "claude_cli_failed",
                returncode=completed.returncode,
                stderr=stderr[:200],
            )
            msg = f"claude CLI failed with exit code {completed.returncode}"
            if stderr:
                msg = f"{msg}\n{stderr}"
            raise LlmApiError(msg, status_code=completed.returncode)

        return completed.stdout
