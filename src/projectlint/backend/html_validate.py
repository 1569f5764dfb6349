"""Lint backend that runs the ``html-validate`` CLI out of process.

Each request starts one worker process, pipes the document on stdin and
parses the JSON formatter output::

    [{"filePath": "...", "messages": [{"ruleId": "close-order", "severity": 2,
      "message": "...", "offset": 12, "size": 4, "ruleUrl": "..."}], ...}]
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shlex
import tempfile
from typing import Any

from projectlint.backend.base import LintBackend
from projectlint.models.diagnostics import LintRequest, RawFinding
from projectlint.models.errors import LintBackendError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {"extends": ["html-validate:recommended"]}


def parse_report(output: str) -> list[RawFinding]:
    """Convert a JSON formatter report into backend findings, in report order."""
    if not output.strip():
        return []
    try:
        results = json.loads(output)
    except json.JSONDecodeError as exc:
        raise LintBackendError(f"html-validate returned invalid JSON: {exc}") from exc
    if not isinstance(results, list):
        raise LintBackendError("html-validate report is not a list of results")

    findings: list[RawFinding] = []
    for result in results:
        for message in result.get("messages", []):
            offset = int(message.get("offset", 0))
            size = int(message.get("size", 0))
            findings.append(
                RawFinding(
                    start=offset,
                    end=offset + size,
                    message=message.get("message", ""),
                    rule_id=message.get("ruleId") or "unknown",
                    severity=int(message.get("severity", 0)),
                    rule_url=message.get("ruleUrl"),
                )
            )
    return findings


class HtmlValidateCliBackend(LintBackend):
    """Runs ``html-validate --formatter json --stdin`` for every request."""

    def __init__(self, executable: str = "html-validate", timeout: float = 30.0) -> None:
        self._command = shlex.split(executable)
        self._timeout = timeout

    @staticmethod
    def _write_config(config: dict[str, Any]) -> str:
        fd, path = tempfile.mkstemp(prefix="htmlvalidate-", suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(config, handle)
        return path

    async def lint(self, request: LintRequest) -> list[RawFinding]:
        config = request.config if request.config is not None else DEFAULT_CONFIG
        config_file = self._write_config(config)
        cmd = [
            *self._command,
            "--formatter", "json",
            "--config", config_file,
            "--stdin",
            "--stdin-filename", request.file_path,
        ]
        try:
            try:
                proc = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdin=asyncio.subprocess.PIPE,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except FileNotFoundError as exc:
                raise LintBackendError(f"{self._command[0]} not found in PATH") from exc

            try:
                stdout, stderr = await asyncio.wait_for(
                    proc.communicate(request.text.encode("utf-8")), timeout=self._timeout
                )
            except TimeoutError:
                proc.kill()
                await proc.wait()
                raise LintBackendError(
                    f"html-validate timed out after {self._timeout:g}s on {request.file_path}"
                ) from None
            except asyncio.CancelledError:
                proc.kill()
                await asyncio.shield(proc.wait())
                raise
        finally:
            os.unlink(config_file)

        # Exit status 1 only means "errors were found"; anything else with no
        # report is a worker failure.
        output = stdout.decode("utf-8", errors="replace")
        if proc.returncode not in (0, 1) and not output.strip():
            detail = stderr.decode("utf-8", errors="replace").strip()
            logger.warning("html-validate exited with %s: %s", proc.returncode, detail)
            raise LintBackendError(f"html-validate exited with {proc.returncode}: {detail}")

        findings = parse_report(output)
        logger.debug(
            "html-validate reported %d finding(s) for %s (generation %d)",
            len(findings), request.file_path, request.generation,
        )
        return findings
