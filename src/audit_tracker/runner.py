"""
Audit runner for executing Lighthouse against a URL.

The ``lighthouse`` command line tool launches and tears down its own
browser; this module only runs it in a subprocess and parses the JSON
report it prints.
"""
from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, Optional

from .errors import AuditEngineError
from .report import validate_report

logger = logging.getLogger(__name__)


class AuditRunner:
    """Produces a report for a URL by invoking the Lighthouse CLI."""

    def __init__(
        self,
        lighthouse_path: str = "lighthouse",
        chrome_flags: str = "--headless",
        form_factor: str = "desktop",
        timeout: Optional[float] = 300.0,
    ):
        self.lighthouse_path = lighthouse_path
        self.chrome_flags = chrome_flags
        self.form_factor = form_factor
        self.timeout = timeout  # Maximum audit time in seconds

    @classmethod
    def from_config(cls, config) -> "AuditRunner":
        return cls(
            lighthouse_path=config.lighthouse_path,
            chrome_flags=config.chrome_flags,
            form_factor=config.form_factor,
            timeout=config.audit_timeout,
        )

    def build_command(self, url: str) -> list[str]:
        """Build the Lighthouse command line for ``url``."""
        command = [
            self.lighthouse_path,
            url,
            "--output=json",
            "--output-path=stdout",
            "--quiet",
        ]
        if self.chrome_flags:
            command.append(f"--chrome-flags={self.chrome_flags}")
        if self.form_factor == "desktop":
            command.append("--preset=desktop")
        elif self.form_factor:
            command.append(f"--form-factor={self.form_factor}")
        return command

    def run(self, url: str) -> dict[str, Any]:
        """Audit ``url`` and return the parsed report."""
        command = self.build_command(url)
        logger.debug(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(
                command, capture_output=True, text=True, timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise AuditEngineError(
                f"Lighthouse executable not found: {self.lighthouse_path}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise AuditEngineError(
                f"Audit of {url} timed out after {self.timeout} seconds"
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise AuditEngineError(
                f"Lighthouse exited with code {result.returncode}: {stderr[-500:]}",
                stderr=stderr,
            )

        try:
            report = json.loads(result.stdout)
            validate_report(report)
        except ValueError as e:
            raise AuditEngineError(f"Lighthouse produced an unusable report: {e}") from e

        return report

    __call__ = run
