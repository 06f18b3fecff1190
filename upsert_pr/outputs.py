"""Step outputs and failure reporting for the Actions runner."""

import sys
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Dict, TextIO

if TYPE_CHECKING:
    from upsert_pr.upsert import UpsertResult


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionOutputs:
    """Writes step outputs to the GITHUB_OUTPUT file and workflow commands to stdout.

    Without an outputs file (older runners, local runs) outputs are printed
    as ``::set-output`` commands.
    """

    def __init__(self, output_file: Path | None = None, stream: TextIO | None = None) -> None:
        self._output_file = output_file
        self._stream = stream or sys.stdout
        self.values: Dict[str, str] = {}

    def set_output(self, name: str, value: str) -> None:
        self.values[name] = value
        if self._output_file is None:
            print(f"::set-output name={name}::{escape_data(value)}", file=self._stream)
            return
        with self._output_file.open("a", encoding="utf-8") as f:
            if "\n" in value:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")

    def set_failed(self, message: str) -> None:
        """Report a fatal error as an ``::error::`` annotation."""
        print(f"::error::{escape_data(message)}", file=self._stream)

    def emit_result(self, result: "UpsertResult") -> None:
        self.set_output("pr_created", "true" if result.created else "false")
        self.set_output("pr_url", result.pr.html_url or "")
        self.set_output("pr_number", str(result.pr.number))
