"""External execution delegates.

A delegate runs a block body for a canonical language in some external
backend (interpreter, compiler, renderer) and reports the output or a path
to a produced file. The dispatcher only talks to the ``ExecutionDelegate``
protocol; ``SubprocessDelegate`` is the built-in backend driving installed
interpreters through ``subprocess``.

Parameters are plain string mappings merged in three layers by
``build_params``: delegate defaults, then language header overrides from the
config, then call-site params.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from bloques.config import TEMP_FILE_PLACEHOLDER
from bloques.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class DelegateResult:
    """What a delegate reports back.

    Attributes:
        success: True when the backend exited cleanly
        output: Captured output or a path to a produced file
        error: Captured error text

    """

    success: bool
    output: str | None = None
    error: str | None = None


class ExecutionDelegate(Protocol):
    """Protocol for code-execution backends."""

    def has_delegate(self, identifier: str) -> bool:
        """Check whether the backend can run this canonical language."""
        ...

    def default_params(self, identifier: str) -> Mapping[str, str]:
        """Backend defaults for this language."""
        ...

    def execute(self, identifier: str, body: str, params: Mapping[str, str]) -> DelegateResult:
        """Run body. Called on a worker thread."""
        ...


def expand_temp_file(value: str) -> str:
    """Replace the temp-file placeholder with a fresh temporary path."""
    if TEMP_FILE_PLACEHOLDER not in value:
        return value
    path = Path(tempfile.gettempdir()) / f"bloques-{uuid.uuid4().hex[:12]}"
    return value.replace(TEMP_FILE_PLACEHOLDER, str(path))


def build_params(
    identifier: str,
    delegate: ExecutionDelegate,
    overrides: Mapping[str, Mapping[str, str]],
    call_params: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Merge delegate defaults <- language overrides <- call-site params."""
    params = dict(delegate.default_params(identifier))
    params.update(overrides.get(identifier, {}))
    params.update(call_params or {})
    return {key: expand_temp_file(value) for key, value in params.items()}


@dataclass(frozen=True, slots=True)
class Interpreter:
    """How to run one language.

    ``command`` items may contain ``{source}`` (the script written to disk)
    and ``{file}`` (the ``file`` parameter, for file-producing tools).
    """

    command: tuple[str, ...]
    suffix: str

    @property
    def executable(self) -> str:
        return self.command[0]

    @property
    def produces_file(self) -> bool:
        return any("{file}" in part for part in self.command)


DEFAULT_INTERPRETERS: Mapping[str, Interpreter] = {
    "python": Interpreter(("python3", "{source}"), ".py"),
    "bash": Interpreter(("bash", "{source}"), ".sh"),
    "sh": Interpreter(("sh", "{source}"), ".sh"),
    "ruby": Interpreter(("ruby", "{source}"), ".rb"),
    "javascript": Interpreter(("node", "{source}"), ".js"),
    "perl": Interpreter(("perl", "{source}"), ".pl"),
    "dot": Interpreter(("dot", "-Tpng", "-o", "{file}", "{source}"), ".dot"),
}


class SubprocessDelegate:
    """Run block bodies through locally installed interpreters.

    The body is written to a temporary script and the interpreter's stdout
    becomes the output. File-producing tools report the ``file`` parameter
    as output when the file exists afterwards. stderr and non-zero exit
    status are reported as the error.
    """

    __slots__ = ("_interpreters", "_timeout")

    def __init__(
        self,
        interpreters: Mapping[str, Interpreter] | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._interpreters = dict(DEFAULT_INTERPRETERS if interpreters is None else interpreters)
        self._timeout = timeout

    def has_delegate(self, identifier: str) -> bool:
        interpreter = self._interpreters.get(identifier)
        return interpreter is not None and shutil.which(interpreter.executable) is not None

    def default_params(self, identifier: str) -> Mapping[str, str]:
        return {"results": "output", "timeout": str(self._timeout)}

    def execute(self, identifier: str, body: str, params: Mapping[str, str]) -> DelegateResult:
        interpreter = self._interpreters.get(identifier)
        if interpreter is None:
            return DelegateResult(False, error=f"No interpreter configured for {identifier}")

        out_file = params.get("file", "")
        if interpreter.produces_file and not out_file:
            return DelegateResult(False, error=f"{identifier} needs a :file parameter")

        timeout = float(params.get("timeout", self._timeout))
        with tempfile.TemporaryDirectory(prefix="bloques-") as tmp:
            script = Path(tmp) / f"block{interpreter.suffix}"
            script.write_text(body)
            argv = [
                part.replace("{source}", str(script)).replace("{file}", out_file)
                for part in interpreter.command
            ]
            logger.debug("Running %s block: %s", identifier, argv)
            try:
                completed = subprocess.run(
                    argv,
                    capture_output=True,
                    text=True,
                    timeout=timeout,
                    cwd=params.get("dir") or None,
                    check=False,
                )
            except subprocess.TimeoutExpired:
                return DelegateResult(False, error=f"Timed out after {timeout:g}s")
            except OSError as exc:
                return DelegateResult(False, error=str(exc))

        success = completed.returncode == 0
        output = completed.stdout
        if out_file and Path(out_file).is_file():
            output = out_file

        error = completed.stderr.strip()
        if not success and not error:
            error = f"exit status {completed.returncode}"
        return DelegateResult(success, output=output or None, error=error or None)
