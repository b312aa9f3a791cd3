"""
Shell collaborator — ``run(argv, cwd, stdio)`` for npm, docker, cdk and friends.

Commands are argv lists run without a shell. Output is either inherited
by the terminal (the default for build tools) or captured into the
receipt.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

from buildloom.adapters.base import Adapter, ExecutionContext
from buildloom.core.config.env_files import merge_env_files, missing_variables
from buildloom.core.models.action import Receipt

logger = logging.getLogger(__name__)

STDIO_MODES = ("inherit", "capture")


class ShellCommandAdapter(Adapter):
    """Run a command and report its exit status.

    Action params:
        argv (list[str]): Command and arguments.
        cwd (str): Working directory (default: context.working_dir).
        stdio (str): ``inherit`` (default) or ``capture``.
        env_files (list[str]): Env files merged into the environment,
            highest precedence first. Defined variables are never overridden.
        required_env (list[str]): Variables that must be defined (after env
            files are merged) for the command to run.
        timeout (int | None): Timeout in seconds (default: none).
    """

    name = "shell"
    operations = ("run",)

    def _environment(self, context: ExecutionContext) -> dict[str, str]:
        return merge_env_files(context.params.get("env_files") or [], os.environ)

    def describe(self, context: ExecutionContext) -> str:
        return "run " + " ".join(context.params.get("argv") or [])

    def validate(self, context: ExecutionContext) -> str | None:
        argv = context.params.get("argv")
        if not isinstance(argv, list) or not argv or not all(isinstance(a, str) for a in argv):
            return "Missing required param: 'argv' (non-empty list of strings)"

        stdio = context.params.get("stdio", "inherit")
        if stdio not in STDIO_MODES:
            return f"Unknown stdio mode '{stdio}'. Valid: {', '.join(STDIO_MODES)}"

        cwd = context.working_dir
        if cwd and not Path(cwd).is_dir():
            return f"Working directory does not exist: {cwd}"

        required = context.params.get("required_env") or []
        if required:
            missing = missing_variables(required, self._environment(context))
            if missing:
                return f"Missing required environment variables: [{','.join(missing)}]"

        return None

    def execute(self, context: ExecutionContext) -> Receipt:
        argv: list[str] = context.params["argv"]
        timeout = context.params.get("timeout")
        capture = context.params.get("stdio", "inherit") == "capture"
        cwd = context.working_dir
        command = " ".join(argv)

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                env=self._environment(context),
                capture_output=capture,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            return self.failed(context, f"Command not found: {argv[0]}", metadata={"command": command})
        except subprocess.TimeoutExpired:
            return self.failed(
                context,
                f"Command timed out after {timeout}s",
                metadata={"command": command, "timeout": timeout},
            )
        except OSError as e:
            return self.failed(context, f"Command execution error: {e}", metadata={"command": command})

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()
        metadata = {"command": command, "return_code": result.returncode}

        if result.returncode == 0:
            return self.succeeded(
                context, stdout, duration_ms=elapsed_ms, metadata={**metadata, "stderr": stderr}
            )
        return self.failed(
            context,
            stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={**metadata, "stdout": stdout},
        )
