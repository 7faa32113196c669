"""Async subprocess helpers used by the teardown steps.

Teardown runs inside an event loop owned by the lifecycle entrypoint, so the
aws/helm/kubectl calls it makes must not block that loop.
"""

import asyncio
import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of an external command.

    Mirrors the returncode/stdout/stderr attributes of subprocess.CompletedProcess.
    """

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Best available diagnostic text, stderr first."""
        return (self.stderr or self.stdout).strip()


def kubeconfig_env(kubeconfig_path: Path | str) -> dict[str, str]:
    """Return a copy of the process environment pointing KUBECONFIG at a file.

    Args:
        kubeconfig_path: Kubeconfig file used by helm and kubectl

    Returns:
        Environment mapping for subprocess calls
    """
    env = os.environ.copy()
    env["KUBECONFIG"] = str(kubeconfig_path)
    return env


def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass


async def run_async(
    cmd: list[str],
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    check: bool = False,
) -> CommandResult:
    """Run a command without blocking the event loop.

    Args:
        cmd: Command and arguments as a list
        env: Optional environment variables
        timeout: Optional timeout in seconds; the process is killed on expiry
        check: If True, raise CalledProcessError on non-zero exit

    Returns:
        CommandResult with returncode, stdout, stderr

    Raises:
        asyncio.TimeoutError: If the command times out
        asyncio.CancelledError: If the caller is cancelled; the process is killed first
        FileNotFoundError: If the executable is not installed
        OSError: If the executable cannot be launched
        subprocess.CalledProcessError: If check=True and the command fails

    Example:
        result = await run_async(["helm", "uninstall", "argocd", "-n", "argocd"], timeout=300)
    """
    logger.debug(f"Running async command: {' '.join(cmd)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
    except FileNotFoundError:
        logger.error(f"Command not found: {cmd[0]}")
        raise

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        _kill(process)
        await process.wait()
        logger.error(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        raise
    except asyncio.CancelledError:
        # The child must not outlive a cancelled caller
        _kill(process)
        await process.wait()
        logger.error(f"Command cancelled: {' '.join(cmd)}")
        raise

    result = CommandResult(
        args=cmd,
        returncode=process.returncode or 0,
        stdout=stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else "",
        stderr=stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else "",
    )

    if check and not result.ok:
        raise subprocess.CalledProcessError(
            returncode=result.returncode,
            cmd=cmd,
            output=result.stdout,
            stderr=result.stderr,
        )

    logger.debug(
        f"Command completed: returncode={result.returncode}, "
        f"stdout_len={len(result.stdout)}, stderr_len={len(result.stderr)}"
    )
    return result
