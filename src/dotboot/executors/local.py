"""
Dotboot Local Executor

Execute commands on the local machine.
"""

import asyncio
import logging
import os
import shutil
from typing import Mapping, Optional, Sequence

from dotboot.executors.base import CommandExecutor, RunResult, format_command

logger = logging.getLogger(__name__)


class LocalExecutor(CommandExecutor):
    """
    Run commands as child processes of dotboot.

    Quiet mode captures output so failures can be reported; verbose mode
    lets the child write straight to the terminal.
    """

    async def run(
        self,
        argv: Sequence[str],
        *,
        environment: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
        capture: bool = False,
    ) -> RunResult:
        argv = [str(a) for a in argv]
        logger.info("CMD %s", format_command(argv))
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=self._stream(capture),
                stderr=self._stream(capture),
                cwd=cwd,
                env=self.environment(environment),
            )
        except (FileNotFoundError, PermissionError) as e:
            logger.info("CMD %s could not start: %s", argv[0], e)
            return RunResult(rc=127, stdout="", stderr=f"Command not found: {argv[0]}")
        return await self._communicate(process, timeout)

    async def run_shell(
        self,
        command: str,
        *,
        environment: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        capture: bool = False,
    ) -> RunResult:
        logger.info("SHELL %s", command)
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=self._stream(capture),
            stderr=self._stream(capture),
            env=self.environment(environment),
        )
        return await self._communicate(process, timeout)

    def which(self, program: str) -> Optional[str]:
        return shutil.which(program, path=self.search_path)

    def exists(self, path: str) -> bool:
        return os.path.exists(os.path.expanduser(path))

    def _stream(self, capture: bool) -> Optional[int]:
        if self.verbose and not capture:
            return None  # inherit the terminal
        return asyncio.subprocess.PIPE

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        timeout: Optional[float],
    ) -> RunResult:
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return RunResult(
                rc=124,  # Standard timeout exit code
                stdout="",
                stderr="Command timed out",
            )

        stdout = stdout_bytes.decode('utf-8', errors='replace') if stdout_bytes else ""
        stderr = stderr_bytes.decode('utf-8', errors='replace') if stderr_bytes else ""
        if stdout:
            logger.debug("STDOUT %s", stdout.strip())
        if stderr:
            logger.debug("STDERR %s", stderr.strip())

        return RunResult(
            rc=process.returncode if process.returncode is not None else 1,
            stdout=stdout,
            stderr=stderr,
        )
