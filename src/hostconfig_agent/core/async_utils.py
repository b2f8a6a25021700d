"""
Async helpers for subprocess and file operations.

Every external command and file access in the agent goes through these
helpers so that a hung child process or slow disk never blocks the event
loop, and so tests have a single seam to patch.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional

import aiofiles


@dataclass
class AsyncProcessResult:
    """Result from async subprocess execution, mimics subprocess.CompletedProcess."""

    returncode: int
    stdout: str
    stderr: str


async def run_command_async(
    cmd: List[str],
    timeout: Optional[float] = 30.0,
    input_data: Optional[str] = None,
) -> AsyncProcessResult:
    """
    Run a command without blocking the event loop.

    Args:
        cmd: Command and arguments, executed directly (never through a shell)
        timeout: Timeout in seconds, or None to wait forever
        input_data: Optional string written to the child's stdin

    Returns:
        AsyncProcessResult with returncode, stdout, stderr

    Raises:
        asyncio.TimeoutError: If the command outlives the timeout; the child
            is killed before the error propagates
        OSError: If the child process cannot be spawned
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.PIPE if input_data is not None else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    input_bytes = input_data.encode("utf-8") if input_data is not None else None
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(input=input_bytes), timeout=timeout
        )
    except asyncio.TimeoutError:
        try:
            process.kill()
            await process.wait()
        except ProcessLookupError:
            pass
        raise

    return AsyncProcessResult(
        returncode=process.returncode,
        stdout=stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else "",
        stderr=stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else "",
    )


async def read_file_async(filepath: str, encoding: str = "utf-8") -> str:
    """Read a whole text file."""
    async with aiofiles.open(filepath, mode="r", encoding=encoding) as file_handle:
        return await file_handle.read()


async def write_file_async(filepath: str, content: str, encoding: str = "utf-8") -> None:
    """Write a whole text file, replacing any existing content."""
    async with aiofiles.open(filepath, mode="w", encoding=encoding) as file_handle:
        await file_handle.write(content)
