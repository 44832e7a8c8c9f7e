"""Renderer backend that runs ``overlaystudio render`` as a child process.

The child gets the snapshot path as its only argument. Its stdout is scanned
for the result line; stderr is kept only to explain failures.
"""

import asyncio
import logging
import sys
from pathlib import Path

from .base import ExportTimeout, RenderProcessFailure
from .protocol import ProtocolError, RenderResponse, parse_result_line

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = [sys.executable, "-m", "overlaystudio", "render"]

# Characters of stderr kept on a failure
_STDERR_TAIL = 2000


class SubprocessRenderer:
    """Renderer implementing ``RendererProtocol`` with an external process.

    Args:
        command: Command prefix; the snapshot path is appended. Defaults to
            running this package's ``render`` command with the current
            interpreter.
    """

    def __init__(self, command: list[str] | None = None) -> None:
        self.command = list(command) if command else list(DEFAULT_COMMAND)

    async def render(self, snapshot_path: Path, timeout: float | None = None) -> RenderResponse:
        """Run the renderer on ``snapshot_path`` and wait for it.

        Args:
            snapshot_path: Snapshot written by ``SnapshotStore``.
            timeout: Seconds to wait before killing the child; None waits
                indefinitely.

        Returns:
            The renderer's parsed result.

        Raises:
            ExportTimeout: If the timeout expired; the child has been killed.
            RenderProcessFailure: On non-zero exit, a missing or malformed
                result line, or a missing output file.
        """
        argv = [*self.command, str(snapshot_path)]
        logger.info("Starting renderer: %s", " ".join(argv))

        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
        except TimeoutError:
            await self._kill(process)
            raise ExportTimeout(f"Renderer did not finish within {timeout}s") from None

        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace")[-_STDERR_TAIL:]

        if process.returncode != 0:
            raise RenderProcessFailure(
                f"Renderer exited with status {process.returncode}",
                returncode=process.returncode,
                stderr=err,
            )

        try:
            response = parse_result_line(out)
        except ProtocolError as exc:
            raise RenderProcessFailure(str(exc), returncode=0, stderr=err) from exc

        if not Path(response.output_path).exists():
            raise RenderProcessFailure(
                f"Renderer reported {response.output_path} but it does not exist",
                returncode=0,
                stderr=err,
            )

        logger.info(
            "Renderer finished: %s (%d frames)",
            response.output_path,
            response.duration_in_frames,
        )
        return response

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
