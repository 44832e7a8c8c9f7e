"""Per-export composition snapshots on disk."""

import logging
import shutil
from pathlib import Path

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .protocol import SCHEMA_VERSION, ProtocolError, RenderRequest

logger = logging.getLogger(__name__)


def load_request(path: Path | str) -> RenderRequest:
    """Read a snapshot written by ``SnapshotStore.write``.

    Raises:
        FileNotFoundError: If the snapshot does not exist.
        ProtocolError: If it was written with another schema version.
        pydantic.ValidationError: If its contents are invalid.
    """
    request = RenderRequest.model_validate_json(Path(path).read_text(encoding="utf-8"))
    if request.schema_version != SCHEMA_VERSION:
        raise ProtocolError(
            f"Snapshot schema version {request.schema_version} is not supported "
            f"(expected {SCHEMA_VERSION})"
        )
    return request


class SnapshotStore:
    """Manages render snapshots in a work directory.

    Each export writes its own file named after its token, so concurrent
    exports never share state.
    """

    def __init__(self, work_dir: Path | str = "build/exports") -> None:
        self.work_dir = Path(work_dir)
        self.work_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, export_token: str) -> Path:
        return self.work_dir / f"render-{export_token}.json"

    def exists(self, export_token: str) -> bool:
        return self.path_for(export_token).exists()

    def write(self, request: RenderRequest) -> Path:
        """Persist ``request`` and return the snapshot path."""
        path = self.path_for(request.export_token)
        path.write_text(request.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Wrote snapshot %s", path)
        return path

    def load(self, export_token: str) -> RenderRequest:
        return load_request(self.path_for(export_token))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(0.2),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def delete(self, path: Path) -> None:
        """Remove a snapshot; retried briefly while the file is still held open."""
        path.unlink(missing_ok=True)

    def clear(self) -> None:
        """Remove all snapshots, recreating the empty work directory."""
        if self.work_dir.exists():
            shutil.rmtree(self.work_dir)
        self.work_dir.mkdir(parents=True, exist_ok=True)
