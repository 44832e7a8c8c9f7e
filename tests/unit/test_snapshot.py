"""Unit tests for the snapshot store."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from overlaystudio.export.protocol import ProtocolError, RenderRequest
from overlaystudio.export.snapshot import SnapshotStore, load_request
from overlaystudio.models.composition import Composition


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "exports")


@pytest.fixture
def request_(composition: Composition, tmp_path: Path) -> RenderRequest:
    return RenderRequest(
        export_token="1700000000000_deadbeef",
        composition=composition,
        source_path=str(tmp_path / "video-1.mp4"),
        output_path=str(tmp_path / "out" / "video_1700000000000_deadbeef.mp4"),
    )


class TestSnapshotStore:
    def test_creates_work_dir(self, store: SnapshotStore) -> None:
        assert store.work_dir.is_dir()

    def test_write_and_load(self, store: SnapshotStore, request_: RenderRequest) -> None:
        path = store.write(request_)
        assert path.name == "render-1700000000000_deadbeef.json"
        assert store.exists(request_.export_token)
        assert store.load(request_.export_token) == request_

    def test_snapshot_is_json(self, store: SnapshotStore, request_: RenderRequest) -> None:
        data = json.loads(store.write(request_).read_text())
        assert data["schema_version"] == 1
        assert data["composition"]["overlays"][0]["text"] == "Hello"

    def test_tokens_do_not_collide(self, store: SnapshotStore, request_: RenderRequest) -> None:
        other = request_.model_copy(update={"export_token": "1700000000000_cafebabe"})
        store.write(request_)
        store.write(other)
        assert len(list(store.work_dir.glob("render-*.json"))) == 2

    def test_delete(self, store: SnapshotStore, request_: RenderRequest) -> None:
        path = store.write(request_)
        store.delete(path)
        assert not path.exists()
        store.delete(path)

    def test_delete_retries_transient_errors(
        self, store: SnapshotStore, request_: RenderRequest
    ) -> None:
        path = store.write(request_)
        with patch.object(Path, "unlink", side_effect=[PermissionError("busy"), None]) as unlink:
            store.delete(path)
        assert unlink.call_count == 2

    def test_delete_gives_up(self, store: SnapshotStore, request_: RenderRequest) -> None:
        path = store.write(request_)
        with (
            patch.object(Path, "unlink", side_effect=PermissionError("busy")) as unlink,
            pytest.raises(PermissionError),
        ):
            store.delete(path)
        assert unlink.call_count == 3

    def test_clear(self, store: SnapshotStore, request_: RenderRequest) -> None:
        store.write(request_)
        store.clear()
        assert store.work_dir.is_dir()
        assert list(store.work_dir.iterdir()) == []


class TestLoadRequest:
    def test_schema_mismatch(self, store: SnapshotStore, request_: RenderRequest) -> None:
        path = store.write(request_.model_copy(update={"schema_version": 2}))
        with pytest.raises(ProtocolError, match="schema version 2"):
            load_request(path)

    def test_invalid_contents(self, tmp_path: Path) -> None:
        path = tmp_path / "render-bad.json"
        path.write_text('{"export_token": "x"}')
        with pytest.raises(ValidationError):
            load_request(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_request(tmp_path / "render-missing.json")
