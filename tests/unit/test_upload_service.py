"""Unit tests for AssetStore."""

from io import BytesIO

import pytest
from fastapi import UploadFile

from src.exceptions import BadRequestError
from src.services.upload_service import AssetStore


@pytest.fixture
def store(tmp_path):
    return AssetStore(tmp_path / "assets")


class TestSave:
    async def test_writes_file_under_original_name(self, store):
        upload = UploadFile(file=BytesIO(b"\x89PNG-data"), filename="avatar.png")

        filename = await store.save(upload)

        assert filename == "avatar.png"
        assert (store.directory / "avatar.png").read_bytes() == b"\x89PNG-data"

    async def test_strips_client_directories(self, store, tmp_path):
        upload = UploadFile(file=BytesIO(b"data"), filename="../../etc/evil.png")

        filename = await store.save(upload)

        assert filename == "evil.png"
        assert (store.directory / "evil.png").exists()
        assert not (tmp_path / "evil.png").exists()

    async def test_same_name_overwrites(self, store):
        await store.save(UploadFile(file=BytesIO(b"one"), filename="a.png"))
        await store.save(UploadFile(file=BytesIO(b"two"), filename="a.png"))
        assert (store.directory / "a.png").read_bytes() == b"two"

    async def test_missing_filename_rejected(self, store):
        with pytest.raises(BadRequestError):
            await store.save(UploadFile(file=BytesIO(b"data"), filename=""))
