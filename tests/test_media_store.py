"""Tests for the local media store."""

import pytest

from tubeline.lib.storage import LocalMediaStore, MediaStore, MediaUploadError


@pytest.fixture
def store(tmp_path):
    return LocalMediaStore(tmp_path / "media", base_url="/media/", max_bytes=1024)


async def test_put_writes_under_content_hash(store):
    stored = await store.put(b"png-bytes", "image/png", "avatar.PNG")

    assert stored.key.endswith(".png")
    assert stored.url == f"/media/{stored.key[:2]}/{stored.key[2:4]}/{stored.key}"
    assert stored.size == 9
    assert (store.base_path / stored.key[:2] / stored.key[2:4] / stored.key).read_bytes() == b"png-bytes"


async def test_same_content_same_key(store):
    first = await store.put(b"same", "image/png", "a.png")
    second = await store.put(b"same", "image/png", "b.png")
    assert first.key == second.key


async def test_extension_from_content_type(store):
    stored = await store.put(b"data", "image/png", "")
    assert stored.key.endswith(".png")


async def test_empty_upload_rejected(store):
    with pytest.raises(MediaUploadError):
        await store.put(b"", "image/png", "a.png")


async def test_oversize_upload_rejected(store):
    with pytest.raises(MediaUploadError):
        await store.put(b"x" * 2048, "image/png", "a.png")


async def test_delete_owned_file(store):
    stored = await store.put(b"bye", "text/plain", "a.txt")
    assert await store.delete(stored.url) is True
    assert not (store.base_path / stored.key[:2] / stored.key[2:4] / stored.key).exists()


async def test_foreign_urls_are_left_alone(store):
    assert store.owns("https://cdn.example.com/a.png") is False
    assert await store.delete("https://cdn.example.com/a.png") is False
    assert store.owns("") is False


def test_satisfies_protocol(store):
    assert isinstance(store, MediaStore)
