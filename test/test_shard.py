# Copyright (C) 2024 Josua Krause
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests computing shard folders."""
import os
from pathlib import Path
from test.util import FixedIdGenerator, list_files

import pytest

from shardstore.system.base import BlobId
from shardstore.system.config.loader import load_config
from shardstore.system.error import StoreConfigError
from shardstore.system.idgen.uuid import UUIDIdGenerator
from shardstore.system.store.disk import DiskFileStore
from shardstore.system.store.store import shard_path
from shardstore.system.util import (
    check_hash_name,
    get_text_hash,
    text_hash_size,
)


HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"
HELLO_SHA256 = (
    "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824")
EMPTY_MD5 = "d41d8cd98f00b204e9800998ecf8427e"


def test_text_hash() -> None:
    """Test computing hashes of names."""
    assert get_text_hash("hello", "md5") == HELLO_MD5
    assert get_text_hash("", "md5") == EMPTY_MD5
    assert get_text_hash("hello", "sha256") == HELLO_SHA256
    assert text_hash_size("md5") == 32
    assert text_hash_size("sha256") == 64
    assert text_hash_size("blake2b") == 128
    assert len(get_text_hash("hello", "blake2b")) == 128


@pytest.mark.parametrize("levels, expected", [
    (0, []),
    (1, ["5"]),
    (2, ["5", "5d"]),
    (3, ["5", "5d", "5d4"]),
    (32, [HELLO_MD5[:ix] for ix in range(1, 33)]),
])
def test_shard_path(levels: int, expected: list[str]) -> None:
    """
    Test shard folders for different levels.

    Args:
        levels (int): The number of levels.
        expected (list[str]): The expected folders.
    """
    assert shard_path("hello", levels) == expected
    assert shard_path("hello", levels, hash_name="md5") == expected


def test_shard_path_deterministic() -> None:
    """Test that shard folders only depend on the name."""
    gen = UUIDIdGenerator()
    names = [gen.new_id().get_name() for _ in range(100)]
    first = [shard_path(name, 2) for name in names]
    second = [shard_path(name, 2) for name in names]
    assert first == second
    assert shard_path("hello", 2, hash_name="sha256") == ["2", "2c"]
    for name, path in zip(names, first):
        digest = get_text_hash(name, "md5")
        assert path == [digest[:1], digest[:2]]


def test_disk_layout(tmp_path: Path) -> None:
    """
    Test the on-disk location of blobs.

    Args:
        tmp_path (Path): The temporary folder.
    """
    root = str(tmp_path / "blobs")
    store = DiskFileStore(UUIDIdGenerator(), root)
    assert os.path.isdir(root)
    assert store.get_root() == os.path.abspath(root)
    assert store.get_levels() == 2
    assert store.get_path(BlobId("hello")) == os.path.join(
        os.path.abspath(root), "5", "5d", "hello")
    flat = DiskFileStore(UUIDIdGenerator(), root, levels=0)
    assert flat.get_path(BlobId("hello")) == os.path.join(
        os.path.abspath(root), "hello")
    deep = DiskFileStore(UUIDIdGenerator(), root, levels=3)
    assert deep.get_path(BlobId("hello")) == os.path.join(
        os.path.abspath(root), "5", "5d", "5d4", "hello")
    with pytest.raises(ValueError, match="invalid blob name"):
        store.get_path(BlobId("../escape"))


def test_invalid_config(tmp_path: Path) -> None:
    """
    Test that misconfigured stores fail on creation.

    Args:
        tmp_path (Path): The temporary folder.
    """
    root = str(tmp_path / "blobs")
    gen = UUIDIdGenerator()
    with pytest.raises(StoreConfigError, match="not available"):
        check_hash_name("nohash")
    with pytest.raises(StoreConfigError, match="not available"):
        DiskFileStore(gen, root, hash_name="nohash")
    with pytest.raises(StoreConfigError, match="no fixed digest size"):
        DiskFileStore(gen, root, hash_name="shake_128")
    with pytest.raises(StoreConfigError, match="invalid number of levels"):
        DiskFileStore(gen, root, levels=-1)
    with pytest.raises(StoreConfigError, match="invalid number of levels"):
        DiskFileStore(gen, root, levels=33)
    with pytest.raises(StoreConfigError, match="invalid chunk size"):
        DiskFileStore(gen, root, chunk_size=0)
    assert not os.path.exists(root)
    DiskFileStore(gen, root, levels=32)
    assert os.path.isdir(root)


def test_upper_hex(tmp_path: Path) -> None:
    """
    Test stores that use upper case shard folder names.

    Args:
        tmp_path (Path): The temporary folder.
    """
    assert shard_path("hello", 3, upper_hex=True) == ["5", "5D", "5D4"]
    assert shard_path("hello", 0, upper_hex=True) == []
    root = str(tmp_path / "blobs")
    store = DiskFileStore(
        FixedIdGenerator(["hello"]), root, levels=2, upper_hex=True)
    assert store.get_path(BlobId("hello")) == os.path.join(
        os.path.abspath(root), "5", "5D", "hello")
    blob_id = store.write_bytes(b"upper")
    assert list_files(root) == ["5/5D/hello"]
    assert store.read_bytes(blob_id) == b"upper"
    config = load_config({
        "store": {
            "name": "disk",
            "root": root,
            "upper_hex": True,
        },
    })
    assert config.get_store().read_bytes(blob_id) == b"upper"
    lower = DiskFileStore(UUIDIdGenerator(), root)
    assert lower.get_path(blob_id) == os.path.join(
        os.path.abspath(root), "5", "5d", "hello")
