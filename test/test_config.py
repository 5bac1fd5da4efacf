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
"""Tests for loading configurations."""
import io
import json
import os
from pathlib import Path
from typing import cast

import pytest

from shardstore.system.config.config import Config
from shardstore.system.config.loader import (
    ConfigJSON,
    load_config,
    load_config_file,
    load_test,
)
from shardstore.system.error import StoreConfigError
from shardstore.system.idgen.redis import RedisIdGenerator
from shardstore.system.idgen.uuid import UUIDIdGenerator
from shardstore.system.logger.log import EventStream
from shardstore.system.store.disk import DiskFileStore


def test_load_config(tmp_path: Path) -> None:
    """
    Test loading a full configuration.

    Args:
        tmp_path (Path): The temporary folder.
    """
    root = tmp_path / "blobs"
    config = load_config({
        "store": {
            "name": "disk",
            "root": str(root),
            "levels": 3,
            "hash_name": "sha1",
            "chunk_size": 1024,
        },
        "id_generator": {
            "name": "redis",
            "backend": "memory",
            "prefix": "X",
        },
        "logger": {
            "listeners": [{"name": "stdout"}],
            "disable_events": ["blob"],
        },
    })
    store = config.get_store()
    assert isinstance(store, DiskFileStore)
    assert store.get_root() == os.path.abspath(root)
    assert store.get_levels() == 3
    assert store.get_chunk_size() == 1024
    assert root.is_dir()
    assert isinstance(config.get_id_generator(), RedisIdGenerator)
    blob_id = store.write_bytes(b"configured")
    assert blob_id.get_name() == "X0000000000000001"
    # sha1("X0000000000000001") determines the shard folders
    assert len(Path(store.get_path(blob_id)).relative_to(root).parts) == 4
    assert store.read_bytes(blob_id) == b"configured"


def test_defaults(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """
    Test the defaults of a minimal configuration.

    Args:
        tmp_path (Path): The temporary folder.
        capsys (pytest.CaptureFixture[str]): Captures the output.
    """
    config = load_config({
        "store": {
            "name": "disk",
            "root": str(tmp_path),
        },
    })
    store = config.get_store()
    assert isinstance(store, DiskFileStore)
    assert store.get_levels() == 2
    assert store.get_chunk_size() == 16 * 1024
    assert isinstance(config.get_id_generator(), UUIDIdGenerator)
    store.write_bytes(b"quiet")
    assert capsys.readouterr().out == ""


def test_load_config_file(tmp_path: Path) -> None:
    """
    Test loading a configuration from a file.

    Args:
        tmp_path (Path): The temporary folder.
    """
    fname = tmp_path / "config.json"
    with open(fname, "w", encoding="utf-8") as fout:
        json.dump({
            "store": {
                "name": "disk",
                "root": str(tmp_path / "blobs"),
                "levels": 0,
            },
            "id_generator": {
                "name": "uuid",
            },
        }, fout)
    config = load_config_file(str(fname))
    store = config.get_store()
    blob_id = store.write(io.BytesIO(b"from file"))
    assert (tmp_path / "blobs" / blob_id.get_name()).is_file()


def test_invalid_config_file(tmp_path: Path) -> None:
    """
    Test loading a broken configuration file.

    Args:
        tmp_path (Path): The temporary folder.
    """
    fname = tmp_path / "config.json"
    fname.write_text('{\n  "store": {\n    "name": "disk",\n  }\n}\n')
    with pytest.raises(ValueError, match="JSON parse error"):
        load_config_file(str(fname))


def test_invalid_config(tmp_path: Path) -> None:
    """
    Test invalid configurations.

    Args:
        tmp_path (Path): The temporary folder.
    """
    root = str(tmp_path)
    with pytest.raises(StoreConfigError, match="unknown blob store"):
        load_config(cast(ConfigJSON, {
            "store": {"name": "cloud", "root": root},
        }))
    with pytest.raises(StoreConfigError, match="is not available"):
        load_config({
            "store": {"name": "disk", "root": root, "hash_name": "md17"},
        })
    with pytest.raises(StoreConfigError, match="invalid number of levels"):
        load_config({
            "store": {"name": "disk", "root": root, "levels": 40},
        })
    with pytest.raises(StoreConfigError, match="unknown event listener"):
        load_config(cast(ConfigJSON, {
            "store": {"name": "disk", "root": root},
            "logger": {"listeners": [{"name": "syslog"}]},
        }))
    with pytest.raises(ValueError, match="invalid filter"):
        load_config({
            "store": {"name": "disk", "root": root},
            "logger": {
                "listeners": [{"name": "stdout"}],
                "disable_events": ["!"],
            },
        })


def test_config_modules(tmp_path: Path) -> None:
    """
    Test setting configuration modules.

    Args:
        tmp_path (Path): The temporary folder.
    """
    config = Config()
    with pytest.raises(ValueError, match="logger not initialized"):
        config.get_logger()
    with pytest.raises(ValueError, match="id generator not initialized"):
        config.get_id_generator()
    with pytest.raises(ValueError, match="store not initialized"):
        config.get_store()
    logger = EventStream()
    config.set_logger(logger)
    with pytest.raises(ValueError, match="logger already initialized"):
        config.set_logger(logger)
    id_gen = UUIDIdGenerator()
    config.set_id_generator(id_gen)
    store = DiskFileStore(id_gen, str(tmp_path), logger=logger)
    config.set_store(store)
    with pytest.raises(ValueError, match="store already initialized"):
        config.set_store(store)
    assert config.get_logger() is logger
    assert config.get_id_generator() is id_gen
    assert config.get_store() is store


@pytest.mark.parametrize("is_redis", [False, True])
def test_load_test(
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        is_redis: bool) -> None:
    """
    Test the unit test configuration.

    Args:
        tmp_path (Path): The temporary folder.
        capsys (pytest.CaptureFixture[str]): Captures the output.
        is_redis (bool): Whether to use counter based ids.
    """
    config = load_test(str(tmp_path), chunk_size=7, is_redis=is_redis)
    store = config.get_store()
    blob_id = store.write_bytes(b"0123456789")
    assert store.read_bytes(blob_id) == b"0123456789"
    if is_redis:
        assert blob_id.get_name() == "T0000000000000001"
    else:
        assert blob_id.get_name().startswith("B")
    out = capsys.readouterr().out
    assert "store.open" in out
    assert "blob.write" in out
    assert "size=10" in out
    assert "debug.shard" not in out
