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
"""Creates a blob store."""
from typing import Literal, TypedDict

from typing_extensions import NotRequired

from shardstore.system.error import StoreConfigError
from shardstore.system.idgen.idgen import IdGenerator
from shardstore.system.io import CHUNK_SIZE
from shardstore.system.logger.log import EventStream
from shardstore.system.plugins import is_plugin_name, load_plugin
from shardstore.system.store.store import (
    DEFAULT_HASH,
    DEFAULT_LEVELS,
    FileStore,
)
from shardstore.system.util import to_bool


DiskFileStoreModule = TypedDict('DiskFileStoreModule', {
    "name": Literal["disk"],
    "root": str,
    "levels": NotRequired[int],
    "hash_name": NotRequired[str],
    "chunk_size": NotRequired[int],
    "upper_hex": NotRequired[bool],
})
"""A blob store on the local file system. `levels` is the number of nested
shard folders (default 2), `hash_name` the hash algorithm for computing the
shard folders (default md5), and `chunk_size` the number of bytes moved per
copy step (default 16KiB). `upper_hex` selects upper case shard folder names
(default False)."""


FileStoreModule = DiskFileStoreModule
"""Blob store configurations."""


def load_file_store(
        module: FileStoreModule,
        id_gen: IdGenerator,
        logger: EventStream) -> FileStore:
    """
    Loads the blob store. If `name` is set to a fully qualified python module
    the store is loaded as plugin. Plugins receive the id generator and the
    logger as keyword arguments `id_gen` and `logger`.

    Args:
        module (FileStoreModule): The module configuration.
        id_gen (IdGenerator): The id generator for new blobs.
        logger (EventStream): The logger.

    Raises:
        StoreConfigError: If the configuration is invalid.

    Returns:
        FileStore: The blob store.
    """
    # pylint: disable=import-outside-toplevel
    if is_plugin_name(module["name"]):
        kwargs = dict(module)
        plugin = load_plugin(FileStore, f"{kwargs.pop('name')}")
        return plugin(id_gen=id_gen, logger=logger, **kwargs)
    if module["name"] == "disk":
        from shardstore.system.store.disk import DiskFileStore
        return DiskFileStore(
            id_gen,
            module["root"],
            levels=int(module.get("levels", DEFAULT_LEVELS)),
            hash_name=module.get("hash_name", DEFAULT_HASH),
            chunk_size=int(module.get("chunk_size", CHUNK_SIZE)),
            upper_hex=to_bool(module.get("upper_hex", False)),
            logger=logger)
    raise StoreConfigError(f"unknown blob store: {module['name']}")
