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
"""Loads a configuration from a JSON file."""
from typing import cast, TypedDict

from typing_extensions import NotRequired

from shardstore.system.config.config import Config
from shardstore.system.idgen.loader import IdGeneratorModule, load_id_generator
from shardstore.system.io import CHUNK_SIZE
from shardstore.system.logger.loader import LoggerDef, load_event_stream
from shardstore.system.store.loader import FileStoreModule, load_file_store
from shardstore.system.util import json_read


ConfigJSON = TypedDict('ConfigJSON', {
    "store": FileStoreModule,
    "id_generator": NotRequired[IdGeneratorModule],
    "logger": NotRequired[LoggerDef],
})
"""The configuration JSON. If `id_generator` is omitted random ids are used.
If `logger` is omitted no events are reported."""


def load_config(config_obj: ConfigJSON) -> Config:
    """
    Load a configuration from a JSON.

    Args:
        config_obj (ConfigJSON): The configuration JSON.

    Raises:
        StoreConfigError: If the configuration is invalid.

    Returns:
        Config: The configuration.
    """
    config = Config()
    logger = load_event_stream(config_obj.get("logger"))
    config.set_logger(logger)
    id_gen = load_id_generator(
        config_obj.get("id_generator", {"name": "uuid"}))
    config.set_id_generator(id_gen)
    config.set_store(load_file_store(config_obj["store"], id_gen, logger))
    return config


def load_config_file(fname: str) -> Config:
    """
    Load a configuration from a JSON file.

    Args:
        fname (str): The file.

    Raises:
        ValueError: If the file is not valid JSON.
        StoreConfigError: If the configuration is invalid.

    Returns:
        Config: The configuration.
    """
    with open(fname, "r", encoding="utf-8") as fin:
        config_obj = cast(ConfigJSON, json_read(fin.read()))
    return load_config(config_obj)


def load_test(
        root: str,
        *,
        levels: int = 2,
        chunk_size: int = CHUNK_SIZE,
        is_redis: bool = False,
        show_debug: bool = False) -> Config:
    """
    Load a configuration for unit tests.

    Args:
        root (str): The root folder of the store.
        levels (int, optional): The number of shard levels. Defaults to 2.
        chunk_size (int, optional): The copy chunk size. Defaults to 16KiB.
        is_redis (bool, optional): Whether to use a counter based id
            generator backed by an in-memory redis. Defaults to False.
        show_debug (bool, optional): Whether to print debug events.
            Defaults to False.

    Returns:
        Config: The configuration.
    """
    id_gen: IdGeneratorModule
    if is_redis:
        id_gen = {
            "name": "redis",
            "backend": "memory",
            "prefix": "T",
        }
    else:
        id_gen = {
            "name": "uuid",
        }
    return load_config({
        "store": {
            "name": "disk",
            "root": root,
            "levels": levels,
            "chunk_size": chunk_size,
        },
        "id_generator": id_gen,
        "logger": {
            "listeners": [
                {
                    "name": "stdout",
                    "show_debug": show_debug,
                },
            ],
            "disable_events": [],
        },
    })
