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
"""Loads custom implementations of id generators, stores, or event listeners
as plugins. A plugin is any importable python module."""
import importlib
import threading
from typing import TypeVar

from shardstore.system.error import StoreConfigError
from shardstore.system.util import full_name


T = TypeVar('T')


PLUGIN_LOCK = threading.RLock()
"""Guards the plugin cache."""
PLUGIN_CACHE: dict[tuple[str, str], type] = {}
"""Caches previously loaded types by base type name and module name."""


def is_plugin_name(name: str) -> bool:
    """
    Whether the module name refers to a plugin. Built-in modules use short
    names while plugins use fully qualified python module names.

    Args:
        name (str): The module name from the configuration.

    Returns:
        bool: True, if the name is a fully qualified module name.
    """
    return "." in name


def load_plugin(base: type[T], name: str) -> type[T]:
    """
    Loads custom code as plugin. The module must be importable by the current
    process and must define exactly one sub-class of the base class. Other
    classes and symbols are allowed.

    Args:
        base (type[T]): The expected base type.
        name (str): The fully qualified name of the plugin module.

    Raises:
        StoreConfigError: If the module cannot be imported, does not define
            a sub-class of the base class, or defines multiple.

    Returns:
        type[T]: The loaded plugin.
    """
    key = (full_name(base), name)
    with PLUGIN_LOCK:
        res = PLUGIN_CACHE.get(key)
        if res is not None:
            return res
        try:
            mod = importlib.import_module(name)
        except ImportError as err:
            raise StoreConfigError(
                f"cannot import plugin {name}: {err}") from err
        candidates = [
            cls
            for cls in mod.__dict__.values()
            if isinstance(cls, type)
            and cls.__module__ == name
            and issubclass(cls, base)
        ]
        if len(candidates) != 1:
            cands = [can.__name__ for can in candidates]
            raise StoreConfigError(
                f"ambiguous or missing plugin for {key[0]} in {name}: {cands}")
        res = candidates[0]
        PLUGIN_CACHE[key] = res
    return res
