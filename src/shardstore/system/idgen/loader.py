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
"""Creates an id generator."""
from typing import Literal, TypedDict

from redipy import RedisConfig
from typing_extensions import NotRequired

from shardstore.system.error import StoreConfigError
from shardstore.system.idgen.idgen import IdGenerator
from shardstore.system.plugins import is_plugin_name, load_plugin


UUIDIdGeneratorModule = TypedDict('UUIDIdGeneratorModule', {
    "name": Literal["uuid"],
})
"""Random ids."""


RedisIdGeneratorModule = TypedDict('RedisIdGeneratorModule', {
    "name": Literal["redis"],
    "cfg": NotRequired[RedisConfig],
    "backend": NotRequired[Literal["redis", "memory"]],
    "prefix": NotRequired[str],
})
"""Counter based ids. `cfg` is required unless `backend` is `memory`."""


IdGeneratorModule = UUIDIdGeneratorModule | RedisIdGeneratorModule
"""Id generator configurations."""


def load_id_generator(module: IdGeneratorModule) -> IdGenerator:
    """
    Loads the id generator. If `name` is set to a fully qualified python
    module the generator is loaded as plugin.

    Args:
        module (IdGeneratorModule): The module configuration.

    Raises:
        StoreConfigError: If the configuration is invalid.

    Returns:
        IdGenerator: The id generator.
    """
    # pylint: disable=import-outside-toplevel
    if is_plugin_name(module["name"]):
        kwargs = dict(module)
        plugin = load_plugin(IdGenerator, f"{kwargs.pop('name')}")
        return plugin(**kwargs)
    if module["name"] == "uuid":
        from shardstore.system.idgen.uuid import UUIDIdGenerator
        return UUIDIdGenerator()
    if module["name"] == "redis":
        from shardstore.system.idgen.redis import RedisIdGenerator
        return RedisIdGenerator(
            module.get("cfg"),
            prefix=module.get("prefix", ""),
            backend=module.get("backend", "redis"))
    raise StoreConfigError(f"unknown id generator: {module['name']}")
