#
# Copyright 2024 zhlinh and ccgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Smoke-test settings loaded from yuedist.toml.

Configuration structure (every key optional):
    [smoke_test]
    version = "v0.15.0"                          # Archive version (default: git describe)
    build_command = "node scripts/build.js out/Release"
    package_command = "node scripts/create_dist.js"
    dist_dir = "out/Dist"                        # Relative to the project directory
    sample_solution = "YueSampleApp.sln"
    strict_platform = false                      # Fail instead of skipping unsupported hosts

    [smoke_test.vs_generators]
    x64 = "Visual Studio 15 Win64"
    x86 = "Visual Studio 15"
"""

import os
import sys
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from yuedist.utils.errors import ConfigError

CONFIG_FILE_NAME = "yuedist.toml"
CONFIG_SECTION = "smoke_test"

DEFAULT_BUILD_COMMAND = "node scripts/build.js out/Release"
DEFAULT_PACKAGE_COMMAND = "node scripts/create_dist.js"
DEFAULT_DIST_DIR = os.path.join("out", "Dist")
DEFAULT_SAMPLE_SOLUTION = "YueSampleApp.sln"
# Visual Studio generator per target CPU, other CPUs have no generator
DEFAULT_VS_GENERATORS = {
    "x64": "Visual Studio 15 Win64",
    "x86": "Visual Studio 15",
}


@dataclass
class SmokeTestSettings:
    """Commands and locations used by the smoke-test workflow."""
    version: Optional[str] = None
    build_command: str = DEFAULT_BUILD_COMMAND
    package_command: str = DEFAULT_PACKAGE_COMMAND
    dist_dir: str = DEFAULT_DIST_DIR
    sample_solution: str = DEFAULT_SAMPLE_SOLUTION
    strict_platform: bool = False
    vs_generators: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_VS_GENERATORS)
    )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "SmokeTestSettings":
        section = config.get(CONFIG_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(f"[{CONFIG_SECTION}] must be a table")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ConfigError(
                f"Unknown keys in [{CONFIG_SECTION}]: {', '.join(unknown)}"
            )
        for key, value in section.items():
            if key == "vs_generators":
                continue
            expected = _FIELD_TYPES[key]
            if not isinstance(value, expected):
                raise ConfigError(
                    f"[{CONFIG_SECTION}] {key} must be a {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
        settings = cls(**{k: v for k, v in section.items() if k != "vs_generators"})
        if "vs_generators" in section:
            generators = section["vs_generators"]
            if not isinstance(generators, dict):
                raise ConfigError(f"[{CONFIG_SECTION}.vs_generators] must be a table")
            for cpu, generator in generators.items():
                if not isinstance(generator, str):
                    raise ConfigError(
                        f"[{CONFIG_SECTION}.vs_generators] {cpu} must be a str"
                    )
            settings.vs_generators = dict(generators)
        return settings


# TOML value type of every scalar [smoke_test] key
_FIELD_TYPES = {
    "version": str,
    "build_command": str,
    "package_command": str,
    "dist_dir": str,
    "sample_solution": str,
    "strict_platform": bool,
}


def find_config_file(project_dir: str) -> Optional[str]:
    """Return the path of yuedist.toml in project_dir, or None."""
    config_file = os.path.join(project_dir, CONFIG_FILE_NAME)
    if os.path.isfile(config_file):
        return config_file
    return None


def load_settings(project_dir: str, config_file: Optional[str] = None) -> SmokeTestSettings:
    """
    Load smoke-test settings for a project.

    Args:
        project_dir: libyue checkout, searched for yuedist.toml
        config_file: Explicit config path, must exist when given

    Returns:
        SmokeTestSettings: Defaults updated with the [smoke_test] table

    Raises:
        ConfigError: If the file is missing (explicit path only), is not
            valid TOML, or contains unknown keys
    """
    if config_file is None:
        config_file = find_config_file(project_dir)
        if config_file is None:
            return SmokeTestSettings()
    elif not os.path.isfile(config_file):
        raise ConfigError(f"Config file not found: {config_file}")

    # Must open in rb mode for tomllib
    try:
        with open(config_file, "rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_file}: {e}") from e
    print(f"Loaded settings from {config_file}")
    return SmokeTestSettings.from_dict(config)
