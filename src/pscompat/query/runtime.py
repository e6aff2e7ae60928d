"""Read-only query object over one captured profile.

``RuntimeQuery`` is the single read API that comparison and reporting
code uses to ask what a target platform provides.  Each instance owns
its profile and derived tables; there is no process-wide "current
profile", so queries against different profiles never interfere.

Usage
-----
::

    from pscompat.query import RuntimeQuery

    runtime = RuntimeQuery.from_file("profiles/ubuntu_x64_7.2.json")
    runtime.has_command("Get-ChildItem")
    runtime.types.has_type("[pscustomobject]")
    runtime.native_commands.try_get("git.exe")
"""
from __future__ import annotations

import os
from collections.abc import Mapping

from pscompat.data.modules import ModuleIndex, latest_version
from pscompat.data.nodes import CommandData, ModuleData, PlatformData, Profile
from pscompat.data.version import Version
from pscompat.query.commands import CommandTable, build_command_table
from pscompat.query.lazy import Lazy
from pscompat.query.native import NativeCommandLookupTable
from pscompat.query.types import TypeCatalog


class RuntimeQuery:
    """Lookups over the commands and types of one platform capture.

    The command and native command tables are built on first access and
    cached for the lifetime of the instance.  Concurrent first accesses
    build each table exactly once; every caller sees the same object.

    Parameters
    ----------
    profile:
        The decoded profile to query.
    name:
        Label used when reporting against this target.  Defaults to the
        platform id recorded in the profile, if any.
    """

    def __init__(self, profile: Profile, name: str | None = None) -> None:
        self._profile = profile
        self._name = name
        self._types = TypeCatalog(profile.types)
        self._commands: Lazy[CommandTable] = Lazy(
            lambda: build_command_table(profile.iter_modules())
        )
        self._native_commands: Lazy[NativeCommandLookupTable] = Lazy(
            lambda: NativeCommandLookupTable.create(profile.native_commands)
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str], name: str | None = None) -> "RuntimeQuery":
        """Load the profile at ``path`` and wrap it."""
        from pscompat.codec.serializer import load_profile

        return cls(load_profile(path), name=name)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def profile(self) -> Profile:
        return self._profile

    @property
    def name(self) -> str:
        """Reporting label for this target."""
        if self._name is not None:
            return self._name
        platform = self._profile.platform
        if platform is not None and platform.id:
            return platform.id
        return "<profile>"

    @property
    def platform(self) -> PlatformData | None:
        return self._profile.platform

    @property
    def types(self) -> TypeCatalog:
        """Types and type accelerators available on the platform."""
        return self._types

    @property
    def modules(self) -> ModuleIndex:
        """Module name (case-insensitive) to version to ``ModuleData``."""
        return self._profile.modules

    @property
    def commands(self) -> CommandTable:
        """Command or alias name to every descriptor providing it."""
        return self._commands.value

    @property
    def native_commands(self) -> NativeCommandLookupTable:
        """Native executables available to the platform."""
        return self._native_commands.value

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def get_commands(self, name: str) -> tuple[CommandData, ...]:
        """Return every descriptor for ``name``; empty if unknown."""
        return self.commands.get(name, ())

    def has_command(self, name: str) -> bool:
        """Return True if ``name`` resolves to at least one module command."""
        return bool(self.get_commands(name))

    def get_module(self, name: str, version: Version | str | None = None) -> ModuleData | None:
        """Return one version of module ``name``.

        With no ``version``, the highest captured version is returned.
        """
        versions: Mapping[Version, ModuleData] | None = self.modules.get(name)
        if versions is None:
            return None
        if version is None:
            return latest_version(versions)
        if isinstance(version, str):
            version = Version.parse(version)
        return versions.get(version)

    def __repr__(self) -> str:
        return f"RuntimeQuery({self.name!r}, {len(self.modules)} modules)"
