"""Lookup table for native executables available to a platform."""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from pscompat.data.mapping import CaseInsensitiveMapping
from pscompat.data.nodes import NativeCommandData

# Suffixes a script may spell out when invoking an executable on Windows.
_EXECUTABLE_EXTENSIONS = (".exe", ".cmd", ".bat", ".com")


class NativeCommandLookupTable(Mapping[str, NativeCommandData]):
    """Case-insensitive index of native command name to descriptor.

    There is no alias layer and no version layering; every name maps to
    exactly one ``NativeCommandData``.
    """

    __slots__ = ("_commands",)

    def __init__(self, commands: CaseInsensitiveMapping[NativeCommandData]) -> None:
        self._commands = commands

    @classmethod
    def create(
        cls,
        commands: Mapping[str, NativeCommandData] | Iterable[NativeCommandData] | None,
    ) -> "NativeCommandLookupTable":
        """Index ``commands`` by name.

        ``None`` means the capture carried no native command data and
        yields an empty table.
        """
        if commands is None:
            return cls(CaseInsensitiveMapping())
        descriptors = commands.values() if isinstance(commands, Mapping) else commands
        return cls(CaseInsensitiveMapping((command.name, command) for command in descriptors))

    def __getitem__(self, name: str) -> NativeCommandData:
        return self._commands[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def try_get(self, name: str) -> NativeCommandData | None:
        """Return the descriptor for ``name``, tolerating an explicit extension.

        ``git.exe`` finds ``git`` when only the bare name was captured.
        """
        command = self._commands.get(name)
        if command is not None:
            return command
        lowered = name.lower()
        for extension in _EXECUTABLE_EXTENSIONS:
            if lowered.endswith(extension) and len(name) > len(extension):
                return self._commands.get(name[: -len(extension)])
        return None

    def __repr__(self) -> str:
        return f"NativeCommandLookupTable({len(self)} commands)"
