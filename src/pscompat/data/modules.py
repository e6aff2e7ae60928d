"""Module index: module name, then version, to ``ModuleData``.

Versions of one module are never merged.  A module may add, drop, or
change commands between releases, and the command lookup table needs
each version's export list exactly as it was captured.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from pscompat.data.mapping import CaseInsensitiveMapping, fold
from pscompat.data.nodes import ModuleData
from pscompat.data.version import Version
from pscompat.errors import DuplicateKeyError

ModuleIndex = CaseInsensitiveMapping[Mapping[Version, ModuleData]]


def index_modules(modules: Iterable[ModuleData]) -> ModuleIndex:
    """Group ``modules`` by case-insensitive name, then by version.

    Parameters
    ----------
    modules:
        Module descriptors in any order.  The first spelling seen for a
        module name is the one the index reports.

    Returns
    -------
    ModuleIndex
        A read-only index.  Each inner mapping is keyed by ``Version``.

    Raises
    ------
    DuplicateKeyError
        If the same module name and version appear twice.
    """
    grouped: dict[str, tuple[str, dict[Version, ModuleData]]] = {}
    for module in modules:
        key = fold(module.name)
        if key not in grouped:
            grouped[key] = (module.name, {})
        versions = grouped[key][1]
        if module.version in versions:
            existing = versions[module.version]
            raise DuplicateKeyError(
                f"{module.name} {module.version}", f"{existing.name} {existing.version}"
            )
        versions[module.version] = module

    return CaseInsensitiveMapping._from_folded(
        {key: (name, MappingProxyType(versions)) for key, (name, versions) in grouped.items()}
    )


def latest_version(versions: Mapping[Version, ModuleData]) -> ModuleData | None:
    """Return the highest-versioned module in ``versions``, if any."""
    if not versions:
        return None
    return versions[max(versions)]
