"""Cross-module command lookup table.

The table maps every command name, case-insensitively, to the ordered
list of descriptors of every module version that provides a command of
that name.  Collisions between modules are kept: the same name exported
by two modules is legitimately ambiguous, and callers decide what that
means for them.

Construction runs in two passes:

1. Every cmdlet and function of every module version is indexed under
   its own name.
2. Aliases are resolved only after pass 1 has seen every module, so the
   result does not depend on module enumeration order.  Aliases form a
   directed graph (alias name to target names); each alias is resolved
   by a breadth-first walk of that graph collecting the direct commands
   of every reachable name.  Chains such as ``alias -> alias -> cmdlet``
   resolve fully and cycles terminate.

An alias whose target is never found gets an empty entry rather than an
error: profiles are best-effort captures and a missing target only
means the lookup cannot say what the alias runs.
"""
from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from pscompat.data.mapping import CaseInsensitiveMapping, fold
from pscompat.data.nodes import CommandData, ModuleData

logger = logging.getLogger(__name__)

CommandTable = CaseInsensitiveMapping[tuple[CommandData, ...]]

# folded name -> (first spelling seen, entries)
_Index = dict[str, tuple[str, list]]


def _append(index: _Index, name: str, item: object) -> None:
    key = fold(name)
    if key not in index:
        index[key] = (name, [])
    index[key][1].append(item)


def build_command_table(modules: Iterable[ModuleData]) -> CommandTable:
    """Build the alias-resolved command lookup table for ``modules``.

    Parameters
    ----------
    modules:
        Every module version of a profile.  Each version contributes its
        own commands; versions are never merged.

    Returns
    -------
    CommandTable
        Read-only, case-insensitive mapping of command or alias name to
        a tuple of descriptors.  Alias entries hold the very descriptor
        objects of the commands they resolve to.
    """
    modules = list(modules)

    direct: _Index = {}
    for module in modules:
        for command in module.commands():
            _append(direct, command.name, command)

    alias_targets: _Index = {}
    for module in modules:
        for alias, target in module.aliases.items():
            _append(alias_targets, alias, target)

    table: dict[str, tuple[str, tuple[CommandData, ...]]] = {
        key: (name, tuple(commands)) for key, (name, commands) in direct.items()
    }
    unresolved = 0
    for key, (alias, _targets) in alias_targets.items():
        resolved = _resolve_alias(key, direct, alias_targets)
        if not resolved:
            unresolved += 1
            logger.debug("Alias %r does not resolve to any captured command", alias)
        name = direct[key][0] if key in direct else alias
        table[key] = (name, resolved)

    logger.debug(
        "Built command table: %d names from %d module versions (%d aliases, %d unresolved)",
        len(table),
        len(modules),
        len(alias_targets),
        unresolved,
    )
    return CaseInsensitiveMapping._from_folded(table)


def _resolve_alias(start: str, direct: _Index, alias_targets: _Index) -> tuple[CommandData, ...]:
    """Collect the direct commands of every name reachable from ``start``."""
    resolved: list[CommandData] = []
    seen = {start}
    worklist = deque([start])
    while worklist:
        key = worklist.popleft()
        if key in direct:
            resolved.extend(direct[key][1])
        if key not in alias_targets:
            continue
        for target in alias_targets[key][1]:
            target_key = fold(target)
            if target_key not in seen:
                seen.add(target_key)
                worklist.append(target_key)
    return tuple(resolved)
