"""Type name resolution against a platform's type catalog."""
from __future__ import annotations

from pscompat.data.mapping import CaseInsensitiveMapping, fold
from pscompat.data.nodes import AvailableTypeData

_IMPLIED_NAMESPACE = "System."


class TypeCatalog:
    """Answers whether a type name is available on a platform.

    Type names are case-insensitive.  A name may be given as written in
    a script: wrapped in brackets (``[int]``), as an accelerator
    (``int``), fully qualified (``System.Int32``), or with the implied
    ``System.`` namespace left off (``Int32``).

    Parameters
    ----------
    data:
        The ``Types`` section of a profile.
    """

    def __init__(self, data: AvailableTypeData) -> None:
        self._data = data
        self._types: dict[str, str] = {}
        for type_name in data.types:
            self._types.setdefault(fold(type_name), type_name)

    @property
    def types(self) -> tuple[str, ...]:
        """Fully-qualified type names in capture order."""
        return self._data.types

    @property
    def accelerators(self) -> CaseInsensitiveMapping[str]:
        """Accelerator name to fully-qualified type name."""
        return self._data.type_accelerators

    def is_accelerator(self, name: str) -> bool:
        return _strip_brackets(name) in self._data.type_accelerators

    def resolve(self, name: str) -> str | None:
        """Return the fully-qualified name ``name`` refers to, or ``None``.

        Accelerators resolve to their target even when the target type
        itself was not captured.
        """
        bare = _strip_brackets(name)
        if not bare:
            return None
        target = self._data.type_accelerators.get(bare)
        if target is not None:
            return self._types.get(fold(target), target)
        full_name = self._types.get(fold(bare))
        if full_name is not None:
            return full_name
        if not fold(bare).startswith(fold(_IMPLIED_NAMESPACE)):
            return self._types.get(fold(_IMPLIED_NAMESPACE + bare))
        return None

    def has_type(self, name: str) -> bool:
        return self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return (
            f"TypeCatalog({len(self._types)} types, "
            f"{len(self._data.type_accelerators)} accelerators)"
        )


def _strip_brackets(name: str) -> str:
    name = name.strip()
    if name.startswith("[") and name.endswith("]"):
        name = name[1:-1].strip()
    return name
