"""Entity definitions for a captured compatibility profile.

A ``Profile`` describes what one platform installation provides: the
types and type accelerators it knows, every module (keyed by name and
then version) with the cmdlets, functions, and aliases it exports, and
the native executables on its search path.

Every entity is a frozen dataclass holding tuples and read-only
mappings, so a decoded profile is deeply immutable and can be shared
between threads without locking.  Commands come in two variants,
``CmdletData`` and ``FunctionData``; the ``CommandData`` union covers
both and downstream code should dispatch with ``isinstance`` or read
the shared ``CommandDescriptor`` attributes.

Enumerations whose member is unknown to this version of the library
are kept as their symbolic string, so profiles written by newer
collectors still load and re-encode without loss.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol, Union

from pscompat.data.mapping import CaseInsensitiveMapping
from pscompat.data.version import Version

if TYPE_CHECKING:
    from pscompat.data.modules import ModuleIndex


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BindingStyle(Enum):
    """How a command binds its parameters."""

    CMDLET = auto()
    ADVANCED = auto()
    SIMPLE = auto()


class ParameterSetFlag(Enum):
    """Per-parameter-set attributes of a parameter."""

    MANDATORY = auto()
    VALUE_FROM_PIPELINE = auto()
    VALUE_FROM_PIPELINE_BY_PROPERTY_NAME = auto()
    VALUE_FROM_REMAINING_ARGUMENTS = auto()


class OperatingSystemFamily(Enum):
    """Operating system family of the captured platform."""

    WINDOWS = auto()
    LINUX = auto()
    MACOS = auto()
    OTHER = auto()


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParameterSetData:
    """Membership of a parameter in one parameter set."""

    position: int | None = None
    flags: tuple[ParameterSetFlag | str, ...] = ()

    @property
    def is_mandatory(self) -> bool:
        return ParameterSetFlag.MANDATORY in self.flags


@dataclass(frozen=True, slots=True)
class ParameterData:
    """A single command parameter.

    Parameters
    ----------
    name:
        Parameter name without the leading dash.
    type:
        Fully-qualified type name of the parameter, if captured.
    parameter_sets:
        Parameter set name to membership details.
    dynamic:
        True for parameters that only exist in some contexts.
    """

    name: str
    type: str | None = None
    parameter_sets: CaseInsensitiveMapping[ParameterSetData] = field(
        default_factory=CaseInsensitiveMapping
    )
    dynamic: bool = False


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class CommandDescriptor(Protocol):
    """Attributes shared by both command variants."""

    name: str
    module_name: str | None
    output_types: tuple[str, ...]
    parameter_sets: tuple[str, ...]
    default_parameter_set: str | None
    parameters: CaseInsensitiveMapping[ParameterData]
    parameter_aliases: CaseInsensitiveMapping[str]

    @property
    def kind(self) -> str: ...

    @property
    def is_cmdlet_binding(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class CmdletData:
    """A compiled cmdlet exported by a module."""

    name: str
    module_name: str | None = None
    output_types: tuple[str, ...] = ()
    parameter_sets: tuple[str, ...] = ()
    default_parameter_set: str | None = None
    parameters: CaseInsensitiveMapping[ParameterData] = field(
        default_factory=CaseInsensitiveMapping
    )
    parameter_aliases: CaseInsensitiveMapping[str] = field(
        default_factory=CaseInsensitiveMapping
    )

    @property
    def kind(self) -> str:
        return "Cmdlet"

    @property
    def binding_style(self) -> BindingStyle:
        return BindingStyle.CMDLET

    @property
    def is_cmdlet_binding(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class FunctionData:
    """A script function exported by a module.

    ``binding_style`` is ``ADVANCED`` for functions declaring cmdlet
    binding, ``SIMPLE`` otherwise, or the raw symbolic name when the
    profile uses a style this library does not know.
    """

    name: str
    module_name: str | None = None
    output_types: tuple[str, ...] = ()
    parameter_sets: tuple[str, ...] = ()
    default_parameter_set: str | None = None
    parameters: CaseInsensitiveMapping[ParameterData] = field(
        default_factory=CaseInsensitiveMapping
    )
    parameter_aliases: CaseInsensitiveMapping[str] = field(
        default_factory=CaseInsensitiveMapping
    )
    binding_style: BindingStyle | str = BindingStyle.SIMPLE

    @property
    def kind(self) -> str:
        return "Function"

    @property
    def is_cmdlet_binding(self) -> bool:
        return self.binding_style is BindingStyle.ADVANCED


CommandData = Union[CmdletData, FunctionData]


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ModuleData:
    """One version of one module and the commands it exports.

    Names are unique within each of ``cmdlets``, ``functions``, and
    ``aliases`` under case-insensitive comparison.  ``aliases`` maps an
    alias name to its target command name; targets are resolved only
    when a command lookup table is built.
    """

    name: str
    version: Version
    cmdlets: CaseInsensitiveMapping[CmdletData] = field(default_factory=CaseInsensitiveMapping)
    functions: CaseInsensitiveMapping[FunctionData] = field(
        default_factory=CaseInsensitiveMapping
    )
    aliases: CaseInsensitiveMapping[str] = field(default_factory=CaseInsensitiveMapping)

    def commands(self) -> Iterator[CommandData]:
        """Yield every cmdlet, then every function."""
        yield from self.cmdlets.values()
        yield from self.functions.values()

    def __repr__(self) -> str:
        return f"ModuleData({self.name!r}, {self.version.text!r})"


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AvailableTypeData:
    """Types and type accelerators known to the platform.

    Parameters
    ----------
    types:
        Fully-qualified type names, e.g. ``"System.Int32"``.
    type_accelerators:
        Accelerator name to fully-qualified type name, e.g.
        ``"int" -> "System.Int32"``.
    """

    types: tuple[str, ...] = ()
    type_accelerators: CaseInsensitiveMapping[str] = field(
        default_factory=CaseInsensitiveMapping
    )


# ---------------------------------------------------------------------------
# Native commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NativeCommandLocation:
    """One place a native executable was found."""

    path: str
    version: Version | None = None


@dataclass(frozen=True, slots=True)
class NativeCommandData:
    """An external executable available to the platform."""

    name: str
    locations: tuple[NativeCommandLocation, ...] = ()

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(location.path for location in self.locations)


# ---------------------------------------------------------------------------
# Platform and profile
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PlatformData:
    """Identity of the captured platform."""

    id: str | None = None
    os_family: OperatingSystemFamily | str | None = None
    runtime_version: Version | None = None
    edition: str | None = None


@dataclass(frozen=True, slots=True)
class Profile:
    """Root of a decoded compatibility profile.

    Parameters
    ----------
    types:
        The platform's type catalog.
    modules:
        Module name to version to ``ModuleData``; name lookups are
        case-insensitive.
    native_commands:
        Native command name to ``NativeCommandData``, or ``None`` when
        the capture carried no native command information.
    platform:
        Optional identity of the captured platform.
    """

    types: AvailableTypeData
    modules: "ModuleIndex"
    native_commands: CaseInsensitiveMapping[NativeCommandData] | None = None
    platform: PlatformData | None = None

    @classmethod
    def build(
        cls,
        modules: Iterable[ModuleData] = (),
        types: AvailableTypeData | None = None,
        native_commands: Iterable[NativeCommandData] | None = None,
        platform: PlatformData | None = None,
    ) -> "Profile":
        """Construct a ``Profile`` from plain iterables.

        Raises
        ------
        DuplicateKeyError
            If two modules share a name and version, or two native
            commands share a name.
        """
        from pscompat.data.modules import index_modules

        return cls(
            types=types if types is not None else AvailableTypeData(),
            modules=index_modules(modules),
            native_commands=(
                CaseInsensitiveMapping((c.name, c) for c in native_commands)
                if native_commands is not None
                else None
            ),
            platform=platform,
        )

    def iter_modules(self) -> Iterator[ModuleData]:
        """Yield every module version, grouped by module name."""
        versions: Mapping[Version, ModuleData]
        for versions in self.modules.values():
            yield from versions.values()
