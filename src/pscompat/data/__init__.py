"""Profile data model.

Exports the immutable entities describing one platform capture, the
``Version`` type, and the case-insensitive mapping used for every
name-keyed collection.
"""
from __future__ import annotations

from pscompat.data.mapping import CaseInsensitiveMapping
from pscompat.data.modules import ModuleIndex, index_modules, latest_version
from pscompat.data.nodes import (
    AvailableTypeData,
    BindingStyle,
    CmdletData,
    CommandData,
    CommandDescriptor,
    FunctionData,
    ModuleData,
    NativeCommandData,
    NativeCommandLocation,
    OperatingSystemFamily,
    ParameterData,
    ParameterSetData,
    ParameterSetFlag,
    PlatformData,
    Profile,
)
from pscompat.data.version import Version

__all__ = [
    # Root and containers
    "Profile",
    "PlatformData",
    "AvailableTypeData",
    "ModuleData",
    "ModuleIndex",
    "NativeCommandData",
    "NativeCommandLocation",
    # Commands
    "CommandData",
    "CommandDescriptor",
    "CmdletData",
    "FunctionData",
    "ParameterData",
    "ParameterSetData",
    # Enums
    "BindingStyle",
    "ParameterSetFlag",
    "OperatingSystemFamily",
    # Helpers
    "CaseInsensitiveMapping",
    "Version",
    "index_modules",
    "latest_version",
]
