"""Profile serialization and deserialization.

Converts ``Profile`` objects to and from the structured document
written by profile collectors.  The serialized form is a plain
dict/list structure that maps naturally to both JSON and YAML.

Two encoding rules keep the documents readable by older consumers:

* versions are written as dotted strings (``"7.2.1"``), never as
  structured numeric objects;
* enumerations are written by symbolic name in PascalCase
  (``"ValueFromPipeline"``), never by numeric code.  On decode the name
  is matched ignoring case and underscores, so ``"VALUE_FROM_PIPELINE"``
  reads the same; names this library does not know are preserved as
  opaque strings.

Usage
-----
::

    from pscompat.codec.serializer import ProfileSerializer

    serializer = ProfileSerializer()
    profile = serializer.load("profiles/win-5.1.json")
    data = serializer.encode(profile, pretty=True)
    assert serializer.decode(data) == profile
"""
from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from pathlib import Path
from typing import TypeVar

import yaml

from pscompat.data.mapping import CaseInsensitiveMapping, fold
from pscompat.data.modules import index_modules
from pscompat.data.nodes import (
    AvailableTypeData,
    BindingStyle,
    CmdletData,
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
from pscompat.errors import DuplicateKeyError, FormatError, ResourceAccessError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
V = TypeVar("V")


def _join(location: str, part: str) -> str:
    return f"{location}/{part}" if location else part


def _enum_key(name: str) -> str:
    return fold(name.replace("_", ""))


def _enum_to_wire(value: Enum | str) -> str:
    if isinstance(value, Enum):
        return "".join(part.capitalize() for part in value.name.split("_"))
    return value


class ProfileSerializer:
    """Converts between ``Profile`` objects and plain Python dicts.

    Parameters
    ----------
    pretty:
        Default formatting for ``encode``, ``to_json`` and ``dump``:
        indented output when ``True``, compact otherwise.
    """

    def __init__(self, pretty: bool = False) -> None:
        self._pretty = pretty

    # ------------------------------------------------------------------
    # Serialization (Profile → dict)
    # ------------------------------------------------------------------

    def to_dict(self, profile: Profile) -> dict[str, object]:
        """Serialize a ``Profile`` to a JSON-compatible dict."""
        data: dict[str, object] = {
            "Types": self._types_to_dict(profile.types),
            "Modules": {
                name: {
                    str(version): self._module_to_dict(module)
                    for version, module in versions.items()
                }
                for name, versions in profile.modules.items()
            },
        }
        if profile.native_commands is not None:
            data["NativeCommands"] = {
                name: [self._location_to_dict(loc) for loc in command.locations]
                for name, command in profile.native_commands.items()
            }
        if profile.platform is not None:
            data["Platform"] = self._platform_to_dict(profile.platform)
        return data

    def _platform_to_dict(self, platform: PlatformData) -> dict[str, object]:
        return {
            "Id": platform.id,
            "OperatingSystem": (
                _enum_to_wire(platform.os_family) if platform.os_family is not None else None
            ),
            "RuntimeVersion": (
                str(platform.runtime_version) if platform.runtime_version is not None else None
            ),
            "Edition": platform.edition,
        }

    def _types_to_dict(self, types: AvailableTypeData) -> dict[str, object]:
        return {
            "Types": list(types.types),
            "TypeAccelerators": dict(types.type_accelerators),
        }

    def _module_to_dict(self, module: ModuleData) -> dict[str, object]:
        return {
            "Cmdlets": {name: self._cmdlet_to_dict(c) for name, c in module.cmdlets.items()},
            "Functions": {name: self._function_to_dict(f) for name, f in module.functions.items()},
            "Aliases": dict(module.aliases),
        }

    def _command_fields(self, command: CmdletData | FunctionData) -> dict[str, object]:
        return {
            "OutputType": list(command.output_types),
            "ParameterSets": list(command.parameter_sets),
            "DefaultParameterSet": command.default_parameter_set,
            "Parameters": {
                name: self._parameter_to_dict(p) for name, p in command.parameters.items()
            },
            "ParameterAliases": dict(command.parameter_aliases),
        }

    def _cmdlet_to_dict(self, cmdlet: CmdletData) -> dict[str, object]:
        return self._command_fields(cmdlet)

    def _function_to_dict(self, function: FunctionData) -> dict[str, object]:
        data = self._command_fields(function)
        data["BindingStyle"] = _enum_to_wire(function.binding_style)
        return data

    def _parameter_to_dict(self, parameter: ParameterData) -> dict[str, object]:
        return {
            "Type": parameter.type,
            "Dynamic": parameter.dynamic,
            "ParameterSets": {
                name: {
                    "Position": pset.position,
                    "Flags": [_enum_to_wire(flag) for flag in pset.flags],
                }
                for name, pset in parameter.parameter_sets.items()
            },
        }

    def _location_to_dict(self, location: NativeCommandLocation) -> dict[str, object]:
        return {
            "Path": location.path,
            "Version": str(location.version) if location.version is not None else None,
        }

    # ------------------------------------------------------------------
    # Deserialization (dict → Profile)
    # ------------------------------------------------------------------

    def from_dict(self, data: object) -> Profile:
        """Deserialize a ``Profile`` from a plain dict.

        Raises
        ------
        FormatError
            If ``Types`` or ``Modules`` is missing, or any field has the
            wrong shape.
        VersionParseError
            If a version string is not 2 to 4 dotted numbers.
        """
        root = self._mapping(data, "")
        for required in ("Types", "Modules"):
            if required not in root:
                raise FormatError(f"Missing required field {required!r}")

        modules = [
            module
            for name, versions in self._mapping(root["Modules"], "Modules").items()
            for module in self._module_versions_from_dict(name, versions, _join("Modules", name))
        ]
        try:
            module_index = index_modules(modules)
        except DuplicateKeyError as exc:
            raise FormatError(str(exc), "Modules") from exc

        native_commands = None
        if root.get("NativeCommands") is not None:
            native_commands = self._native_commands_from_dict(root["NativeCommands"])

        platform = None
        if root.get("Platform") is not None:
            platform = self._platform_from_dict(root["Platform"], "Platform")

        return Profile(
            types=self._types_from_dict(root["Types"], "Types"),
            modules=module_index,
            native_commands=native_commands,
            platform=platform,
        )

    # Shape helpers ----------------------------------------------------

    def _mapping(self, value: object, location: str) -> Mapping[str, object]:
        if not isinstance(value, Mapping):
            raise FormatError(f"Expected an object, found {type(value).__name__}", location)
        for key in value:
            if not isinstance(key, str):
                raise FormatError(f"Expected string keys, found {key!r}", location)
        return value

    def _optional_mapping(self, value: object, location: str) -> Mapping[str, object]:
        return {} if value is None else self._mapping(value, location)

    def _strings(self, value: object, location: str) -> tuple[str, ...]:
        if value is None:
            return ()
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise FormatError("Expected a list of strings", location)
        return tuple(value)

    def _string(self, value: object, location: str) -> str:
        if not isinstance(value, str):
            raise FormatError(f"Expected a string, found {type(value).__name__}", location)
        return value

    def _optional_string(self, value: object, location: str) -> str | None:
        return None if value is None else self._string(value, location)

    def _enum(self, enum_type: type[E], value: object, location: str) -> E | str:
        name = self._string(value, location)
        key = _enum_key(name)
        for member in enum_type:
            if _enum_key(member.name) == key:
                return member
        return name

    def _ci_mapping(
        self,
        value: object,
        location: str,
        build: Callable[[str, object, str], V],
    ) -> CaseInsensitiveMapping[V]:
        items = self._optional_mapping(value, location)
        try:
            return CaseInsensitiveMapping(
                (key, build(key, item, _join(location, key))) for key, item in items.items()
            )
        except DuplicateKeyError as exc:
            raise FormatError(str(exc), location) from exc

    # Entities ---------------------------------------------------------

    def _platform_from_dict(self, value: object, location: str) -> PlatformData:
        data = self._mapping(value, location)
        os_family = data.get("OperatingSystem")
        runtime_version = data.get("RuntimeVersion")
        return PlatformData(
            id=self._optional_string(data.get("Id"), _join(location, "Id")),
            os_family=(
                self._enum(OperatingSystemFamily, os_family, _join(location, "OperatingSystem"))
                if os_family is not None
                else None
            ),
            runtime_version=(
                Version.parse(runtime_version, _join(location, "RuntimeVersion"))
                if runtime_version is not None
                else None
            ),
            edition=self._optional_string(data.get("Edition"), _join(location, "Edition")),
        )

    def _types_from_dict(self, value: object, location: str) -> AvailableTypeData:
        data = self._mapping(value, location)
        return AvailableTypeData(
            types=self._strings(data.get("Types"), _join(location, "Types")),
            type_accelerators=self._ci_mapping(
                data.get("TypeAccelerators"),
                _join(location, "TypeAccelerators"),
                lambda _name, target, where: self._string(target, where),
            ),
        )

    def _module_versions_from_dict(
        self, name: str, value: object, location: str
    ) -> Iterable[ModuleData]:
        for version_text, module in self._mapping(value, location).items():
            yield self._module_from_dict(
                name,
                Version.parse(version_text, location),
                module,
                _join(location, version_text),
            )

    def _module_from_dict(
        self, name: str, version: Version, value: object, location: str
    ) -> ModuleData:
        data = self._optional_mapping(value, location)
        return ModuleData(
            name=name,
            version=version,
            cmdlets=self._ci_mapping(
                data.get("Cmdlets"),
                _join(location, "Cmdlets"),
                lambda key, item, where: self._cmdlet_from_dict(key, name, item, where),
            ),
            functions=self._ci_mapping(
                data.get("Functions"),
                _join(location, "Functions"),
                lambda key, item, where: self._function_from_dict(key, name, item, where),
            ),
            aliases=self._ci_mapping(
                data.get("Aliases"),
                _join(location, "Aliases"),
                lambda _alias, target, where: self._string(target, where),
            ),
        )

    def _command_kwargs(
        self, name: str, module_name: str, data: Mapping[str, object], location: str
    ) -> dict[str, object]:
        return {
            "name": name,
            "module_name": module_name,
            "output_types": self._strings(data.get("OutputType"), _join(location, "OutputType")),
            "parameter_sets": self._strings(
                data.get("ParameterSets"), _join(location, "ParameterSets")
            ),
            "default_parameter_set": self._optional_string(
                data.get("DefaultParameterSet"), _join(location, "DefaultParameterSet")
            ),
            "parameters": self._ci_mapping(
                data.get("Parameters"),
                _join(location, "Parameters"),
                self._parameter_from_dict,
            ),
            "parameter_aliases": self._ci_mapping(
                data.get("ParameterAliases"),
                _join(location, "ParameterAliases"),
                lambda _alias, target, where: self._string(target, where),
            ),
        }

    def _cmdlet_from_dict(
        self, name: str, module_name: str, value: object, location: str
    ) -> CmdletData:
        data = self._optional_mapping(value, location)
        return CmdletData(**self._command_kwargs(name, module_name, data, location))

    def _function_from_dict(
        self, name: str, module_name: str, value: object, location: str
    ) -> FunctionData:
        data = self._optional_mapping(value, location)
        if data.get("BindingStyle") is not None:
            binding_style = self._enum(
                BindingStyle, data["BindingStyle"], _join(location, "BindingStyle")
            )
        else:
            # Collectors predating BindingStyle write a boolean.
            cmdlet_binding = data.get("CmdletBinding")
            if cmdlet_binding is None:
                cmdlet_binding = False
            if not isinstance(cmdlet_binding, bool):
                raise FormatError("Expected a boolean", _join(location, "CmdletBinding"))
            binding_style = BindingStyle.ADVANCED if cmdlet_binding else BindingStyle.SIMPLE
        return FunctionData(
            **self._command_kwargs(name, module_name, data, location),
            binding_style=binding_style,
        )

    def _parameter_from_dict(self, name: str, value: object, location: str) -> ParameterData:
        data = self._optional_mapping(value, location)
        dynamic = data.get("Dynamic", False)
        if not isinstance(dynamic, bool):
            raise FormatError("Expected a boolean", _join(location, "Dynamic"))
        return ParameterData(
            name=name,
            type=self._optional_string(data.get("Type"), _join(location, "Type")),
            parameter_sets=self._ci_mapping(
                data.get("ParameterSets"),
                _join(location, "ParameterSets"),
                self._parameter_set_from_dict,
            ),
            dynamic=dynamic,
        )

    def _parameter_set_from_dict(
        self, _name: str, value: object, location: str
    ) -> ParameterSetData:
        data = self._optional_mapping(value, location)
        position = data.get("Position")
        if position is not None and (isinstance(position, bool) or not isinstance(position, int)):
            raise FormatError("Expected an integer or null", _join(location, "Position"))
        flags_location = _join(location, "Flags")
        return ParameterSetData(
            position=position,
            flags=tuple(
                self._enum(ParameterSetFlag, flag, flags_location)
                for flag in self._strings(data.get("Flags"), flags_location)
            ),
        )

    def _native_commands_from_dict(
        self, value: object
    ) -> CaseInsensitiveMapping[NativeCommandData]:
        return self._ci_mapping(value, "NativeCommands", self._native_command_from_dict)

    def _native_command_from_dict(
        self, name: str, value: object, location: str
    ) -> NativeCommandData:
        if value is None:
            return NativeCommandData(name=name)
        if not isinstance(value, list):
            raise FormatError("Expected a list of locations", location)
        locations = []
        for index, entry in enumerate(value):
            where = _join(location, str(index))
            data = self._mapping(entry, where)
            version = data.get("Version")
            locations.append(
                NativeCommandLocation(
                    path=self._string(data.get("Path"), _join(where, "Path")),
                    version=(
                        Version.parse(version, _join(where, "Version"))
                        if version is not None
                        else None
                    ),
                )
            )
        return NativeCommandData(name=name, locations=tuple(locations))

    # ------------------------------------------------------------------
    # Byte encoding
    # ------------------------------------------------------------------

    def encode(self, profile: Profile, pretty: bool | None = None) -> bytes:
        """Encode a ``Profile`` as UTF-8 JSON bytes with sorted keys."""
        return self.to_json(profile, pretty=pretty).encode("utf-8")

    def decode(self, data: bytes | bytearray | str) -> Profile:
        """Decode a ``Profile`` from JSON bytes or text.

        A leading UTF-8 byte order mark, as written by some Windows
        collectors, is ignored.
        """
        if isinstance(data, (bytes, bytearray)):
            try:
                text = bytes(data).decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise FormatError(f"Profile is not valid UTF-8: {exc}") from exc
        else:
            text = data.removeprefix("\ufeff")
        return self.from_json(text)

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, profile: Profile, pretty: bool | None = None) -> str:
        """Serialize a ``Profile`` to a JSON string."""
        indent = 2 if (self._pretty if pretty is None else pretty) else None
        separators = None if indent else (",", ":")
        return json.dumps(
            self.to_dict(profile),
            indent=indent,
            separators=separators,
            sort_keys=True,
            ensure_ascii=False,
        )

    def from_json(self, text: str) -> Profile:
        """Deserialize a ``Profile`` from a JSON string."""
        try:
            data: object = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FormatError(f"Invalid JSON: {exc.msg}", f"line {exc.lineno}") from exc
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, profile: Profile) -> str:
        """Serialize a ``Profile`` to a YAML string."""
        return yaml.safe_dump(self.to_dict(profile), default_flow_style=False, allow_unicode=True)

    def from_yaml(self, text: str) -> Profile:
        """Deserialize a ``Profile`` from a YAML string."""
        try:
            data: object = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise FormatError(f"Invalid YAML: {exc}") from exc
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def load(self, path: str | os.PathLike[str]) -> Profile:
        """Read and decode the profile stored at ``path``.

        Raises
        ------
        ResourceAccessError
            If the file cannot be opened or read.
        FormatError, VersionParseError
            If the contents are not a valid profile.
        """
        path = Path(path)
        logger.debug("Loading profile from %s", path)
        try:
            stream = path.open("rb")
        except OSError as exc:
            raise ResourceAccessError(path, exc) from exc
        with stream:
            try:
                data = stream.read()
            except OSError as exc:
                raise ResourceAccessError(path, exc) from exc
            return self.decode(data)

    def dump(
        self, profile: Profile, path: str | os.PathLike[str], pretty: bool | None = None
    ) -> None:
        """Encode ``profile`` and write it to ``path``.

        The profile is fully encoded before the file is opened, so an
        encoding failure leaves any existing file untouched.
        """
        path = Path(path)
        data = self.encode(profile, pretty=pretty)
        logger.debug("Writing profile to %s (%d bytes)", path, len(data))
        try:
            with path.open("wb") as stream:
                stream.write(data)
        except OSError as exc:
            raise ResourceAccessError(path, exc) from exc


def encode(profile: Profile, pretty: bool = False) -> bytes:
    """Encode ``profile`` as JSON bytes."""
    return ProfileSerializer().encode(profile, pretty=pretty)


def decode(data: bytes | bytearray | str) -> Profile:
    """Decode a ``Profile`` from JSON bytes or text."""
    return ProfileSerializer().decode(data)


def load_profile(path: str | os.PathLike[str]) -> Profile:
    """Read the profile stored at ``path``."""
    return ProfileSerializer().load(path)


def save_profile(profile: Profile, path: str | os.PathLike[str], pretty: bool = False) -> None:
    """Write ``profile`` to ``path``."""
    ProfileSerializer().dump(profile, path, pretty=pretty)
