"""Unit tests for pscompat.codec.serializer — decoding, encoding, and file I/O."""
from __future__ import annotations

import errno
import io
import json
from pathlib import Path

import pytest

from pscompat.codec import ProfileSerializer, decode, encode, load_profile, save_profile
from pscompat.data import (
    BindingStyle,
    CmdletData,
    FunctionData,
    OperatingSystemFamily,
    ParameterSetFlag,
    Profile,
    Version,
)
from pscompat.errors import FormatError, ResourceAccessError, VersionParseError


def _decode_doc(document: object) -> Profile:
    return decode(json.dumps(document).encode("utf-8"))


# ===========================================================================
# Decoding
# ===========================================================================


class TestDecode:
    def test_sample_profile(self, profile_bytes: bytes) -> None:
        profile = decode(profile_bytes)
        assert sorted(profile.modules) == ["Helpers", "Microsoft.PowerShell.Management", "PSReadLine"]
        assert profile.types.types[0] == "System.Int32"
        assert profile.platform is not None
        assert profile.platform.os_family is OperatingSystemFamily.WINDOWS
        assert profile.platform.runtime_version == Version.parse("7.2.1")

    def test_commands_are_decoded(self, profile_bytes: bytes) -> None:
        profile = decode(profile_bytes)
        module = profile.modules["Microsoft.PowerShell.Management"][Version.parse("7.0.0.0")]
        cmdlet = module.cmdlets["get-childitem"]
        assert isinstance(cmdlet, CmdletData)
        assert cmdlet.module_name == "Microsoft.PowerShell.Management"
        assert cmdlet.default_parameter_set == "Items"
        path = cmdlet.parameters["path"]
        assert path.parameter_sets["Items"].position == 0
        assert path.parameter_sets["Items"].flags == (ParameterSetFlag.VALUE_FROM_PIPELINE,)
        assert cmdlet.parameters["LiteralPath"].parameter_sets["LiteralItems"].is_mandatory
        assert cmdlet.parameter_aliases["pspath"] == "LiteralPath"
        assert module.aliases["GCI"] == "Get-ChildItem"

    def test_functions_are_decoded(self, profile_bytes: bytes) -> None:
        profile = decode(profile_bytes)
        readline = profile.modules["PSReadLine"][Version.parse("2.0.0")]
        function = readline.functions["PSConsoleHostReadLine"]
        assert isinstance(function, FunctionData)
        assert function.binding_style is BindingStyle.ADVANCED

    def test_legacy_cmdlet_binding_flag(self, profile_bytes: bytes) -> None:
        helpers = decode(profile_bytes).modules["Helpers"][Version.parse("1.0")]
        assert helpers.functions["Get-ChildItem"].binding_style is BindingStyle.SIMPLE

    def test_legacy_cmdlet_binding_true(self) -> None:
        profile = _decode_doc(
            {"Types": {}, "Modules": {"M": {"1.0": {"Functions": {"f": {"CmdletBinding": True}}}}}}
        )
        assert profile.modules["M"][Version.parse("1.0")].functions["f"].is_cmdlet_binding

    def test_native_commands(self, profile_bytes: bytes) -> None:
        profile = decode(profile_bytes)
        assert profile.native_commands is not None
        git = profile.native_commands["GIT"]
        assert git.paths == ("C:\\Program Files\\Git\\cmd\\git.exe",)
        assert git.locations[0].version == Version.parse("2.40.0.1")

    def test_minimal_document(self) -> None:
        profile = _decode_doc({"Types": {}, "Modules": {}})
        assert len(profile.modules) == 0
        assert profile.native_commands is None
        assert profile.platform is None

    def test_byte_order_mark_is_ignored(self, profile_bytes: bytes) -> None:
        assert decode(b"\xef\xbb\xbf" + profile_bytes) == decode(profile_bytes)

    def test_text_input(self, profile_bytes: bytes) -> None:
        text = profile_bytes.decode("utf-8")
        assert decode("\ufeff" + text) == decode(profile_bytes)

    @pytest.mark.parametrize(
        ("wire", "expected"),
        [
            ("ValueFromPipeline", ParameterSetFlag.VALUE_FROM_PIPELINE),
            ("VALUE_FROM_PIPELINE", ParameterSetFlag.VALUE_FROM_PIPELINE),
            ("valuefrompipeline", ParameterSetFlag.VALUE_FROM_PIPELINE),
            ("ValueFromPipelineByPropertyName", ParameterSetFlag.VALUE_FROM_PIPELINE_BY_PROPERTY_NAME),
            ("ValueFromRemainingArguments", ParameterSetFlag.VALUE_FROM_REMAINING_ARGUMENTS),
            ("Mandatory", ParameterSetFlag.MANDATORY),
        ],
    )
    def test_flag_names_ignore_case_and_underscores(
        self, wire: str, expected: ParameterSetFlag
    ) -> None:
        profile = _decode_doc(
            {
                "Types": {},
                "Modules": {
                    "M": {
                        "1.0": {
                            "Cmdlets": {
                                "c": {"Parameters": {"P": {"ParameterSets": {"S": {"Flags": [wire]}}}}}
                            }
                        }
                    }
                },
            }
        )
        cmdlet = profile.modules["M"][Version.parse("1.0")].cmdlets["c"]
        assert cmdlet.parameters["P"].parameter_sets["S"].flags == (expected,)

    @pytest.mark.parametrize(
        ("wire", "expected"),
        [
            ("Advanced", BindingStyle.ADVANCED),
            ("ADVANCED", BindingStyle.ADVANCED),
            ("Simple", BindingStyle.SIMPLE),
            ("Cmdlet", BindingStyle.CMDLET),
        ],
    )
    def test_binding_style_names(self, wire: str, expected: BindingStyle) -> None:
        profile = _decode_doc(
            {"Types": {}, "Modules": {"M": {"1.0": {"Functions": {"f": {"BindingStyle": wire}}}}}}
        )
        assert profile.modules["M"][Version.parse("1.0")].functions["f"].binding_style is expected

    def test_mixed_flag_spellings_in_one_capture(self) -> None:
        profile = _decode_doc(
            {
                "Types": {},
                "Modules": {
                    "M": {
                        "1.0": {
                            "Cmdlets": {
                                "c": {
                                    "Parameters": {
                                        "P": {
                                            "ParameterSets": {
                                                "S": {"Flags": ["ValueFromPipeline", "Mandatory"]}
                                            }
                                        }
                                    }
                                }
                            }
                        }
                    }
                },
            }
        )
        cmdlet = profile.modules["M"][Version.parse("1.0")].cmdlets["c"]
        flags = cmdlet.parameters["P"].parameter_sets["S"].flags
        assert ParameterSetFlag.VALUE_FROM_PIPELINE in flags
        assert ParameterSetFlag.MANDATORY in flags

    def test_unknown_enum_names_are_preserved(self) -> None:
        profile = _decode_doc(
            {
                "Platform": {"OperatingSystem": "Windows"},
                "Types": {},
                "Modules": {
                    "M": {
                        "1.0": {
                            "Functions": {
                                "f": {
                                    "BindingStyle": "Filter",
                                    "Parameters": {
                                        "P": {"ParameterSets": {"S": {"Flags": ["DONT_SHOW"]}}}
                                    },
                                }
                            }
                        }
                    }
                },
            }
        )
        assert profile.platform is not None
        assert profile.platform.os_family is OperatingSystemFamily.WINDOWS
        function = profile.modules["M"][Version.parse("1.0")].functions["f"]
        assert function.binding_style == "Filter"
        assert function.parameters["P"].parameter_sets["S"].flags == ("DONT_SHOW",)


class TestDecodeErrors:
    @pytest.mark.parametrize("missing", ["Types", "Modules"])
    def test_missing_required_field(self, profile_document: dict[str, object], missing: str) -> None:
        del profile_document[missing]
        with pytest.raises(FormatError) as exc_info:
            _decode_doc(profile_document)
        assert missing in str(exc_info.value)

    def test_bad_module_version(self) -> None:
        with pytest.raises(VersionParseError) as exc_info:
            _decode_doc({"Types": {}, "Modules": {"M": {"abc": {}}}})
        assert exc_info.value.text == "abc"
        assert not isinstance(exc_info.value, FormatError)

    def test_bad_native_command_version(self) -> None:
        with pytest.raises(VersionParseError):
            _decode_doc(
                {"Types": {}, "Modules": {}, "NativeCommands": {"git": [{"Path": "/g", "Version": "2"}]}}
            )

    def test_invalid_json(self) -> None:
        with pytest.raises(FormatError) as exc_info:
            decode(b'{"Types": {},\n "Modules": ')
        assert exc_info.value.location == "line 2"

    def test_root_must_be_an_object(self) -> None:
        with pytest.raises(FormatError):
            decode(b"[]")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(FormatError):
            decode(b'{"Types": {}, "Modules": {"\xff": {}}}')

    def test_wrong_shape_reports_location(self) -> None:
        with pytest.raises(FormatError) as exc_info:
            _decode_doc({"Types": {}, "Modules": {"M": {"1.0": {"Cmdlets": ["Get-Foo"]}}}})
        assert exc_info.value.location == "Modules/M/1.0/Cmdlets"

    def test_case_insensitive_duplicate_commands(self) -> None:
        with pytest.raises(FormatError):
            _decode_doc(
                {"Types": {}, "Modules": {"M": {"1.0": {"Cmdlets": {"Get-Foo": {}, "GET-FOO": {}}}}}}
            )

    def test_duplicate_module_versions(self) -> None:
        with pytest.raises(FormatError):
            _decode_doc({"Types": {}, "Modules": {"M": {"1.0": {}}, "m": {"1.0": {}}}})

    def test_position_must_be_integer(self) -> None:
        with pytest.raises(FormatError):
            _decode_doc(
                {
                    "Types": {},
                    "Modules": {
                        "M": {
                            "1.0": {
                                "Cmdlets": {
                                    "c": {"Parameters": {"P": {"ParameterSets": {"S": {"Position": True}}}}}
                                }
                            }
                        }
                    },
                }
            )

    def test_cmdlet_binding_must_be_boolean(self) -> None:
        with pytest.raises(FormatError):
            _decode_doc(
                {"Types": {}, "Modules": {"M": {"1.0": {"Functions": {"f": {"CmdletBinding": "yes"}}}}}}
            )


# ===========================================================================
# Encoding
# ===========================================================================


class TestEncode:
    @pytest.mark.parametrize("pretty", [False, True])
    def test_round_trip(self, profile_bytes: bytes, pretty: bool) -> None:
        profile = decode(profile_bytes)
        assert decode(encode(profile, pretty=pretty)) == profile

    def test_output_is_deterministic(self, profile_bytes: bytes) -> None:
        profile = decode(profile_bytes)
        assert encode(profile) == encode(decode(encode(profile)))

    def test_compact_and_pretty_differ_only_in_whitespace(self, profile_bytes: bytes) -> None:
        profile = decode(profile_bytes)
        compact = encode(profile)
        pretty = encode(profile, pretty=True)
        assert b"\n" not in compact
        assert b"\n" in pretty
        assert json.loads(compact) == json.loads(pretty)

    def test_versions_and_enums_are_written_as_strings(self, profile_bytes: bytes) -> None:
        document = json.loads(encode(decode(profile_bytes)))
        assert "7.0.0.0" in document["Modules"]["Microsoft.PowerShell.Management"]
        function = document["Modules"]["PSReadLine"]["2.0.0"]["Functions"]["PSConsoleHostReadLine"]
        assert function["BindingStyle"] == "Advanced"
        cmdlet = document["Modules"]["Microsoft.PowerShell.Management"]["7.0.0.0"]["Cmdlets"][
            "Get-ChildItem"
        ]
        assert cmdlet["Parameters"]["Path"]["ParameterSets"]["Items"]["Flags"] == [
            "ValueFromPipeline"
        ]
        assert document["Platform"]["OperatingSystem"] == "Windows"
        assert document["Platform"]["RuntimeVersion"] == "7.2.1"
        assert document["NativeCommands"]["git"][0]["Version"] == "2.40.0.1"

    def test_upper_snake_names_are_rewritten_in_pascal_case(self) -> None:
        document = {
            "Types": {},
            "Modules": {
                "M": {
                    "1.0": {
                        "Cmdlets": {
                            "c": {
                                "Parameters": {
                                    "P": {
                                        "ParameterSets": {
                                            "S": {"Flags": ["VALUE_FROM_PIPELINE_BY_PROPERTY_NAME"]}
                                        }
                                    }
                                }
                            }
                        }
                    }
                }
            },
        }
        encoded = json.loads(encode(_decode_doc(document)))
        pset = encoded["Modules"]["M"]["1.0"]["Cmdlets"]["c"]["Parameters"]["P"]["ParameterSets"]["S"]
        assert pset["Flags"] == ["ValueFromPipelineByPropertyName"]

    def test_legacy_flag_is_rewritten_as_binding_style(self, profile_bytes: bytes) -> None:
        document = json.loads(encode(decode(profile_bytes)))
        function = document["Modules"]["Helpers"]["1.0"]["Functions"]["Get-ChildItem"]
        assert function["BindingStyle"] == "Simple"
        assert "CmdletBinding" not in function

    def test_absent_sections_are_omitted(self) -> None:
        data = ProfileSerializer().to_dict(Profile.build())
        assert "NativeCommands" not in data
        assert "Platform" not in data

    def test_unknown_enum_names_round_trip(self) -> None:
        document = {
            "Types": {},
            "Modules": {"M": {"1.0": {"Functions": {"f": {"BindingStyle": "Filter"}}}}},
        }
        encoded = json.loads(encode(_decode_doc(document)))
        assert encoded["Modules"]["M"]["1.0"]["Functions"]["f"]["BindingStyle"] == "Filter"

    def test_non_ascii_is_written_verbatim(self) -> None:
        profile = _decode_doc({"Types": {"Types": ["Café.Type"]}, "Modules": {}})
        assert "Café.Type".encode("utf-8") in encode(profile)


class TestYaml:
    def test_round_trip(self, profile_bytes: bytes) -> None:
        serializer = ProfileSerializer()
        profile = decode(profile_bytes)
        assert serializer.from_yaml(serializer.to_yaml(profile)) == profile

    def test_invalid_yaml(self) -> None:
        with pytest.raises(FormatError):
            ProfileSerializer().from_yaml("Types: [unclosed")


# ===========================================================================
# Files
# ===========================================================================


class TestFiles:
    def test_save_and_load(self, tmp_path: Path, profile_bytes: bytes) -> None:
        profile = decode(profile_bytes)
        path = tmp_path / "out.json"
        save_profile(profile, path, pretty=True)
        assert load_profile(path) == profile

    def test_load_fixture_file(self, profile_file: Path) -> None:
        assert load_profile(profile_file).platform is not None

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.json"
        with pytest.raises(ResourceAccessError) as exc_info:
            load_profile(path)
        error = exc_info.value
        assert isinstance(error, OSError)
        assert error.errno == errno.ENOENT
        assert error.path == str(path)
        assert isinstance(error.__cause__, FileNotFoundError)

    def test_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"Types": {}}', encoding="utf-8")
        with pytest.raises(FormatError):
            load_profile(path)

    def test_stream_is_closed_when_decoding_fails(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        stream = io.BytesIO(b"not json")
        monkeypatch.setattr(Path, "open", lambda self, *args, **kwargs: stream)
        with pytest.raises(FormatError):
            load_profile(tmp_path / "any.json")
        assert stream.closed

    def test_encode_failure_leaves_existing_file(
        self, tmp_path: Path, profile_bytes: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "existing.json"
        path.write_bytes(b"original")

        def failing_encode(self, profile, pretty=None):  # type: ignore[no-untyped-def]
            raise RuntimeError("encode failed")

        monkeypatch.setattr(ProfileSerializer, "encode", failing_encode)
        with pytest.raises(RuntimeError):
            save_profile(Profile.build(), path)
        assert path.read_bytes() == b"original"

    def test_unwritable_destination(self, tmp_path: Path) -> None:
        with pytest.raises(ResourceAccessError):
            save_profile(Profile.build(), tmp_path / "no-such-dir" / "out.json")
