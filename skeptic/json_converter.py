"""cattrs converter configuration for JSON serialization.

Configures cattrs to serialize doc test records and emission manifests to
JSON with camelCase keys, leaving out fields that hold their default value.
"""

from __future__ import annotations

import json
from dataclasses import MISSING, fields
from pathlib import Path
from typing import Any, Callable, get_type_hints

import cattrs

from .types import DocTest, DocTestSuite, Test


def _to_camel_case(snake_str: str) -> str:
    """Convert a snake_case string to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def _make_omit_default_hook(
    cls: type,
    conv: cattrs.Converter,
    required_fields: set[str] | None = None,
) -> Callable[[Any], dict[str, Any]]:
    """Create an unstructure hook that omits fields equal to their defaults.

    Pre-computes field information at registration time. Output field names
    are converted from snake_case to camelCase.

    Args:
        cls: The dataclass type
        conv: The cattrs converter
        required_fields: Set of field names that must always be included (even if default)
    """
    if required_fields is None:
        required_fields = set()

    # Sentinel for fields with no default (must always be included)
    _NO_DEFAULT = object()

    # Store (python_name, json_name, default, is_required)
    field_info: list[tuple[str, str, Any, bool]] = []
    for fld in fields(cls):
        if fld.default is not MISSING:
            default = fld.default
        elif fld.default_factory is not MISSING:
            default = fld.default_factory()
        else:
            default = _NO_DEFAULT

        is_required = fld.name in required_fields or default is _NO_DEFAULT
        field_info.append((fld.name, _to_camel_case(fld.name), default, is_required))

    def unstructure(obj: Any) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for py_name, json_name, default, is_required in field_info:
            val = getattr(obj, py_name)
            # Skip if value equals the field's default (handles None, (), False correctly)
            if not is_required and val == default:
                continue
            result[json_name] = conv.unstructure(val)
        return result

    return unstructure


def _make_camel_structure_hook(
    cls: type,
    conv: cattrs.Converter,
) -> Callable[[dict[str, Any], type], Any]:
    """Create a structure hook reading the camelCase keys written by the unstructure hook.

    Keys that are absent fall back to the dataclass defaults.
    """
    hints = get_type_hints(cls)
    field_info = [(fld.name, _to_camel_case(fld.name), hints[fld.name]) for fld in fields(cls)]

    def structure(d: dict[str, Any], _: type) -> Any:
        kwargs = {
            py_name: conv.structure(d[json_name], field_type)
            for py_name, json_name, field_type in field_info
            if json_name in d
        }
        return cls(**kwargs)

    return structure


def _create_converter() -> cattrs.Converter:
    """Create and configure a cattrs converter for JSON serialization."""
    conv = cattrs.Converter()

    conv.register_unstructure_hook(Path, lambda p: p.as_posix())
    conv.register_structure_hook(Path, lambda d, _: Path(d))

    type_required_fields: dict[type, set[str]] = {
        Test: {"name", "text", "line"},
        DocTest: {"path", "tests"},
        DocTestSuite: {"doc_tests"},
    }

    for cls, required in type_required_fields.items():
        conv.register_unstructure_hook(cls, _make_omit_default_hook(cls, conv, required))
        conv.register_structure_hook(cls, _make_camel_structure_hook(cls, conv))

    return conv


def register_record(cls: type, required_fields: set[str] | None = None) -> None:
    """Register camelCase hooks for another dataclass on the global converter."""
    converter.register_unstructure_hook(
        cls, _make_omit_default_hook(cls, converter, required_fields)
    )
    converter.register_structure_hook(cls, _make_camel_structure_hook(cls, converter))


def suite_to_json(suite: DocTestSuite, indent: int | None = 2) -> str:
    """Serialize a suite to a JSON document."""
    return json.dumps(converter.unstructure(suite), indent=indent)


def suite_from_json(data: str) -> DocTestSuite:
    """Load a suite serialized by :func:`suite_to_json`."""
    return converter.structure(json.loads(data), DocTestSuite)


# Global converter instance
converter: cattrs.Converter = _create_converter()
