"""
RU: Поиск кода производителя (вместо запроса к БД).
EN: Manufacturer code lookups used by the SKU generator.

The generator only depends on the ManufacturerLookup protocol; storage behind
it (in-memory mapping, JSON file, a database adapter) is up to the caller.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, Union, runtime_checkable

logger = logging.getLogger(__name__)

__all__ = [
    "ManufacturerLookup",
    "ManufacturerLookupError",
    "MappingManufacturerLookup",
    "JsonFileManufacturerLookup",
    "lookup_from_config",
]


class ManufacturerLookupError(Exception):
    """Manufacturer code source is unreadable or malformed."""


@runtime_checkable
class ManufacturerLookup(Protocol):
    def code_for(self, name: str) -> Optional[str]:
        """Return the manufacturer's short code or None when unknown."""
        ...


class MappingManufacturerLookup:
    """In-memory {manufacturer name: code} lookup."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None) -> None:
        self._codes: Dict[str, str] = {}
        for name, code in (mapping or {}).items():
            self.add(name, code)

    def add(self, name: str, code: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ManufacturerLookupError("Manufacturer name must be a non-empty string")
        if not isinstance(code, str) or not code.strip():
            raise ManufacturerLookupError(
                f"Manufacturer code for {name!r} must be a non-empty string"
            )
        self._codes[name] = code.strip()

    def code_for(self, name: str) -> Optional[str]:
        return self._codes.get(name)

    def __len__(self) -> int:
        return len(self._codes)

    def __contains__(self, name: object) -> bool:
        return name in self._codes


class JsonFileManufacturerLookup(MappingManufacturerLookup):
    """
    Lookup loaded once from a JSON object file ``{"Name": "CODE", ...}``.

    Raises:
        ManufacturerLookupError: file missing, unreadable, or not a JSON object.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data: Any = json.load(f)
        except json.JSONDecodeError as e:
            raise ManufacturerLookupError(
                f"Invalid JSON in {self.path} at line {e.lineno}, column {e.colno}"
            ) from e
        except OSError as e:
            raise ManufacturerLookupError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ManufacturerLookupError(
                f"{self.path} must contain a JSON object, got {type(data).__name__}"
            )
        super().__init__(data)
        logger.info("Loaded %d manufacturer codes from %s", len(self), self.path)


def lookup_from_config(config: Mapping[str, Any]) -> MappingManufacturerLookup:
    """
    Build a lookup from ``manufacturer_codes`` and ``manufacturer_codes_file``.

    Inline codes override codes from the file.
    """
    lookup: MappingManufacturerLookup
    codes_file = config.get("manufacturer_codes_file")
    if codes_file:
        lookup = JsonFileManufacturerLookup(codes_file)
    else:
        lookup = MappingManufacturerLookup()
    inline = config.get("manufacturer_codes") or {}
    if not isinstance(inline, Mapping):
        raise ManufacturerLookupError("manufacturer_codes must be an object")
    for name, code in inline.items():
        lookup.add(name, code)
    return lookup
