"""Loading allocation request files.

File system problems, malformed JSON and schema violations all surface as
a single ConfigError whose ``error_type`` tells them apart.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from stockalloc.application.config.schema import AllocationConfiguration


class ConfigError(Exception):
    """Raised when an allocation request cannot be loaded.

    Attributes:
        message: The primary error message.
        error_type: One of file_not_found, permission_denied,
            file_read_error, json_parse, validation.
        path: Path of the request file, if any.
        details: Per-error details (line/column or field path).
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Render a Pydantic location tuple as a dotted path.

    Examples:
        >>> _format_json_path(("pieces", 0, "current_length_mm"))
        'pieces[0].current_length_mm'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _validation_error(error: PydanticValidationError, path: Path | None = None) -> ConfigError:
    details = [
        {
            "path": _format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]
    lines = ["Allocation request validation failed:"]
    for detail in details:
        lines.append(f"  - {detail['path']}: {detail['message']}")
    return ConfigError(
        message="\n".join(lines),
        error_type="validation",
        path=path,
        details=details,
    )


def load_config(path: Path) -> AllocationConfiguration:
    """Load and validate an allocation request from a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file is missing, unreadable, not JSON, or does
            not match the schema.
    """
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in config file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )

    try:
        return AllocationConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error(e, path)


def load_config_from_dict(data: dict[str, Any]) -> AllocationConfiguration:
    """Validate an allocation request given as a dictionary."""
    try:
        return AllocationConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error(e)
