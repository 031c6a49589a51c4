"""
Configuration management for the Unix domain socket client.

This module provides type-safe configuration handling with validation.
"""

import json
import logging
from pathlib import Path
from typing import Union, Dict, Any
from dataclasses import dataclass, asdict

# JSON key -> attribute name
_FILE_KEYS = {
    "socketPath": "socket_path",
    "greeting": "greeting",
    "connectionTimeout": "connection_timeout",
    "writeTimeout": "write_timeout",
    "readChunkSize": "read_chunk_size",
    "logLevel": "log_level",
}


@dataclass
class Config:
    """Configuration for the socket client and the greeter application."""

    socket_path: str = "/tmp/socket_file"
    greeting: str = "Hello, rust server!"
    connection_timeout: float = 5.0
    write_timeout: float = 10.0
    read_chunk_size: int = 65536
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.socket_path, str) or not self.socket_path.strip():
            raise ValueError(
                f"Invalid socket_path: {self.socket_path}. Must be a non-empty string."
            )

        if not isinstance(self.greeting, str):
            raise ValueError(f"Invalid greeting: {self.greeting}. Must be a string.")

        for name in ("connection_timeout", "write_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"Invalid {name}: {value}. Must be a positive number.")

        if (
            isinstance(self.read_chunk_size, bool)
            or not isinstance(self.read_chunk_size, int)
            or self.read_chunk_size < 1
        ):
            raise ValueError(
                f"Invalid read_chunk_size: {self.read_chunk_size}. Must be a positive integer."
            )

        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level}.")

    @classmethod
    def from_file(cls, filepath: str) -> "Config":
        """Load configuration from JSON file, falling back to defaults for missing keys."""
        if not filepath or not filepath.strip():
            raise ValueError("Filepath must be a non-empty string")

        try:
            config_data = json.loads(Path(filepath).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as err:
            raise ValueError(f"Failed to load config from {filepath}: {err}") from err

        if not isinstance(config_data, dict):
            raise ValueError(f"Failed to load config from {filepath}: expected an object")

        kwargs = {
            attr: config_data[key] for key, attr in _FILE_KEYS.items() if key in config_data
        }
        return cls(**kwargs)

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        if not filepath or not filepath.strip():
            raise ValueError("Filepath must be a non-empty string")

        try:
            file_path = Path(filepath)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(
                json.dumps(self.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as err:
            raise ValueError(f"Failed to save config to {filepath}: {err}") from err

    def update(self, **kwargs: Union[str, int, float]) -> "Config":
        """Create a copy with updated values."""
        current = asdict(self)
        current.update(kwargs)
        return Config(**current)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {key: getattr(self, attr) for key, attr in _FILE_KEYS.items()}
