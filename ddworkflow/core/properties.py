"""Key/value properties loaded once from a classpath resource."""

from __future__ import annotations

import logging
import re
import warnings
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from jproperties import Properties, PropertyError

from ddworkflow.core.resources import Classpath

LOGGER = logging.getLogger("ddworkflow.core.properties")

REDACTED = "********"

# Integer.parseInt syntax: optional sign, ASCII digits only.
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class ConfigurationLoadError(RuntimeError):
    """Raised when the properties resource is missing or unreadable."""


class MissingPropertyError(ConfigurationLoadError):
    """Raised when a required property is absent or blank."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Required property '{key}' is not set")
        self.key = key


class ConfigurationParseWarning(UserWarning):
    """Issued when a typed property cannot be parsed and the default is used."""


class ApplicationProperties:
    """Immutable string-keyed properties with typed accessors."""

    def __init__(self, values: Mapping[str, str], *, source: str = "<memory>") -> None:
        self._values: Mapping[str, str] = MappingProxyType(dict(values))
        self.source = source

    @classmethod
    def load(cls, name: str, classpath: Optional[Classpath] = None) -> "ApplicationProperties":
        """Read ``name`` from the classpath.

        Raises ConfigurationLoadError when the resource cannot be found,
        read or decoded.
        """

        classpath = classpath or Classpath()
        resource = classpath.find(name)
        if resource is None:
            LOGGER.error("Unable to find %s on classpath [%s]", name, classpath.describe())
            raise ConfigurationLoadError(f"Configuration file not found: {name}")

        parsed = Properties()
        try:
            parsed.load(resource.read_bytes(), "utf-8")
        except (OSError, UnicodeDecodeError, PropertyError) as exc:
            raise ConfigurationLoadError(f"Error loading properties file {name}: {exc}") from exc

        values = {key: parsed[key].data for key in parsed}
        LOGGER.info("Configuration loaded successfully from %s", name, extra={"property_count": len(values)})
        return cls(values, source=str(resource))

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        value = self._values.get(key)
        if value is None:
            return default
        text = value.strip()
        if _INT_PATTERN.fullmatch(text):
            return int(text)
        else:
            message = f"Invalid integer value for property '{key}', using default: {default}"
            LOGGER.warning(message)
            warnings.warn(message, ConfigurationParseWarning, stacklevel=2)
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        value = self._values.get(key)
        if value is None:
            return default
        return value.strip().lower() == "true"

    def has(self, key: str) -> bool:
        return key in self._values

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def dump(self) -> List[str]:
        """Log and return every entry, masking password-like keys."""

        lines = []
        for key in sorted(self._values):
            display = REDACTED if "password" in key.lower() else self._values[key]
            lines.append(f"{key} = {display}")

        LOGGER.info("Loaded configuration from %s:", self.source)
        for line in lines:
            LOGGER.info("  %s", line)
        return lines
