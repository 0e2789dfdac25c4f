# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import json
import os.path
from collections.abc import Iterator
from typing import Any, MutableMapping

# Local Modules:
from .utils import getDataPath


DATA_DIRECTORY: str = getDataPath()
DEFAULTS: dict[str, Any] = {
	"logging_level": "INFO",
	"maps_directory": "maps",
	"cross_zone_fallback": True,
	"find_me_clears_path": True,
}


class ConfigError(Exception):
	"""Implements the base class for Config exceptions."""


class Config(MutableMapping[str, Any]):
	"""
	The user's automapper settings.

	Values set in '<name>.json' take precedence over '<name>.json.sample', and keys missing
	from both fall back to DEFAULTS when read through get or the typed properties.
	Only the keys actually set are written back by save.
	"""

	def __init__(self, name: str = "config") -> None:
		super().__init__()
		self._name: str = name
		self._config: dict[str, Any] = dict()
		self.reload()

	@property
	def name(self) -> str:
		"""The name of the configuration."""
		return self._name

	@property
	def filePath(self) -> str:
		return os.path.join(DATA_DIRECTORY, f"{self.name}.json")

	@property
	def mapsDirectory(self) -> str:
		"""The directory holding zone files. Relative paths are relative to the data directory."""
		return os.path.join(DATA_DIRECTORY, str(self.get("maps_directory")))

	@property
	def crossZoneFallback(self) -> bool:
		"""Search the other loaded zones when the current room isn't found in the active one."""
		return bool(self.get("cross_zone_fallback"))

	@property
	def findMeClearsPath(self) -> bool:
		return bool(self.get("find_me_clears_path"))

	def _parse(self, filename: str) -> dict[str, Any]:
		filename = os.path.join(DATA_DIRECTORY, filename)
		if not os.path.exists(filename):
			return {}
		elif os.path.isdir(filename):
			raise ConfigError(f"'{filename}' is a directory, not a file.")
		try:
			with open(filename, "r", encoding="utf-8") as fileObj:
				data: Any = json.load(fileObj)
		except IOError as e:  # pragma: no cover
			raise ConfigError(f"{e.strerror}: '{e.filename}'")
		except ValueError:
			raise ConfigError(f"Corrupted json file: {filename}")
		if not isinstance(data, dict):
			raise ConfigError(f"'{filename}' must contain a json object.")
		return data

	def reload(self) -> None:
		"""Reloads the configuration from disc."""
		self._config.clear()
		self._config.update(self._parse(f"{self.name}.json.sample"))
		self._config.update(self._parse(f"{self.name}.json"))

	def save(self) -> None:
		"""Saves the configuration to disc."""
		with open(self.filePath, "w", encoding="utf-8") as fileObj:
			json.dump(self._config, fileObj, sort_keys=True, indent=2)

	def get(self, key: str, default: Any = None) -> Any:
		if key in self._config:
			return self._config[key]
		elif default is None:
			return DEFAULTS.get(key)
		return default

	def __getitem__(self, key: str) -> Any:
		return self._config[key]

	def __setitem__(self, key: str, value: Any) -> None:
		self._config[key] = value

	def __delitem__(self, key: str) -> None:
		del self._config[key]

	def __iter__(self) -> Iterator[str]:
		return iter(self._config)

	def __len__(self) -> int:
		return len(self._config)
