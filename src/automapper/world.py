# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
import os.path
import threading
from collections.abc import Generator, Iterable
from timeit import default_timer as defaultTimer
from typing import Optional, Union

# Third-party Modules:
from rapidfuzz import fuzz

# Local Modules:
from .roomdata.database import listZoneFiles, loadZone
from .roomdata.objects import Node, Zone


logger: logging.Logger = logging.getLogger(__name__)


class World(object):
	"""
	Holds the loaded zones and tracks which one is active.

	Zones are never edited in place. Reloading a zone swaps the whole object under the lock,
	so readers holding a reference to the previous zone are unaffected.
	"""

	def __init__(self, zones: Iterable[Zone] = ()) -> None:
		self.zonesLock = threading.Lock()
		self.zones: dict[str, Zone] = {}
		self._activeZone: Union[Zone, None] = None
		for zone in zones:
			self.replaceZone(zone)

	@property
	def activeZone(self) -> Union[Zone, None]:
		return self._activeZone

	@activeZone.setter
	def activeZone(self, value: Union[Zone, None]) -> None:
		if value is not None and value.id not in self.zones:
			raise ValueError(f"Zone '{value.id}' has not been loaded.")
		if value is not self._activeZone:
			logger.info(f"Active zone changed to {value!r}.")
		self._activeZone = value

	def replaceZone(self, zone: Zone) -> None:
		"""
		Adds a zone, or replaces a loaded zone with the same Id.

		Args:
			zone: The new zone.
		"""
		with self.zonesLock:
			previous: Union[Zone, None] = self.zones.get(zone.id)
			self.zones[zone.id] = zone
			if previous is not None and previous is self._activeZone:
				self._activeZone = zone

	def removeZone(self, zoneId: str) -> None:
		with self.zonesLock:
			zone: Union[Zone, None] = self.zones.pop(zoneId, None)
			if zone is not None and zone is self._activeZone:
				self._activeZone = None

	def loadZones(self, directory: str) -> list[str]:
		"""
		Loads every zone file in a directory.

		Args:
			directory: The directory containing the zone files.

		Returns:
			The error messages of the files which could not be loaded.
		"""
		startTime: float = defaultTimer()
		errorMessages: list[str] = []
		for path in listZoneFiles(directory):
			errors: Union[str, None]
			zone: Union[Zone, None]
			errors, zone = loadZone(path)
			if zone is None:
				logger.warning(errors)
				errorMessages.append(str(errors))
			else:
				self.replaceZone(zone)
		elapsedTime: float = defaultTimer() - startTime
		logger.info(f"{len(self.zones)} zones loaded from '{directory}' in {elapsedTime:.1f} seconds.")
		return errorMessages

	def findZone(self, text: str) -> Union[Zone, None]:
		"""
		Finds a loaded zone by Id, name, or file name without extension.

		Args:
			text: The zone Id, name, or file stem.

		Returns:
			The zone, or None if nothing matches.
		"""
		text = text.strip()
		if not text:
			return None
		elif text in self.zones:
			return self.zones[text]
		lowered: str = text.lower()
		for zone in self.zones.values():
			fileStem: str = os.path.splitext(os.path.basename(zone.filePath))[0]
			if zone.name.strip().lower() == lowered or fileStem and fileStem.lower() == lowered:
				return zone
		return None

	def selectZone(self, text: str) -> bool:
		"""
		Makes a zone the active zone.

		Args:
			text: The zone Id, name, or file stem.

		Returns:
			True if the active zone changed, False otherwise.
		"""
		zone: Union[Zone, None] = self.findZone(text)
		if zone is None or zone is self.activeZone:
			return False
		self.activeZone = zone
		return True

	def otherZones(self, exclude: Optional[Zone] = None) -> Generator[Zone, None, None]:
		"""A generator which yields the loaded zones, in load order, other than the excluded one."""
		for zone in list(self.zones.values()):
			if zone is not exclude:
				yield zone

	def findZoneWithRoom(self, roomName: str, exclude: Optional[Zone] = None) -> Union[Zone, None]:
		"""
		Finds the first zone containing a room with the given name.

		Args:
			roomName: The room name to look for, compared case-insensitively.
			exclude: A zone which should not be searched.

		Returns:
			The zone, or None if no other zone has a room with that name.
		"""
		for zone in self.otherZones(exclude):
			if zone.hasNodeNamed(roomName):
				return zone
		return None

	def getNode(self, nodeId: Union[int, None]) -> Union[Node, None]:
		if self.activeZone is None:
			return None
		return self.activeZone.get(nodeId)

	def getNodeFromTarget(self, text: str) -> Union[Node, None]:
		"""
		Finds the destination of a goto request in the active zone.

		Args:
			text: A node Id, or the start of one of the '|' delimited tokens of a node note.

		Returns:
			The node, or None if nothing matches.
		"""
		text = text.strip()
		zone: Union[Zone, None] = self.activeZone
		if not text or zone is None:
			return None
		elif text.isdecimal():  # The text is a node Id.
			return zone.get(int(text))
		lowered: str = text.lower()
		for node in zone:
			for token in node.noteTokens:
				if token.lower().startswith(lowered):
					return node
		return None

	def similarNotes(self, text: str, limit: int = 4) -> list[str]:
		"""
		Returns the note tokens of the active zone which most closely resemble some text.

		Args:
			text: The text to compare against.
			limit: The maximum number of results.

		Returns:
			The closest note tokens, best match first.
		"""
		if self.activeZone is None:
			return []
		text = text.strip().lower()
		tokens: set[str] = {token for node in self.activeZone for token in node.noteTokens}
		return sorted(tokens, key=lambda token: (-fuzz.ratio(token.lower(), text), token))[:limit]
