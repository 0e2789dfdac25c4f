# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
from collections.abc import Iterable
from enum import Enum, auto
from typing import NamedTuple, Union

# Local Modules:
from .roomdata.objects import DIRECTIONS, Node, Zone
from .world import World


logger: logging.Logger = logging.getLogger(__name__)


class GameSignal(NamedTuple):
	"""The room information most recently sent by the game."""

	roomName: str = ""
	roomDescription: str = ""
	exits: frozenset[str] = frozenset()

	@classmethod
	def fromExits(cls, roomName: str, roomDescription: str = "", exits: Iterable[str] = ()) -> GameSignal:
		"""Creates a signal, keeping only the cardinal directions of the given exits."""
		return cls(roomName, roomDescription, frozenset(e.lower() for e in exits if e.lower() in DIRECTIONS))


class ResolveStatus(Enum):
	RESOLVED = auto()
	AMBIGUOUS = auto()
	UNRESOLVED = auto()
	NO_MAP = auto()


class Resolution(object):
	"""
	The outcome of resolving a game signal to a node.
	"""

	def __init__(
		self,
		status: ResolveStatus,
		node: Union[Node, None] = None,
		candidates: Iterable[Node] = (),
		roomName: str = "",
		zoneChanged: bool = False,
	) -> None:
		self.status: ResolveStatus = status
		self.node: Union[Node, None] = node
		self.candidates: tuple[Node, ...] = tuple(candidates)
		self.roomName: str = roomName
		self.zoneChanged: bool = zoneChanged

	def __repr__(self) -> str:
		return f"{type(self).__name__}({self.status.name}, node={self.node!r})"

	@property
	def isResolved(self) -> bool:
		"""True if a node was selected, even heuristically."""
		return self.node is not None

	@property
	def message(self) -> str:
		"""A status line describing the outcome."""
		if self.status is ResolveStatus.NO_MAP:
			return "No map loaded"
		elif self.status is ResolveStatus.AMBIGUOUS:
			return f"Multiple matches ({len(self.candidates)})"
		elif self.node is not None:
			return f"#{self.node.id} {self.node.name}"
		elif not self.roomName:
			return "No room name"
		return f"Not found: {self.roomName}"


def matchesName(node: Node, roomName: str) -> bool:
	return not node.isMapLink and node.name.strip().lower() == roomName.strip().lower()


def matchesDescription(node: Node, roomDescription: str) -> bool:
	"""
	Determines if a node matches an observed room description.

	Nodes without stored descriptions and empty observed descriptions always match.
	"""
	roomDescription = roomDescription.strip().lower()
	if not roomDescription or not node.descriptions:
		return True
	return any(description.strip().lower() == roomDescription for description in node.descriptions)


def matchesExits(node: Node, exits: frozenset[str]) -> bool:
	"""
	Determines if the visible cardinal exits of a node are close enough to the observed exits.

	At least half of the smaller of the two sets, rounded down, must be shared.
	An empty set on either side always matches.
	"""
	nodeExits: frozenset[str] = node.cardinalExits
	if not exits or not nodeExits:
		return True
	return len(exits & nodeExits) >= min(len(exits), len(nodeExits)) // 2


class LocationResolver(object):
	"""
	Maps the room information sent by the game to a node of the active zone.
	"""

	def __init__(self, world: World, crossZoneFallback: bool = True) -> None:
		self.world: World = world
		self.crossZoneFallback: bool = crossZoneFallback

	def candidates(self, zone: Zone, signal: GameSignal) -> list[Node]:
		"""
		Filters the nodes of a zone by name, description, and exits.

		Args:
			zone: The zone to search.
			signal: The observed room information.

		Returns:
			The surviving nodes, in enumeration order.
		"""
		return [
			node
			for node in zone
			if matchesName(node, signal.roomName)
			and matchesDescription(node, signal.roomDescription)
			and matchesExits(node, signal.exits)
		]

	def select(self, zone: Zone, candidates: list[Node], previousId: Union[int, None]) -> Resolution:
		"""
		Picks one node out of the candidates.

		When more than one node survives, the only candidate reachable by one arc from the
		previous node is chosen. Otherwise the previous node is kept if it is among them.
		Failing both, the first candidate is picked and the result is reported as ambiguous.
		"""
		if not candidates:
			return Resolution(ResolveStatus.UNRESOLVED)
		elif len(candidates) == 1:
			return Resolution(ResolveStatus.RESOLVED, candidates[0], candidates)
		previous: Union[Node, None] = zone.get(previousId)
		if previous is not None:
			connected: list[Node] = [node for node in candidates if previous.arcTo(node.id) is not None]
			if len(connected) == 1:
				return Resolution(ResolveStatus.RESOLVED, connected[0], candidates)
			elif previous in candidates:
				return Resolution(ResolveStatus.RESOLVED, previous, candidates)
		logger.debug(f"{len(candidates)} rooms match, picking {candidates[0]!r}.")
		return Resolution(ResolveStatus.AMBIGUOUS, candidates[0], candidates)

	def resolveInZone(self, zone: Zone, signal: GameSignal, previousId: Union[int, None]) -> Resolution:
		resolution: Resolution = self.select(zone, self.candidates(zone, signal), previousId)
		resolution.roomName = signal.roomName
		return resolution

	def resolve(self, signal: GameSignal, previousId: Union[int, None] = None) -> Resolution:
		"""
		Determines which node the player occupies.

		If nothing matches in the active zone, the first other zone containing a room with the
		same name becomes active and the search is repeated there once.

		Args:
			signal: The observed room information.
			previousId: The Id of the node the player was last known to occupy.

		Returns:
			The resolution.
		"""
		if not signal.roomName.strip():
			return Resolution(ResolveStatus.UNRESOLVED)
		zone: Union[Zone, None] = self.world.activeZone
		if zone is None and not self.world.zones:
			return Resolution(ResolveStatus.NO_MAP, roomName=signal.roomName)
		resolution: Resolution
		if zone is not None:
			resolution = self.resolveInZone(zone, signal, previousId)
			if resolution.isResolved or not self.crossZoneFallback:
				return resolution
		elif not self.crossZoneFallback:
			return Resolution(ResolveStatus.NO_MAP, roomName=signal.roomName)
		fallback: Union[Zone, None] = self.world.findZoneWithRoom(signal.roomName, exclude=zone)
		if fallback is None:
			return Resolution(ResolveStatus.UNRESOLVED, roomName=signal.roomName)
		logger.info(f"'{signal.roomName}' not found in {zone!r}, switching to {fallback!r}.")
		self.world.activeZone = fallback
		resolution = self.resolveInZone(fallback, signal, None)
		resolution.zoneChanged = True
		return resolution
