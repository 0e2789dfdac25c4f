# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
from collections.abc import Iterable, Iterator
from typing import Optional, Union

# Local Modules:
from ..typedef import COORDINATES_TYPE
from ..utils import splitNote


DIRECTIONS: tuple[str, ...] = (
	"north",
	"northeast",
	"east",
	"southeast",
	"south",
	"southwest",
	"west",
	"northwest",
	"up",
	"down",
	"out",
)
NON_CARDINAL_DIRECTIONS: tuple[str, ...] = (
	"go",
	"climb",
	"none",
)
DIRECTION_COMMANDS: dict[str, str] = {
	"north": "n",
	"northeast": "ne",
	"east": "e",
	"southeast": "se",
	"south": "s",
	"southwest": "sw",
	"west": "w",
	"northwest": "nw",
	"up": "up",
	"down": "down",
	"out": "out",
}
DIRECTION_ALIASES: dict[str, str] = {
	**{direction: direction for direction in DIRECTIONS},
	**{command: direction for direction, command in DIRECTION_COMMANDS.items()},
	"u": "up",
	"d": "down",
	"o": "out",
}


def parseDirection(exit: str) -> str:
	"""
	Classifies an exit token.

	Args:
		exit: The exit token, either a direction or a verbose command such as 'go gate'.

	Returns:
		One of the cardinal directions, or 'go', 'climb', or 'none'.
	"""
	text: str = exit.strip().lower()
	if text in DIRECTION_ALIASES:
		return DIRECTION_ALIASES[text]
	for verb in NON_CARDINAL_DIRECTIONS[:-1]:
		if text.startswith(f"{verb} "):
			return verb
	return "none"


class Arc(object):
	"""
	An exit from one node to another.
	"""

	def __init__(
		self,
		destinationId: int,
		exit: str = "",
		move: str = "",
		hidden: bool = False,
		direction: Optional[str] = None,
	) -> None:
		self.destinationId: int = destinationId
		self.exit: str = exit
		self.move: str = move
		self.hidden: bool = hidden
		self.direction: str = parseDirection(exit) if direction is None else direction

	def __repr__(self) -> str:
		return f"{type(self).__name__}(destinationId={self.destinationId!r}, exit={self.exit!r})"

	@property
	def isCardinal(self) -> bool:
		"""True if the arc leads in one of the cardinal directions, False otherwise."""
		return self.direction in DIRECTIONS


class Label(object):
	"""
	A text annotation at a map position.
	"""

	def __init__(self, text: str = "", x: int = 0, y: int = 0, z: int = 0) -> None:
		self.text: str = text
		self.x: int = x
		self.y: int = y
		self.z: int = z


class Node(object):
	"""
	A room.
	"""

	def __init__(self, id: int, name: str = "") -> None:
		self.id: int = id
		self.name: str = name
		self.descriptions: list[str] = []
		self.note: str = ""
		self.isMapLink: bool = False
		self.color: Union[str, None] = None
		self.x: int = 0
		self.y: int = 0
		self.z: int = 0
		self.arcs: list[Arc] = []

	def __repr__(self) -> str:
		return f"{type(self).__name__}(id={self.id!r}, name={self.name!r})"

	@property
	def coordinates(self) -> COORDINATES_TYPE:
		"""The room coordinates."""
		return self.x, self.y, self.z

	@coordinates.setter
	def coordinates(self, value: COORDINATES_TYPE) -> None:
		if len(value) != 3:
			raise ValueError("Coordinates must be a sequence of X, Y, and Z.")
		self.x, self.y, self.z = value

	@property
	def cardinalExits(self) -> frozenset[str]:
		"""The directions of the visible cardinal exits."""
		return frozenset(arc.direction for arc in self.arcs if arc.isCardinal and not arc.hidden)

	@property
	def noteTokens(self) -> list[str]:
		"""The '|' delimited tokens of the note."""
		return splitNote(self.note)

	def arcTo(self, destinationId: int) -> Union[Arc, None]:
		"""
		Returns the first arc leading to a destination.

		Args:
			destinationId: The Id of the destination node.

		Returns:
			The arc, or None if this node has no arc to the destination.
		"""
		for arc in self.arcs:
			if arc.destinationId == destinationId:
				return arc
		return None

	@property
	def info(self) -> str:
		"""A summery of the room info."""
		output = []
		output.append(f"Id: '{self.id}'")
		output.append(f"Name: '{self.name}'")
		for description in self.descriptions:
			output.append("Description:")
			output.append("-" * 5)
			output.extend(description.splitlines())
			output.append("-" * 5)
		output.append(f"Note: '{self.note}'")
		output.append(f"Map Link: '{self.isMapLink}'")
		output.append(f"Coordinates (X, Y, Z): '{self.x}', '{self.y}', '{self.z}'")
		output.append("Exits:")
		for arc in self.arcs:
			output.append("-" * 5)
			output.append(f"Exit: '{arc.exit}'")
			output.append(f"Direction: '{arc.direction}'")
			output.append(f"To: '{arc.destinationId}'")
			if arc.move:
				output.append(f"Move: '{arc.move}'")
			if arc.hidden:
				output.append("Hidden: 'True'")
		return "\n".join(output)


class Zone(object):
	"""
	The room graph of one in-game area.

	Nodes are kept in the order they were added, which is the enumeration order used
	when breaking ties during location resolution and goto target lookup.
	"""

	def __init__(
		self,
		id: str,
		name: str = "",
		nodes: Iterable[Node] = (),
		labels: Iterable[Label] = (),
		filePath: str = "",
	) -> None:
		self.id: str = id
		self.name: str = name
		self.filePath: str = filePath
		self.nodes: dict[int, Node] = {}
		self.labels: list[Label] = list(labels)
		for node in nodes:
			self.addNode(node)

	def __repr__(self) -> str:
		return f"{type(self).__name__}(id={self.id!r}, name={self.name!r}, nodes={len(self.nodes)})"

	def __contains__(self, nodeId: object) -> bool:
		return nodeId in self.nodes

	def __iter__(self) -> Iterator[Node]:
		return iter(self.nodes.values())

	def __len__(self) -> int:
		return len(self.nodes)

	def addNode(self, node: Node) -> None:
		"""
		Adds a node to the zone.

		Args:
			node: The node to be added.

		Raises:
			ValueError: A node with the same Id already exists.
		"""
		if node.id in self.nodes:
			raise ValueError(f"Duplicate node Id {node.id} in zone '{self.id}'.")
		self.nodes[node.id] = node

	def get(self, nodeId: Union[int, None]) -> Union[Node, None]:
		"""
		Looks up a node by Id.

		Args:
			nodeId: The node Id.

		Returns:
			The node, or None if no node has the Id.
		"""
		if nodeId is None:
			return None
		return self.nodes.get(nodeId)

	def hasNodeNamed(self, name: str) -> bool:
		"""True if a node which isn't a map link has the given name, case-insensitively."""
		name = name.strip().lower()
		return any(node.name.strip().lower() == name for node in self if not node.isMapLink)
