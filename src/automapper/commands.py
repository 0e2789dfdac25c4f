# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import itertools
from collections.abc import Sequence
from typing import Union

# Local Modules:
from .roomdata.objects import DIRECTION_COMMANDS, Arc, Node, Zone


def arcCommand(arc: Arc) -> str:
	"""
	Returns the command that moves the player along an arc.

	Args:
		arc: The arc.

	Returns:
		The move override if there is one, the direction abbreviation for cardinal arcs,
		or the exit itself (E.G. 'go gate') otherwise.
	"""
	if arc.move.strip():
		return arc.move.strip()
	elif arc.direction in DIRECTION_COMMANDS:
		return DIRECTION_COMMANDS[arc.direction]
	return arc.exit.strip()


def pathCommands(zone: Zone, path: Sequence[int]) -> list[str]:
	"""
	Converts a route into the commands which walk it.

	Args:
		zone: The zone the route belongs to.
		path: The node Ids of the route, origin first.

	Returns:
		One command per move.

	Raises:
		ValueError: Two consecutive nodes of the route aren't connected.
	"""
	results: list[str] = []
	for currentId, nextId in zip(path, path[1:]):
		currentNode: Union[Node, None] = zone.get(currentId)
		arc: Union[Arc, None] = currentNode.arcTo(nextId) if currentNode is not None else None
		if arc is None:
			raise ValueError(f"No arc from {currentId} to {nextId} in zone '{zone.id}'.")
		results.append(arcCommand(arc))
	return results


def quoteCommand(command: str) -> str:
	return f'"{command}"' if any(char.isspace() for char in command) else command


def joinCommands(commands: Sequence[str]) -> str:
	"""Joins commands into one space separated string, quoting those which contain white space."""
	return " ".join(quoteCommand(command) for command in commands)


def createSpeedWalk(commands: Sequence[str]) -> str:
	"""Given a list of commands, return a summary in speed walk format, E.G. '4 moves: 2e, n, "go gate"'."""
	speedWalkDirs: list[str] = []
	for command, group in itertools.groupby(commands):
		lenGroup: int = len(list(group))
		if lenGroup == 1 or command not in DIRECTION_COMMANDS.values():
			speedWalkDirs.extend([quoteCommand(command)] * lenGroup)
		else:
			speedWalkDirs.append(f"{lenGroup}{command}")
	return f"{len(commands)} {'move' if len(commands) == 1 else 'moves'}: {', '.join(speedWalkDirs)}"
