# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
import threading
from collections.abc import MutableMapping
from enum import Enum, auto
from queue import SimpleQueue
from typing import Optional, Union

# Local Modules:
from .commands import createSpeedWalk, joinCommands, pathCommands
from .exitflags import ExitFlagHandler
from .pathfinder import PathFinder
from .resolver import GameSignal, LocationResolver, Resolution, ResolveStatus
from .roomdata.objects import DIRECTIONS, Node, Zone
from .typedef import (
	COMMAND_EXECUTOR_TYPE,
	MAPPER_QUEUE_TYPE,
	OUTPUT_TYPE,
	VARIABLE_EVENT_HANDLER_TYPE,
)
from .world import World


USER_INPUT: str = "userInput"
VARIABLE: str = "variable"
NO_DESTINATION: str = "0"


logger: logging.Logger = logging.getLogger(__name__)


class MapperState(Enum):
	UNRESOLVED = auto()
	RESOLVED = auto()
	ROUTING = auto()


class GotoStatus(Enum):
	DISPATCHED = auto()
	ALREADY_THERE = auto()
	NOT_FOUND = auto()
	NO_PATH = auto()
	NO_LOCATION = auto()
	NO_MAP = auto()
	NO_TARGET = auto()


class Mapper(threading.Thread):
	"""
	Tracks the player's location and walks them to requested destinations.

	All state changes happen through handleVariable and handleUserInput. A host delivering
	events from several threads should use putVariable and putUserInput instead, which queue
	the events for the mapper thread to process one at a time.
	"""

	def __init__(
		self,
		world: World,
		commandExecutor: COMMAND_EXECUTOR_TYPE,
		output: Optional[OUTPUT_TYPE] = None,
		variables: Optional[MutableMapping[str, str]] = None,
		crossZoneFallback: bool = True,
		findMeClearsPath: bool = True,
	) -> None:
		threading.Thread.__init__(self)
		self.name = "Mapper"
		self.world: World = world
		self.resolver: LocationResolver = LocationResolver(world, crossZoneFallback=crossZoneFallback)
		self.commandExecutor: COMMAND_EXECUTOR_TYPE = commandExecutor
		self._output: Union[OUTPUT_TYPE, None] = output
		self.variables: MutableMapping[str, str] = {} if variables is None else variables
		self.findMeClearsPath: bool = findMeClearsPath
		self.queue: MAPPER_QUEUE_TYPE = SimpleQueue()
		self.state: MapperState = MapperState.UNRESOLVED
		self.currentNodeId: Union[int, None] = None
		self.currentLevel: int = 0
		self.highlightedPath: list[int] = []
		self.destination: str = NO_DESTINATION
		self.status: str = "No map loaded" if not world.zones else ""
		self.roomName: str = ""
		self.roomDescription: str = ""
		self.observedExits: set[str] = set()
		self.lastResolution: Union[Resolution, None] = None
		self.userCommands: list[str] = [
			func[len("user_command_") :]
			for func in dir(self)
			if func.startswith("user_command_") and callable(getattr(self, func))
		]
		self.variableEventHandlers: dict[str, set[VARIABLE_EVENT_HANDLER_TYPE]] = {}
		for legacyHandler in [
			func[len("variable_event_") :]
			for func in dir(self)
			if func.startswith("variable_event_") and callable(getattr(self, func))
		]:
			self.registerVariableEventHandler(legacyHandler, getattr(self, "variable_event_" + legacyHandler))
		self.unknownVariables: list[str] = []
		self.exitFlagHandlers: list[ExitFlagHandler] = [
			ExitFlagHandler(self, direction) for direction in DIRECTIONS
		]

	@property
	def signal(self) -> GameSignal:
		"""The room information accumulated from the game variables."""
		return GameSignal(self.roomName, self.roomDescription, frozenset(self.observedExits))

	@property
	def zone(self) -> Union[Zone, None]:
		return self.world.activeZone

	@property
	def currentNode(self) -> Union[Node, None]:
		return self.world.getNode(self.currentNodeId)

	def output(self, text: str) -> None:
		"""Reports a message to the player."""
		self.status = text
		logger.debug(text)
		if self._output is not None:
			self._output(text)

	def setDestination(self, value: str) -> None:
		self.destination = value
		self.variables["destination"] = value

	def setCurrentNode(self, nodeId: Union[int, None]) -> None:
		"""
		Updates the player's location.

		The highlighted path is cleared when the player arrives at its end,
		or moves to a node which is not on it.

		Args:
			nodeId: The Id of the node the player occupies, or None if unknown.
		"""
		self.currentNodeId = nodeId
		if self.highlightedPath and nodeId is not None:
			if nodeId == self.highlightedPath[-1]:
				logger.debug(f"Arrived at #{nodeId}.")
				self.highlightedPath.clear()
			elif nodeId not in self.highlightedPath:
				logger.debug(f"Left the route at #{nodeId}.")
				self.highlightedPath.clear()
		node: Union[Node, None] = self.currentNode
		if node is not None:
			self.currentLevel = node.z
		if nodeId is None:
			self.state = MapperState.UNRESOLVED
		else:
			self.state = MapperState.ROUTING if self.highlightedPath else MapperState.RESOLVED

	def resetLocation(self) -> None:
		self.highlightedPath.clear()
		self.setCurrentNode(None)

	def applyResolution(self, resolution: Resolution) -> None:
		self.lastResolution = resolution
		if resolution.zoneChanged:
			self.resetLocation()
		if resolution.node is not None:
			self.setCurrentNode(resolution.node.id)
		else:
			self.state = MapperState.UNRESOLVED
		self.status = resolution.message

	def locate(self) -> Resolution:
		"""
		Resolves the player's location from the accumulated game variables.

		Returns:
			The resolution.
		"""
		resolution: Resolution = self.resolver.resolve(self.signal, self.currentNodeId)
		self.applyResolution(resolution)
		if resolution.status is ResolveStatus.AMBIGUOUS:
			logger.info(f"{resolution.message} for '{self.roomName}'.")
		return resolution

	def changeZone(self, text: str) -> None:
		if not self.world.selectZone(text):
			return None
		self.resetLocation()
		zone: Union[Zone, None] = self.zone
		self.status = f"Loaded: {zone.name}" if zone is not None else ""
		if self.roomName:
			self.locate()

	def findMe(self) -> Union[Resolution, None]:
		"""
		Forces the player's location to be resolved again.

		Returns:
			The resolution, or None if the game hasn't sent a room name.
		"""
		if self.findMeClearsPath:
			self.highlightedPath.clear()
		if not self.roomName:
			self.state = MapperState.UNRESOLVED
			self.output("No room name")
			return None
		resolution: Resolution = self.locate()
		self.output(resolution.message)
		return resolution

	def goto(self, target: str) -> GotoStatus:
		"""
		Walks the player to a node of the active zone.

		Args:
			target: A node Id, or the start of one of the '|' delimited tokens of a node note.

		Returns:
			The outcome of the request.
		"""
		target = target.strip()
		if not target:
			self.setDestination(NO_DESTINATION)
			self.output("Goto - please specify a room id to travel to.")
			return GotoStatus.NO_TARGET
		zone: Union[Zone, None] = self.zone
		if zone is None:
			self.setDestination(NO_DESTINATION)
			self.output("No map loaded - select a map first.")
			return GotoStatus.NO_MAP
		destination: Union[Node, None] = self.world.getNodeFromTarget(target)
		if destination is None:
			self.setDestination(NO_DESTINATION)
			message: str = f'Destination "{target}" not found.'
			if not target.isdecimal():
				suggestions: list[str] = self.world.similarNotes(target)
				if suggestions:
					message += f" Did you mean {', '.join(suggestions)}?"
			self.output(message)
			return GotoStatus.NOT_FOUND
		origin: Union[Node, None] = self.currentNode
		if origin is None:
			self.setDestination(NO_DESTINATION)
			self.output("Location unknown - use 'find me' first.")
			return GotoStatus.NO_LOCATION
		elif origin is destination:
			self.setDestination(str(destination.id))
			self.output("Already at destination!")
			return GotoStatus.ALREADY_THERE
		path: Union[list[int], None] = PathFinder(zone).findPath(origin.id, destination.id)
		if not path:
			self.setDestination(NO_DESTINATION)
			self.output(f"No path to #{destination.id}")
			return GotoStatus.NO_PATH
		commands: list[str] = pathCommands(zone, path)
		self.setDestination(str(destination.id))
		self.highlightedPath = path
		self.state = MapperState.ROUTING
		logger.info(f"Walking to #{destination.id}, {createSpeedWalk(commands)}")
		self.commandExecutor(joinCommands(commands))
		self.output(f"Route to #{destination.id} ({len(commands)} moves)")
		return GotoStatus.DISPATCHED

	def user_command_goto(self, *args: str) -> None:
		"""Walks to a room Id or note."""
		self.goto(args[0] if args else "")

	def user_command_findme(self, *args: str) -> None:
		"""Finds the current room on the map."""
		self.findMe()

	def user_command_rinfo(self, *args: str) -> None:
		"""Shows the details of a room, the current room by default."""
		text: str = args[0].strip() if args else ""
		node: Union[Node, None]
		if text:
			node = self.world.getNodeFromTarget(text)
		else:
			node = self.currentNode
		if node is None:
			self.output(f"Error: No such room, '{text}'" if text else "Location unknown.")
			return None
		lines: list[str] = [node.info]
		zone: Union[Zone, None] = self.zone
		if zone is not None and self.currentNodeId is not None and node.id != self.currentNodeId:
			distance: Union[int, None] = PathFinder(zone).distances(self.currentNodeId).get(node.id)
			lines.append(f"Distance: '{distance}' moves" if distance is not None else "Distance: 'unreachable'")
		self.output("\n".join(lines))

	def variable_event_roomname(self, value: str) -> None:
		self.roomName = value.strip()
		if not self.roomName:
			self.state = MapperState.UNRESOLVED

	def variable_event_roomdesc(self, value: str) -> None:
		self.roomDescription = value.strip()

	def variable_event_zoneid(self, value: str) -> None:
		self.changeZone(value)

	def variable_event_zonename(self, value: str) -> None:
		self.changeZone(value)

	def variable_event_roomid(self, value: str) -> None:
		value = value.strip()
		nodeId: int = int(value) if value.isdecimal() else 0
		if nodeId > 0 and self.world.getNode(nodeId) is not None:
			self.setCurrentNode(nodeId)

	def variable_event_prompt(self, value: str) -> None:
		if self.roomName:
			self.locate()
		else:
			self.state = MapperState.UNRESOLVED

	def handleUserInput(self, text: str) -> None:
		text = text.strip().lstrip("#")
		if not text:
			return None
		command, _, args = text.partition(" ")
		command = command.lower()
		if command == "find" and args.strip().lower() == "me":
			command, args = "findme", ""
		if command not in self.userCommands:
			self.output(f"Unknown mapper command: '{command}'.")
			return None
		getattr(self, f"user_command_{command}")(args.strip())

	def handleVariable(self, name: str, value: str) -> None:
		name = name.strip().lower()
		if name in self.variableEventHandlers:
			for handler in list(self.variableEventHandlers[name]):
				handler(value)
		elif name not in self.unknownVariables:
			self.unknownVariables.append(name)
			logger.debug(f"received a change of the unknown variable {name}")

	def registerVariableEventHandler(self, event: str, handler: VARIABLE_EVENT_HANDLER_TYPE) -> None:
		"""Registers a method to handle changes of a game variable.
		Params: event, handler
		where event is the name of the variable, and handler is a method that takes a single argument,
		the new value of the variable.
		"""
		event = event.strip().lower()
		if event not in self.variableEventHandlers:
			self.variableEventHandlers[event] = set()
		self.variableEventHandlers[event].add(handler)

	def deregisterVariableEventHandler(self, event: str, handler: VARIABLE_EVENT_HANDLER_TYPE) -> None:
		"""Deregisters game variable event handlers.
		params: same as registerVariableEventHandler.
		"""
		event = event.strip().lower()
		if event in self.variableEventHandlers and handler in self.variableEventHandlers[event]:
			self.variableEventHandlers[event].remove(handler)

	def putVariable(self, name: str, value: str) -> None:
		self.queue.put((VARIABLE, (name, value)))

	def putUserInput(self, text: str) -> None:
		self.queue.put((USER_INPUT, text))

	def stop(self) -> None:
		self.queue.put(None)

	def run(self) -> None:
		while True:
			item = self.queue.get()
			if item is None:
				break
			dataType, data = item
			try:
				if dataType == USER_INPUT:
					self.handleUserInput(data)  # type: ignore[arg-type]
				elif dataType == VARIABLE:
					name, value = data
					self.handleVariable(name, value)
			except Exception:
				logger.exception(f"Error while handling {dataType} {data!r}.")
		logger.debug("Exiting mapper thread.")
