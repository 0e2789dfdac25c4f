# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
from unittest import TestCase
from unittest.mock import Mock, patch

# Automapper Modules:
from automapper.mapper import NO_DESTINATION, GotoStatus, Mapper, MapperState
from automapper.resolver import ResolveStatus
from automapper.roomdata.objects import Arc, Node, Zone
from automapper.world import World


def newNode(nodeId: int, name: str, note: str = "", *arcs: Arc) -> Node:
	node: Node = Node(nodeId, name)
	node.note = note
	node.arcs.extend(arcs)
	return node


class TestMapper(TestCase):
	def setUp(self) -> None:
		logging.disable(logging.CRITICAL)
		self.town: Zone = Zone(
			"1",
			"Town",
			[
				newNode(1, "Bank", "bank|teller", Arc(2, "east"), Arc(4, "north")),
				newNode(2, "Vault", "vault", Arc(1, "west"), Arc(3, "go gate")),
				newNode(3, "Yard", "yard", Arc(2, "out")),
				newNode(4, "Street", "street", Arc(1, "south")),
				newNode(5, "Island", "island"),
			],
		)
		self.town.nodes[3].z = 1
		self.forest: Zone = Zone("2", "Forest", [newNode(1, "Clearing"), newNode(2, "Glade")])
		self.world: World = World([self.town, self.forest])
		self.world.activeZone = self.town
		self.commandExecutor: Mock = Mock()
		self.output: Mock = Mock()
		self.variables: dict[str, str] = {}
		self.mapper: Mapper = Mapper(self.world, self.commandExecutor, self.output, self.variables)

	def tearDown(self) -> None:
		logging.disable(logging.NOTSET)

	def enterRoom(self, name: str, description: str = "") -> None:
		self.mapper.handleVariable("roomname", name)
		self.mapper.handleVariable("roomdesc", description)
		self.mapper.handleVariable("prompt", "")

	def test_initialState(self) -> None:
		self.assertIs(self.mapper.state, MapperState.UNRESOLVED)
		self.assertIsNone(self.mapper.currentNodeId)
		self.assertEqual(self.mapper.destination, NO_DESTINATION)
		self.assertEqual(self.mapper.highlightedPath, [])
		self.assertEqual(Mapper(World(), Mock()).status, "No map loaded")
		self.assertEqual(sorted(self.mapper.userCommands), ["findme", "goto", "rinfo"])

	def test_prompt_resolvesLocation(self) -> None:
		self.enterRoom("Bank")
		self.assertIs(self.mapper.state, MapperState.RESOLVED)
		self.assertEqual(self.mapper.currentNodeId, 1)
		self.assertEqual(self.mapper.status, "#1 Bank")
		assert self.mapper.lastResolution is not None
		self.assertIs(self.mapper.lastResolution.status, ResolveStatus.RESOLVED)
		self.enterRoom("Yard")
		self.assertEqual(self.mapper.currentLevel, 1)

	def test_prompt_withoutRoomName(self) -> None:
		self.mapper.handleVariable("prompt", "")
		self.assertIs(self.mapper.state, MapperState.UNRESOLVED)
		self.enterRoom("Bank")
		self.mapper.handleVariable("roomname", "  ")
		self.assertIs(self.mapper.state, MapperState.UNRESOLVED)

	def test_prompt_unknownRoom(self) -> None:
		self.enterRoom("Bank")
		self.enterRoom("Library")
		self.assertIs(self.mapper.state, MapperState.UNRESOLVED)
		# The last known node is kept to help the next resolution.
		self.assertEqual(self.mapper.currentNodeId, 1)
		self.assertEqual(self.mapper.status, "Not found: Library")

	def test_exitFlags(self) -> None:
		self.mapper.handleVariable("north", "1")
		self.mapper.handleVariable("East", "1")
		self.mapper.handleVariable("up", "0")
		self.assertEqual(self.mapper.signal.exits, frozenset(("north", "east")))
		self.mapper.handleVariable("north", "0")
		self.assertEqual(self.mapper.signal.exits, frozenset(("east",)))

	def test_unknownVariablesAreRemembered(self) -> None:
		self.mapper.handleVariable("health", "100")
		self.mapper.handleVariable("HEALTH", "90")
		self.assertEqual(self.mapper.unknownVariables, ["health"])

	def test_roomId(self) -> None:
		self.mapper.handleVariable("roomid", "2")
		self.assertEqual(self.mapper.currentNodeId, 2)
		self.assertIs(self.mapper.state, MapperState.RESOLVED)
		# Ids which are not positive, or unknown to the zone, leave the location alone.
		for value in ("0", "99", "abc", "", "-1"):
			self.mapper.handleVariable("roomid", value)
			self.assertEqual(self.mapper.currentNodeId, 2)
			self.assertIs(self.mapper.state, MapperState.RESOLVED)

	def test_roomId_blankValueKeepsPreviousNodeForResolution(self) -> None:
		corridor: Zone = Zone(
			"3",
			"Tunnels",
			[
				newNode(1, "Corridor", "", Arc(2, "east")),
				newNode(2, "Corridor", "", Arc(1, "west"), Arc(3, "east")),
				newNode(3, "Corridor", "", Arc(2, "west")),
			],
		)
		self.world.replaceZone(corridor)
		self.world.activeZone = corridor
		self.mapper.setCurrentNode(1)
		self.mapper.handleVariable("roomid", "")
		self.assertEqual(self.mapper.currentNodeId, 1)
		self.enterRoom("Corridor")
		self.assertEqual(self.mapper.currentNodeId, 2)
		self.assertIs(self.mapper.state, MapperState.RESOLVED)

	def test_goto_dispatchesRoute(self) -> None:
		self.enterRoom("Bank")
		self.assertIs(self.mapper.goto("3"), GotoStatus.DISPATCHED)
		self.commandExecutor.assert_called_once_with('e "go gate"')
		self.assertEqual(self.mapper.highlightedPath, [1, 2, 3])
		self.assertIs(self.mapper.state, MapperState.ROUTING)
		self.assertEqual(self.mapper.destination, "3")
		self.assertEqual(self.variables["destination"], "3")
		self.output.assert_called_with("Route to #3 (2 moves)")

	def test_goto_byNote(self) -> None:
		self.enterRoom("Vault")
		self.assertIs(self.mapper.goto("TELL"), GotoStatus.DISPATCHED)
		self.commandExecutor.assert_called_once_with("w")
		self.assertEqual(self.mapper.destination, "1")

	def test_goto_notFound(self) -> None:
		self.enterRoom("Bank")
		self.assertIs(self.mapper.goto("99"), GotoStatus.NOT_FOUND)
		self.assertEqual(self.mapper.destination, NO_DESTINATION)
		self.assertEqual(self.variables["destination"], "0")
		self.output.assert_called_with('Destination "99" not found.')
		self.commandExecutor.assert_not_called()
		self.assertIs(self.mapper.state, MapperState.RESOLVED)

	def test_goto_notFoundSuggestsNotes(self) -> None:
		self.enterRoom("Bank")
		self.assertIs(self.mapper.goto("valt"), GotoStatus.NOT_FOUND)
		message: str = self.output.call_args[0][0]
		self.assertTrue(message.startswith('Destination "valt" not found. Did you mean vault'))

	@patch("automapper.mapper.PathFinder")
	def test_goto_alreadyThere(self, mockPathFinder: Mock) -> None:
		self.enterRoom("Vault")
		self.assertIs(self.mapper.goto("2"), GotoStatus.ALREADY_THERE)
		self.output.assert_called_with("Already at destination!")
		self.assertEqual(self.mapper.destination, "2")
		mockPathFinder.assert_not_called()
		self.commandExecutor.assert_not_called()

	def test_goto_noPath(self) -> None:
		self.enterRoom("Bank")
		self.assertIs(self.mapper.goto("5"), GotoStatus.NO_PATH)
		self.output.assert_called_with("No path to #5")
		self.assertEqual(self.mapper.destination, NO_DESTINATION)
		self.commandExecutor.assert_not_called()

	def test_goto_withoutLocation(self) -> None:
		self.assertIs(self.mapper.goto("2"), GotoStatus.NO_LOCATION)
		self.assertEqual(self.mapper.destination, NO_DESTINATION)
		self.commandExecutor.assert_not_called()

	def test_goto_withoutTargetOrMap(self) -> None:
		self.assertIs(self.mapper.goto("  "), GotoStatus.NO_TARGET)
		self.output.assert_called_with("Goto - please specify a room id to travel to.")
		self.world.activeZone = None
		self.assertIs(self.mapper.goto("2"), GotoStatus.NO_MAP)
		self.output.assert_called_with("No map loaded - select a map first.")

	def test_route_clearedOnArrival(self) -> None:
		self.enterRoom("Bank")
		self.mapper.goto("3")
		self.enterRoom("Vault")
		self.assertEqual(self.mapper.highlightedPath, [1, 2, 3])
		self.assertIs(self.mapper.state, MapperState.ROUTING)
		self.enterRoom("Yard")
		self.assertEqual(self.mapper.highlightedPath, [])
		self.assertIs(self.mapper.state, MapperState.RESOLVED)

	def test_route_clearedOnDeviation(self) -> None:
		self.enterRoom("Bank")
		self.mapper.goto("3")
		self.enterRoom("Street")
		self.assertEqual(self.mapper.highlightedPath, [])
		self.assertIs(self.mapper.state, MapperState.RESOLVED)

	def test_findMe(self) -> None:
		self.assertIsNone(self.mapper.findMe())
		self.output.assert_called_with("No room name")
		self.enterRoom("Bank")
		self.mapper.goto("3")
		self.mapper.handleUserInput("#find me")
		self.assertEqual(self.mapper.highlightedPath, [])
		self.assertIs(self.mapper.state, MapperState.RESOLVED)
		self.output.assert_called_with("#1 Bank")

	def test_findMe_keepsPathWhenConfigured(self) -> None:
		self.mapper.findMeClearsPath = False
		self.enterRoom("Bank")
		self.mapper.goto("3")
		self.mapper.findMe()
		self.assertEqual(self.mapper.highlightedPath, [1, 2, 3])
		self.assertIs(self.mapper.state, MapperState.ROUTING)

	def test_zoneChange(self) -> None:
		self.mapper.resolver.crossZoneFallback = False
		self.enterRoom("Bank")
		self.mapper.goto("3")
		self.mapper.handleVariable("zonename", "forest")
		self.assertIs(self.world.activeZone, self.forest)
		self.assertEqual(self.mapper.highlightedPath, [])
		self.assertIsNone(self.mapper.currentNodeId)
		self.assertIs(self.mapper.state, MapperState.UNRESOLVED)
		self.assertEqual(self.mapper.status, "Not found: Bank")
		self.mapper.handleVariable("zoneid", "1")
		self.assertIs(self.world.activeZone, self.town)
		self.assertEqual(self.mapper.currentNodeId, 1)

	def test_zoneChange_unknownZoneIsIgnored(self) -> None:
		self.enterRoom("Bank")
		self.mapper.handleVariable("zoneid", "42")
		self.assertIs(self.world.activeZone, self.town)
		self.assertEqual(self.mapper.currentNodeId, 1)

	def test_crossZoneFallbackResetsLocation(self) -> None:
		self.enterRoom("Bank")
		self.mapper.goto("3")
		self.enterRoom("Glade")
		self.assertIs(self.world.activeZone, self.forest)
		self.assertEqual(self.mapper.currentNodeId, 2)
		self.assertEqual(self.mapper.highlightedPath, [])
		self.assertIs(self.mapper.state, MapperState.RESOLVED)

	def test_rinfo(self) -> None:
		self.mapper.handleUserInput("rinfo")
		self.output.assert_called_with("Location unknown.")
		self.mapper.handleUserInput("rinfo 99")
		self.output.assert_called_with("Error: No such room, '99'")
		self.mapper.handleUserInput("rinfo vault")
		self.assertIn("Name: 'Vault'", self.output.call_args[0][0])
		self.assertNotIn("Distance:", self.output.call_args[0][0])

	def test_rinfo_reportsDistanceFromCurrentRoom(self) -> None:
		self.enterRoom("Bank")
		self.mapper.handleUserInput("rinfo yard")
		self.assertTrue(self.output.call_args[0][0].endswith("Distance: '2' moves"))
		self.mapper.handleUserInput("rinfo island")
		self.assertTrue(self.output.call_args[0][0].endswith("Distance: 'unreachable'"))
		self.mapper.handleUserInput("rinfo")
		self.assertIn("Name: 'Bank'", self.output.call_args[0][0])
		self.assertNotIn("Distance:", self.output.call_args[0][0])

	def test_handleUserInput(self) -> None:
		self.enterRoom("Bank")
		self.mapper.handleUserInput("#GOTO 2")
		self.commandExecutor.assert_called_once_with("e")
		self.mapper.handleUserInput("dance")
		self.output.assert_called_with("Unknown mapper command: 'dance'.")
		self.output.reset_mock()
		self.mapper.handleUserInput("   ")
		self.output.assert_not_called()

	def test_variableEventHandlers(self) -> None:
		handler: Mock = Mock()
		self.mapper.registerVariableEventHandler("health", handler)
		self.mapper.handleVariable("Health", "90")
		handler.assert_called_once_with("90")
		self.mapper.deregisterVariableEventHandler("health", handler)
		self.mapper.deregisterVariableEventHandler("health", handler)
		self.mapper.handleVariable("health", "80")
		handler.assert_called_once_with("90")

	def test_variableEventHandlers_ignoreCaseOfRegisteredName(self) -> None:
		handler: Mock = Mock()
		self.mapper.registerVariableEventHandler("RoomTitle", handler)
		self.mapper.handleVariable("roomtitle", "Bank")
		self.mapper.handleVariable("ROOMTITLE", "Vault")
		self.assertEqual(handler.call_count, 2)
		self.assertNotIn("roomtitle", self.mapper.unknownVariables)
		self.mapper.deregisterVariableEventHandler("ROOMTITLE", handler)
		self.mapper.handleVariable("RoomTitle", "Street")
		self.assertEqual(handler.call_count, 2)

	def test_run_processesQueueInOrder(self) -> None:
		self.mapper.putVariable("roomname", "Bank")
		self.mapper.putVariable("prompt", "")
		self.mapper.putUserInput("goto vault")
		self.mapper.putUserInput("rinfo nowhere")
		self.mapper.stop()
		self.mapper.start()
		self.mapper.join(5)
		self.assertFalse(self.mapper.is_alive())
		self.commandExecutor.assert_called_once_with("e")
		self.assertEqual(self.mapper.currentNodeId, 1)
		self.output.assert_called_with("Error: No such room, 'nowhere'")

	def test_run_survivesHandlerErrors(self) -> None:
		self.mapper.registerVariableEventHandler("boom", Mock(side_effect=RuntimeError("boom")))
		self.mapper.putVariable("boom", "1")
		self.mapper.putVariable("roomname", "Vault")
		self.mapper.putVariable("prompt", "")
		self.mapper.stop()
		self.mapper.start()
		self.mapper.join(5)
		self.assertFalse(self.mapper.is_alive())
		self.assertEqual(self.mapper.currentNodeId, 2)
