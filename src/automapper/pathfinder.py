# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
from collections import deque
from typing import Union

# Local Modules:
from .roomdata.objects import Node, Zone


logger: logging.Logger = logging.getLogger(__name__)


class PathFinder(object):
	"""
	Finds the shortest routes between nodes of a zone, counting every arc as one move.

	Hidden arcs are followed. Arcs to nodes missing from the zone are ignored.
	Map link nodes can be a destination, but a route never passes through one.
	"""

	def __init__(self, zone: Zone) -> None:
		self.zone: Zone = zone

	def neighbors(self, node: Node) -> list[Node]:
		"""The nodes reachable by one arc, in arc order, skipping dangling arcs."""
		results: list[Node] = []
		for arc in node.arcs:
			neighbor: Union[Node, None] = self.zone.get(arc.destinationId)
			if neighbor is not None:
				results.append(neighbor)
		return results

	def findPath(self, originId: int, destinationId: int) -> Union[list[int], None]:
		"""
		Performs a breadth-first search from the origin to the destination.

		Args:
			originId: The Id of the starting node.
			destinationId: The Id of the destination node.

		Returns:
			The node Ids from origin to destination inclusive, or None if there is no route.
		"""
		origin: Union[Node, None] = self.zone.get(originId)
		destination: Union[Node, None] = self.zone.get(destinationId)
		if origin is None or destination is None:
			return None
		# Each key-value pair added to this dict will be a child node and its parent respectively.
		parents: dict[Node, Node] = {origin: origin}
		opened: deque[Node] = deque([origin])
		currentNode: Node
		while opened:
			currentNode = opened.popleft()
			if currentNode is destination:
				break
			elif currentNode.isMapLink and currentNode is not origin:
				continue
			for neighbor in self.neighbors(currentNode):
				if neighbor not in parents:
					# The first node to discover a neighbor is on a shortest path to it.
					parents[neighbor] = currentNode
					opened.append(neighbor)
		else:
			# The while loop terminated normally (I.E. without encountering a break statement),
			# and the destination was *not* found.
			logger.debug(f"No route from {origin!r} to {destination!r}.")
			return None
		results: list[int] = [currentNode.id]
		while currentNode is not origin:
			currentNode = parents[currentNode]
			results.append(currentNode.id)
		results.reverse()
		return results

	def distances(self, originId: int) -> dict[int, int]:
		"""
		Counts the moves from the origin to every reachable node.

		Args:
			originId: The Id of the starting node.

		Returns:
			A mapping of node Id to the number of moves, including the origin at distance 0.
		"""
		origin: Union[Node, None] = self.zone.get(originId)
		if origin is None:
			return {}
		results: dict[int, int] = {origin.id: 0}
		opened: deque[Node] = deque([origin])
		while opened:
			currentNode: Node = opened.popleft()
			if currentNode.isMapLink and currentNode is not origin:
				continue
			for neighbor in self.neighbors(currentNode):
				if neighbor.id not in results:
					results[neighbor.id] = results[currentNode.id] + 1
					opened.append(neighbor)
		return results
