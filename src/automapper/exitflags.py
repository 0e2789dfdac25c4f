# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Local Modules:
from .mudevents import Handler


EXIT_OPEN_VALUES: frozenset[str] = frozenset(("1", "true", "yes", "on"))


class ExitFlagHandler(Handler):
	"""
	Implements an event handler that tracks one of the game's open exit flags.

	The game reports each cardinal direction as a separate variable whose value is '1' while
	an exit in that direction is visible. The handler registered for the direction adds it to,
	or removes it from, the set of observed exits used when resolving the player's location.
	"""

	def handle(self, value: str) -> None:
		"""
		Handles a change of the exit flag.

		Args:
			value: The new value of the variable.
		"""
		if value.strip().lower() in EXIT_OPEN_VALUES:
			self.mapper.observedExits.add(self.event)
		else:
			self.mapper.observedExits.discard(self.event)
