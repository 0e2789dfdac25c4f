# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
import sys
from collections.abc import Iterable
from typing import Optional, TextIO

# Third-party Modules:
from tap import Tap

# Local Modules:
from . import __version__, setupLogging
from .config import Config
from .mapper import Mapper
from .world import World


VERSION: str = (
	f"%(prog)s {__version__} "
	+ f"(Python {'.'.join(str(i) for i in sys.version_info[:3])} {sys.version_info.releaselevel})"
)


logger: logging.Logger = logging.getLogger(__name__)


class ArgumentParser(Tap):
	maps_directory: str = ""
	"""The directory containing the zone files. Defaults to the configured maps directory."""
	zone: str = ""
	"""The Id, name, or file name of the zone to start in."""
	no_fallback: bool = False
	"""Do not search other zones when the current room isn't found in the active zone."""

	def configure(self) -> None:
		self.add_argument(
			"-v",
			"--version",
			help="Print the program version as well as the Python version.",
			action="version",
			version=VERSION,
		)
		self.add_argument("-m", "--maps_directory", metavar="path")
		self.add_argument("-z", "--zone", metavar="zone")
		self.add_argument("-nf", "--no_fallback")


def printCommands(commands: str) -> None:
	print(f"> {commands}")


def printOutput(text: str) -> None:
	print(f"[Mapper] {text}")


def console(mapper: Mapper, lines: Iterable[str]) -> None:
	"""
	Feeds console input to a running mapper thread.

	Lines of the form 'set <variable> <value>' change a game variable,
	'quit' stops the mapper, and anything else is treated as a mapper command.

	Args:
		mapper: The mapper thread.
		lines: The input lines.
	"""
	for line in lines:
		text: str = line.strip()
		if not text:
			continue
		elif text.lower() in ("quit", "exit"):
			break
		elif text.lower().startswith("set "):
			_, name, value = (text.split(None, 2) + [""])[:3]
			mapper.putVariable(name, value)
		else:
			mapper.putUserInput(text)
	mapper.stop()


def main(args: Optional[list[str]] = None, stdin: Optional[TextIO] = None) -> int:
	parsed: ArgumentParser = ArgumentParser(description="Offline automapper console.").parse_args(args)
	cfg: Config = Config()
	setupLogging(cfg)
	world: World = World()
	for errors in world.loadZones(parsed.maps_directory or cfg.mapsDirectory):
		printOutput(errors)
	if parsed.zone and not world.selectZone(parsed.zone):
		printOutput(f"Unknown zone '{parsed.zone}'.")
	mapper: Mapper = Mapper(
		world,
		printCommands,
		output=printOutput,
		crossZoneFallback=bool(cfg.crossZoneFallback) and not parsed.no_fallback,
		findMeClearsPath=bool(cfg.findMeClearsPath),
	)
	mapper.start()
	try:
		console(mapper, sys.stdin if stdin is None else stdin)
	except KeyboardInterrupt:
		mapper.stop()
	mapper.join()
	return 0
