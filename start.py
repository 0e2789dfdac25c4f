#!/usr/bin/env python

# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.


# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
import sys
import traceback

# Automapper Modules:
import automapper.main


if __name__ == "__main__":
	exitCode: int = 1
	try:
		exitCode = automapper.main.main()
	except Exception:
		traceback.print_exception(*sys.exc_info())
		logging.exception("OOPS!")
	finally:
		logging.info("Shutting down.")
		logging.shutdown()
	sys.exit(exitCode)
