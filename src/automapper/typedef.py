# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

# Future Modules:
from __future__ import annotations

# Built-in Modules:
from collections.abc import Callable
from queue import SimpleQueue
from re import Pattern
from typing import TypeAlias, Union


COORDINATES_TYPE: TypeAlias = tuple[int, int, int]
COMMAND_EXECUTOR_TYPE: TypeAlias = Callable[[str], None]
OUTPUT_TYPE: TypeAlias = Callable[[str], None]
VARIABLE_EVENT_HANDLER_TYPE: TypeAlias = Callable[[str], None]
VARIABLE_EVENT_TYPE: TypeAlias = tuple[str, str]
MAPPER_QUEUE_EVENT_TYPE: TypeAlias = Union[tuple[str, str], tuple[str, VARIABLE_EVENT_TYPE], None]
MAPPER_QUEUE_TYPE: TypeAlias = SimpleQueue[MAPPER_QUEUE_EVENT_TYPE]
REGEX_PATTERN: TypeAlias = Pattern[str]


__all__: list[str] = [
	"COMMAND_EXECUTOR_TYPE",
	"COORDINATES_TYPE",
	"MAPPER_QUEUE_EVENT_TYPE",
	"MAPPER_QUEUE_TYPE",
	"OUTPUT_TYPE",
	"REGEX_PATTERN",
	"VARIABLE_EVENT_HANDLER_TYPE",
	"VARIABLE_EVENT_TYPE",
]
