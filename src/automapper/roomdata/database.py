# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

# Future Modules:
from __future__ import annotations

# Built-in Modules:
import logging
import os.path
import re
from collections.abc import Callable, Mapping
from typing import Any, Union

# Third-party Modules:
import fastjsonschema
import orjson

# Local Modules:
from ..typedef import REGEX_PATTERN
from .objects import Arc, Label, Node, Zone


ZONE_SCHEMA_VERSION: int = 1  # Increment this when the zone schema changes.
ZONE_FILE_EXTENSION: str = ".json"
MAP_LINK_REGEX: REGEX_PATTERN = re.compile(r"\.(?:json|xml)\b", re.IGNORECASE)
POSITION_SCHEMA: dict[str, Any] = {
	"x": {"type": "integer"},
	"y": {"type": "integer"},
	"z": {"type": "integer"},
}
ZONE_SCHEMA: dict[str, Any] = {
	"$schema": "http://json-schema.org/draft-07/schema#",
	"type": "object",
	"required": ["id", "name", "nodes"],
	"properties": {
		"schema_version": {"type": "integer", "minimum": 0},
		"id": {"type": "string"},
		"name": {"type": "string"},
		"nodes": {
			"type": "array",
			"items": {
				"type": "object",
				"required": ["id", "name"],
				"properties": {
					"id": {"type": "integer"},
					"name": {"type": "string"},
					"descriptions": {"type": "array", "items": {"type": "string"}},
					"note": {"type": "string"},
					"color": {"type": ["string", "null"]},
					"map_link": {"type": "boolean"},
					**POSITION_SCHEMA,
					"arcs": {
						"type": "array",
						"items": {
							"type": "object",
							"required": ["destination"],
							"properties": {
								"destination": {"type": "integer"},
								"exit": {"type": "string"},
								"move": {"type": "string"},
								"hidden": {"type": "boolean"},
							},
						},
					},
				},
			},
		},
		"labels": {
			"type": "array",
			"items": {
				"type": "object",
				"required": ["text"],
				"properties": {"text": {"type": "string"}, **POSITION_SCHEMA},
			},
		},
	},
}


logger: logging.Logger = logging.getLogger(__name__)


validateZone: Callable[..., Any] = fastjsonschema.compile(ZONE_SCHEMA)


def _validate(database: Mapping[str, Any]) -> Union[str, None]:
	"""
	Validates a zone database against the schema.

	Args:
		database: The database to be validated.

	Returns:
		An error message, or None if the database is valid.
	"""
	try:
		validateZone(database)
	except fastjsonschema.JsonSchemaException as e:
		logger.exception(f"Data failed validation: {e}")
		return f"Error: data failed validation. {e}"
	return None


def _load(databasePath: str) -> Union[tuple[str, None, int], tuple[None, dict[str, Any], int]]:
	"""
	Loads a database into memory.

	Args:
		databasePath: The location of the database.

	Returns:
		An error message or None, the loaded database or None, and the schema version.
	"""
	if not os.path.exists(databasePath):
		return f"Error: '{databasePath}' doesn't exist.", None, 0
	if os.path.isdir(databasePath):
		return f"Error: '{databasePath}' is a directory, not a file.", None, 0
	try:
		with open(databasePath, "rb") as fileObj:
			database: dict[str, Any] = orjson.loads(fileObj.read())
	except IOError as e:
		return f"IOError: {e}", None, 0
	except orjson.JSONDecodeError as e:
		return f"Error: '{databasePath}' is corrupted. {e}", None, 0
	if not isinstance(database, dict):
		return f"Error: '{databasePath}' does not contain a zone.", None, 0
	errors: Union[str, None] = _validate(database)
	if errors is not None:
		return f"{errors} ({databasePath})", None, 0
	schemaVersion: int = database.pop("schema_version", 0)
	return None, database, schemaVersion


def _dump(database: Mapping[str, Any], databasePath: str) -> None:
	"""
	Saves a database to disk.

	Args:
		database: The database to be saved.
		databasePath: The location where the database should be saved.
	"""
	if _validate(database) is not None:
		return
	options: int = (
		orjson.OPT_APPEND_NEWLINE | orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS | orjson.OPT_STRICT_INTEGER
	)
	try:
		data: bytes = orjson.dumps(database, option=options)
	except orjson.JSONEncodeError as e:
		logger.exception(f"Error: Cannot encode to '{databasePath}'. {e}")
		return
	try:
		with open(databasePath, "wb") as fileObj:
			fileObj.write(data)
	except IOError as e:
		logger.exception(f"IOError: {e}")


def nodeFromDict(nodeDict: Mapping[str, Any]) -> Node:
	"""
	Creates a node from its database representation.

	Args:
		nodeDict: The node data.

	Returns:
		The new node.
	"""
	node: Node = Node(nodeDict["id"], nodeDict["name"])
	node.descriptions = [text for text in nodeDict.get("descriptions", []) if text]
	node.note = nodeDict.get("note", "")
	if "map_link" in nodeDict:
		node.isMapLink = nodeDict["map_link"]
	else:
		# Older zones flag links to other zone files only through the note.
		node.isMapLink = MAP_LINK_REGEX.search(node.note) is not None
	node.color = nodeDict.get("color") or None
	node.x = nodeDict.get("x", 0)
	node.y = nodeDict.get("y", 0)
	node.z = nodeDict.get("z", 0)
	for arcDict in nodeDict.get("arcs", []):
		node.arcs.append(
			Arc(
				arcDict["destination"],
				exit=arcDict.get("exit", ""),
				move=arcDict.get("move", ""),
				hidden=arcDict.get("hidden", False),
			)
		)
	return node


def nodeToDict(node: Node) -> dict[str, Any]:
	nodeDict: dict[str, Any] = {
		"id": node.id,
		"name": node.name,
		"descriptions": list(node.descriptions),
		"note": node.note,
		"map_link": node.isMapLink,
		"color": node.color,
		"x": node.x,
		"y": node.y,
		"z": node.z,
		"arcs": [],
	}
	for arc in node.arcs:
		arcDict: dict[str, Any] = {"destination": arc.destinationId, "exit": arc.exit}
		if arc.move:
			arcDict["move"] = arc.move
		if arc.hidden:
			arcDict["hidden"] = True
		nodeDict["arcs"].append(arcDict)
	return nodeDict


def zoneFromDict(database: Mapping[str, Any], filePath: str = "") -> Zone:
	"""
	Creates a zone from its database representation.

	Args:
		database: The zone data.
		filePath: The file the data was read from, if any.

	Returns:
		The new zone.
	"""
	zone: Zone = Zone(database["id"], database["name"], filePath=filePath)
	for nodeDict in database["nodes"]:
		node: Node = nodeFromDict(nodeDict)
		if node.id in zone:
			logger.warning(f"Ignoring duplicate node Id {node.id} in zone '{zone.id}'.")
			continue
		zone.addNode(node)
	for labelDict in database.get("labels", []):
		zone.labels.append(
			Label(labelDict["text"], labelDict.get("x", 0), labelDict.get("y", 0), labelDict.get("z", 0))
		)
	return zone


def zoneToDict(zone: Zone) -> dict[str, Any]:
	return {
		"schema_version": ZONE_SCHEMA_VERSION,
		"id": zone.id,
		"name": zone.name,
		"nodes": [nodeToDict(node) for node in zone],
		"labels": [{"text": label.text, "x": label.x, "y": label.y, "z": label.z} for label in zone.labels],
	}


def loadZone(databasePath: str) -> Union[tuple[str, None], tuple[None, Zone]]:
	"""
	Loads a zone file into memory.

	Args:
		databasePath: The location of the zone file.

	Returns:
		An error message or None, and the loaded zone or None.
	"""
	errors: Union[str, None]
	database: Union[dict[str, Any], None]
	errors, database, schemaVersion = _load(databasePath)
	if database is None:
		return errors or f"Error: unable to load '{databasePath}'.", None
	if schemaVersion > ZONE_SCHEMA_VERSION:
		logger.warning(f"'{databasePath}' uses the newer schema V{schemaVersion}.")
	return None, zoneFromDict(database, filePath=databasePath)


def dumpZone(zone: Zone, databasePath: Union[str, None] = None) -> None:
	"""
	Saves a zone to disk.

	Args:
		zone: The zone to be saved.
		databasePath: The location where the zone should be saved. Defaults to the zone's own file path.
	"""
	path: str = databasePath or zone.filePath
	if not path:
		logger.error(f"No file path for zone '{zone.id}'.")
		return
	_dump(zoneToDict(zone), path)


def listZoneFiles(directory: str) -> list[str]:
	"""
	Lists the zone files in a directory.

	Args:
		directory: The directory to search.

	Returns:
		The sorted paths of the zone files.
	"""
	if not os.path.isdir(directory):
		return []
	return sorted(
		os.path.join(directory, filename)
		for filename in os.listdir(directory)
		if filename.lower().endswith(ZONE_FILE_EXTENSION)
		and os.path.isfile(os.path.join(directory, filename))
	)
