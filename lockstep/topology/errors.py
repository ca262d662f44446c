"""Exception types raised by the topology pass.

Recoverable conditions (no key sector, no path, no dead ends) never raise;
they degrade the puzzle instead. Everything here signals a broken contract
between the carving stage and this package and should fail generation loudly.
"""


class TopologyError(Exception):
    """Structural inconsistency in a topology map."""


class ObjectKindError(TopologyError):
    """An id resolved to the wrong kind of object (sector vs connector) or to nothing."""

    def __init__(self, object_id, expected: str):
        self.object_id = object_id
        self.expected = expected
        super().__init__(f"topology object {object_id} is not a {expected}")


class MissingDoorError(TopologyError):
    """A connector cell has no door entity to lock."""

    def __init__(self, connector_id: int, cell):
        self.connector_id = connector_id
        self.cell = cell
        super().__init__(f"connector {connector_id} at {cell[0]}-{cell[1]} has no door")


class LevelParseError(ValueError):
    """Malformed ASCII level text."""


__all__ = ["TopologyError", "ObjectKindError", "MissingDoorError", "LevelParseError"]
