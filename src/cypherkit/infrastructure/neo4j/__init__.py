"""Neo4j execution collaborator."""

from .driver import Neo4jDriver, get_driver

__all__ = ["Neo4jDriver", "get_driver"]
