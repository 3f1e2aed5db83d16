"""Entity and catalog models."""

from .catalog import EntityCatalog
from .entity import EntityRecord

__all__ = ["EntityCatalog", "EntityRecord"]
