"""
field_catalog.py - Field name to provider key mapping for a contact database.

The catalog is loaded once per session and never refreshed. If the remote
schema changes, build a new session.
"""

import logging
from enum import Enum
from typing import NamedTuple, Optional

import requests

from errors import NoPrimaryKeyError, ProviderError, SchemaLoadError

log = logging.getLogger(__name__)


class Resolution(Enum):
    LOGICAL = "logical"
    RAW_KEY = "raw_key"
    NOT_FOUND = "not_found"


class FieldResolution(NamedTuple):
    """Outcome of resolving a field reference against the catalog."""
    kind: Resolution
    name: Optional[str] = None
    key: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.kind is not Resolution.NOT_FOUND


class FieldCatalog:
    """Immutable name -> key mapping plus the primary key field."""

    def __init__(self, database, fields, primary_key=None):
        self._database = database
        self._fields = dict(fields)
        self._names = {key: name for name, key in self._fields.items()}
        self._primary_key = primary_key

    @classmethod
    def load(cls, provider, database):
        """Fetch the field list of a database and index it.

        The first field flagged as primary wins.
        Raises: SchemaLoadError if the provider call fails.
        """
        try:
            descriptors = provider.list_fields(database)
        except (ProviderError, requests.RequestException) as e:
            raise SchemaLoadError(f"Could not load fields for database {database}: {e}") from e

        fields = {}
        primary_key = None
        for descriptor in descriptors:
            fields[descriptor["name"]] = descriptor["id"]
            if descriptor.get("is_primary") and primary_key is None:
                primary_key = descriptor["id"]

        if primary_key is None:
            log.warning("Database %s has no primary key field", database)
        log.info("Loaded %d fields for database %s", len(fields), database)
        return cls(database, fields, primary_key)

    @property
    def database(self):
        return self._database

    def primary_key_field(self) -> str:
        if self._primary_key is None:
            raise NoPrimaryKeyError(f"Database {self._database} has no primary key field")
        return self._primary_key

    def primary_key_name(self) -> str:
        return self._names[self.primary_key_field()]

    def resolve(self, field) -> FieldResolution:
        """Resolve a logical name or raw provider key."""
        if field in self._fields:
            return FieldResolution(Resolution.LOGICAL, field, self._fields[field])
        if field in self._names:
            return FieldResolution(Resolution.RAW_KEY, self._names[field], field)
        return FieldResolution(Resolution.NOT_FOUND)

    def key_for(self, name):
        return self._fields.get(name)

    def name_for(self, key):
        return self._names.get(key)

    def names(self):
        return list(self._fields)

    def keys(self):
        return list(self._fields.values())

    def __contains__(self, field):
        return self.resolve(field).found

    def __len__(self):
        return len(self._fields)

    def __repr__(self):
        return f"FieldCatalog(database={self._database!r}, fields={len(self._fields)})"
