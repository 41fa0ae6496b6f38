"""Base class for contact database providers."""

from abc import ABC, abstractmethod


class BaseProvider(ABC):
    """Abstract base class that all contact database providers must implement.

    Providers return plain dicts in the shapes documented on each method, so
    ContactSession never sees the remote API's own response structure.

    To add a new provider:
    1. Create providers/yourapi.py with a class inheriting BaseProvider
    2. Implement all abstract methods
    3. Register in providers/__init__.py
    """

    name = ""           # e.g., "tripolis" — used as registry key
    display_name = ""   # e.g., "Tripolis" — for log and UI display

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether this provider has valid credentials configured."""

    @abstractmethod
    def list_fields(self, database: str) -> list:
        """List the fields of a contact database in provider order.

        Returns: list of {"id": str, "name": str, "is_primary": bool}.
        """

    @abstractmethod
    def search(self, database: str, criteria: list, exact: bool = True) -> dict:
        """Search contacts on (field_key, value) pairs.

        Returns: {"total_items": int,
                  "items": [{"id": str, "fields": [{"name": str, "value": str}]}]}
        """

    @abstractmethod
    def get_by_id(self, database: str, contact_id: str):
        """Fetch one contact by identifier.

        Returns: {"id": str, "fields": [...]}, or None if not found.
        """

    @abstractmethod
    def create(self, database: str, fields: dict, key_type: str = "name") -> dict:
        """Create a contact.

        Returns: {"id": str}
        Raises: AlreadyExistsError carrying the existing contact id.
        """

    @abstractmethod
    def update(self, database: str, contact_id: str, fields: dict, key_type: str = "id"):
        """Update fields of an existing contact."""

    @abstractmethod
    def list_groups(self, database: str) -> list:
        """List all contact groups.

        Returns: list of {"id": str, "name": str}.
        """

    @abstractmethod
    def add_to_group(self, database: str, contact_id: str, group_id: str):
        """Add a contact to a group."""

    @abstractmethod
    def remove_from_group(self, database: str, contact_id: str, group_id: str):
        """Remove a contact from a group."""

    @abstractmethod
    def list_group_subscriptions(self, database: str, contact_id: str, status: str) -> list:
        """List the group subscriptions of a contact with the given status.

        Returns: list of {"group_id": str, "label": str}.
        """
