"""
contact.py - Session around a single "current" contact in a remote database.

A ContactSession loads the field catalog of one database, then finds,
creates and updates one contact at a time. Field names are translated to
provider field keys through the catalog before every remote call, and the
loaded contact is kept locally as a dict keyed by field name plus "_id".
"""

import logging

import config
from app_logger import log_event
from errors import AlreadyExistsError, CreateError, InvalidFieldError, InvalidGroupError
from field_catalog import FieldCatalog
from providers import resolve_provider

log = logging.getLogger(__name__)

ID_FIELD = "_id"

_ABSENT = object()


def _to_int(value):
    """Coerce a field value to int; absent or non-numeric values count as 0."""
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0


class ContactSession:
    """Holds at most one loaded contact of a contact database.

    Fields can be read as session.email, session["email"] or
    session.get("email"). Attribute access cannot reach fields named like a
    session member (database, contact, id, catalog, get, update, ...); use
    get() or [] for those.

    Not safe for concurrent use; give every task its own session.
    """

    def __init__(self, provider=None, database=None, strict_fields=None):
        self._provider = resolve_provider(provider)
        self._database = database if database is not None else config.DATABASE
        self._strict = config.STRICT_FIELDS if strict_fields is None else strict_fields
        self._contact = None
        self._catalog = FieldCatalog.load(self._provider, self._database)

    # -- state ------------------------------------------------------------

    @property
    def database(self):
        return self._database

    @property
    def catalog(self) -> FieldCatalog:
        return self._catalog

    @property
    def contact(self):
        """Copy of the loaded contact record, or None."""
        return dict(self._contact) if self._contact is not None else None

    @property
    def id(self):
        return self._contact.get(ID_FIELD) if self._contact is not None else None

    def valid(self) -> bool:
        """Check if a contact is currently loaded."""
        return self._contact is not None and ID_FIELD in self._contact

    def reset(self):
        self._contact = None
        return self

    def get(self, field, default=None):
        if self._contact is None:
            return default
        value = self._contact.get(field)
        return default if value is None else value

    def __getitem__(self, field):
        return self.get(field)

    def __getattr__(self, field):
        # Only reached for names that are not real attributes
        if field.startswith("_") and field != ID_FIELD:
            raise AttributeError(field)
        return self.get(field)

    def __repr__(self):
        return f"ContactSession(database={self._database!r}, contact_id={self.id!r})"

    # -- lookup -----------------------------------------------------------

    def find(self, field_or_value, value=_ABSENT):
        """Search a contact and load it as the current contact.

        find(value) searches the primary key field, find(field, value) searches
        a named field and find("_id", id) fetches the contact directly.
        Anything but exactly one match leaves no contact loaded.

        Returns: self
        """
        if value is _ABSENT:
            key = self._catalog.primary_key_field()
            value = field_or_value
        elif field_or_value == ID_FIELD:
            return self._find_by_id(value)
        else:
            resolution = self._catalog.resolve(field_or_value)
            if not resolution.found:
                raise InvalidFieldError(field_or_value)
            key = resolution.key

        self._contact = None
        result = self._provider.search(self._database, [(key, value)], exact=True) or {}
        items = result.get("items") or []

        if result.get("total_items") == 1 and items and self._store(items[0]):
            log_event(self._database, "find", self.id, key)
        else:
            log.info("No unique contact for %s in database %s (%s matches)",
                     key, self._database, result.get("total_items", 0))
            log_event(self._database, "find_miss", "", f"{key}:{result.get('total_items', 0)}")
        return self

    def _find_by_id(self, contact_id):
        self._contact = None
        contact = self._provider.get_by_id(self._database, contact_id)
        if contact is None or not self._store(contact):
            log_event(self._database, "find_miss", contact_id, ID_FIELD)
            return self
        log_event(self._database, "find", self.id, ID_FIELD)
        return self

    def _store(self, item):
        """Load an item as the current contact; items without an id are skipped."""
        if not item.get("id"):
            log.warning("Ignoring contact without id in database %s", self._database)
            return False
        record = {ID_FIELD: item["id"]}
        for field in item.get("fields") or []:
            record[field["name"]] = field.get("value")
        self._contact = record
        return True

    # -- writes -----------------------------------------------------------

    def _filter(self, values, action, passthrough=()):
        """Keep only fields known to the catalog, keyed by field name.

        Unknown fields are dropped, or raise InvalidFieldError in strict mode.
        Names in passthrough are handled by the caller and dropped silently.
        """
        filtered = {}
        for field, value in values.items():
            resolution = self._catalog.resolve(field)
            if resolution.found:
                filtered[resolution.name] = value
            elif field in passthrough:
                continue
            elif self._strict:
                raise InvalidFieldError(field)
            else:
                log.warning("Dropping unknown field %s from %s in database %s",
                            field, action, self._database)
        return filtered

    def create(self, values):
        """Create a contact and load it.

        An existing contact reported by the provider is loaded instead.
        Raises: CreateError if the provider returns no identifier.
        """
        fields = self._filter(values, "create")

        try:
            response = self._provider.create(self._database, fields, "name") or {}
        except AlreadyExistsError as e:
            contact_id = e.existing_id
            log_event(self._database, "create_existing", contact_id)
        else:
            contact_id = response.get("id")
            if contact_id:
                log_event(self._database, "create", contact_id, ",".join(fields))

        if not contact_id:
            raise CreateError(f"Create in database {self._database} returned no contact id")

        return self.find(ID_FIELD, contact_id)

    def update(self, fields):
        """Update the current contact remotely and merge the fields locally.

        Returns: False if no contact is loaded, True otherwise.
        """
        if not self.valid():
            return False

        filtered = self._filter(fields, "update", passthrough=("id",))
        translated = {self._catalog.key_for(name): value for name, value in filtered.items()}

        if translated:
            self._provider.update(self._database, self._contact[ID_FIELD], translated, "id")
            log_event(self._database, "update", self.id, ",".join(filtered))

        self._contact.update(filtered)
        if "id" in fields:
            self._contact[ID_FIELD] = fields["id"]
        return True

    def increment(self, field):
        return self.update({field: _to_int(self.get(field)) + 1})

    def decrement(self, field):
        """Decrease the value of a field by one."""
        return self.update({field: _to_int(self.get(field)) - 1})

    # -- groups -----------------------------------------------------------

    def _group_id(self, group):
        # Linear scan; the first group with exactly this name wins
        for entry in self._provider.list_groups(self._database):
            if entry.get("name") == group:
                return entry.get("id")
        log.warning("Group %s not found in database %s", group, self._database)
        raise InvalidGroupError(group)

    def join(self, group, by_id=False):
        """Add the current contact to a group, given by name or by id."""
        if not self.valid():
            return False
        group_id = group if by_id else self._group_id(group)
        self._provider.add_to_group(self._database, self.id, group_id)
        log_event(self._database, "join", self.id, group_id)
        return self

    def leave(self, group, by_id=False):
        """Remove the current contact from a group, given by name or by id."""
        if not self.valid():
            return False
        group_id = group if by_id else self._group_id(group)
        self._provider.remove_from_group(self._database, self.id, group_id)
        log_event(self._database, "leave", self.id, group_id)
        return self

    def subscriptions(self):
        """Get {group_id: label} for the active group subscriptions.

        Returns False when no contact is loaded, so check valid() first.
        """
        if not self.valid():
            return False
        subs = self._provider.list_group_subscriptions(
            self._database, self.id, config.SUBSCRIPTION_STATUS
        )
        return {sub["group_id"]: sub.get("label") for sub in subs}
