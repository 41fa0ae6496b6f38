"""Exception taxonomy for contact sessions and providers.

Unknown fields or groups are programmer errors and raise. A contact that
cannot be found is a normal outcome and is reported through return values.
"""


class ContactError(Exception):
    """Base class for all contact session errors."""
    pass


class SchemaLoadError(ContactError):
    """Raised when the field schema of a database cannot be fetched."""
    pass


class NoPrimaryKeyError(ContactError):
    """Raised when a database has no field flagged as primary key."""
    pass


class InvalidFieldError(ContactError):
    """Raised when a field name is not known to the database."""

    def __init__(self, field):
        self.field = field
        super().__init__(f"No such field {field}")


class InvalidGroupError(ContactError):
    """Raised when no group with the given name exists."""

    def __init__(self, group):
        self.group = group
        super().__init__(f"No such group {group}")


class CreateError(ContactError):
    """Raised when a create call returns no contact identifier."""
    pass


class ProviderError(Exception):
    """Raised by providers when the remote service rejects a call."""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class AlreadyExistsError(ProviderError):
    """Raised by providers when a contact being created already exists."""

    def __init__(self, existing_id, status_code=409):
        self.existing_id = existing_id
        super().__init__(f"Contact already exists with id {existing_id}", status_code)
