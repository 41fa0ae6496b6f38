"""Tripolis Dialogue API provider."""

import requests

import config
from errors import AlreadyExistsError, ProviderError
from providers.base import BaseProvider


class TripolisProvider(BaseProvider):
    name = "tripolis"
    display_name = "Tripolis"

    CONTACT_SERVICE = "ContactService"
    FIELD_SERVICE = "ContactDatabaseFieldService"
    GROUP_SERVICE = "ContactGroupService"

    def __init__(self, api_url=None, client=None, username=None, password=None, timeout=None):
        self._api_url = (api_url if api_url is not None else config.API_URL).rstrip("/")
        self._client = client if client is not None else config.CLIENT
        self._username = username if username is not None else config.USERNAME
        self._password = password if password is not None else config.PASSWORD
        self._timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self._api_url and self._client and self._username and self._password)

    def call_api(self, service: str, method: str, payload: dict):
        url = f"{self._api_url}/{service}/{method}"
        body = {
            "authInfo": {
                "client": self._client,
                "username": self._username,
                "password": self._password,
            },
            **payload,
        }
        response = requests.post(url, json=body, timeout=self._timeout)

        if response.status_code == 200:
            return response.json()
        elif response.status_code == 404:
            return None
        elif response.status_code == 409:
            try:
                error = response.json() or {}
            except ValueError:
                error = {}
            if error.get("errorCode") == "ALREADY_EXISTS":
                raise AlreadyExistsError(error.get("identifier"))
            raise ProviderError(
                f"{service}.{method} conflict: {error.get('message', '')}", response.status_code
            )
        elif response.status_code in (401, 403):
            raise ProviderError(f"{service}.{method} not authorized", response.status_code)
        else:
            raise ProviderError(
                f"{service}.{method} failed with status code {response.status_code}",
                response.status_code,
            )

    # -- flattening -------------------------------------------------------

    @staticmethod
    def _items(data: dict, outer: str, inner: str) -> list:
        items = ((data or {}).get(outer) or {}).get(inner) or []
        if isinstance(items, dict):
            # single element collections come back unwrapped
            return [items]
        return items

    def flatten_contact(self, contact: dict) -> dict:
        fields = self._items(contact, "contactFields", "contactField")
        return {
            "id": contact.get("contactId") or contact.get("id"),
            "fields": [{"name": f.get("name"), "value": f.get("value")} for f in fields],
        }

    # -- schema -----------------------------------------------------------

    def list_fields(self, database: str) -> list:
        data = self.call_api(self.FIELD_SERVICE, "getByContactDatabaseId", {
            "contactDatabaseId": database,
        })
        if data is None:
            raise ProviderError(f"Contact database {database} not found", 404)
        return [
            {
                "id": field.get("id"),
                "name": field.get("name"),
                "is_primary": bool(field.get("key")),
            }
            for field in self._items(data, "contactDatabaseFields", "contactDatabaseField")
        ]

    # -- contacts ---------------------------------------------------------

    def search(self, database: str, criteria: list, exact: bool = True) -> dict:
        data = self.call_api(self.CONTACT_SERVICE, "search", {
            "contactDatabaseId": database,
            "searchParameters": {
                "contactFieldValue": [
                    {"contactDatabaseFieldId": key, "value": value} for key, value in criteria
                ],
                "exactMatch": exact,
            },
            "paging": {"pageNr": 1, "pageSize": 2},
        }) or {}
        contacts = self._items(data, "contacts", "contact")
        total = (data.get("paging") or {}).get("totalItems", len(contacts))
        return {
            "total_items": int(total or 0),
            "items": [self.flatten_contact(c) for c in contacts],
        }

    def get_by_id(self, database: str, contact_id: str):
        data = self.call_api(self.CONTACT_SERVICE, "getById", {
            "contactDatabaseId": database,
            "id": contact_id,
        })
        if not data or not data.get("contact"):
            return None
        return self.flatten_contact(data["contact"])

    def create(self, database: str, fields: dict, key_type: str = "name") -> dict:
        data = self.call_api(self.CONTACT_SERVICE, "create", {
            "contactDatabaseId": database,
            "contactFields": self._field_list(fields, key_type),
        }) or {}
        return {"id": data.get("id")}

    def update(self, database: str, contact_id: str, fields: dict, key_type: str = "id"):
        return self.call_api(self.CONTACT_SERVICE, "update", {
            "contactDatabaseId": database,
            "id": contact_id,
            "contactFields": self._field_list(fields, key_type),
        })

    @staticmethod
    def _field_list(fields: dict, key_type: str) -> list:
        key = "name" if key_type == "name" else "contactDatabaseFieldId"
        return [{key: k, "value": "" if v is None else str(v)} for k, v in fields.items()]

    # -- groups -----------------------------------------------------------

    def list_groups(self, database: str) -> list:
        data = self.call_api(self.GROUP_SERVICE, "getByContactDatabaseId", {
            "contactDatabaseId": database,
        }) or {}
        return [
            {"id": group.get("id"), "name": group.get("name")}
            for group in self._items(data, "contactGroups", "contactGroup")
        ]

    def add_to_group(self, database: str, contact_id: str, group_id: str):
        return self.call_api(self.CONTACT_SERVICE, "addToContactGroup", {
            "contactDatabaseId": database,
            "contactId": contact_id,
            "contactGroupId": group_id,
        })

    def remove_from_group(self, database: str, contact_id: str, group_id: str):
        return self.call_api(self.CONTACT_SERVICE, "removeFromContactGroup", {
            "contactDatabaseId": database,
            "contactId": contact_id,
            "contactGroupId": group_id,
        })

    def list_group_subscriptions(self, database: str, contact_id: str, status: str) -> list:
        data = self.call_api(self.CONTACT_SERVICE, "getContactGroupSubscriptions", {
            "contactDatabaseId": database,
            "contactId": contact_id,
            "contactGroupSubscriptionStatus": status,
        }) or {}
        return [
            {"group_id": sub.get("contactGroupId"), "label": sub.get("contactGroupLabel")}
            for sub in self._items(data, "contactGroupSubscriptions", "contactGroupSubscription")
        ]
