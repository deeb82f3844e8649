"""HTTP client for the Life Tracker API with a local cache of categories and entries."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter

from lifetracker.models.entry import Entry
from lifetracker.models.taxonomy import Category, CategoryType, Item, ScaleType, SubItem
from lifetracker.services.scales import COMPOSER_LAYOUTS, DEFAULT_SCALE_TYPES, SCALES, ScaleRange
from lifetracker.services.taxonomy import describe_item, find_node

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"

_categories_adapter = TypeAdapter(list[Category])
_entries_adapter = TypeAdapter(list[Entry])


class ApiError(Exception):
    """Raised when the API answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SessionExpiredError(ApiError):
    """Raised on 401; the client has already dropped its token and user."""


def widget_for(scale_type: ScaleType) -> ScaleRange:
    """Slider range/step/unit for an item's scale."""
    return SCALES[scale_type]


def layout_for(category_type: CategoryType) -> str:
    """Composer layout for a category: 'checklist' (food) or 'nested' (self)."""
    return COMPOSER_LAYOUTS[category_type]


def snap(scale: ScaleRange, value: float) -> int:
    """Clamp value into the scale and round it to the nearest slider step."""
    clamped = min(max(value, scale.min), scale.max)
    steps = round((clamped - scale.min) / scale.step)
    return scale.min + steps * scale.step


def scale_type_of(categories: list[Category], node_id: str) -> ScaleType:
    """
    Scale used to record node_id: the item's scale (sub-items inherit it). A
    category without items is rated directly on its type's default scale.
    Unknown ids fall back to rating.
    """
    node = find_node(categories, node_id)
    if node is not None:
        return node[1].scale_type
    for category in categories:
        if category.id == node_id:
            return DEFAULT_SCALE_TYPES[category.category_type]
    return "rating"


def compose_entry_items(
    categories: list[Category], measurements: dict[str, float]
) -> list[dict[str, Any]]:
    """Build the EntryItem payloads, storing each value in the field its scale requires."""
    items = []
    for node_id, value in measurements.items():
        scale = widget_for(scale_type_of(categories, node_id))
        items.append({"itemId": node_id, scale.field: snap(scale, value)})
    return items


class LifeTrackerClient:
    """
    Synchronous API client.

    Keeps the token and user from login() and a cache of categories and entries
    that is refreshed on demand. Any 401 logs the client out and raises
    SessionExpiredError. Pass http= to reuse an existing httpx.Client (it must
    already point at the server).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http: httpx.Client | None = None,
        api_prefix: str = "/api",
        timeout: float = 10.0,
    ) -> None:
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self._prefix = api_prefix.rstrip("/")
        self.token: str | None = None
        self.user: dict[str, Any] | None = None
        self._categories: list[Category] | None = None
        self._entries: list[Entry] | None = None

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> LifeTrackerClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.user and self.user.get("role") == "admin")

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        resp = self._http.request(method, f"{self._prefix}{path}", headers=headers, **kwargs)
        if resp.status_code == 401:
            logger.warning("Session rejected by server; logging out")
            self.logout()
            raise SessionExpiredError(_error_message(resp), 401)
        if resp.status_code >= 400:
            raise ApiError(_error_message(resp), resp.status_code)
        return resp

    def login(self, username: str, password: str) -> dict[str, Any]:
        resp = self._request("POST", "/login", json={"username": username, "password": password})
        data = resp.json()
        self.token = data["token"]
        self.user = data["user"]
        return self.user

    def logout(self) -> None:
        """Forget the session and the cached data."""
        self.token = None
        self.user = None
        self._categories = None
        self._entries = None

    def categories(self, refresh: bool = False) -> list[Category]:
        if self._categories is None or refresh:
            data = self._request("GET", "/categories").json()
            self._categories = _categories_adapter.validate_python(data["categories"])
        return self._categories

    def entries(self, refresh: bool = False) -> list[Entry]:
        if self._entries is None or refresh:
            self._entries = _entries_adapter.validate_python(self._request("GET", "/entries").json())
        return self._entries

    def refresh(self) -> None:
        """Refetch categories and entries, as on navigation."""
        self.categories(refresh=True)
        self.entries(refresh=True)

    def label_for(self, item_id: str) -> str:
        """Display name of an entry item; the raw id when it no longer exists."""
        return describe_item(self.categories(), item_id)

    def add_entry(
        self, category_id: str, measurements: dict[str, float], notes: str | None = None
    ) -> Entry:
        """Compose and post an entry; the cache is updated only after the server confirms."""
        if not measurements:
            raise ValueError("an entry needs at least one measurement")
        payload: dict[str, Any] = {
            "categoryId": category_id,
            "items": compose_entry_items(self.categories(), measurements),
        }
        if notes:
            payload["notes"] = notes
        entry = Entry.model_validate(self._request("POST", "/entries", json=payload).json())
        if self._entries is not None:
            self._entries.append(entry)
        return entry

    def delete_entry(self, entry_id: str) -> None:
        """Remove locally first, then on the server. A failed server call is not reconciled."""
        if self._entries is not None:
            self._entries = [e for e in self._entries if e.id != entry_id]
        self._request("DELETE", f"/entries/{entry_id}")

    # Taxonomy management (admin only on the server side)

    def create_category(self, name: str, category_type: CategoryType = "self") -> Category:
        data = self._request(
            "POST", "/categories", json={"name": name, "categoryType": category_type}
        ).json()
        self._categories = None
        return Category.model_validate(data)

    def update_category(self, category_id: str, **fields: Any) -> Category:
        data = self._request("PUT", f"/categories/{category_id}", json=fields).json()
        self._categories = None
        return Category.model_validate(data)

    def delete_category(self, category_id: str) -> None:
        self._request("DELETE", f"/categories/{category_id}")
        self._categories = None

    def create_item(
        self, category_id: str, name: str, scale_type: ScaleType | None = None
    ) -> Item:
        body: dict[str, Any] = {"name": name}
        if scale_type is not None:
            body["scaleType"] = scale_type
        data = self._request("POST", f"/categories/{category_id}/items", json=body).json()
        self._categories = None
        return Item.model_validate(data)

    def delete_item(self, category_id: str, item_id: str) -> None:
        self._request("DELETE", f"/categories/{category_id}/items/{item_id}")
        self._categories = None

    def create_sub_item(self, category_id: str, item_id: str, name: str) -> SubItem:
        data = self._request(
            "POST", f"/categories/{category_id}/items/{item_id}/subitems", json={"name": name}
        ).json()
        self._categories = None
        return SubItem.model_validate(data)

    def delete_sub_item(self, category_id: str, item_id: str, sub_item_id: str) -> None:
        self._request("DELETE", f"/categories/{category_id}/items/{item_id}/subitems/{sub_item_id}")
        self._categories = None


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if detail is not None:
        return str(detail)
    return f"Request failed with status {resp.status_code}"
