"""Pydantic schemas for routing form requests and responses.

Wire format is camelCase (``userId``, ``selectText``, ``queryValue``...);
snake_case names are accepted on input as well.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


class RoutesState(str, Enum):
    """Observable states of a form's routes."""
    UNSET = "unset"
    CLEARED = "cleared"
    SET = "set"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FormField(CamelModel):
    """A single field on a routing form.

    ``type`` is free-form; renderers decide what they support.
    """
    id: str
    label: str
    type: str
    select_text: Optional[str] = None
    required: Optional[bool] = None


class RouteAction(CamelModel):
    """What happens when a route matches (e.g. customPageMessage, eventTypeRedirectUrl)."""
    type: str
    value: str


class Route(CamelModel):
    """A routing rule.

    Attributes:
        id: Route identifier
        query_value: Opaque query-builder tree, stored as given
        is_fallback: Whether this is the catch-all route
        action: Action taken on match
    """
    id: str
    query_value: Any = None
    is_fallback: Optional[bool] = None
    action: RouteAction


class FormInput(CamelModel):
    """Payload for creating or updating a form.

    ``routes`` distinguishes three cases: omitted (leave as is, or never
    configured on create), explicit null (clear) and a list (replace).
    Read it through :attr:`routes_state`.
    """
    id: str = Field(..., min_length=1)
    name: str
    description: Optional[str] = None
    disabled: Optional[bool] = None
    form_fields: Optional[list[FormField]] = Field(None, alias="fields")
    routes: Optional[list[Route]] = None

    @property
    def routes_state(self) -> RoutesState:
        if "routes" not in self.model_fields_set:
            return RoutesState.UNSET
        if self.routes is None:
            return RoutesState.CLEARED
        return RoutesState.SET

    def fields_document(self) -> list[dict[str, Any]]:
        """Fields as stored: only the keys the caller sent, [] when omitted."""
        return [
            field.model_dump(by_alias=True, exclude_unset=True)
            for field in self.form_fields or []
        ]

    def routes_document(self) -> Optional[list[dict[str, Any]]]:
        if self.routes is None:
            return None
        return [
            route.model_dump(by_alias=True, exclude_unset=True)
            for route in self.routes
        ]


class FormIdInput(CamelModel):
    """Identifies a single form."""
    id: str = Field(..., min_length=1)


class FormRead(CamelModel):
    """A stored form as returned to clients.

    When routes were never configured the ``routes`` key is omitted from
    the output; when they were cleared it is present and null.
    """
    id: str
    name: str
    description: Optional[str] = None
    disabled: bool = False
    form_fields: list[dict[str, Any]] = Field(default_factory=list, alias="fields")
    routes: Optional[list[dict[str, Any]]] = None
    user_id: str
    created_at: datetime
    updated_at: datetime

    @property
    def routes_state(self) -> RoutesState:
        if "routes" not in self.model_fields_set:
            return RoutesState.UNSET
        if self.routes is None:
            return RoutesState.CLEARED
        return RoutesState.SET

    @model_serializer(mode="wrap")
    def _omit_unset_routes(self, handler):
        data = handler(self)
        if "routes" not in self.model_fields_set:
            data.pop("routes", None)
        return data

    @classmethod
    def from_model(cls, form) -> "FormRead":
        """Build from a RoutingForm row, preserving the routes state."""
        data = {
            "id": form.id,
            "name": form.name,
            "description": form.description,
            "disabled": form.disabled,
            "form_fields": form.fields or [],
            "user_id": form.user_id,
            "created_at": form.created_at,
            "updated_at": form.updated_at,
        }
        if form.routes_configured:
            data["routes"] = form.routes
        return cls(**data)


class FormResponseInput(CamelModel):
    """A submission against a form."""
    form_id: str = Field(..., min_length=1)
    form_filler_id: str = Field(..., min_length=1)
    response: dict[str, str]


class FormResponseRead(CamelModel):
    """A stored form submission."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    form_id: str
    form_filler_id: str
    response: dict[str, str]
    created_at: datetime
