"""Pydantic schemas for data validation.

This package contains all Pydantic models for routing form payloads.
"""

from routing_forms.schemas.form import (
    RoutesState,
    FormField,
    RouteAction,
    Route,
    FormInput,
    FormIdInput,
    FormRead,
    FormResponseInput,
    FormResponseRead,
)

__all__ = [
    "RoutesState",
    "FormField",
    "RouteAction",
    "Route",
    "FormInput",
    "FormIdInput",
    "FormRead",
    "FormResponseInput",
    "FormResponseRead",
]
