"""Routing forms endpoints.

RPC-style endpoints grouped under the ``routingForms`` namespace: queries
are GETs, mutations are POSTs with a JSON body. Every endpoint requires an
authenticated caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from routing_forms.middleware.identity import get_current_user
from routing_forms.models.database import get_db
from routing_forms.schemas.form import (
    FormIdInput,
    FormInput,
    FormRead,
    FormResponseInput,
    FormResponseRead,
)
from routing_forms.services.form_service import RoutingFormService, UserIdentity
from routing_forms.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


def get_form_service(db: Session = Depends(get_db)) -> RoutingFormService:
    return RoutingFormService(db)


@router.get("/api/routingForms.forms", response_model=list[FormRead])
async def list_forms(
    user: UserIdentity = Depends(get_current_user),
    service: RoutingFormService = Depends(get_form_service),
) -> list[FormRead]:
    """List the caller's forms, oldest first."""
    forms = service.list_forms(user)
    logger.debug(f"Listed {len(forms)} forms", extra={"user_id": user.id})
    return [FormRead.from_model(form) for form in forms]


@router.get("/api/routingForms.form", response_model=Optional[FormRead])
async def get_form(
    form_id: str = Query(..., alias="id", min_length=1),
    service: RoutingFormService = Depends(get_form_service),
) -> Optional[FormRead]:
    """Fetch a form by id; null when it does not exist."""
    form = service.get_form(form_id)
    if form is None:
        return None
    return FormRead.from_model(form)


@router.post("/api/routingForms.form", response_model=FormRead)
async def upsert_form(
    form_input: FormInput,
    user: UserIdentity = Depends(get_current_user),
    service: RoutingFormService = Depends(get_form_service),
) -> FormRead:
    """Create the form, or overwrite the form with the same id."""
    form = service.upsert_form(user, form_input)
    return FormRead.from_model(form)


@router.post("/api/routingForms.deleteForm", response_model=FormRead)
async def delete_form(
    delete_input: FormIdInput,
    service: RoutingFormService = Depends(get_form_service),
) -> FormRead:
    """Delete a form; 404 when it does not exist."""
    form = service.delete_form(delete_input.id)
    return FormRead.from_model(form)


@router.post("/api/routingForms.response", response_model=FormResponseRead)
async def submit_response(
    response_input: FormResponseInput,
    service: RoutingFormService = Depends(get_form_service),
) -> FormResponseRead:
    """Record a response; 409 when this filler already responded."""
    form_response = service.submit_response(response_input)
    return FormResponseRead.model_validate(form_response)
