"""
API v1 routes.

Defines REST endpoints for self-registration and password recovery.
"""

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status

from src.api.dependencies import (
    get_recovery_workflow,
    get_registration_workflow,
    get_session_state,
)
from src.api.models import (
    ErrorResponse,
    PersonData,
    RecoveryRequest,
    RecoveryResponse,
    RegistrationResponse,
)
from src.config.settings import Settings, get_settings
from src.domain.ports import SessionState
from src.domain.recovery import RecoveryWorkflow
from src.domain.registration import RegistrationOutcome, RegistrationWorkflow

router = APIRouter(tags=["v1"])


def _registration_response(outcome: RegistrationOutcome) -> RegistrationResponse:
    if outcome.rejection is not None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=outcome.message)

    return RegistrationResponse(
        success=outcome.success,
        data=PersonData.model_validate(outcome.account),
        errors=outcome.errors,
    )


@router.get(
    "/register",
    response_model=RegistrationResponse,
    responses={403: {"model": ErrorResponse, "description": "Registration not allowed"}},
    summary="Show the registration form",
    description="Returns a blank account for the registration form. "
    "Query parameters are not applied to the account.",
)
async def show_registration(
    request: Request,
    workflow: RegistrationWorkflow = Depends(get_registration_workflow),
    session: SessionState = Depends(get_session_state),
) -> RegistrationResponse:
    outcome = workflow.register(request.method, dict(request.query_params), session)
    return _registration_response(outcome)


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"model": ErrorResponse, "description": "Registration not allowed"},
        422: {
            "model": RegistrationResponse,
            "description": "Validation error, or a non-string field value",
        },
    },
    summary="Register a new account",
    description="Submit registration fields (FirstName, LastName, Gender, BirthDate, "
    "Username, Password, Email, Phone, Location, About) plus PasswordConfirm. "
    "On success the session cookie is bound to the new account.",
)
async def register(
    request: Request,
    response: Response,
    request_data: dict[str, str] | None = Body(default=None),
    workflow: RegistrationWorkflow = Depends(get_registration_workflow),
    session: SessionState = Depends(get_session_state),
    settings: Settings = Depends(get_settings),
) -> RegistrationResponse:
    """
    Register an account and log the visitor in.

    Body fields win over query parameters of the same name. Fields
    outside the registration allow-list are ignored; every value must be
    a string.
    """
    raw_fields = {**request.query_params, **(request_data or {})}

    outcome = workflow.register(request.method, raw_fields, session)

    body = _registration_response(outcome)

    if outcome.success:
        response.set_cookie(
            settings.session_cookie_name,
            outcome.session.handle,
            httponly=True,
            samesite="lax",
        )
    else:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    return body


@router.get(
    "/register/recover",
    response_model=RecoveryResponse,
    summary="Show the password recovery form",
)
async def show_recovery(
    request: Request,
    workflow: RecoveryWorkflow = Depends(get_recovery_workflow),
) -> RecoveryResponse:
    outcome = workflow.request_recovery(request.method, None)
    return RecoveryResponse(success=outcome.success, error=outcome.error)


@router.post(
    "/register/recover",
    response_model=RecoveryResponse,
    responses={400: {"model": RecoveryResponse, "description": "No recoverable account"}},
    summary="Request a password reset",
    description="Looks up the account by username, then by email address, "
    "and emails it a single-use password reset token.",
)
async def recover(
    request: Request,
    response: Response,
    request_data: RecoveryRequest | None = None,
    workflow: RecoveryWorkflow = Depends(get_recovery_workflow),
) -> RecoveryResponse:
    """
    Email a password reset token.

    - **username**: Username or email address of the account
    """
    identifier = request_data.username if request_data else None
    outcome = workflow.request_recovery(request.method, identifier)

    if not outcome.success:
        response.status_code = status.HTTP_400_BAD_REQUEST

    return RecoveryResponse(success=outcome.success, error=outcome.error)
