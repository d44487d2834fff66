"""
API v1 routes.

Defines REST endpoints for account listing, signup, activation,
editing and deletion.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from account_core.api.dependencies import get_account_service, get_actor
from account_core.api.models import (
    AccountDetailResponse,
    AccountListResponse,
    AccountSummaryResponse,
    ErrorResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateRequest,
    ValidationErrorResponse,
)
from account_core.domain.accounts import AccountService
from account_core.domain.exceptions import AccountNotFound, NotAuthorized, ValidationFailed
from account_core.domain.models import Actor
from account_core.domain.ports import ActivationResult, DeletionResult, RegistrationOutcome

router = APIRouter(tags=["v1"])


def _forbidden() -> HTTPException:
    # Same response whether the caller is anonymous or lacks the role.
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")


def _validation_error(errors: dict[str, list[str]]) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": "Validation failed", "errors": errors},
    )


@router.get(
    "/accounts",
    response_model=AccountListResponse,
    responses={403: {"model": ErrorResponse, "description": "Admins only"}},
    summary="List accounts",
)
def list_accounts(
    page: str | None = Query(default=None, description="Token from a previous page"),
    actor: Actor | None = Depends(get_actor),
    service: AccountService = Depends(get_account_service),
) -> AccountListResponse:
    try:
        result = service.list_accounts(actor, page)
    except NotAuthorized:
        raise _forbidden() from None
    return AccountListResponse(
        items=[AccountSummaryResponse.model_validate(item) for item in result.items],
        next_page_token=result.next_page_token,
    )


@router.post(
    "/accounts",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": RegisterResponse, "description": "Activation link re-sent"},
        409: {"model": ErrorResponse, "description": "Account already activated"},
        422: {"model": ValidationErrorResponse, "description": "Validation error"},
    },
    summary="Sign up",
    description="Create a local account and email an activation link. "
    "Signing up again with an unactivated email sends a fresh link.",
)
def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
):
    result = service.register_account(
        request_data.email,
        request_data.model_dump(exclude={"email"}),
    )

    if result.outcome == RegistrationOutcome.ALREADY_REGISTERED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account already exists, please log in",
        )
    if result.outcome == RegistrationOutcome.VALIDATION_FAILED:
        raise _validation_error(result.errors)

    reissued = result.outcome == RegistrationOutcome.REISSUED
    if not result.notification_sent:
        message = "Activation email could not be sent, sign up again to retry"
    elif reissued:
        message = "New activation link sent"
    else:
        message = "Activation link sent"

    body = RegisterResponse(
        message=message,
        email=result.account.email,
        outcome=result.outcome.value,
        notification_sent=result.notification_sent,
    )
    if reissued:
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump())
    return body


@router.get(
    "/accounts/{account_id}",
    response_model=AccountDetailResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Not authorized"},
        404: {"model": ErrorResponse, "description": "Account not found"},
    },
    summary="Show an account and its projects",
)
def get_account(
    account_id: int,
    actor: Actor | None = Depends(get_actor),
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    try:
        detail = service.get_account(actor, account_id)
    except NotAuthorized:
        raise _forbidden() from None
    except AccountNotFound:
        raise _not_found() from None
    return AccountDetailResponse.model_validate(detail)


@router.get(
    "/accounts/{account_id}/edit",
    response_model=AccountDetailResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Not authorized"},
        404: {"model": ErrorResponse, "description": "Account not found"},
    },
    summary="Load editable account fields",
)
def edit_account(
    account_id: int,
    actor: Actor | None = Depends(get_actor),
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    try:
        detail = service.edit_account(actor, account_id)
    except NotAuthorized:
        raise _forbidden() from None
    except AccountNotFound:
        raise _not_found() from None
    return AccountDetailResponse.model_validate(detail)


@router.patch(
    "/accounts/{account_id}",
    response_model=AccountDetailResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Not authorized"},
        404: {"model": ErrorResponse, "description": "Account not found"},
        422: {"model": ValidationErrorResponse, "description": "Validation error"},
    },
    summary="Update name, email or password",
)
def update_account(
    account_id: int,
    request_data: UpdateRequest,
    actor: Actor | None = Depends(get_actor),
    service: AccountService = Depends(get_account_service),
) -> AccountDetailResponse:
    try:
        detail = service.update_account(
            actor, account_id, request_data.model_dump(exclude_none=True)
        )
    except NotAuthorized:
        raise _forbidden() from None
    except AccountNotFound:
        raise _not_found() from None
    except ValidationFailed as e:
        raise _validation_error(e.errors) from None
    return AccountDetailResponse.model_validate(detail)


@router.delete(
    "/accounts/{account_id}",
    response_model=MessageResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Admins only"},
        404: {"model": ErrorResponse, "description": "Account not found"},
        409: {"model": ErrorResponse, "description": "Cannot delete own account"},
    },
    summary="Delete an account",
    description="Delete an account. Its projects are transferred to the deleting admin.",
)
def delete_account(
    account_id: int,
    actor: Actor | None = Depends(get_actor),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        result = service.delete_account(actor, account_id)
    except NotAuthorized:
        raise _forbidden() from None
    except AccountNotFound:
        raise _not_found() from None

    if result == DeletionResult.CANNOT_DELETE_SELF:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You cannot delete your own account",
        )
    return MessageResponse(message="Account deleted")


@router.get(
    "/accounts/{account_id}/activate",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid activation link"},
        409: {"model": ErrorResponse, "description": "Account already activated"},
    },
    summary="Activate account from emailed link",
)
def activate(
    account_id: int,
    token: str = Query(..., min_length=1, description="Token from the activation email"),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    result = service.activate_account(account_id, token)

    if result == ActivationResult.ACTIVATED:
        return MessageResponse(message="Account activated")
    if result == ActivationResult.ALREADY_ACTIVATED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account already activated",
        )
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid activation link",
    )
