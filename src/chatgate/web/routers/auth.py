from fastapi import APIRouter
from pydantic import BaseModel, Field

from chatgate.core.modules.session.models import AuthToken
from chatgate.web.deps import AppDep
from chatgate.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    """Email and password, used for registration and login."""

    email: str = Field("", description="Account email")
    password: str = Field("", description="Account password")


class CreateAccountResponse(BaseModel):
    success: bool = True
    message: str = "Account created successfully"
    email: str = Field(..., description="Email of the created account")


class LoginResponse(BaseModel):
    """Authentication response."""

    success: bool = True
    token: str = Field(..., description="Session token for subsequent requests")
    email: str = Field(..., description="Authenticated account email")


class TokenRequest(BaseModel):
    token: str | None = Field(None, description="Session token")


class VerifySessionResponse(BaseModel):
    valid: bool = Field(..., description="Whether the token belongs to a live session")
    email: str | None = Field(None, description="Session email, present when valid")


class SuccessResponse(BaseModel):
    success: bool = True


@router.post(
    "/create-account",
    summary="Create account",
    description="Register a new account with email and password.",
    operation_id="createAccount",
    responses={
        200: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Missing fields or email already registered"},
    },
)
async def create_account(request: CredentialsRequest, app: AppDep) -> CreateAccountResponse:
    email = await app.create_account(request.email, request.password)
    return CreateAccountResponse(email=email)


@router.post(
    "/login",
    summary="Authenticate account",
    description="Authenticate with email and password to receive a session token valid for 7 days.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(request: CredentialsRequest, app: AppDep) -> LoginResponse:
    """Authenticate account and create session."""
    token = await app.login(request.email, request.password)
    return LoginResponse(token=token, email=request.email)


@router.post(
    "/verify-session",
    summary="Verify session token",
    description="Check whether a token belongs to a live session. Expired sessions are removed.",
    operation_id="verifySession",
    response_model_exclude_none=True,
)
async def verify_session(request: TokenRequest, app: AppDep) -> VerifySessionResponse:
    email = await app.verify_session(AuthToken(request.token) if request.token else None)
    if email is None:
        return VerifySessionResponse(valid=False)
    return VerifySessionResponse(valid=True, email=email)


@router.post(
    "/logout",
    summary="End session",
    description="Invalidate a session token. Unknown tokens are accepted.",
    operation_id="logout",
)
async def logout(request: TokenRequest, app: AppDep) -> SuccessResponse:
    await app.logout(AuthToken(request.token) if request.token else None)
    return SuccessResponse()
