"""Client API: thin routes delegating to the ClientLifecycle facade."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.v1.dependencies import CurrentClientId, Lifecycle, get_google_verifier
from app.application.dtos.client import ProfileUpdate, RegistrationInput
from app.infrastructure.external.identity import GoogleIdentityVerifier
from app.schemas.client import (
    AuthResponse,
    DeleteResultResponse,
    LoginRequest,
    PictureResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    SocialLoginRequest,
    TokenResponse,
)

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(body: RegisterRequest, lifecycle: Lifecycle) -> TokenResponse:
    """Register a client and return a bearer token."""
    token = await lifecycle.register(
        RegistrationInput(
            email=body.email,
            password=body.password,
            first_name=body.first_name,
            last_name=body.last_name,
        )
    )
    return TokenResponse(access_token=token)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, lifecycle: Lifecycle) -> AuthResponse:
    """Email/password login. 404 for an unknown email, 401 for a wrong password."""
    result = await lifecycle.login(body.email, body.password)
    return AuthResponse.from_result(result)


@router.post("/social/google", response_model=AuthResponse)
async def google_sign_in(
    body: SocialLoginRequest,
    lifecycle: Lifecycle,
    verifier: Annotated[GoogleIdentityVerifier, Depends(get_google_verifier)],
) -> AuthResponse:
    """Sign in (or sign up) with a Google access token."""
    result = await lifecycle.sign_in_with_provider(verifier, body.access_token)
    return AuthResponse.from_result(result)


@router.get("/me", response_model=ProfileResponse)
async def get_me(client_id: CurrentClientId, lifecycle: Lifecycle) -> ProfileResponse:
    """Current client's profile (picture as a data URL)."""
    return ProfileResponse.from_view(await lifecycle.get_profile(client_id))


@router.patch("/me", response_model=ProfileResponse)
async def update_me(
    body: ProfileUpdateRequest,
    client_id: CurrentClientId,
    lifecycle: Lifecycle,
) -> ProfileResponse:
    """Partial profile update."""
    view = await lifecycle.update_profile(
        client_id,
        ProfileUpdate(
            email=body.email,
            display_name=body.display_name,
            first_name=body.first_name,
            last_name=body.last_name,
            password=body.password,
        ),
    )
    return ProfileResponse.from_view(view)


@router.put("/me/picture", response_model=PictureResponse)
async def set_picture(
    client_id: CurrentClientId,
    lifecycle: Lifecycle,
    file: UploadFile = File(...),
) -> PictureResponse:
    """Upload or replace the profile picture."""
    media_id = await lifecycle.set_picture(
        client_id,
        file.file,
        file.content_type or "",
        file.filename or "picture",
    )
    return PictureResponse(media_id=media_id)


@router.delete("/me/picture", response_model=DeleteResultResponse)
async def delete_picture(
    client_id: CurrentClientId, lifecycle: Lifecycle
) -> DeleteResultResponse:
    """Reset the picture to the placeholder; deleted reports the media cleanup outcome."""
    return DeleteResultResponse(deleted=await lifecycle.delete_picture(client_id))


@router.delete("/me", response_model=DeleteResultResponse)
async def delete_me(
    client_id: CurrentClientId, lifecycle: Lifecycle
) -> DeleteResultResponse:
    """Delete the account and its picture."""
    return DeleteResultResponse(deleted=await lifecycle.delete_account(client_id))
