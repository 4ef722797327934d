from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.begin_activation import begin_activation
from app.application.complete_activation import complete_activation
from app.application.messages import MessageBranding
from app.application.provisioning import AccountProvisioner
from app.application.resend_verification_code import resend_verification_code
from app.domain.entities import IdentityZone
from app.domain.errors import (
    AccountAlreadyActive,
    AccountAlreadyExists,
    AccountNotFound,
    InvalidCode,
    MalformedCodePayload,
    PasswordPolicyViolation,
)
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.client_registry import ClientRegistryPort
from app.domain.ports.message_port import MessagePort
from app.domain.ports.password_policy import PasswordPolicyPort
from app.domain.redirects import RedirectResolver
from app.presentation.dependencies import (
    get_activation_code_ttl_seconds,
    get_branding,
    get_client_registry,
    get_code_store,
    get_message_port,
    get_password_policy,
    get_provisioner,
    get_redirect_resolver,
    get_zone,
)
from app.schemas.requests import AccountCreateIn, AccountResendIn, AccountVerifyIn
from app.schemas.responses import AcceptedOut, AccountVerifiedOut

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", status_code=202, response_model=AcceptedOut)
async def post_begin_activation(
    body: AccountCreateIn,
    zone: Annotated[IdentityZone, Depends(get_zone)],
    provisioner: Annotated[AccountProvisioner, Depends(get_provisioner)],
    code_store: Annotated[ActionCodeStorePort, Depends(get_code_store)],
    messages: Annotated[MessagePort, Depends(get_message_port)],
    password_policy: Annotated[PasswordPolicyPort, Depends(get_password_policy)],
    branding: Annotated[MessageBranding, Depends(get_branding)],
    code_ttl_seconds: Annotated[int, Depends(get_activation_code_ttl_seconds)],
):
    try:
        await begin_activation(
            provisioner=provisioner,
            code_store=code_store,
            messages=messages,
            password_policy=password_policy,
            zone=zone,
            email=body.email,
            password=body.password,
            client_id=body.client_id,
            redirect_uri=body.redirect_uri,
            branding=branding,
            code_ttl_seconds=code_ttl_seconds,
        )
    except PasswordPolicyViolation as e:
        raise HTTPException(status_code=422, detail=e.errors)
    except AccountAlreadyActive:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="user already active"
        )
    except AccountAlreadyExists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="user already exists"
        )
    return AcceptedOut()


@router.post("/verify", response_model=AccountVerifiedOut)
async def post_complete_activation(
    body: AccountVerifyIn,
    zone: Annotated[IdentityZone, Depends(get_zone)],
    provisioner: Annotated[AccountProvisioner, Depends(get_provisioner)],
    code_store: Annotated[ActionCodeStorePort, Depends(get_code_store)],
    client_registry: Annotated[ClientRegistryPort, Depends(get_client_registry)],
    redirects: Annotated[RedirectResolver, Depends(get_redirect_resolver)],
):
    try:
        result = await complete_activation(
            provisioner=provisioner,
            code_store=code_store,
            client_registry=client_registry,
            redirects=redirects,
            zone=zone,
            code=body.code,
        )
    except (InvalidCode, MalformedCodePayload):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid activation code"
        )
    except AccountAlreadyActive:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="user already active"
        )
    except AccountNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="unknown user")

    return AccountVerifiedOut(
        user_id=result.user_id,
        username=result.username,
        email=result.email,
        redirect_location=result.redirect_location,
    )


@router.post("/resend", status_code=202, response_model=AcceptedOut)
async def post_resend_verification(
    body: AccountResendIn,
    zone: Annotated[IdentityZone, Depends(get_zone)],
    provisioner: Annotated[AccountProvisioner, Depends(get_provisioner)],
    code_store: Annotated[ActionCodeStorePort, Depends(get_code_store)],
    messages: Annotated[MessagePort, Depends(get_message_port)],
    branding: Annotated[MessageBranding, Depends(get_branding)],
    code_ttl_seconds: Annotated[int, Depends(get_activation_code_ttl_seconds)],
):
    try:
        await resend_verification_code(
            provisioner=provisioner,
            code_store=code_store,
            messages=messages,
            zone=zone,
            email=body.email,
            client_id=body.client_id,
            branding=branding,
            code_ttl_seconds=code_ttl_seconds,
        )
    except AccountNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="unknown user")
    except AccountAlreadyActive:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="user already active"
        )
    return AcceptedOut()
