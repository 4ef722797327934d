import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from app.application.forgot_password import forgot_password
from app.application.messages import MessageBranding, deliver, password_reset_message
from app.application.provisioning import AccountProvisioner
from app.application.reset_password import reset_password
from app.domain.entities import IdentityZone
from app.domain.errors import (
    AccountNotFound,
    InvalidCode,
    MalformedCodePayload,
    PasswordPolicyViolation,
    ResetConflict,
)
from app.domain.ports.action_code_store import ActionCodeStorePort
from app.domain.ports.event_publisher import AccountEventPublisherPort
from app.domain.ports.message_port import MessagePort, MessageType
from app.domain.ports.password_policy import PasswordPolicyPort
from app.presentation.dependencies import (
    get_branding,
    get_code_store,
    get_event_publisher,
    get_message_port,
    get_password_policy,
    get_provisioner,
    get_reset_code_ttl_seconds,
    get_zone,
)
from app.schemas.requests import PasswordResetConfirmIn, PasswordResetRequestIn
from app.schemas.responses import AcceptedOut, PasswordChangedOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/password_resets", tags=["Passwords"])


@router.post("", status_code=202, response_model=AcceptedOut)
async def post_forgot_password(
    body: PasswordResetRequestIn,
    background_tasks: BackgroundTasks,
    zone: Annotated[IdentityZone, Depends(get_zone)],
    provisioner: Annotated[AccountProvisioner, Depends(get_provisioner)],
    code_store: Annotated[ActionCodeStorePort, Depends(get_code_store)],
    events: Annotated[AccountEventPublisherPort, Depends(get_event_publisher)],
    messages: Annotated[MessagePort, Depends(get_message_port)],
    branding: Annotated[MessageBranding, Depends(get_branding)],
    code_ttl_seconds: Annotated[int, Depends(get_reset_code_ttl_seconds)],
):
    # Same answer, and no mail I/O on the request path, whether or not the
    # address is known.
    try:
        info = await forgot_password(
            provisioner=provisioner,
            code_store=code_store,
            zone=zone,
            email=body.email,
            events=events,
            code_ttl_seconds=code_ttl_seconds,
        )
    except AccountNotFound:
        logger.info("password reset for unknown address", extra={"zone_id": zone.id})
        return AcceptedOut()
    except ResetConflict as e:
        logger.info(
            "password reset for externally managed account",
            extra={"user_id": e.user_id, "zone_id": zone.id},
        )
        return AcceptedOut()

    subject, content = password_reset_message(branding, zone, info.email, info.code.code)
    background_tasks.add_task(
        deliver,
        messages,
        recipient=info.email,
        category=MessageType.PASSWORD_RESET,
        subject=subject,
        content=content,
    )
    return AcceptedOut()


@router.post("/confirm", response_model=PasswordChangedOut)
async def post_reset_password(
    body: PasswordResetConfirmIn,
    zone: Annotated[IdentityZone, Depends(get_zone)],
    provisioner: Annotated[AccountProvisioner, Depends(get_provisioner)],
    code_store: Annotated[ActionCodeStorePort, Depends(get_code_store)],
    password_policy: Annotated[PasswordPolicyPort, Depends(get_password_policy)],
):
    try:
        account = await reset_password(
            provisioner=provisioner,
            code_store=code_store,
            password_policy=password_policy,
            zone=zone,
            code=body.code,
            new_password=body.new_password,
        )
    except PasswordPolicyViolation as e:
        raise HTTPException(status_code=422, detail=e.errors)
    except (InvalidCode, MalformedCodePayload):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="invalid reset code"
        )
    except AccountNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="unknown user")

    return PasswordChangedOut(user_id=account.id, username=account.username)
