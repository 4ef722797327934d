from typing import Literal

from pydantic import BaseModel, Field


class AcceptedOut(BaseModel):
    status: Literal["accepted"] = "accepted"


class AccountVerifiedOut(BaseModel):
    user_id: str = Field(..., description="The id of the user")
    username: str
    email: str
    redirect_location: str = Field(..., description="Where to send the browser next")


class PasswordChangedOut(BaseModel):
    user_id: str
    username: str
