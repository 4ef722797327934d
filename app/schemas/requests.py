from pydantic import BaseModel, EmailStr, Field


class AccountCreateIn(BaseModel):
    email: EmailStr = Field(..., description="The email of the user", max_length=255)
    password: str = Field(..., description="The password of the user", max_length=255)
    client_id: str | None = Field(None, max_length=255)
    redirect_uri: str | None = Field(None, max_length=2048)


class AccountVerifyIn(BaseModel):
    code: str = Field(..., min_length=1, max_length=255)


class AccountResendIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    client_id: str | None = Field(None, max_length=255)


class PasswordResetRequestIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)


class PasswordResetConfirmIn(BaseModel):
    code: str = Field(..., min_length=1, max_length=255)
    new_password: str = Field(..., max_length=255)
