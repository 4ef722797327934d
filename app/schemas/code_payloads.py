from __future__ import annotations

from typing import Literal, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from app.domain.errors import MalformedCodePayload


class CodePayload(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    v: Literal[1] = 1
    zone_id: str
    user_id: str

    def encode(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class ActivationPayload(CodePayload):
    kind: Literal["activation"] = "activation"
    client_id: str | None = None
    redirect_uri: str | None = None


class ResetPayload(CodePayload):
    kind: Literal["reset"] = "reset"


P = TypeVar("P", bound=CodePayload)


def decode_payload(model: Type[P], data: bytes) -> P:
    """Validate `data` against `model`; any mismatch is a MalformedCodePayload."""
    try:
        return model.model_validate_json(data)
    except ValidationError as e:
        raise MalformedCodePayload(
            f"{model.__name__} rejected: {e.error_count()} error(s)"
        ) from e
