from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.domain.errors import AccountAlreadyActive

DEFAULT_ZONE_ID = "uaa"


class Origin:
    UAA = "uaa"
    UNKNOWN = "unknown"
    LDAP = "ldap"
    SAML = "saml"
    KEYSTONE = "keystone"


def normalize_username(value: str) -> str:
    return value.strip().lower()


@dataclass(frozen=True)
class IdentityZone:
    id: str = DEFAULT_ZONE_ID
    name: str = DEFAULT_ZONE_ID

    @property
    def is_default(self) -> bool:
        return self.id == DEFAULT_ZONE_ID

    @classmethod
    def default(cls, name: str = DEFAULT_ZONE_ID) -> "IdentityZone":
        return cls(id=DEFAULT_ZONE_ID, name=name)


@dataclass
class Account:
    id: str | None = None
    username: str | None = None
    email: str | None = None
    origin: str = Origin.UAA
    zone_id: str = DEFAULT_ZONE_ID
    verified: bool = False
    version: int = 0

    def __post_init__(self):
        if self.username:
            self.username = normalize_username(self.username)
            if not self.username:
                raise ValueError("username cannot be empty")
        else:
            raise ValueError("username is required")
        if self.email is None:
            self.email = self.username
        else:
            self.email = normalize_username(self.email)

    def ensure_unverified(self):
        if self.verified:
            raise AccountAlreadyActive()


@dataclass(frozen=True)
class ActionCode:
    code: str | None
    expires_at: datetime
    data: bytes

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at


@dataclass(frozen=True)
class RedirectRegistration:
    client_id: str
    redirect_uris: tuple[str, ...] = field(default_factory=tuple)
    signup_redirect_url: str | None = None
