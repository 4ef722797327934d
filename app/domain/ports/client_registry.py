from typing import Optional, Protocol

from app.domain.entities import RedirectRegistration


class ClientRegistryPort(Protocol):
    async def lookup(
        self, client_id: str, zone_id: str
    ) -> Optional[RedirectRegistration]:
        """Registered redirect patterns for the client, None if unknown."""
