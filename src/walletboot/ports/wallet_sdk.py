from abc import ABC, abstractmethod
from typing import Any

from ..domain.session import AppMetadata


class WalletSDKPort(ABC):
    """Wallet-connection SDK abstraction.

    The handshake itself lives behind this port. The bootstrap only relies
    on the construction order: signing client, then core, then wallet.
    """

    @abstractmethod
    async def init_signing_client(self, project_id: str) -> Any:
        """Establish the signaling (sign) client for project_id."""
        ...

    @abstractmethod
    def create_core(self, project_id: str) -> Any:
        """Construct the wallet core bound to project_id."""
        ...

    @abstractmethod
    async def init_wallet(self, core: Any, metadata: AppMetadata) -> Any:
        """Build the wallet handle from a core and static app metadata."""
        ...
