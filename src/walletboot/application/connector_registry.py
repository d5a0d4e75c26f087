from typing import List, Sequence, Set

from loguru import logger

from ..domain.connectors import ConnectorDescriptor, ConnectorGroup, WalletGroup, WalletOptions
from ..domain.errors import MisconfiguredCredential


class ConnectorRegistry:
    """Builds ordered, de-duplicated connector groups from wallet factories.

    Policy for a missing credential is omit-and-continue: a connector that
    requires the credential is dropped (and logged) when it is empty, the
    rest of the build goes on.
    """

    def __init__(self, app_name: str = ""):
        self.app_name = app_name

    def build(self, groups: Sequence[WalletGroup], credential: str) -> List[ConnectorGroup]:
        credential = (credential or "").strip()
        seen: Set[str] = set()
        out: List[ConnectorGroup] = []

        for group in groups:
            options = WalletOptions(credential=credential, app_name=self.app_name, group=group.name)
            emitted: List[ConnectorDescriptor] = []
            for factory in group.wallets:
                try:
                    descriptor = factory(options)
                    if descriptor.id in seen:
                        logger.debug(f"Duplicate connector dropped | id={descriptor.id} | group={group.name}")
                        continue
                    self._check_credential(descriptor, credential)
                except MisconfiguredCredential as exc:
                    connector_id = exc.connector_id or getattr(factory, "__name__", "?")
                    logger.warning(f"Connector omitted | id={connector_id} | group={group.name} | {exc}")
                    continue
                seen.add(descriptor.id)
                emitted.append(descriptor)
            out.append(ConnectorGroup(name=group.name, connectors=tuple(emitted)))

        logger.info(
            f"Connectors built | groups={[g.name for g in out]} | total={sum(len(g.connectors) for g in out)}"
        )
        return out

    @staticmethod
    def _check_credential(descriptor: ConnectorDescriptor, credential: str) -> None:
        if descriptor.requires_credential and not credential:
            raise MisconfiguredCredential(
                f"{descriptor.name} requires a project credential but none is configured",
                connector_id=descriptor.id,
            )
