"""Client application factory"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from invest_client.config import Settings, settings as default_settings
from invest_client.domain.methods import DepositInstructions, PaymentMethod, deposit_instructions
from invest_client.infrastructure.clients.backend import BackendGateway
from invest_client.infrastructure.observability.logging import setup_logging
from invest_client.infrastructure.session import SessionContext
from invest_client.services.investing import InvestmentService
from invest_client.services.portfolio import PortfolioService
from invest_client.services.wizards import (
    DepositWizard,
    WithdrawalWizard,
    create_deposit_wizard,
    create_withdrawal_wizard,
)

logger = logging.getLogger(__name__)


@dataclass
class ClientApp:
    """Wired collaborators handed to the UI shell"""

    settings: Settings
    session: SessionContext
    gateway: BackendGateway
    portfolio: PortfolioService
    investing: InvestmentService

    def login(self, access_token: str, refresh_token: Optional[str] = None) -> str:
        """Store the credential returned by the login endpoint; returns the display name"""
        self.session.init(access_token, refresh_token)
        return self.session.current_user()

    def logout(self) -> None:
        self.session.clear()
        self.portfolio.dashboard = None
        self.portfolio.profit_overview = None

    def new_deposit_wizard(self) -> DepositWizard:
        return create_deposit_wizard(self.gateway, self.settings, on_success=self._after_transaction)

    def new_withdrawal_wizard(self) -> WithdrawalWizard:
        return create_withdrawal_wizard(self.gateway, self.settings, on_success=self._after_transaction)

    def deposit_instructions(self, method: PaymentMethod) -> DepositInstructions:
        return deposit_instructions(method, self.settings)

    async def _after_transaction(self) -> None:
        await self.portfolio.try_refresh()


def create_client_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    configure_logging: bool = True,
) -> ClientApp:
    """Create and wire the client-side services"""
    config = settings or default_settings

    if configure_logging:
        setup_logging(config.log_level, service_name=config.service_name)

    session = SessionContext()
    gateway = BackendGateway(session, transport=transport, settings=config)
    portfolio = PortfolioService(gateway)

    logger.info("Client initialised", extra={"backend": config.backend_api_base})

    return ClientApp(
        settings=config,
        session=session,
        gateway=gateway,
        portfolio=portfolio,
        investing=InvestmentService(portfolio),
    )
