"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Backend
    backend_api_base: str = "http://localhost:8000/api"
    http_timeout_seconds: float = 10.0

    # Service
    service_name: str = "invest-client"
    log_level: str = "INFO"

    # Transaction rules
    deposit_minimum: Decimal = Decimal("3000")
    withdrawal_minimum: Decimal = Decimal("100")
    deposit_presets: List[Decimal] = [
        Decimal("3000"),
        Decimal("5000"),
        Decimal("8000"),
        Decimal("10000"),
    ]
    max_proof_bytes: int = 5 * 1024 * 1024

    # Platform accounts shown as deposit instructions
    receiving_account_name: str = "Investment Accounting"
    receiving_bank_name: str = "HBL Bank"
    receiving_bank_account: str = "1234-5678-9012-3456"
    receiving_jazzcash_number: str = "0300-1234567"
    receiving_easypaisa_number: str = "0312-7654321"


settings = Settings()
