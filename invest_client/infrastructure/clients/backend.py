"""Backend API HTTP client for transactions, plans, profits and wallet data"""

import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from invest_client.config import Settings, settings as default_settings
from invest_client.domain.exceptions import (
    AuthenticationError,
    InvalidResponseError,
    SubmissionRejectedError,
    TransportError,
)
from invest_client.domain.flows import DepositPayload, WithdrawalPayload
from invest_client.domain.models import (
    InvestmentPlan,
    PlanEnrollment,
    ProfitRecord,
    TransactionLogEntry,
    WalletDetail,
)
from invest_client.infrastructure.clients.schemas import (
    MessageSchema,
    PlanHistorySchema,
    PlanSchema,
    ProfitHistorySchema,
    TransactionLogSchema,
    WalletSchema,
)
from invest_client.infrastructure.observability.metrics import backend_failure_counter, backend_request_histogram
from invest_client.infrastructure.session import SessionContext

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

DEPOSIT_PATH = "/transactions/deposit/"
WITHDRAW_PATH = "/transactions/withdraw/"
INVEST_PATH = "/transactions/invest/"
PLANS_PATH = "/transactions/plans/"
PLAN_HISTORY_PATH = "/transactions/plans/history/"
PROFIT_HISTORY_PATH = "/transactions/profit/history/"
WALLET_PATH = "/transactions/wallet/detail/"
DEPOSIT_HISTORY_PATH = "/transactions/deposit/history/"
WITHDRAW_HISTORY_PATH = "/transactions/withdraw/history/"

DUPLICATE_REFERENCE_MESSAGE = "This transaction ID already exists or is invalid."


def extract_error_message(status_code: int, body: Any) -> str:
    """
    Pick the user-facing message out of an error body.

    Precedence: "error", "detail", "message", then the first field-level
    error (DRF style {"field": ["msg"]}).
    """
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value

        if "transaction_id" in body:
            return DUPLICATE_REFERENCE_MESSAGE

        for field_name, value in body.items():
            if isinstance(value, list) and value:
                return f"{field_name}: {value[0]}"
            if isinstance(value, str) and value:
                return f"{field_name}: {value}"

    if isinstance(body, str) and body.strip():
        return body.strip()

    return f"Request failed with status {status_code}"


def _field_errors(body: Any) -> Dict[str, List[str]]:
    if not isinstance(body, dict):
        return {}
    return {
        key: [str(v) for v in value] if isinstance(value, list) else [str(value)]
        for key, value in body.items()
        if key not in ("error", "detail", "message")
    }


class BackendGateway:
    """
    Client for the investment platform's REST API.

    Every call requires an authenticated SessionContext. A 401 clears the
    session before AuthenticationError is raised, so the UI can route the
    user back to login.
    """

    def __init__(
        self,
        session: SessionContext,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Optional[Settings] = None,
    ):
        config = settings or default_settings
        self.session = session
        self.base_url = (base_url or config.backend_api_base).rstrip("/")
        self.timeout = timeout or config.http_timeout_seconds
        self._transport = transport

    # --- State-changing calls ---

    async def submit_deposit(self, payload: DepositPayload) -> str:
        """
        Upload a deposit request with its payment screenshot (multipart).

        Raises:
            SubmissionRejectedError: Duplicate transaction id, bad fields
            AuthenticationError: Missing or expired credential
            TransportError: Timeout, network or server failure
        """
        response = await self._request(
            "POST",
            DEPOSIT_PATH,
            data=payload.as_form(),
            files=payload.as_files(),
        )
        return self._message(response, "Your deposit request is successfully submitted. Amount will be added soon.")

    async def submit_withdrawal(self, payload: WithdrawalPayload) -> str:
        response = await self._request("POST", WITHDRAW_PATH, json=payload.as_json())
        return self._message(response, "Withdrawal request submitted.")

    async def invest(self, plan_id: int) -> str:
        response = await self._request("POST", INVEST_PATH, json={"plan_id": plan_id})
        return self._message(response, "Investment activated successfully.")

    # --- Reads ---

    async def get_plans(self) -> List[InvestmentPlan]:
        response = await self._request("GET", PLANS_PATH)
        return [item.to_domain() for item in self._parse_list(response, PlanSchema)]

    async def get_plan_history(self) -> List[PlanEnrollment]:
        response = await self._request("GET", PLAN_HISTORY_PATH)
        return [item.to_domain() for item in self._parse_list(response, PlanHistorySchema)]

    async def get_profit_history(self) -> List[ProfitRecord]:
        response = await self._request("GET", PROFIT_HISTORY_PATH)
        return [item.to_domain() for item in self._parse_list(response, ProfitHistorySchema)]

    async def get_wallet(self) -> WalletDetail:
        response = await self._request("GET", WALLET_PATH)
        return self._parse(response, WalletSchema).to_domain()

    async def get_deposit_history(self) -> List[TransactionLogEntry]:
        response = await self._request("GET", DEPOSIT_HISTORY_PATH)
        return [item.to_domain() for item in self._parse_list(response, TransactionLogSchema)]

    async def get_withdrawal_history(self) -> List[TransactionLogEntry]:
        response = await self._request("GET", WITHDRAW_HISTORY_PATH)
        return [item.to_domain() for item in self._parse_list(response, TransactionLogSchema)]

    # --- Internals ---

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one authenticated request and map failures to domain errors.

        No automatic retry: a failed submission is surfaced to the user.
        """
        if not self.session.is_authenticated():
            raise AuthenticationError("Not logged in")

        request_id = str(uuid.uuid4())
        headers = {**self.session.auth_headers(), "X-Request-ID": request_id}
        start_time = time.time()

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, path, headers=headers, **kwargs)
            except httpx.TimeoutException as e:
                backend_failure_counter.labels(endpoint=path, kind="timeout").inc()
                logger.error(f"Backend timeout after {self.timeout}s", extra={"request_id": request_id, "endpoint": path})
                raise TransportError(f"Backend timeout after {self.timeout}s") from e
            except httpx.RequestError as e:
                backend_failure_counter.labels(endpoint=path, kind="network").inc()
                logger.error(f"Backend unreachable: {e}", extra={"request_id": request_id, "endpoint": path})
                raise TransportError(f"Backend unreachable: {e}") from e

        backend_request_histogram.labels(endpoint=path, status=response.status_code).observe(time.time() - start_time)

        if response.status_code == 401:
            backend_failure_counter.labels(endpoint=path, kind="auth").inc()
            logger.warning("Backend rejected credential", extra={"request_id": request_id, "endpoint": path})
            self.session.clear()
            raise AuthenticationError("Session expired. Please login again.")

        if response.status_code >= 500:
            backend_failure_counter.labels(endpoint=path, kind="server").inc()
            logger.error(
                f"Backend error: {response.status_code}",
                extra={"request_id": request_id, "endpoint": path},
            )
            raise TransportError(f"Backend error: {response.status_code}")

        if response.status_code >= 400:
            body = self._safe_json(response)
            backend_failure_counter.labels(endpoint=path, kind="rejected").inc()
            message = extract_error_message(response.status_code, body)
            logger.info(
                f"Backend rejected request: {response.status_code}",
                extra={"request_id": request_id, "endpoint": path},
            )
            raise SubmissionRejectedError(
                message,
                status_code=response.status_code,
                field_errors=_field_errors(body),
            )

        return response

    @staticmethod
    def _safe_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            backend_failure_counter.labels(endpoint=response.request.url.path, kind="invalid").inc()
            raise InvalidResponseError(f"Backend returned non-JSON body: {e}") from e

    def _parse(self, response: httpx.Response, schema: Type[SchemaT]) -> SchemaT:
        try:
            return schema.model_validate(self._json(response))
        except ValidationError as e:
            backend_failure_counter.labels(endpoint=response.request.url.path, kind="invalid").inc()
            raise InvalidResponseError(f"Invalid {schema.__name__} from backend: {e}") from e

    def _parse_list(self, response: httpx.Response, schema: Type[SchemaT]) -> List[SchemaT]:
        data = self._json(response)
        if not isinstance(data, list):
            raise InvalidResponseError(f"Expected a list of {schema.__name__}, got {type(data).__name__}")
        try:
            return [schema.model_validate(item) for item in data]
        except ValidationError as e:
            backend_failure_counter.labels(endpoint=response.request.url.path, kind="invalid").inc()
            raise InvalidResponseError(f"Invalid {schema.__name__} from backend: {e}") from e

    def _message(self, response: httpx.Response, default: str) -> str:
        if not response.content:
            return default
        body = self._safe_json(response)
        if not isinstance(body, dict):
            return default
        # Request already accepted; fall back to the default acknowledgement
        try:
            return MessageSchema.model_validate(body).message or default
        except ValidationError:
            logger.warning("Unexpected acknowledgement body", extra={"endpoint": response.request.url.path})
            return default
