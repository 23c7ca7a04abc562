"""In-memory stand-in for the investment platform backend"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

EXPIRED_TOKEN = "expired-token"
METHODS = {"BankTransfer", "JazzCash", "EasyPaisa", "Easypaisa"}

DEFAULT_PLANS = [
    {"id": 1, "title": "10 Marla", "amount": "3000.00", "daily_profit": "50.00", "duration_days": 30},
    {"id": 2, "title": "20 Marla", "amount": "5000.00", "daily_profit": "100.00", "duration_days": 30},
    {"id": 3, "title": "1 Kanal", "amount": "8000.00", "daily_profit": "150.00", "duration_days": 30},
    {"id": 4, "title": "10 Kanal", "amount": "10000.00", "daily_profit": "200.00", "duration_days": 30},
]


@dataclass
class BackendState:
    """Mutable server-side data for one app instance"""

    balance: Decimal = Decimal("0")
    username: str = "ali"
    plans: List[Dict[str, Any]] = field(default_factory=lambda: [dict(p) for p in DEFAULT_PLANS])
    enrollments: List[Dict[str, Any]] = field(default_factory=list)
    profits: List[Dict[str, Any]] = field(default_factory=list)
    deposits: List[Dict[str, Any]] = field(default_factory=list)
    withdrawals: List[Dict[str, Any]] = field(default_factory=list)
    fail_with_status: Optional[int] = None


class WithdrawRequest(BaseModel):
    amount: Decimal
    method: str
    account_owner: str
    bank_account: str
    bank_name: Optional[str] = None


class InvestRequest(BaseModel):
    plan_id: int


def _error(status_code: int, body: Dict[str, Any]) -> HTTPException:
    return HTTPException(status_code=status_code, detail=body)


def get_state(request: Request) -> BackendState:
    return request.app.state.backend


def require_token(
    state: BackendState = Depends(get_state),
    authorization: Optional[str] = Header(default=None),
) -> str:
    if state.fail_with_status is not None:
        raise _error(state.fail_with_status, {"detail": "Server error"})
    if not authorization or not authorization.startswith("Bearer "):
        raise _error(401, {"detail": "Authentication credentials were not provided."})
    token = authorization[len("Bearer "):]
    if token == EXPIRED_TOKEN:
        raise _error(401, {"detail": "Given token not valid for any token type"})
    return token


router = APIRouter(prefix="/api/transactions", dependencies=[Depends(require_token)])


@router.post("/deposit/")
async def deposit(
    amount: str = Form(...),
    method: str = Form(...),
    transaction_id: str = Form(...),
    account_owner: str = Form(""),
    bank_account: str = Form(""),
    bank_name: Optional[str] = Form(None),
    screenshot: UploadFile = File(...),
    state: BackendState = Depends(get_state),
):
    if method not in METHODS:
        raise _error(400, {"method": [f'"{method}" is not a valid choice.']})
    if any(d["transaction_id"] == transaction_id for d in state.deposits):
        raise _error(400, {"transaction_id": ["deposit with this transaction id already exists."]})

    content = await screenshot.read()
    state.deposits.append(
        {
            "amount": amount,
            "method": method,
            "transaction_id": transaction_id,
            "account_owner": account_owner,
            "bank_account": bank_account,
            "bank_name": bank_name,
            "screenshot_size": len(content),
            "status": "pending",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
    )
    return {"message": "Deposit request submitted successfully"}


@router.post("/withdraw/")
def withdraw(body: WithdrawRequest, state: BackendState = Depends(get_state)):
    if body.amount > state.balance:
        raise _error(400, {"error": "Insufficient balance"})

    state.balance -= body.amount
    state.withdrawals.append(
        {
            "amount": str(body.amount),
            "method": body.method,
            "bank_name": body.bank_name,
            "account_owner": body.account_owner,
            "bank_account": body.bank_account,
            "status": "pending",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
    )
    return {"message": "Withdrawal request submitted."}


@router.post("/invest/")
def invest(body: InvestRequest, state: BackendState = Depends(get_state)):
    plan = next((p for p in state.plans if p["id"] == body.plan_id), None)
    if plan is None:
        raise _error(404, {"error": "Plan not found"})
    if any(e["status"] == "Active" for e in state.enrollments):
        raise _error(400, {"error": "You already have an active plan"})

    amount = Decimal(plan["amount"])
    if amount > state.balance:
        raise _error(400, {"error": "Insufficient balance"})

    state.balance -= amount
    start = date.today()
    end = start + timedelta(days=plan["duration_days"])
    state.enrollments.append(
        {
            "title": plan["title"],
            "amount": plan["amount"],
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "status": "Active",
        }
    )
    state.profits.append(
        {
            "plan": plan["title"],
            "daily_profit": plan["daily_profit"],
            "total_earned": "0.00",
            "remaining_days": plan["duration_days"],
            "is_active": True,
        }
    )
    return {"message": f"Investment in {plan['title']} activated successfully."}


@router.get("/plans/")
def plans(state: BackendState = Depends(get_state)):
    has_active = any(e["status"] == "Active" for e in state.enrollments)
    return [
        {
            **p,
            "total_profit": str(Decimal(p["daily_profit"]) * p["duration_days"]),
            "is_locked": has_active,
        }
        for p in state.plans
    ]


@router.get("/plans/history/")
def plan_history(state: BackendState = Depends(get_state)):
    return state.enrollments


@router.get("/profit/history/")
def profit_history(state: BackendState = Depends(get_state)):
    return state.profits


@router.get("/wallet/detail/")
def wallet_detail(state: BackendState = Depends(get_state)):
    return {"balance": str(state.balance), "username": state.username}


@router.get("/deposit/history/")
def deposit_history(state: BackendState = Depends(get_state)):
    return [
        {k: d[k] for k in ("amount", "method", "status", "created_at", "transaction_id")}
        for d in state.deposits
    ]


@router.get("/withdraw/history/")
def withdraw_history(state: BackendState = Depends(get_state)):
    return [{k: w[k] for k in ("amount", "method", "status", "created_at")} for w in state.withdrawals]


def create_app(state: Optional[BackendState] = None) -> FastAPI:
    app = FastAPI(title="Mock Investment Backend", version="1.0.0")
    app.state.backend = state or BackendState()

    @app.exception_handler(HTTPException)
    async def raw_error_body(request: Request, exc: HTTPException):
        # DRF-style bodies: {"error": ...} or {"field": [...]} at the top level
        body = exc.detail if isinstance(exc.detail, dict) else {"detail": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(router)
    return app


app = create_app()
