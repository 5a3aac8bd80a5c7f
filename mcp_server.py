"""Lightweight MCP-aligned server exposing the FinanceIQ engine as tools over FastAPI."""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

import config
from classifier import classify
from dashboard import compute_kpis, daily_revenue_expenses, monthly_expenses, spending_by_category
from insights import AnomalyMonitor
from loans import (
    CalculatorInputError,
    InvestmentResult,
    LoanResult,
    MortgageResult,
    RetirementResult,
    SavingsResult,
    calculate_investment,
    calculate_loan,
    calculate_mortgage,
    calculate_retirement,
    calculate_savings,
)
from logging_setup import configure_logging, get_logger
from models import AnomalyReport, KPISummary
from process_transactions import ingest_records, load_default_transactions

logger = get_logger("financeiq.mcp_server")

_monitor = AnomalyMonitor()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    _monitor.submit(load_default_transactions().transactions)
    yield
    _monitor.cancel()


app = FastAPI(title="FinanceIQ Tools", version="0.1.0", lifespan=lifespan)


def get_monitor() -> AnomalyMonitor:
    return _monitor


class IngestRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list, description="Raw CSV/JSON transaction rows")


class IngestResponse(BaseModel):
    supplied: int
    accepted: int
    dropped: int
    message: str
    kpis: KPISummary
    anomalies: AnomalyReport


@app.post("/tools/ingest_transactions", response_model=IngestResponse)
async def ingest_transactions(req: IngestRequest, monitor: AnomalyMonitor = Depends(get_monitor)):
    result = ingest_records(req.records, source="upload")
    monitor.submit(result.transactions)
    return IngestResponse(
        supplied=result.supplied,
        accepted=result.accepted,
        dropped=result.dropped,
        message=result.message,
        kpis=compute_kpis(monitor.batch),
        anomalies=monitor.report,
    )


@app.get("/tools/kpis", response_model=KPISummary)
async def get_kpis(monitor: AnomalyMonitor = Depends(get_monitor)):
    return compute_kpis(monitor.batch)


class AnomalyResponse(BaseModel):
    report: AnomalyReport
    deep_scan_pending: bool


@app.get("/tools/anomalies", response_model=AnomalyResponse)
async def get_anomalies(monitor: AnomalyMonitor = Depends(get_monitor)):
    return AnomalyResponse(report=monitor.report, deep_scan_pending=monitor.pending)


class ChartSeriesResponse(BaseModel):
    daily: List[Dict[str, Any]]
    by_category: Dict[str, float]
    monthly_expenses: List[Dict[str, Any]]


@app.get("/tools/chart_series", response_model=ChartSeriesResponse)
async def get_chart_series(monitor: AnomalyMonitor = Depends(get_monitor)):
    daily = daily_revenue_expenses(monitor.batch)
    if not daily.empty:
        daily["Date"] = daily["Date"].dt.strftime("%Y-%m-%d")
    return ChartSeriesResponse(
        daily=daily.to_dict(orient="records"),
        by_category=spending_by_category(monitor.batch),
        monthly_expenses=monthly_expenses(monitor.batch).to_dict(orient="records"),
    )


class CategorizeRequest(BaseModel):
    description: str


class CategorizeResponse(BaseModel):
    type: str
    category: str


@app.post("/tools/classify_transaction", response_model=CategorizeResponse)
async def classify_transaction(req: CategorizeRequest):
    cls = classify(req.description)
    return CategorizeResponse(type=cls.type.value, category=cls.category)


class LoanRequest(BaseModel):
    amount: float
    rate: float = Field(..., description="Annual interest rate in percent")
    term_years: float


class MortgageRequest(BaseModel):
    home_price: float
    down_payment: float = 0.0
    rate: float
    term_years: float


class SavingsRequest(BaseModel):
    monthly_contribution: float
    rate: float
    years: float
    goal: Optional[float] = None


class InvestmentRequest(BaseModel):
    initial: float = 0.0
    rate: float
    years: float
    monthly: float = 0.0


class RetirementRequest(BaseModel):
    current_age: float
    retirement_age: float
    current_savings: float = 0.0
    monthly_saving: float = 0.0
    expected_return: float


def _calculate(fn, *args):
    try:
        return fn(*args)
    except CalculatorInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/tools/calculate_loan", response_model=LoanResult)
async def calculate_loan_tool(req: LoanRequest):
    return _calculate(calculate_loan, req.amount, req.rate, req.term_years)


@app.post("/tools/calculate_mortgage", response_model=MortgageResult)
async def calculate_mortgage_tool(req: MortgageRequest):
    return _calculate(calculate_mortgage, req.home_price, req.down_payment, req.rate, req.term_years)


@app.post("/tools/calculate_savings", response_model=SavingsResult)
async def calculate_savings_tool(req: SavingsRequest):
    return _calculate(calculate_savings, req.monthly_contribution, req.rate, req.years, req.goal)


@app.post("/tools/calculate_investment", response_model=InvestmentResult)
async def calculate_investment_tool(req: InvestmentRequest):
    return _calculate(calculate_investment, req.initial, req.rate, req.years, req.monthly)


@app.post("/tools/calculate_retirement", response_model=RetirementResult)
async def calculate_retirement_tool(req: RetirementRequest):
    return _calculate(
        calculate_retirement,
        req.current_age,
        req.retirement_age,
        req.current_savings,
        req.monthly_saving,
        req.expected_return,
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("mcp_server:app", host=config.SERVER_HOST, port=config.SERVER_PORT, reload=True)
