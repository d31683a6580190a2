from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parent.parent))

from fastapi import FastAPI, HTTPException, Query
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console
from rich.table import Table

from taxplanner.config import get_settings
from taxplanner.data import (
    UnknownProvinceError,
    UnsupportedTaxYearError,
    get_tax_data,
    list_provinces,
    supported_years,
)
from taxplanner.data.provinces import province_name
from taxplanner.lifespan import build_application_lifespan
from taxplanner.models import TaxData
from taxplanner.rrsp import RRSPRoom, deduction_limit, optimize, savings_for_contribution
from taxplanner.rrsp.optimizer import RRSPOptimizationResult
from taxplanner.tax.sales import estimate_remittance
from taxplanner.tax.summary import TaxSummary, summarize

logger = logging.getLogger("taxplanner")


async def _announce_defaults(_: FastAPI) -> None:
    settings = get_settings()
    logger.info(
        "Tax planner ready; default_tax_year=%s default_province=%s data_dir=%s",
        settings.tax_year,
        settings.default_province,
        settings.tax_data_dir,
    )


app = FastAPI(
    title="Tax Planner",
    description="Canadian federal/provincial tax estimates and RRSP contribution planning.",
    version="0.1.0",
    lifespan=build_application_lifespan("planner", startup_hook=_announce_defaults),
)


class OptimizeRequest(BaseModel):
    gross_income: float = Field(
        ...,
        description="Taxable income before any RRSP deduction",
        validation_alias=AliasChoices("gross_income", "grossIncome", "income"),
    )
    contribution_room: float = Field(
        ...,
        ge=0,
        description="Deduction limit from the latest notice of assessment",
        validation_alias=AliasChoices("contribution_room", "contributionRoom", "room"),
    )
    previous_year_unused: float = Field(
        0.0,
        ge=0,
        description="Unused room carried forward from earlier years",
        validation_alias=AliasChoices("previous_year_unused", "previousYearUnused", "unused"),
    )
    contributions_made: float = Field(
        0.0,
        ge=0,
        description="Contributions already made against this year's room",
        validation_alias=AliasChoices("contributions_made", "contributionsMade", "made"),
    )
    province: str | None = Field(None, description="Province code, defaults to DEFAULT_PROVINCE")
    tax_year: int | None = Field(None, validation_alias=AliasChoices("tax_year", "taxYear", "year"))

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def room(self) -> RRSPRoom:
        return RRSPRoom(
            contribution_room=self.contribution_room,
            previous_year_unused=self.previous_year_unused,
            contributions_made=self.contributions_made,
        )


class SavingsRequest(BaseModel):
    gross_income: float = Field(..., validation_alias=AliasChoices("gross_income", "grossIncome", "income"))
    contribution: float = Field(..., ge=0)
    province: str | None = None
    tax_year: int | None = Field(None, validation_alias=AliasChoices("tax_year", "taxYear", "year"))

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


def _resolve_tax_data(year: int | None) -> TaxData:
    settings = get_settings()
    target = settings.tax_year if year is None else year
    preloaded = getattr(app.state, "tax_data", None) or {}
    if target in preloaded:
        return preloaded[target]
    try:
        return get_tax_data(target)
    except UnsupportedTaxYearError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _resolve_province(province: str | None) -> str:
    return (province or get_settings().default_province).upper()


def _unknown_province(exc: UnknownProvinceError) -> HTTPException:
    return HTTPException(status_code=404, detail=exc.args[0] if exc.args else "Unknown province")


def _optimization_payload(
    result: RRSPOptimizationResult, room: RRSPRoom, province: str, year: int
) -> dict[str, Any]:
    body = asdict(result)
    body["available_room"] = room.remaining
    body["scenarios"] = [asdict(s) for s in result.scenarios]
    body["province"] = province
    body["tax_year"] = year
    return body


def _summary_payload(summary: TaxSummary, year: int) -> dict[str, Any]:
    body = asdict(summary)
    body["province_name"] = province_name(summary.province_code)
    body["is_refund"] = summary.is_refund
    body["tax_year"] = year
    return body


@app.get("/health")
def health():
    settings = getattr(app.state, "settings", get_settings())
    loaded = getattr(app.state, "tax_data", {}) or {}
    return {
        "status": "ok",
        "default_tax_year": settings.tax_year,
        "default_province": settings.default_province,
        "supported_years": list(supported_years()),
        "loaded_years": sorted(loaded),
        "build": {"version": settings.build_version, "sha": settings.build_sha},
    }


@app.get("/tax/years")
def tax_years():
    return {"years": list(supported_years()), "default": get_settings().tax_year}


@app.get("/tax/{year}/provinces")
def provinces(year: int):
    tax_data = _resolve_tax_data(year)
    return {
        "tax_year": year,
        "provinces": [{"code": code, "name": province_name(code)} for code in list_provinces(tax_data)],
    }


@app.get("/tax/estimate")
def estimate(
    income: float,
    deductions: float = 0.0,
    withheld: float = 0.0,
    self_employment: float = Query(0.0, ge=0),
    province: str | None = None,
    year: int | None = None,
):
    tax_data = _resolve_tax_data(year)
    code = _resolve_province(province)
    try:
        summary = summarize(
            income,
            deductions,
            code,
            tax_data,
            tax_withheld=withheld,
            employment_income=max(0.0, income - self_employment),
            self_employment_income=self_employment,
        )
    except UnknownProvinceError as exc:
        raise _unknown_province(exc) from exc
    body = _summary_payload(summary, tax_data.year)
    body["rrsp_deduction_limit"] = deduction_limit(income, tax_data.rrsp)
    return body


@app.post("/rrsp/optimize")
def rrsp_optimize(req: OptimizeRequest):
    tax_data = _resolve_tax_data(req.tax_year)
    code = _resolve_province(req.province)
    try:
        room = req.room()
        result = optimize(req.gross_income, room.remaining, code, tax_data)
    except UnknownProvinceError as exc:
        raise _unknown_province(exc) from exc
    logger.info(
        "RRSP optimization province=%s year=%s optimal=%.2f",
        code,
        tax_data.year,
        result.optimal_contribution,
    )
    return _optimization_payload(result, room, code, tax_data.year)


@app.post("/rrsp/savings")
def rrsp_savings(req: SavingsRequest):
    tax_data = _resolve_tax_data(req.tax_year)
    code = _resolve_province(req.province)
    try:
        savings = savings_for_contribution(req.gross_income, req.contribution, code, tax_data)
    except UnknownProvinceError as exc:
        raise _unknown_province(exc) from exc
    return {
        "gross_income": req.gross_income,
        "contribution": req.contribution,
        "province": code,
        "tax_year": tax_data.year,
        "tax_savings": savings,
    }


@app.get("/sales-tax/estimate")
def sales_tax_estimate(
    revenues: float = Query(0.0, ge=0),
    collected: float = Query(0.0, ge=0),
    itcs: float = Query(0.0, ge=0),
    province: str | None = None,
):
    code = _resolve_province(province)
    try:
        result = estimate_remittance(code, revenues, collected, itcs)
    except UnknownProvinceError as exc:
        raise _unknown_province(exc) from exc
    return asdict(result)


def _format_currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _format_rate(value: float) -> str:
    return f"{value * 100:.2f}%"


def _get_console() -> Console:
    return Console(highlight=False)


def _console_print(console: Console, message: str) -> None:
    console.print(message, markup=False, soft_wrap=True)


def _print_rows(console: Console, title: str, rows: Sequence[tuple[str, str]]) -> None:
    table = Table(title=title, show_header=False, expand=False)
    table.add_column("Item")
    table.add_column("Amount", justify="right")
    for label, value in rows:
        table.add_row(label, value)
    console.print(table)


def _print_summary(console: Console, summary: TaxSummary, new_room: float) -> None:
    rows = [
        ("Province", province_name(summary.province_code)),
        ("Total income", _format_currency(summary.total_income)),
        ("Deductions", _format_currency(summary.total_deductions)),
        ("Taxable income", _format_currency(summary.taxable_income)),
        ("Federal tax", _format_currency(summary.federal_tax)),
        ("Provincial tax", _format_currency(summary.provincial_tax)),
        ("Total tax", _format_currency(summary.total_tax)),
        ("CPP contributions", _format_currency(summary.cpp_contributions)),
        ("EI premiums", _format_currency(summary.ei_premiums)),
        ("Tax withheld", _format_currency(summary.tax_withheld)),
    ]
    if summary.is_refund:
        rows.append(("Expected refund", _format_currency(abs(summary.balance_owing))))
    else:
        rows.append(("Balance owing", _format_currency(summary.balance_owing)))
    rows.append(("Marginal rate", _format_rate(summary.marginal_rate)))
    rows.append(("Effective rate", _format_rate(summary.effective_rate)))
    rows.append(("RRSP room earned", _format_currency(new_room)))
    _print_rows(console, "Summary", rows)


def _print_optimization(console: Console, result: RRSPOptimizationResult, room: RRSPRoom) -> None:
    _print_rows(
        console,
        "Current position",
        [
            ("Available room", _format_currency(max(0.0, room.remaining))),
            ("Current tax", _format_currency(result.current_tax)),
            ("Marginal rate", _format_rate(result.current_marginal_rate)),
        ],
    )
    table = Table(title="Scenarios", expand=False)
    table.add_column("Contribution", justify="right")
    table.add_column("Total tax", justify="right")
    table.add_column("Savings", justify="right")
    table.add_column("Marginal", justify="right")
    for scenario in result.scenarios:
        optimal = scenario.contribution == result.optimal_contribution
        table.add_row(
            _format_currency(scenario.contribution),
            _format_currency(scenario.total_tax),
            _format_currency(scenario.tax_savings),
            _format_rate(scenario.marginal_rate),
            style="bold green" if optimal else None,
        )
    console.print(table)
    _console_print(console, result.recommendation)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="taxplanner",
        description="Estimate Canadian income tax and plan RRSP contributions.",
    )
    parser.add_argument("--year", type=int, default=None, help="Tax year (default: TAX_YEAR).")
    parser.add_argument("--province", default=None, help="Province code (default: DEFAULT_PROVINCE).")
    sub = parser.add_subparsers(dest="command", required=True)

    est = sub.add_parser("estimate", help="Summarize tax owing for an income.")
    est.add_argument("income", type=float)
    est.add_argument("--deductions", type=float, default=0.0)
    est.add_argument("--withheld", type=float, default=0.0)

    opt = sub.add_parser("optimize", help="Find the most effective RRSP contribution.")
    opt.add_argument("income", type=float)
    opt.add_argument("room", type=float, help="Deduction limit from the notice of assessment.")
    opt.add_argument("--unused", type=float, default=0.0, help="Unused room carried forward.")
    opt.add_argument("--made", type=float, default=0.0, help="Contributions already made this year.")

    sav = sub.add_parser("savings", help="Tax saved by one specific RRSP contribution.")
    sav.add_argument("income", type=float)
    sav.add_argument("contribution", type=float)

    srv = sub.add_parser("serve", help="Run the HTTP API.")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def _serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run(app, host=host, port=port)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.command == "serve":
        _serve(args.host, args.port)
        return 0
    try:
        tax_data = get_tax_data(args.year)
    except UnsupportedTaxYearError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    code = _resolve_province(args.province)
    console = _get_console()
    try:
        if args.command == "estimate":
            summary = summarize(args.income, args.deductions, code, tax_data, tax_withheld=args.withheld)
            _print_summary(console, summary, deduction_limit(args.income, tax_data.rrsp))
        elif args.command == "optimize":
            room = RRSPRoom(
                contribution_room=args.room,
                previous_year_unused=args.unused,
                contributions_made=args.made,
            )
            _print_optimization(console, optimize(args.income, room.remaining, code, tax_data), room)
        else:
            savings = savings_for_contribution(args.income, args.contribution, code, tax_data)
            _console_print(
                console,
                f"Contributing {_format_currency(args.contribution)} saves {_format_currency(savings)}.",
            )
    except UnknownProvinceError as exc:
        print(f"ERROR: {exc.args[0]}", file=sys.stderr)
        return 2
    except ValidationError as exc:
        print(f"ERROR: {exc.errors()[0]['msg']}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
