"""Mini README: FastAPI-powered compliance dashboard.

Structure:
    * create_application - application factory wiring routes and templates.
    * _raise_http - maps compliance errors to HTTP status codes.

The dashboard shows ship balances, banking actions, pool previews and route
comparisons. Every mutation goes through ``ComplianceService`` so the ledger
invariants hold no matter which endpoint is used; rejected requests return
the error kind plus numeric context for the operator to correct.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, NoReturn, Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from ..configuration import get_settings
from ..ledger import ComplianceError, InvalidAmount, StaleBalance, UnknownShip
from ..logging_utils import get_logger
from ..service import ComplianceService

LOGGER = get_logger(__name__)


def _raise_http(error: ComplianceError) -> NoReturn:
    """Translate a compliance error into an ``HTTPException``."""

    if isinstance(error, UnknownShip):
        status_code = 404
    elif isinstance(error, StaleBalance):
        status_code = 409
    else:
        status_code = 400
    LOGGER.info("Request rejected (%s): %s", error.kind, error.message)
    raise HTTPException(status_code=status_code, detail=error.as_dict()) from error


def _parse_amount(raw: str) -> float:
    """Convert a form field to a number, reporting junk as an invalid amount."""

    try:
        return float(raw)
    except ValueError as error:
        raise InvalidAmount(raw) from error


def create_application(service: Optional[ComplianceService] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    app = FastAPI(title="FuelEU Compliance Dashboard", version="0.1.0")
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    static_directory = Path(__file__).parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_directory)), name="static")

    settings = get_settings()
    service = service or ComplianceService(settings=settings)

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(request: Request) -> HTMLResponse:
        """Render the main dashboard with balances, history and routes."""

        metrics = service.reporter.summarise_metrics()
        LOGGER.debug(
            "Dashboard metrics -> ships: %s net: %.2f banked: %.2f",
            metrics["ship_count"],
            metrics["net_balance_gco2eq"],
            metrics["total_banked_gco2eq"],
        )
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "ships": service.reporter.ship_snapshots(),
                "metrics": metrics,
                "transactions": list(reversed(service.store.get_transaction_history())),
                "routes": service.routes.list_routes(),
                "comparisons": service.routes.compare_to_baseline(),
                "route_metrics": service.routes.summarise_metrics(),
                "target_intensity": service.routes.target_intensity,
            },
        )

    @app.get("/balances")
    async def balances() -> JSONResponse:
        """Return every ship's balance, status and banked reserve."""

        return JSONResponse(
            {
                "ships": [snapshot.as_dict() for snapshot in service.reporter.ship_snapshots()],
                "metrics": service.reporter.summarise_metrics(),
            }
        )

    @app.get("/ships/{ship_id}/history")
    async def ship_history(ship_id: str, kind: Optional[str] = None) -> JSONResponse:
        """Return a ship's transactions, most recent first, optionally by kind."""

        try:
            transactions = service.reporter.recent_transactions(ship_id, kind)
            banked = service.get_banked_amount(ship_id)
        except ComplianceError as error:
            _raise_http(error)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(
            {
                "ship_id": ship_id,
                "banked_gco2eq": banked,
                "transactions": [transaction.as_dict() for transaction in transactions],
            }
        )

    @app.post("/banking/bank")
    async def bank(ship_id: str = Form(...), amount: str = Form(...)) -> JSONResponse:
        """Bank surplus compliance balance for future periods."""

        try:
            transaction = service.bank(ship_id, _parse_amount(amount))
        except ComplianceError as error:
            _raise_http(error)
        return JSONResponse(
            {
                "transaction": transaction.as_dict(),
                "banked_gco2eq": service.get_banked_amount(ship_id),
            }
        )

    @app.post("/banking/apply")
    async def apply_banked(ship_id: str = Form(...), amount: str = Form(...)) -> JSONResponse:
        """Apply banked surplus to a ship in deficit."""

        try:
            result = service.apply_from_bank(ship_id, _parse_amount(amount))
        except ComplianceError as error:
            _raise_http(error)
        payload = result.as_dict()
        payload["banked_gco2eq"] = service.get_banked_amount(ship_id)
        return JSONResponse(payload)

    @app.post("/pools/preview")
    async def preview_pool(ship_ids: List[str] = Form(...)) -> JSONResponse:
        """Snapshot the selected ships without committing anything."""

        try:
            proposal = service.propose_pool(ship_ids)
        except ComplianceError as error:
            _raise_http(error)
        return JSONResponse(proposal.as_dict())

    @app.post("/pools/allocate")
    async def allocate_pool(ship_ids: List[str] = Form(...)) -> JSONResponse:
        """Create a pool from the selected ships and commit the allocation."""

        try:
            proposal = service.propose_pool(ship_ids)
            allocations = service.allocate_pool(proposal)
        except ComplianceError as error:
            _raise_http(error)
        improved = sum(1 for item in allocations if item.balance_after > item.balance_before)
        return JSONResponse(
            {
                "allocations": [allocation.as_dict() for allocation in allocations],
                "improved_ships": improved,
            }
        )

    @app.get("/routes")
    async def list_routes(
        vessel_type: Optional[str] = None,
        fuel_type: Optional[str] = None,
        year: Optional[str] = None,
    ) -> JSONResponse:
        """Return filtered routes with summary statistics.

        Blank filters, as submitted by the dashboard form, match everything.
        """

        try:
            routes = service.routes.list_routes(
                vessel_type=vessel_type,
                fuel_type=fuel_type,
                year=int(year) if year else None,
            )
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(
            {
                "routes": [route.as_dict() for route in routes],
                "metrics": service.routes.summarise_metrics(routes),
            }
        )

    @app.post("/routes/{route_id}/baseline")
    async def set_baseline(route_id: str) -> JSONResponse:
        """Select the baseline route used by comparisons."""

        try:
            route = service.routes.set_baseline(route_id)
        except KeyError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        return JSONResponse({"baseline": route.as_dict()})

    @app.get("/routes/comparison")
    async def route_comparison() -> JSONResponse:
        """Compare every route against the baseline and the intensity target."""

        comparisons = service.routes.compare_to_baseline()
        compliant = sum(1 for comparison in comparisons if comparison.compliant)
        return JSONResponse(
            {
                "target_intensity": service.routes.target_intensity,
                "comparisons": [comparison.as_dict() for comparison in comparisons],
                "compliant_routes": compliant,
                "total_routes": len(comparisons),
            }
        )

    return app
