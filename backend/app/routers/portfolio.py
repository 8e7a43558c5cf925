# backend/app/routers/portfolio.py
"""
Whole-portfolio endpoints.

- GET  /portfolio/export  - Download everything as one JSON document
- POST /portfolio/import  - Replace everything with a document
- POST /portfolio/reset   - Delete everything
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_transfer_service
from app.services.transfer import PortfolioTransferService

router = APIRouter(
    prefix="/portfolio",
    tags=["Portfolio"],
)


@router.get(
    "/export",
    summary="Export portfolio",
    response_description="simple-investor-portfolio.v1 document",
)
def export_portfolio(
        db: Session = Depends(get_db),
        service: PortfolioTransferService = Depends(get_transfer_service),
) -> JSONResponse:
    """Export instruments, prices, purchases and goals as a downloadable file."""
    document = service.export_document(db)
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d-%H-%M-%S")
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="portfolio-export-{stamp}.json"'},
    )


@router.post(
    "/import",
    summary="Import portfolio",
)
def import_portfolio(
        payload: Any = Body(..., description="simple-investor-portfolio.v1 document"),
        db: Session = Depends(get_db),
        service: PortfolioTransferService = Depends(get_transfer_service),
) -> dict:
    """
    Replace ALL stored data with the document's contents.

    Raises **400** if the document is invalid. Nothing is changed then.
    """
    result = service.import_document(db, payload)
    return {
        "status": "imported",
        "instruments": result.instruments,
        "prices": result.prices,
        "purchases": result.purchases,
        "goals": result.goals,
    }


@router.post(
    "/reset",
    summary="Reset portfolio",
)
def reset_portfolio(
        db: Session = Depends(get_db),
        service: PortfolioTransferService = Depends(get_transfer_service),
) -> dict:
    """Delete every instrument, price, purchase and goal. Cannot be undone."""
    service.reset(db)
    return {"status": "reset"}
