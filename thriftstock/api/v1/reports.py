# thriftstock/api/v1/reports.py
from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from thriftstock.api.deps import get_staff
from thriftstock.core.database import get_db
from thriftstock.schemas.report import DashboardSummary, StockReport
from thriftstock.schemas.user import CurrentUser
from thriftstock.services.report_service import report_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardSummary)
def dashboard(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return report_service.dashboard(db)


@router.get("/stock", response_model=StockReport)
def stock_report(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    return report_service.stock_report(db)


@router.get("/stock.csv")
def stock_report_csv(
    current_user: CurrentUser = Depends(get_staff),
    db: Session = Depends(get_db)
):
    filename = f"inventory-report-{date.today().isoformat()}.csv"
    return Response(
        content=report_service.stock_report_csv(db),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
