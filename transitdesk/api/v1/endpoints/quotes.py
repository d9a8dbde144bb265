from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from transitdesk.api.responses import render
from transitdesk.db.session import get_db
from transitdesk.schemas.quote import ModeQuoteRead, QuoteEstimateRequest
from transitdesk.services.quote_service import RateCalculator

router = APIRouter()


@router.post("/estimate")
def estimate_quote(payload: QuoteEstimateRequest, db: Session = Depends(get_db)):
    """Price the request once per transport mode."""
    return render(RateCalculator(db).estimate_all_modes(payload), ModeQuoteRead)
