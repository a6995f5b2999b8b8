"""POST /v1/emi - standalone EMI calculator"""

import math
import logging
from fastapi import APIRouter, HTTPException, Request

from underwriting_gateway.api.v1.schemas import EmiRequest, EmiResponse
from underwriting_gateway.api.dependencies import get_request_id
from underwriting_gateway.domain.emi import emi_breakdown
from underwriting_gateway.domain.exceptions import InvalidInputError
from underwriting_gateway.infrastructure.observability.metrics import emi_quote_counter

router = APIRouter()


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@router.post("/emi", response_model=EmiResponse)
def calculate_emi_quote(request_body: EmiRequest, request: Request):
    """
    Quote the monthly installment for a prospective loan.

    No application or profile is needed; used by the pre-application calculator.
    """
    try:
        quote = emi_breakdown(request_body.principal, request_body.rate, request_body.tenure_months)
    except InvalidInputError as e:
        logging.warning(f"Invalid EMI input: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    emi_quote_counter.inc()

    return EmiResponse(
        emi=round_half_up(quote.emi),
        total_amount=round_half_up(quote.total_amount),
        total_interest=round_half_up(quote.total_interest),
        principal=round_half_up(quote.principal),
    )
