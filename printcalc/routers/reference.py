"""
Reference data — machine profiles and per-currency price tables.

GET /api/reference/machines            — all machine profiles
GET /api/reference/pricing             — all price tables
GET /api/reference/pricing/{currency}  — one price table
"""

from fastapi import APIRouter, HTTPException

from .. import profiles
from ..errors import InvalidInput

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/machines")
def list_machines():
    return {key: profile.model_dump() for key, profile in profiles.MACHINES.items()}


@router.get("/pricing")
def list_pricing():
    return {
        code: {**table.model_dump(), "symbol": profiles.currency_symbol(code)}
        for code, table in profiles.PRICE_TABLES.items()
    }


@router.get("/pricing/{currency}")
def get_pricing(currency: str):
    try:
        table = profiles.get_price_table(currency)
    except InvalidInput as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {**table.model_dump(), "symbol": profiles.currency_symbol(table.currency)}
