"""
Demo resources protected by the x402 paywall.

/api/weather is priced as a stream, /api/premium per request, /api/free is
open. The paywall middleware attaches the accepted proof to request.state.
"""

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter()


def _paid_with(request: Request) -> dict[str, Any]:
    proof = getattr(request.state, "payment_proof", None)
    if proof is None:
        return {}
    return {"paidWithStream": proof.stream_id, "paidWithTx": proof.tx_hash}


@router.get("/weather")
async def weather(request: Request) -> dict[str, Any]:
    return {"temperature": 22, "city": "London", "condition": "Cloudy", **_paid_with(request)}


@router.get("/premium")
async def premium(request: Request) -> dict[str, Any]:
    return {"content": "This is premium content.", **_paid_with(request)}


@router.get("/free")
async def free() -> dict[str, Any]:
    return {"message": "This is free content."}
