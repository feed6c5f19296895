"""
x402 paywall middleware for FastAPI.

Provider side of the protocol: requests to a priced path must carry payment
proof headers, otherwise they are answered with HTTP 402 and the headers
describing how to pay. Proofs are accepted as presented; settlement is not
verified.
"""

import logging
from typing import Any, Callable, Mapping

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from paystream.core.config import settings
from paystream.x402.headers import PAYMENT_REQUIRED_STATUS
from paystream.x402.proof import PaymentProof
from paystream.x402.requirement import PaymentMode, PaymentRequirement

logger = logging.getLogger(__name__)


class PricedRoute(BaseModel):
    """Pricing for one protected path prefix."""

    price: str
    mode: PaymentMode = PaymentMode.STREAMING
    min_deposit: str | None = None
    description: str | None = None


DEFAULT_PRICED_ROUTES: dict[str, PricedRoute] = {
    "/api/weather": PricedRoute(
        price="0.0001",
        mode=PaymentMode.STREAMING,
        min_deposit="0.36",
        description="Real-time weather data",
    ),
    "/api/premium": PricedRoute(
        price="0.01",
        mode=PaymentMode.PER_REQUEST,
        description="Premium content",
    ),
}


def match_route(routes: Mapping[str, PricedRoute], path: str) -> PricedRoute | None:
    """Exact match first, then the first configured prefix of path."""
    if path in routes:
        return routes[path]
    for prefix, route in routes.items():
        if path.startswith(prefix):
            return route
    return None


def requirement_for(route: PricedRoute, recipient: str, network: str, token: str) -> PaymentRequirement:
    """Build the requirement advertised for a priced route."""
    if route.mode == PaymentMode.STREAMING:
        return PaymentRequirement(
            recipient=recipient,
            mode=route.mode,
            rate_per_second=route.price,
            min_deposit=route.min_deposit,
            description=route.description,
            network=network,
            token=token,
        )
    return PaymentRequirement(
        recipient=recipient,
        mode=route.mode,
        amount=route.price,
        description=route.description,
        network=network,
        token=token,
    )


def create_x402_paywall(
    routes: Mapping[str, PricedRoute] | None = None,
    recipient: str | None = None,
    network: str | None = None,
    token: str | None = None,
) -> Callable[[Request, Callable[[Request], Any]], Any]:
    """
    Create an HTTP middleware enforcing x402 payment on priced routes.

    Args:
        routes: Path prefix to pricing map (defaults to DEFAULT_PRICED_ROUTES)
        recipient: Recipient advertised in challenges
        network: Network advertised in challenges
        token: Token advertised in challenges

    Returns:
        Middleware callable for app.middleware("http")
    """
    routes = dict(DEFAULT_PRICED_ROUTES if routes is None else routes)
    recipient = recipient or settings.paywall_recipient
    network = network or settings.paywall_network
    token = token or settings.paywall_token

    async def x402_paywall(request: Request, call_next: Callable[[Request], Any]) -> Any:
        route = match_route(routes, request.url.path)
        if route is None:
            return await call_next(request)

        proof = PaymentProof.from_headers(request.headers)
        if proof is not None:
            logger.info(
                f"Request accepted for {request.url.path} using "
                f"{'stream #' + str(proof.stream_id) if proof.stream_id is not None else 'tx ' + str(proof.tx_hash)}"
            )
            request.state.payment_proof = proof
            return await call_next(request)

        requirement = requirement_for(route, recipient, network, token)
        logger.info(f"Payment required for {request.url.path} ({route.mode.value}, {route.price})")
        return JSONResponse(
            status_code=PAYMENT_REQUIRED_STATUS,
            headers=requirement.to_headers(),
            content={
                "message": "Payment Required",
                "requirements": requirement.model_dump(mode="json", exclude_none=True),
            },
        )

    return x402_paywall
