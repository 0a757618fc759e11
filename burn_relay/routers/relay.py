"""
Relay endpoints - accepts burn announcements and submits them on-chain.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core.errors import RelayError
from ..relay_service import TransactionSubmitter
from ..schemas.relay import RelayRequest, RelayResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_submitter(request: Request) -> TransactionSubmitter:
    """Submitter built at startup and kept on the application state."""
    return request.app.state.submitter


@router.post("/relay", response_model=RelayResponse, response_model_exclude_none=True)
def relay(body: RelayRequest, submitter: TransactionSubmitter = Depends(get_submitter)):
    """
    Relay an emitBurn call for the given ephemeral public key and burn address.
    The relayer account signs and pays for the transaction.
    """
    if not body.ephemeral_public_key or not body.burn_address:
        return JSONResponse(
            status_code=400,
            content=RelayResponse(
                success=False,
                error="ephemeralPublicKey and burnAddress are required",
            ).to_json(),
        )

    logger.info(
        f"Relay request received - PublicKey: {body.ephemeral_public_key}, BurnAddress: {body.burn_address}"
    )

    try:
        tx_hash = submitter.call_contract(body.ephemeral_public_key, body.burn_address)
    except RelayError as e:
        logger.error(f"Relay failed ({type(e).__name__}): {e}")
        return JSONResponse(
            status_code=500,
            content=RelayResponse(
                success=False,
                error=f"Failed to relay transaction: {e}",
            ).to_json(),
        )

    return RelayResponse(
        success=True,
        message="Transaction submitted successfully",
        tx_hash=tx_hash,
    ).to_json()
