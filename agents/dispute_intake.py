"""
Dispute Intake Agent - Verifies Stripe webhooks and turns new disputes into drafts
"""
import json
from typing import Dict, Any, Optional

import stripe

from models.dispute_case import PLATFORM_ACCOUNT
from services.service_factory import ServiceContainer
from utils.dispute_context import DisputeContext, set_phase
from utils.errors import DisputeServiceError, WebhookVerificationError
from utils.logging_config import get_logger

logger = get_logger('agents.dispute_intake')

DISPUTE_CREATED = 'charge.dispute.created'
DISPUTE_CLOSED = 'charge.dispute.closed'


def verify_event(payload: bytes, signature: Optional[str], secret: str,
                 tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE) -> Dict[str, Any]:
    """
    Authenticate a raw webhook body against its Stripe-Signature header.

    Args:
        payload: Request body exactly as received
        signature: Value of the Stripe-Signature header, if any
        secret: Webhook signing secret (whsec_...)
        tolerance: Maximum age of the signed timestamp, in seconds

    Returns:
        The decoded event

    Raises:
        WebhookVerificationError: If the header is missing, the signature does
            not match, the timestamp is stale or the body is not a JSON object
    """
    if not signature:
        raise WebhookVerificationError("Missing Stripe-Signature header")

    try:
        body = payload.decode('utf-8') if isinstance(payload, bytes) else payload
    except UnicodeDecodeError as e:
        raise WebhookVerificationError("Payload is not valid UTF-8") from e

    try:
        stripe.WebhookSignature.verify_header(body, signature, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        raise WebhookVerificationError(str(e)) from e

    try:
        event = json.loads(body)
    except ValueError as e:
        raise WebhookVerificationError("Payload is not valid JSON") from e

    if not isinstance(event, dict):
        raise WebhookVerificationError("Payload is not a JSON object")

    return event


async def handle_dispute_event(event: Dict[str, Any], services: ServiceContainer) -> str:
    """
    Dispatch a verified event.

    Returns the outcome: "created", "closed" or "ignored". Provider errors raised
    while handling a new dispute propagate to the caller, and nothing is stored
    for that dispute.
    """
    event_type = event.get('type')
    # Connect events carry the connected account id at the top level
    account_id = event.get('account') or None
    data = event.get('data')
    dispute = data.get('object') if isinstance(data, dict) else None
    if not isinstance(dispute, dict):
        dispute = {}

    if event_type == DISPUTE_CREATED:
        await _handle_dispute_created(dispute.get('id'), account_id, services)
        return 'created'

    if event_type == DISPUTE_CLOSED:
        with DisputeContext(dispute.get('id'), account_id, 'closed'):
            logger.info(f"✅ [INTAKE] Dispute closed: {dispute.get('id')} status: {dispute.get('status')}")
        return 'closed'

    logger.debug(f"[INTAKE] Ignoring event type {event_type}")
    return 'ignored'


async def _handle_dispute_created(dispute_id: Optional[str], account_id: Optional[str],
                                  services: ServiceContainer) -> None:
    """Retrieve the full dispute, draft a response and store both"""
    if not dispute_id:
        raise DisputeServiceError("Dispute event carries no dispute id")

    with DisputeContext(dispute_id, account_id, 'retrieve'):
        logger.info(f"🔔 [INTAKE] Dispute created: {dispute_id} acct: {account_id or PLATFORM_ACCOUNT}")

        full_dispute = await services.async_data.fetch_dispute(dispute_id, account_id)

        set_phase('draft')
        draft = await services.async_data.generate_draft(full_dispute)

        set_phase('store')
        services.disputes.put(dispute_id, full_dispute, draft, account_id or PLATFORM_ACCOUNT)

        logger.info(f"✅ [INTAKE] Draft ready for dispute {dispute_id}")
