"""
FastAPI Application for the Dispute Draft service
"""
import secrets
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, RedirectResponse
from dotenv import load_dotenv
from pydantic import BaseModel

from agents import handle_dispute_event, submit_dispute_evidence, verify_event
from services.service_factory import ServiceContainer, ServiceFactory
from services.stripe_service import StripeService
from utils.config import Settings
from utils.errors import DisputeNotFoundError, ProviderError, WebhookVerificationError
from utils.logging_config import get_logger, init_logging

logger = get_logger('api.main')

# Pydantic models
class DisputeSummary(BaseModel):
    # Stripe fields are passed through as stored
    id: str
    account_id: str
    status: Any = None
    amount: Any = None
    currency: Any = None
    reason: Any = None
    created: Any = None
    draft: str = ""

class WebhookAck(BaseModel):
    received: bool = True


def get_services(request: Request) -> ServiceContainer:
    """Resolve the service container attached to the running app"""
    return request.app.state.services


def create_app(services: Optional[ServiceContainer] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API.

    Args:
        services: Prebuilt service container; built from settings when omitted
        settings: Configuration; read from the environment when omitted

    Raises:
        ConfigurationError: If no container is given and STRIPE_SECRET_KEY is unset
    """
    if services is None:
        load_dotenv()
        init_logging()
        services = ServiceFactory.create_services(settings or Settings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.services.async_data.shutdown()

    app = FastAPI(
        title="Dispute Draft API",
        description="Links Stripe accounts, drafts dispute responses and submits them as evidence",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=services.settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"ok": True}

    @app.get("/llm/health")
    async def get_llm_health(services: ServiceContainer = Depends(get_services)):
        """Get draft generation health status"""
        return services.llm.health_check()

    @app.get("/connect/stripe")
    async def connect_stripe(services: ServiceContainer = Depends(get_services)):
        """Redirect a merchant to Stripe Connect to link their account"""
        settings = services.settings
        if not settings.stripe_client_id or not settings.stripe_redirect_uri:
            logger.error("❌ [API] Connect requested without STRIPE_CLIENT_ID or STRIPE_REDIRECT_URI")
            raise HTTPException(status_code=500, detail="Missing STRIPE_CLIENT_ID or STRIPE_REDIRECT_URI")

        url = StripeService.build_authorize_url(
            client_id=settings.stripe_client_id,
            redirect_uri=settings.stripe_redirect_uri,
            state=secrets.token_urlsafe(16)
        )
        return RedirectResponse(url, status_code=302)

    @app.get("/connect/stripe/callback", response_class=PlainTextResponse)
    async def connect_stripe_callback(code: Optional[str] = None, error: Optional[str] = None,
                                      error_description: Optional[str] = None,
                                      services: ServiceContainer = Depends(get_services)):
        """Exchange the OAuth code and remember the connected account"""
        if error:
            logger.warning(f"⚠️ [API] OAuth error returned by Stripe: {error}")
            return PlainTextResponse(f"OAuth error: {error}: {error_description or ''}", status_code=400)

        if not code:
            logger.error("❌ [API] OAuth callback without an authorization code")
            return PlainTextResponse("OAuth token exchange failed", status_code=500)

        try:
            token = await services.async_data.exchange_oauth_code(code)
        except ProviderError as e:
            logger.error(f"❌ [API] OAuth token exchange failed: {e}")
            return PlainTextResponse("OAuth token exchange failed", status_code=500)

        account = services.merchants.put(token['account_id'], token['access_token'], token['scope'])
        logger.info(f"🔗 [API] Connected account: {account.account_id}")
        return f"✅ Connected Stripe account: {account.account_id}. You can close this tab."

    @app.post("/webhooks/stripe", response_model=WebhookAck)
    async def stripe_webhook(request: Request, services: ServiceContainer = Depends(get_services)):
        """Receive Stripe events"""
        secret = services.settings.stripe_signing_secret
        if not secret:
            logger.error("❌ [WEBHOOK] STRIPE_SIGNING_SECRET is not configured")
            return PlainTextResponse("Webhook not configured", status_code=500)

        payload = await request.body()
        try:
            event = verify_event(payload, request.headers.get('stripe-signature'), secret)
        except WebhookVerificationError as e:
            logger.error(f"❌ [WEBHOOK] Signature verification failed: {e}")
            return PlainTextResponse("Webhook Error: invalid signature", status_code=400)

        try:
            outcome = await handle_dispute_event(event, services)
        except Exception as e:
            logger.exception(f"❌ [WEBHOOK] Handler error for event {event.get('id')}: {e}")
            return PlainTextResponse("Internal error", status_code=500)

        logger.info(f"📨 [WEBHOOK] Event {event.get('id')} ({event.get('type')}) handled: {outcome}")
        return WebhookAck()

    @app.get("/cases", response_model=List[DisputeSummary])
    @app.get("/disputes", response_model=List[DisputeSummary])
    async def list_disputes(services: ServiceContainer = Depends(get_services)):
        """List the disputes received so far"""
        return services.disputes.list_summaries()

    @app.post("/cases/{dispute_id}/submit")
    @app.post("/disputes/{dispute_id}/submit")
    async def submit_evidence(dispute_id: str, services: ServiceContainer = Depends(get_services)):
        """Submit the stored draft as evidence for the dispute"""
        try:
            updated = await submit_dispute_evidence(dispute_id, services)
        except DisputeNotFoundError:
            raise HTTPException(status_code=404, detail="Unknown dispute")
        except ProviderError as e:
            logger.error(f"❌ [API] Failed to submit evidence for {dispute_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to submit evidence: {e}")

        return {"ok": True, "updated": updated}

    return app
