"""
Stripe Service
"""
from typing import Dict, Any, Optional
from urllib.parse import urlencode

import stripe

from utils.errors import ProviderError
from utils.logging_config import get_logger

logger = get_logger('services.stripe')

CONNECT_AUTHORIZE_URL = 'https://connect.stripe.com/oauth/authorize'
CONNECT_SCOPE = 'read_write'

class StripeService:
    """
    Service for interacting with Stripe Connect and the Disputes API
    """

    def __init__(self, api_key: str, api_version: Optional[str] = None):
        self.api_key = api_key
        stripe.api_key = api_key
        if api_version:
            stripe.api_version = api_version
        logger.info(f"✅ [STRIPE] Stripe client configured (API version {api_version or 'account default'})")

    @staticmethod
    def build_authorize_url(client_id: str, redirect_uri: str, state: str) -> str:
        """
        Build the Connect OAuth URL a merchant is sent to for linking their account
        """
        params = {
            'response_type': 'code',
            'client_id': client_id,
            'scope': CONNECT_SCOPE,
            'redirect_uri': redirect_uri,
            'state': state,
            'stripe_user[business_type]': 'company'
        }
        return f"{CONNECT_AUTHORIZE_URL}?{urlencode(params)}"

    def exchange_oauth_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange an OAuth authorization code for the connected account's token
        """
        logger.info("🔑 [STRIPE] Exchanging OAuth authorization code")

        try:
            response = stripe.OAuth.token(grant_type='authorization_code', code=code)
        except stripe.StripeError as e:
            logger.error(f"❌ [STRIPE] OAuth token exchange failed: {e}")
            raise ProviderError('oauth', str(e), original_exception=e) from e

        try:
            result = {
                'account_id': response['stripe_user_id'],
                'access_token': response['access_token'],
                'scope': response['scope']
            }
        except KeyError as e:
            logger.error(f"❌ [STRIPE] OAuth response is missing {e}")
            raise ProviderError('oauth', f"OAuth response is missing {e}") from e

        logger.info(f"✅ [STRIPE] OAuth exchange completed for account {result['account_id']}")
        return result

    def retrieve_dispute(self, dispute_id: str, account_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Retrieve a full dispute, on the connected account when one is given
        """
        logger.info(f"🔍 [STRIPE] Retrieving dispute {dispute_id} (account: {account_id or 'platform'})")

        try:
            dispute = stripe.Dispute.retrieve(dispute_id, **self._account_options(account_id))
        except stripe.StripeError as e:
            logger.error(f"❌ [STRIPE] Stripe error retrieving dispute {dispute_id}: {e}")
            raise ProviderError('retrieve', str(e), resource_id=dispute_id, original_exception=e) from e

        logger.info(f"✅ [STRIPE] Retrieved dispute {dispute_id}")
        return dispute.to_dict()

    def submit_evidence(self, dispute_id: str, text: str, account_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Attach free text to a dispute as uncategorized evidence
        """
        logger.info(f"📤 [STRIPE] Submitting evidence for dispute {dispute_id} ({len(text)} chars)")

        try:
            updated = stripe.Dispute.modify(
                dispute_id,
                evidence={'uncategorized_text': text},
                **self._account_options(account_id)
            )
        except stripe.StripeError as e:
            logger.error(f"❌ [STRIPE] Stripe error submitting evidence for dispute {dispute_id}: {e}")
            raise ProviderError('submit', str(e), resource_id=dispute_id, original_exception=e) from e

        logger.info(f"✅ [STRIPE] Evidence submitted for dispute {dispute_id}")
        return updated.to_dict()

    @staticmethod
    def _account_options(account_id: Optional[str]) -> Dict[str, str]:
        """Request options routing a call to a connected account"""
        return {'stripe_account': account_id} if account_id else {}
