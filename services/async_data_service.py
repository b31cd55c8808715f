"""
Async Data Service - Runs the blocking Stripe and OpenAI SDK calls off the event loop
"""
import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Any, Optional

from services.llm_service import LLMService
from services.stripe_service import StripeService
from utils.config import DEFAULT_WORKER_THREADS
from utils.logging_config import get_logger

logger = get_logger('services.async_data')

class AsyncDataService:
    """
    Awaitable wrappers around the synchronous provider services.

    Each call is submitted to a thread pool so that request handlers only
    suspend at provider I/O. The pool is sized from WORKER_THREADS so that
    slow draft generation does not hold up submissions or OAuth callbacks.
    No timeouts or retries are added on top of the SDK defaults.
    """

    def __init__(self, stripe_service: StripeService, llm_service: LLMService, max_workers: int = DEFAULT_WORKER_THREADS):
        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        self.stripe = stripe_service
        self.llm = llm_service

    async def _run(self, func, *args):
        # run_in_executor does not carry contextvars over, so the log context is copied explicitly
        context = contextvars.copy_context()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, context.run, func, *args)

    async def fetch_dispute(self, dispute_id: str, account_id: Optional[str] = None) -> Dict[str, Any]:
        """Retrieve the full dispute from Stripe"""
        return await self._run(self.stripe.retrieve_dispute, dispute_id, account_id)

    async def generate_draft(self, dispute: Dict[str, Any]) -> str:
        """Draft a response for the dispute"""
        return await self._run(self.llm.generate_dispute_draft, dispute)

    async def submit_evidence(self, dispute_id: str, text: str, account_id: Optional[str] = None) -> Dict[str, Any]:
        """Attach evidence text to the dispute on Stripe"""
        return await self._run(self.stripe.submit_evidence, dispute_id, text, account_id)

    async def exchange_oauth_code(self, code: str) -> Dict[str, Any]:
        """Exchange an OAuth code for connected account credentials"""
        return await self._run(self.stripe.exchange_oauth_code, code)

    def shutdown(self):
        """Release the worker threads"""
        self.executor.shutdown(wait=False)
        logger.info("🛑 [ASYNC] Worker pool shut down")
