"""
Service Factory for building the service graph handed to the API
"""
from dataclasses import dataclass

from services.async_data_service import AsyncDataService
from services.dispute_store import DisputeStore, InMemoryDisputeStore
from services.llm_service import LLMService
from services.merchant_registry import MerchantRegistry, InMemoryMerchantRegistry
from services.stripe_service import StripeService
from utils.config import Settings
from utils.logging_config import get_logger

logger = get_logger('services.factory')

@dataclass
class ServiceContainer:
    """
    Everything a request handler needs, passed in explicitly
    """
    settings: Settings
    stripe: StripeService
    llm: LLMService
    async_data: AsyncDataService
    merchants: MerchantRegistry
    disputes: DisputeStore

class ServiceFactory:
    """
    Builds a fresh, independent set of services per application instance
    """

    @classmethod
    def create_stripe_service(cls, settings: Settings) -> StripeService:
        """Create the Stripe service"""
        return StripeService(api_key=settings.stripe_secret_key, api_version=settings.stripe_api_version)

    @classmethod
    def create_llm_service(cls, settings: Settings) -> LLMService:
        """Create the draft generation service"""
        return LLMService(api_key=settings.openai_api_key, model=settings.openai_model)

    @classmethod
    def create_services(cls, settings: Settings, stripe_service: StripeService = None,
                        llm_service: LLMService = None, merchants: MerchantRegistry = None,
                        disputes: DisputeStore = None) -> ServiceContainer:
        """
        Create the service container, using any instance passed in instead of the default
        """
        stripe_service = stripe_service or cls.create_stripe_service(settings)
        llm_service = llm_service or cls.create_llm_service(settings)
        merchants = merchants if merchants is not None else InMemoryMerchantRegistry()
        disputes = disputes if disputes is not None else InMemoryDisputeStore()

        container = ServiceContainer(
            settings=settings,
            stripe=stripe_service,
            llm=llm_service,
            async_data=AsyncDataService(stripe_service, llm_service, max_workers=settings.worker_threads),
            merchants=merchants,
            disputes=disputes
        )
        logger.info("Created service container")
        return container
