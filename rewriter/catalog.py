"""
Model catalog: which remote models can do rewrites.
"""
import logging
from typing import List

from core import BaseLLMClient
from .config import REWRITE_GENERATION_METHOD
from .errors import CatalogFetchError
from .schemas import ModelDescriptor

logger = logging.getLogger(__name__)


class ModelCatalog:
    """Lists models that declare the rewrite generation method."""

    def __init__(self, client: BaseLLMClient, method: str = REWRITE_GENERATION_METHOD):
        self.client = client
        self.method = method

    async def list_rewrite_capable_models(self, api_key: str) -> List[str]:
        """
        Fetch the catalog and keep rewrite-capable models.

        Args:
            api_key: Gemini API key

        Returns:
            Model names without the "models/" prefix, in catalog order.
            May be empty; callers decide what that means.

        Raises:
            CatalogFetchError: If the catalog could not be fetched
        """
        try:
            entries = await self.client.list_models(api_key)
        except RuntimeError as e:
            logger.error(f"[CATALOG] Failed to list models | error={e}")
            raise CatalogFetchError(str(e)) from e

        try:
            descriptors = [ModelDescriptor.from_api(entry) for entry in entries]
        except (TypeError, ValueError) as e:
            logger.error(f"[CATALOG] Malformed catalog | error={e}")
            raise CatalogFetchError(f"Failed to fetch models: malformed catalog response ({e})") from e

        names = [d.name for d in descriptors if d.supports(self.method)]

        logger.info(f"[CATALOG] Listed models | total={len(descriptors)} | usable={len(names)} | method={self.method}")
        return names
