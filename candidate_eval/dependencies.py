from fastapi import Depends

from candidate_eval.services.anthropic_client import AnthropicClient
from candidate_eval.services.blob_storage import BlobStorageClient
from candidate_eval.utils.config import Settings, get_settings


def get_anthropic_client(settings: Settings = Depends(get_settings)) -> AnthropicClient:
    """Raises ConfigurationError when ANTHROPIC_API_KEY is unset."""
    return AnthropicClient.from_settings(settings)


def get_blob_storage(settings: Settings = Depends(get_settings)) -> BlobStorageClient:
    """Raises ConfigurationError when BLOB_READ_WRITE_TOKEN is unset."""
    return BlobStorageClient.from_settings(settings)
