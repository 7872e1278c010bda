"""GCP Secret Manager integration"""
from google.cloud import secretmanager

from ..config.settings import Settings
from ...shared.exceptions.errors import ConfigurationError
from ...shared.logging.config import get_logger

logger = get_logger(__name__)

DEVELOPMENT_API_KEY = "123-test-key"


class SecretManagerClient:
    """Secret Manager client"""

    def __init__(self, project_id: str):
        """
        Args:
            project_id: GCP project ID
        """
        self.project_id = project_id
        self.client = secretmanager.SecretManagerServiceClient()

    def get_secret(self, secret_name: str, version: str = "latest") -> str:
        """
        Fetch a secret value

        Args:
            secret_name: Secret name
            version: Secret version (default: latest)

        Returns:
            The secret value

        Raises:
            ConfigurationError: The secret could not be read
        """
        name = f"projects/{self.project_id}/secrets/{secret_name}/versions/{version}"
        try:
            logger.debug(f"Fetching secret: {name}")
            response = self.client.access_secret_version(request={"name": name})
        except Exception as e:
            logger.error(f"Failed to fetch secret {secret_name}: {e}")
            raise ConfigurationError(f"Failed to fetch secret {secret_name}: {e}") from e

        logger.info(f"Fetched secret: {secret_name}")
        return response.payload.data.decode("UTF-8").strip()


def resolve_masjidi_api_key(settings: Settings) -> str:
    """
    Resolve the MasjidiAPI key for the proxy relay

    The key from the environment wins. A missing key falls back to the test
    key in development and is read from Secret Manager elsewhere.

    Args:
        settings: Application settings

    Returns:
        The API key

    Raises:
        ConfigurationError: The key is missing and Secret Manager is unavailable
    """
    if settings.masjidi_api_key:
        return settings.masjidi_api_key

    if settings.is_development:
        logger.warning("MASJIDI_API_KEY is not set, using the development test key")
        return DEVELOPMENT_API_KEY

    if not settings.gcp_project_id:
        raise ConfigurationError(
            "GCP_PROJECT_ID is required to read the MasjidiAPI key from Secret Manager"
        )

    client = SecretManagerClient(settings.gcp_project_id)
    return client.get_secret(settings.masjidi_api_key_secret_name)
