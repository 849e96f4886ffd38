"""Configuration management for the opsctl application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

class Config:
    """Application configuration with sensible defaults."""

    # Kubernetes access
    KUBECONFIG: str = os.getenv("KUBECONFIG", "")
    NAMESPACE: str = os.getenv("OPSCTL_NAMESPACE", "default")

    # Control plane API
    API_GROUP: str = os.getenv("OPSCTL_API_GROUP", "dbaas.kubeblocks.io")
    API_VERSION: str = os.getenv("OPSCTL_API_VERSION", "v1alpha1")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        required = {
            "OPSCTL_API_GROUP": cls.API_GROUP,
            "OPSCTL_API_VERSION": cls.API_VERSION,
        }
        missing = [k for k, v in required.items() if not v]
        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

# Don't validate on import to allow for dynamic configuration
# Call Config.validate() explicitly when needed
