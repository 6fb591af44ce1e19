"""tenacious - a resilient client for the Tenable.io / Nessus API.

Retries the API's inconsistent failures with exponential backoff, honors
its rate limits and walks its paginated search endpoints.
"""

__version__ = "1.0.0"

from tenacious.client import TenableClient
from tenacious.config import Settings

__all__ = ["Settings", "TenableClient", "__version__"]
