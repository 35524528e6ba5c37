"""Backend factory.

The server holds exactly one backend for its whole lifetime; every handler
receives it through ``CRMService``.
"""

import logging
from typing import TYPE_CHECKING

from ..config import ServerConfig

if TYPE_CHECKING:
    from .protocol import CRMBackend

logger = logging.getLogger(__name__)


def get_backend(config: ServerConfig) -> "CRMBackend":
    """Build the backend described by ``config``.

    Raises:
        ValueError: connection URL or credential missing
    """
    if not config.supabase_url or not config.supabase_service_key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must both be set")

    from .supabase_backend import SupabaseBackend

    return SupabaseBackend.from_credentials(config.supabase_url, config.supabase_service_key)
