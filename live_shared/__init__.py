"""
Shared module for the real-time client and its CLI.

STRUCTURE:
- live_shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging, token masking
- live_shared.infrastructure: Session id correlation for logs
- live_shared.utils: Exceptions with auto-logging
- live_shared.auth: Access token providers

IMPORT EXAMPLES:
    from live_shared.config.settings import settings
    from live_shared.config.logging import get_logger
    from live_shared.utils.exceptions import ConnectionFailedError
    from live_shared.auth import StaticTokenProvider
"""
