"""Infrastructure modules for the notification delivery engine.

Centralized infrastructure components:
- configuration: Settings management (settings, RetrySettings, RateLimitSettings)
- logging: Structured logging setup and correlation context
- cache: Preference cache backends (memory, redis)
- persistence: Preference, delivery log and in-app stores
- notifications: Dispatcher, bulk dispatch, preferences and delivery log
- resilience: Deferred retry queue and worker
- rate_limiting: Fixed-window admission control
- services: Dependency injection services (SettingsDep, DispatcherDep, get_settings)
"""

# Configuration
from infrastructure.configuration import settings

# Observability
from infrastructure.logging import get_module_logger

# Dependency Injection Services
from infrastructure.services import (
    DispatcherDep,
    SettingsDep,
    get_dispatcher,
    get_settings,
)

__all__ = [
    # Configuration
    "settings",
    # Observability
    "get_module_logger",
    # Dependency Injection Services
    "DispatcherDep",
    "SettingsDep",
    "get_dispatcher",
    "get_settings",
]
