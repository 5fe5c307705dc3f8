"""gc-auth.

OAuth 2.0 Implicit and PKCE login flows for a cloud identity provider.
"""

__version__ = "0.1.0"

from gc_auth.config import Config, ConfigError, FlowConfig, load_config
from gc_auth.oauth import AuthResult, OAuth2LoginFlow

__all__ = [
    "AuthResult",
    "Config",
    "ConfigError",
    "FlowConfig",
    "OAuth2LoginFlow",
    "__version__",
    "load_config",
]
