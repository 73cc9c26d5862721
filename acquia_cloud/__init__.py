"""
Acquia Cloud API client

This package wraps the Cloud API used to manage hosted sites: environments,
databases and their backups, domains, servers, SSH keys, SVN users, tasks
and code/file deploys. Every call goes through one request dispatcher that
authenticates with the site's credentials and maps HTTP status codes to a
small error taxonomy.

Requirements:
    - Python 3
    - requests library

Configuration:
    Credentials are read from an ini file (one section per site with
    username, password, endpoint and optional stage; top-level keys are the
    stage label and site aliases). Library defaults live in DEFAULT_CONFIG.
"""

from .credentials import (
    CredentialStore,
    SiteCredentials,
    credentials_path,
    load_credentials,
)
from .errors import (
    ApiError,
    CloudApiError,
    CredentialsError,
    NotImplementedCall,
    ResourceNotFound,
    ResultStreamError,
    TransportError,
    UnknownSite,
)
from .main import (
    DEFAULT_CONFIG,
    CloudApiClient,
    DispatchResult,
    Failure,
    ResponseEnvelope,
    Success,
    build_url,
    encode_query,
    execute_command,
    extract_location,
    initialize,
)

# Package metadata
__version__ = "1.0.0"
__author__ = "Acquia Cloud Tools"
__description__ = "Acquia Cloud API client for site, environment and database management"

__all__ = [
    "ApiError",
    "CloudApiClient",
    "CloudApiError",
    "CredentialStore",
    "CredentialsError",
    "DEFAULT_CONFIG",
    "DispatchResult",
    "Failure",
    "NotImplementedCall",
    "ResourceNotFound",
    "ResponseEnvelope",
    "ResultStreamError",
    "SiteCredentials",
    "Success",
    "TransportError",
    "UnknownSite",
    "build_url",
    "credentials_path",
    "encode_query",
    "execute_command",
    "extract_location",
    "initialize",
    "load_credentials",
    "__version__",
    "__author__",
    "__description__",
]
