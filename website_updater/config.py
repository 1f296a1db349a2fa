# website_updater/config.py
from dataclasses import dataclass, fields, replace
from typing import Optional
from dotenv import load_dotenv
import os

from website_updater.exceptions import ConfigError

load_dotenv()

# Directory service credentials
EA_USERNAME = os.getenv("EA_USERNAME", "")
EA_PASSWORD = os.getenv("EA_PASSWORD", "")
EA_COMPANYID = os.getenv("EA_COMPANYID", "")

# API Keys
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
GOOGLE_CSE_KEY = os.getenv("GOOGLE_CSE_KEY")
GOOGLE_CX = os.getenv("GOOGLE_CX")

# Runtime parameters
RATE_LIMIT = 10
DNS_TIMEOUT = 3.0
HTTP_TIMEOUT = 5.0
DIRECTORY_TIMEOUT = 30.0
SEARCH_TIMEOUT = 15.0
AI_TIMEOUT = 30.0
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# URLs
EA_ENDPOINT = os.getenv("EA_ENDPOINT", "https://sfs.rpg.com/pip/PublicAPIService.asmx")
EA_NAMESPACE = os.getenv("EA_NAMESPACE", "http://digitalgateway.com/WebServices/PublicAPIService")
EA_VERSION = "25.0"
GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"


@dataclass(frozen=True)
class Settings:
    """Immutable per-run configuration handed to every client and tier."""
    endpoint: str = EA_ENDPOINT
    namespace: str = EA_NAMESPACE
    username: str = EA_USERNAME
    password: str = EA_PASSWORD
    company_id: str = EA_COMPANYID
    version: str = EA_VERSION

    enable_domain_guess: bool = True
    enable_search: bool = True
    enable_ai: bool = True
    force_www: bool = True

    dns_timeout: float = DNS_TIMEOUT
    http_timeout: float = HTTP_TIMEOUT
    directory_timeout: float = DIRECTORY_TIMEOUT
    search_timeout: float = SEARCH_TIMEOUT
    ai_timeout: float = AI_TIMEOUT

    google_cse_key: Optional[str] = GOOGLE_CSE_KEY
    google_cx: Optional[str] = GOOGLE_CX
    search_url: str = GOOGLE_CSE_URL
    openai_api_key: Optional[str] = OPENAI_API_KEY
    openai_model: str = OPENAI_MODEL
    rate_limit: int = RATE_LIMIT

    verbose: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """
        Build settings from the environment defaults, applying any overrides
        whose value is not None (so unset CLI flags keep the env value).
        """
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(cls(), **{k: v for k, v in overrides.items() if v is not None})

    def missing_credentials(self) -> list:
        missing = []
        if not self.username:
            missing.append("username")
        if not self.password:
            missing.append("password")
        if not self.company_id:
            missing.append("companyID")
        return missing

    def require_credentials(self) -> None:
        missing = self.missing_credentials()
        if missing:
            raise ConfigError(
                f"Missing credentials/companyID for non-interactive run: {', '.join(missing)}. "
                "Provide --username --password --companyID or set EA_USERNAME, EA_PASSWORD, EA_COMPANYID"
            )
