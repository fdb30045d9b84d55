"""
Skin Radar — Configuration & Constants

Every URL, threshold, delay and catalog list lives here. No hardcoded values
in business logic.

Usage:
    from skinradar.config import settings
"""

from __future__ import annotations

from decimal import Decimal

from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Currencies
# ---------------------------------------------------------------------------

BASE_CURRENCY = "USD"
TARGET_CURRENCY = "AZN"


# ---------------------------------------------------------------------------
# Weapon catalog
# ---------------------------------------------------------------------------

# Slugs that show up under /weapons/ but are not weapons at all
EXCLUDED_WEAPON_SLUGS = frozenset({"a"})

# Cosmetic categories (case-insensitive substrings) that must never be scraped
EXCLUDED_WEAPON_PATTERNS = ("knife", "glove", "wrap", "bayonet")

# Authoritative allow-list. Discovery can only narrow this, never widen it.
KNOWN_WEAPON_SLUGS = frozenset({
    "ak-47",
    "aug",
    "awp",
    "cz75-auto",
    "desert-eagle",
    "dual-berettas",
    "famas",
    "five-seven",
    "g3sg1",
    "galil-ar",
    "glock-18",
    "m249",
    "m4a1-s",
    "m4a4",
    "mac-10",
    "mag-7",
    "mp5-sd",
    "mp7",
    "mp9",
    "negev",
    "nova",
    "p2000",
    "p250",
    "p90",
    "pp-bizon",
    "r8-revolver",
    "sawed-off",
    "scar-20",
    "sg-553",
    "ssg-08",
    "tec-9",
    "ump-45",
    "usp-s",
    "xm1014",
    "zeus-x27",
})


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for Skin Radar.

    Loads from environment variables with fallback defaults.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # -----------------------------------------------------------------------
    # Marketplace
    # -----------------------------------------------------------------------
    BASE_URL: str = "https://csgoskins.gg"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    )
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # -----------------------------------------------------------------------
    # Forex — one USD/AZN rate per run
    # -----------------------------------------------------------------------
    FX_API_URL: str = "https://api.frankfurter.app/latest?from=USD&to=AZN"
    FX_PROVIDER: str = "frankfurter.app"
    FALLBACK_USD_TO_AZN: Decimal = Decimal("1.7")

    # -----------------------------------------------------------------------
    # Filtering
    # -----------------------------------------------------------------------
    PRICE_LIMIT_AZN: Decimal = Decimal("20")

    # -----------------------------------------------------------------------
    # Rate limiting
    # backoff = FETCH_BACKOFF_SECONDS × attempt (linear)
    # -----------------------------------------------------------------------
    FETCH_MAX_ATTEMPTS: int = 4
    FETCH_BACKOFF_SECONDS: float = 0.6
    CATEGORY_PACING_SECONDS: float = 0.22

    # -----------------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------------
    OUTPUT_DIR: str = "public/data"
    LEGACY_CATEGORY_SLUG: str = "scar-20"

    LOG_LEVEL: str = "INFO"

    @property
    def discovery_url(self) -> str:
        return f"{self.BASE_URL.rstrip('/')}/"

    def category_url(self, slug: str) -> str:
        return f"{self.BASE_URL.rstrip('/')}/weapons/{slug}"


# Singleton instance
settings = Settings()
