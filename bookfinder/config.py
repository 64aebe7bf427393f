import os
import json
import math
import logging
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load .env first (Project specific overrides)
load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".bookfinder_config.json"

DEFAULT_LLM_MODEL = "meta-llama/llama-3.2-3b-instruct:free"

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}

NUMBER_DEFAULTS = {
    "LLM_TIMEOUT": 6.0,
    "CACHE_TTL_SECONDS": 300.0,
}

def parse_positive_number(value) -> float:
    """Raises ValueError unless value is a finite number above zero."""
    number = float(value)
    if not math.isfinite(number) or number <= 0:
        raise ValueError(f"{value!r} is not a positive number")
    return number

def check_value(key: str, value: str):
    """Raises ValueError when value cannot be used for key."""
    if key in NUMBER_DEFAULTS:
        parse_positive_number(value)
    elif key == "USE_STATIC_FALLBACK" and str(value).strip().lower() not in TRUTHY | FALSY:
        raise ValueError(f"{value!r} is not a boolean")

class Config:
    def __init__(self):
        self._load_from_file()

    def _load_from_file(self):
        self.file_config = {}
        if CONFIG_PATH.exists():
            try:
                self.file_config = json.loads(CONFIG_PATH.read_text())
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable config file {CONFIG_PATH}: {e}")

    def _get(self, key: str) -> Optional[str]:
        return os.getenv(key) or self.file_config.get(key)

    @property
    def OPENROUTER_API_KEY(self):
        return self._get("OPENROUTER_API_KEY")

    @property
    def GOOGLE_API_KEY(self):
        return self._get("GOOGLE_API_KEY")

    @property
    def GOOGLE_CX(self):
        # Programmable Search Engine ID
        return self._get("GOOGLE_CX")

    @property
    def LLM_MODEL(self):
        return self._get("LLM_MODEL") or DEFAULT_LLM_MODEL

    def _number(self, key: str) -> float:
        default = NUMBER_DEFAULTS[key]
        val = self._get(key)
        if not val:
            return default
        try:
            return parse_positive_number(val)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid {key}={val!r}; using {default}")
            return default

    @property
    def LLM_TIMEOUT(self) -> float:
        return self._number("LLM_TIMEOUT")

    @property
    def CACHE_TTL_SECONDS(self) -> float:
        return self._number("CACHE_TTL_SECONDS")

    @property
    def USE_STATIC_FALLBACK(self) -> bool:
        val = self._get("USE_STATIC_FALLBACK")
        if isinstance(val, bool):
            return val
        return str(val).strip().lower() in TRUTHY if val else False

    @property
    def pdf_search_enabled(self) -> bool:
        return bool(self.GOOGLE_API_KEY and self.GOOGLE_CX)

    def save(self, key: str, value: str):
        check_value(key, value)
        self.file_config[key] = value
        CONFIG_PATH.write_text(json.dumps(self.file_config, indent=2))

    def validate(self) -> List[str]:
        """
        Returns human readable warnings for missing settings.
        The LLM key is required; the search keys only disable PDF lookup.
        """
        warnings = []
        if not self.OPENROUTER_API_KEY:
            warnings.append("OPENROUTER_API_KEY is not set; every search will return no results.")
        if not self.pdf_search_enabled:
            warnings.append("GOOGLE_API_KEY/GOOGLE_CX are not set; PDF lookup is disabled.")
        for w in warnings:
            logger.warning(w)
        return warnings

config = Config()
