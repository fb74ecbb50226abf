# centralized configuration loader
# runs load_dotenv() to read .env
# API_KEY / BASE_URL are looked up on every call so a changed environment is picked up without reload

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# same default the official OpenAI client falls back to
DEFAULT_BASE_URL = "https://api.openai.com/v1"

# only applied to clients built per call; an injected client keeps its own timeouts
CONNECT_TIMEOUT = float(os.getenv("CONNECT_TIMEOUT", "10"))
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))


def api_key() -> Optional[str]:
    return os.getenv("API_KEY") or None


def base_url() -> str:
    return os.getenv("BASE_URL") or DEFAULT_BASE_URL
