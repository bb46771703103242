"""Runtime settings for the sitemap diff tool.

Settings come from environment variables, optionally placed in a ``.env``
file in the project root:

```env
# .env
SITEMAP_DIFF_EMAIL=webmaster@example.com
SITEMAP_DIFF_TIMEOUT=15
SITEMAP_DIFF_LOG_LEVEL=warn
```

The variables are loaded via *python-dotenv*. AWS credentials and the
default region (``AWS_REGION`` / ``AWS_DEFAULT_REGION``) are read by boto3
itself from the same environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load variables from .env if present; silently ignore missing file
load_dotenv()

DEFAULT_EMAIL = "contact@example.com"
DEFAULT_TIMEOUT = 30
DEFAULT_LOG_LEVEL = "info"


def _default_user_agent(email: str) -> str:
    return f"sitemap-diff (+{email})"


@dataclass
class Settings:
    """Configuration shared by the fetcher and the CLI."""

    user_agent: str = _default_user_agent(DEFAULT_EMAIL)
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``SITEMAP_DIFF_*`` environment variables."""
        email = os.getenv("SITEMAP_DIFF_EMAIL", DEFAULT_EMAIL)
        user_agent = os.getenv("SITEMAP_DIFF_USER_AGENT") or _default_user_agent(email)

        raw_timeout = os.getenv("SITEMAP_DIFF_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ValueError(f"SITEMAP_DIFF_TIMEOUT must be a number, got {raw_timeout!r}") from e
        if timeout <= 0:
            raise ValueError("SITEMAP_DIFF_TIMEOUT must be positive")

        return cls(
            user_agent=user_agent,
            timeout=timeout,
            log_level=os.getenv("SITEMAP_DIFF_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
