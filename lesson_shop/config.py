from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URL = "http://localhost:3000"


@dataclass(slots=True)
class ShopConfig:
    base_url: str = DEFAULT_BASE_URL
    # None: ждём ответа сколько угодно, как и браузерный fetch.
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShopConfig":
        env = os.environ if environ is None else environ
        timeout = env.get("LESSON_SHOP_TIMEOUT")
        return cls(
            base_url=(env.get("LESSON_SHOP_API_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout=float(timeout) if timeout else None,
        )
