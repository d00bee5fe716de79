"""
Google Sheets feed retrieval through public relays.

The GViz endpoint is fetched through an ordered list of strategies. Each
strategy wraps the sheet URL in a third-party relay; the first one that
returns text wins. Strategies run one at a time, never in parallel.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import quote

import httpx
import structlog

from config.feed import FeedConfig
from exceptions import RetrievalError

logger = structlog.get_logger(__name__)


class RelayPayloadError(ValueError):
    """Relay answered but without the payload we need."""
    pass


@dataclass(frozen=True)
class RelayStrategy:
    """How to reach the feed through one relay and read its answer."""
    name: str
    build_url: Callable[[str], str]
    extract: Callable[[httpx.Response], str]


def _allorigins_url(target: str) -> str:
    return f"https://api.allorigins.win/get?url={quote(target, safe='')}"


def _allorigins_extract(response: httpx.Response) -> str:
    """AllOrigins wraps the body in JSON: {"contents": "...", "status": {...}}."""
    data = response.json()
    contents = data.get("contents") if isinstance(data, dict) else None
    if not isinstance(contents, str) or not contents:
        raise RelayPayloadError("AllOrigins response has no text contents")
    return contents


def _corsproxy_url(target: str) -> str:
    return f"https://corsproxy.io/?{quote(target, safe='')}"


def _plain_text(response: httpx.Response) -> str:
    if not response.text:
        raise RelayPayloadError("Empty response body")
    return response.text


STRATEGIES: dict[str, RelayStrategy] = {
    "allorigins": RelayStrategy("allorigins", _allorigins_url, _allorigins_extract),
    "corsproxy": RelayStrategy("corsproxy", _corsproxy_url, _plain_text),
    "direct": RelayStrategy("direct", lambda target: target, _plain_text),
}


def resolve_strategies(names: tuple[str, ...] | list[str]) -> list[RelayStrategy]:
    """
    Look up strategies by name, keeping the configured order.

    Raises:
        ValueError: If a name is not a known strategy
    """
    unknown = [n for n in names if n not in STRATEGIES]
    if unknown:
        raise ValueError(
            f"Unknown feed strategies {unknown}; valid: {sorted(STRATEGIES)}"
        )
    return [STRATEGIES[n] for n in names]


def with_cache_buster(url: str, now_ms: Optional[int] = None) -> str:
    """Append a timestamp parameter so relays never serve a cached copy."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}_={now_ms}"


class FeedRetriever:
    """
    Fetches the raw GViz text with fallback across strategies.

    Usage:
        retriever = FeedRetriever(FeedConfig.from_settings())
        raw_text = await retriever.retrieve()
        retriever.preview  # first characters of raw_text
    """

    def __init__(
        self,
        config: FeedConfig,
        client: Optional[httpx.AsyncClient] = None,
        strategies: Optional[list[RelayStrategy]] = None,
    ):
        self.config = config
        self.strategies = strategies if strategies is not None else resolve_strategies(config.strategies)
        self._client = client
        self._preview: Optional[str] = None

    @property
    def preview(self) -> Optional[str]:
        """Diagnostic preview of the last raw text obtained (read-only)."""
        return self._preview

    async def retrieve(self, feed_url: Optional[str] = None) -> str:
        """
        Get the raw feed text from the first strategy that succeeds.

        Args:
            feed_url: Sheet URL to fetch (defaults to the configured tab)

        Returns:
            Raw response text (still wrapped in the GViz envelope)

        Raises:
            RetrievalError: If every strategy failed
        """
        feed_url = feed_url or self.config.feed_url

        if self._client is not None:
            return await self._retrieve_with(self._client, feed_url)

        async with httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        ) as client:
            return await self._retrieve_with(client, feed_url)

    async def _retrieve_with(self, client: httpx.AsyncClient, feed_url: str) -> str:
        failures: list[dict] = []

        for strategy in self.strategies:
            request_url = strategy.build_url(with_cache_buster(feed_url))
            try:
                response = await client.get(request_url)
                if not response.is_success:
                    raise RelayPayloadError(f"HTTP {response.status_code}")
                raw_text = strategy.extract(response)
                if not isinstance(raw_text, str) or not raw_text:
                    raise RelayPayloadError("Strategy returned no text")
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(
                    "feed_strategy_failed",
                    strategy=strategy.name,
                    error=str(e),
                    error_type=type(e).__name__
                )
                failures.append({"strategy": strategy.name, "error": str(e)})
                continue

            self._remember_preview(raw_text)
            logger.info(
                "feed_retrieved",
                strategy=strategy.name,
                length=len(raw_text),
                failed_before=len(failures)
            )
            return raw_text

        logger.error("feed_all_strategies_failed", failures=failures)
        raise RetrievalError(failures)

    def _remember_preview(self, raw_text: str) -> None:
        limit = self.config.preview_length
        if len(raw_text) > limit:
            self._preview = raw_text[:limit] + "..."
        else:
            self._preview = raw_text
