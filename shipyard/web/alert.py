"""Alert webhook client."""
import asyncio
import logging
import aiohttp
from typing import Any, Dict, Optional
from yarl import URL
from .error import AuthenticationError, NotFoundError, WebhookError
from .session import SessionManager

logger = logging.getLogger(__name__)


class AlertClient(SessionManager):
    """Posts `{title, category, data}` alerts to a webhook.

    Without a URL every alert is only logged.
    """

    url: Optional[URL]

    def __init__(self, url: str = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.url = URL(url) if url else None

    @property
    def enabled(self) -> bool:
        return self.url is not None

    async def alert(self, title: str, category: str, data: Dict[str, Any] = None) -> bool:
        """Send one alert. Returns whether the webhook accepted it."""
        if not self.enabled:
            logger.debug(f"Alert webhook disabled, dropping alert: {title}")
            return False
        payload = {"title": title, "category": category, "data": data or {}}
        try:
            await self.post(self.url, payload)
        except (aiohttp.ClientError, WebhookError, AuthenticationError, NotFoundError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to send alert '{title}' ({category}): {e}")
            return False
        return True
