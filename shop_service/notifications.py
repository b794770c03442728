# shop_service/notifications.py
"""Merchant notifications about new orders.

Gateways deliver one message and report an outcome; they never raise to the
caller. The dispatcher runs each delivery as a detached task so checkout never
waits on the merchant channel. There is no retry and no queue: an outcome only
ever ends up in the log.
"""
import asyncio
import json
from typing import Optional, Set

import aio_pika
import httpx
import structlog
from pydantic import BaseModel

from shop_service.config import Settings
from shop_service.errors import NotificationFailure

logger = structlog.get_logger(__name__)


class OrderNotice(BaseModel):
    order_id: int
    user_id: str
    display_name: Optional[str] = None
    phone: Optional[str] = None
    total: int
    item_count: int

    def as_text(self) -> str:
        lines = [
            f"New order #{self.order_id}",
            f"Customer: {self.display_name or 'no name'} ({self.user_id})",
            f"Phone: {self.phone or 'not given'}",
            f"Items: {self.item_count}",
            f"Total: {self.total}",
        ]
        return "\n".join(lines)


class NotificationOutcome(BaseModel):
    delivered: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "NotificationOutcome":
        return cls(delivered=True)

    @classmethod
    def failed(cls, reason: str) -> "NotificationOutcome":
        return cls(delivered=False, reason=reason)


class NotificationGateway:
    async def notify(self, notice: OrderNotice) -> NotificationOutcome:
        raise NotImplementedError


class LogGateway(NotificationGateway):
    """Used when no merchant channel is configured."""

    async def notify(self, notice: OrderNotice) -> NotificationOutcome:
        logger.info("order_notice", **notice.model_dump())
        return NotificationOutcome.ok()


class TelegramGateway(NotificationGateway):
    API_URL = "https://api.telegram.org/bot{token}/sendMessage"

    def __init__(self, client: httpx.AsyncClient, bot_token: str, chat_id: str):
        self.client = client
        self.bot_token = bot_token
        self.chat_id = chat_id

    async def _send(self, text: str):
        url = self.API_URL.format(token=self.bot_token)
        try:
            response = await self.client.post(url, json={"chat_id": self.chat_id, "text": text})
        except httpx.HTTPError as e:
            raise NotificationFailure(f"telegram unreachable: {e}") from e
        if response.status_code != 200:
            raise NotificationFailure(f"telegram returned {response.status_code}: {response.text[:200]}")

    async def notify(self, notice: OrderNotice) -> NotificationOutcome:
        try:
            await self._send(notice.as_text())
        except NotificationFailure as e:
            return NotificationOutcome.failed(e.message)
        return NotificationOutcome.ok()


class RabbitGateway(NotificationGateway):
    """Publishes the notice as JSON onto a durable queue for a bot worker to pick up."""

    def __init__(self, url: str, queue: str = "order_events"):
        self.url = url
        self.queue = queue

    async def notify(self, notice: OrderNotice) -> NotificationOutcome:
        body = json.dumps({"event": "order_created", **notice.model_dump()}).encode()
        try:
            connection = await aio_pika.connect_robust(self.url)
            async with connection:
                channel = await connection.channel()
                await channel.declare_queue(self.queue, durable=True)
                await channel.default_exchange.publish(
                    aio_pika.Message(
                        body=body,
                        content_type="application/json",
                        delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
                    ),
                    routing_key=self.queue,
                )
        except Exception as e:
            return NotificationOutcome.failed(f"rabbitmq publish failed: {e}")
        return NotificationOutcome.ok()


def build_gateway(settings: Settings, client: httpx.AsyncClient) -> NotificationGateway:
    if settings.bot_token and settings.admin_chat_id:
        return TelegramGateway(client, settings.bot_token, settings.admin_chat_id)
    if settings.rabbitmq_url:
        return RabbitGateway(settings.rabbitmq_url, settings.notify_queue)
    return LogGateway()


class NotificationDispatcher:
    """Fire-and-forget delivery of order notices.

    dispatch() returns at once; the delivery runs as its own task, bounded by
    `timeout`. Failures are logged and dropped. The dispatcher holds a strong
    reference to every running task until it finishes, and drain() waits for
    whatever is still in flight (used on shutdown).
    """

    def __init__(self, gateway: NotificationGateway, timeout: float = 5.0):
        self.gateway = gateway
        self.timeout = timeout
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, notice: OrderNotice) -> asyncio.Task:
        task = asyncio.create_task(self._deliver(notice))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(self, notice: OrderNotice) -> NotificationOutcome:
        try:
            outcome = await asyncio.wait_for(self.gateway.notify(notice), self.timeout)
        except asyncio.TimeoutError:
            outcome = NotificationOutcome.failed(f"timed out after {self.timeout}s")
        except Exception as e:
            logger.exception("order_notification_error", order_id=notice.order_id)
            outcome = NotificationOutcome.failed(str(e) or e.__class__.__name__)

        if outcome.delivered:
            logger.info("order_notification_sent", order_id=notice.order_id)
        else:
            logger.warning("order_notification_failed", order_id=notice.order_id, reason=outcome.reason)
        return outcome

    async def drain(self):
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
