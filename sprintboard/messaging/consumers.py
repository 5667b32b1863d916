import asyncio
import json
import logging
from typing import Any, Dict

from aiokafka import AIOKafkaConsumer

from sprintboard.core.config import settings
from sprintboard.messaging.producers import MEMBER_EVENTS_TOPIC
from sprintboard.worker.tasks import send_invitation_email

logger = logging.getLogger(__name__)


def handle_member_event(event: Dict[str, Any]) -> None:
    """Обрабатывает одно событие из топика member_events"""
    if event.get("event_type") == "member_invited":
        data = event["data"]
        send_invitation_email.delay(
            to_email=data["email"],
            inviter_name=data.get("inviter_name"),
            inviter_email=data["inviter_email"],
            project_name=data["project_name"],
            role=data["role"],
            project_id=data["project_id"],
        )
    else:
        logger.debug("Ignoring member event %s", event.get("event_type"))


async def consume_member_events():
    """
    Потребляет события участников проектов из Kafka
    """
    consumer = AIOKafkaConsumer(
        MEMBER_EVENTS_TOPIC,
        bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
        group_id="sprintboard_members",
        value_deserializer=lambda m: json.loads(m.decode("utf-8")),
    )

    await consumer.start()
    try:
        async for msg in consumer:
            logger.info("Received member event: %s", msg.value.get("event_type"))
            try:
                handle_member_event(msg.value)
            except Exception:
                logger.exception("Failed to handle member event")
    finally:
        await consumer.stop()


async def start_consumers():
    """
    Запускает все консьюмеры Kafka
    """
    await asyncio.gather(
        consume_member_events(),
    )
