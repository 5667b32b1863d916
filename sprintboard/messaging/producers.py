import json
import logging
from typing import Any, Dict, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.admin import AIOKafkaAdminClient, NewTopic

from sprintboard.core.config import settings

logger = logging.getLogger(__name__)

MEMBER_EVENTS_TOPIC = "member_events"

# Список топиков, которые нужно создать
KAFKA_TOPICS = [MEMBER_EVENTS_TOPIC]

producer: Optional[AIOKafkaProducer] = None


async def create_topics():
    """
    Создает необходимые топики в Kafka, если они не существуют
    """
    admin_client = AIOKafkaAdminClient(bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS)
    try:
        await admin_client.start()

        existing_topics = await admin_client.list_topics()
        topics_to_create = [
            NewTopic(name=topic, num_partitions=1, replication_factor=1)
            for topic in KAFKA_TOPICS
            if topic not in existing_topics
        ]

        if topics_to_create:
            logger.info("Creating Kafka topics: %s", [t.name for t in topics_to_create])
            await admin_client.create_topics(topics_to_create)
        else:
            logger.info("All Kafka topics already exist")
    except Exception as e:
        logger.error("Failed to create Kafka topics: %s", e)
    finally:
        await admin_client.close()


async def get_kafka_producer() -> AIOKafkaProducer:
    """
    Возвращает инстанс Kafka-продюсера или создает новый, если его нет
    """
    global producer
    if producer is None:
        producer = AIOKafkaProducer(
            bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
            value_serializer=lambda v: json.dumps(v).encode("utf-8"),
        )
        await producer.start()
    return producer


async def close_kafka_producer():
    """
    Закрывает соединение с Kafka
    """
    global producer
    if producer is not None:
        await producer.stop()
        producer = None


async def send_event(topic: str, event_type: str, data: Dict[str, Any]) -> bool:
    """
    Отправляет событие в Kafka. Ошибки только логируются: событие побочное
    и не должно откатывать уже сохраненные изменения.
    """
    if settings.TESTING:
        logger.debug("Kafka disabled in testing, dropping %s event", event_type)
        return False

    try:
        kafka_producer = await get_kafka_producer()
        await kafka_producer.send_and_wait(topic, {"event_type": event_type, "data": data})
        logger.info("Sent event to topic %s: %s", topic, event_type)
        return True
    except Exception as e:
        logger.error("Failed to send Kafka event %s: %s", event_type, e)
        return False
