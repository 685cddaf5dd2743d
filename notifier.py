"""
Change notifications.

After a successful mutation the API publishes a small JSON event
(``{"id", "event", "timestamp"}``) to a Kafka topic. Publishing is
best-effort from the caller's point of view: failures are logged and
raised as NotificationError, and the HTTP layer never lets them change
the response.
"""

import json
import logging
import time
from abc import ABC, abstractmethod

from kafka import KafkaProducer
from kafka.errors import KafkaError

from errors import NotificationError
from models import CompanyEvent

logger = logging.getLogger(__name__)

SEND_TIMEOUT_SECONDS = 10


class EventNotifier(ABC):
    """Abstract base class for change event publishers."""

    @abstractmethod
    def send(self, event: CompanyEvent) -> None:
        """
        Publish an event. The timestamp is assigned here, at send time.

        Raises:
            NotificationError: the event could not be delivered
        """
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class KafkaNotifier(EventNotifier):
    """Synchronous Kafka producer for company change events."""

    def __init__(self, hosts: str, topic: str):
        self.hosts = [h.strip() for h in hosts.split(",") if h.strip()]
        self.topic = topic
        self.producer = KafkaProducer(bootstrap_servers=self.hosts)

    def send(self, event: CompanyEvent) -> None:
        event = event.model_copy(update={"timestamp": int(time.time())})
        data = json.dumps(event.model_dump(mode="json")).encode("utf-8")

        try:
            self.producer.send(self.topic, value=data).get(timeout=SEND_TIMEOUT_SECONDS)
        except KafkaError as e:
            logger.error(f"Kafka send failed (topic={self.topic}, event={event.event.value}, id={event.id}): {e}")
            raise NotificationError(str(e)) from e

        logger.info(f"Notification sent to kafka: topic={self.topic} message={data.decode('utf-8')}")

    def close(self) -> None:
        self.producer.close()
