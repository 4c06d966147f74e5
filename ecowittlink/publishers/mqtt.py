from __future__ import annotations

import logging
from typing import Callable, Optional

import paho.mqtt.client as mqtt

from ecowittlink.gateway_app.config import GatewaySettings

MessageHandler = Callable[[bytes], None]


class MqttPublisher:
    """
    Publishes readings under ``<base_topic>/<channel>`` and routes requests.

    Callbacks run on the paho network thread started by ``connect``.
    """

    def __init__(self, settings: GatewaySettings, logger: logging.Logger, client: Optional[mqtt.Client] = None) -> None:
        self.settings = settings
        self.logger = logger
        self.client = client or mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=settings.client_id,
        )
        if settings.broker_username:
            self.client.username_pw_set(settings.broker_username, settings.broker_password)
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_unhandled_message
        self._handlers: dict[str, MessageHandler] = {}

    # ---- helpers ----
    def topic(self, channel: str) -> str:
        return f"{self.settings.base_topic}/{channel}"

    def _on_connect(self, client, userdata, flags, reason_code, properties=None) -> None:
        if reason_code == 0:
            self.logger.info("broker_connected", extra={"details": {"host": self.settings.broker_host}})
            # Subscriptions do not survive a reconnect with a clean session.
            for topic in self._handlers:
                client.subscribe(topic)
        else:
            self.logger.error("broker_connect_failed", extra={"details": {"reason": str(reason_code)}})

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None) -> None:
        self.logger.info("broker_disconnected", extra={"details": {"reason": str(reason_code)}})

    def _on_unhandled_message(self, client, userdata, message) -> None:
        self.logger.warning("topic_handler_missing", extra={"details": {"topic": message.topic}})

    # ---- lifecycle ----
    def connect(self) -> None:
        try:
            self.client.connect(self.settings.broker_host, self.settings.broker_port, self.settings.broker_keepalive)
        except OSError as exc:
            raise ConnectionError(
                f"Could not connect to MQTT broker at {self.settings.broker_host}:{self.settings.broker_port}: {exc}"
            ) from exc
        self.client.loop_start()

    def close(self) -> None:
        self.client.disconnect()
        self.client.loop_stop()

    # ---- publisher ----
    def publish(self, channel: str, payload: str | bytes) -> None:
        topic = self.topic(channel)
        self.logger.debug("publish", extra={"details": {"topic": topic}})
        try:
            info = self.client.publish(topic, payload, qos=0, retain=False)
        except (OSError, ValueError) as exc:
            self.logger.error("publish_failed", extra={"details": {"topic": topic, "error": str(exc)}})
            return
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self.logger.error(
                "publish_failed", extra={"details": {"topic": topic, "error": mqtt.error_string(info.rc)}}
            )

    def subscribe(self, channel: str, on_message: MessageHandler) -> None:
        topic = self.topic(channel)
        self._handlers[topic] = on_message

        def _dispatch(client, userdata, message) -> None:
            self.logger.debug("message_received", extra={"details": {"topic": message.topic}})
            on_message(bytes(message.payload))

        self.client.message_callback_add(topic, _dispatch)
        result, _mid = self.client.subscribe(topic)
        if result == mqtt.MQTT_ERR_NO_CONN:
            self.logger.info("subscribe_deferred", extra={"details": {"topic": topic}})
        elif result != mqtt.MQTT_ERR_SUCCESS:
            self.logger.error(
                "subscribe_failed", extra={"details": {"topic": topic, "error": mqtt.error_string(result)}}
            )
        else:
            self.logger.info("subscribed", extra={"details": {"topic": topic}})
