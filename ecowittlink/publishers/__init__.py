from ecowittlink.publishers.mqtt import MqttPublisher

__all__ = ["MqttPublisher"]
