"""
Runtime pieces of the gateway daemon: settings, logging, the poll worker,
the snapshot request protocol and the optional HTTP status API.
"""
from ecowittlink.gateway_app.api import create_app
from ecowittlink.gateway_app.config import GatewaySettings, load_settings
from ecowittlink.gateway_app.jobs import JobManager, PollWorker
from ecowittlink.gateway_app.protocol import RequestHandler, respond

__all__ = ["create_app", "load_settings", "respond", "GatewaySettings", "JobManager", "PollWorker", "RequestHandler"]
