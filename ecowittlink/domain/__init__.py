"""
This package holds the gateway's runtime state: the observation cache that
keeps the last decoded value of every channel and the last raw payload.
"""
from ecowittlink.domain.observations import Observation, ObservationCache, DEFAULT_STALENESS_SECONDS

__all__ = ["Observation", "ObservationCache", "DEFAULT_STALENESS_SECONDS"]
