"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class StorageBackend(str, Enum):
    POSTGRES = "postgres"
    FILE = "file"


class ResponseFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


class ServiceState(str, Enum):
    STARTING = "starting"
    CONNECTING = "connecting"
    READY = "ready"
    SERVING = "serving"
    DRAINING = "draining"
    STOPPED = "stopped"
    FAILED = "failed"
