from __future__ import annotations

from enum import StrEnum


class UserType(StrEnum):
    TEACHER = "teacher"
    STUDENT = "student"


class ConnectionState(StrEnum):
    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class RegistrationState(StrEnum):
    UNREGISTERED = "unregistered"
    REGISTERING = "registering"
    REGISTERED = "registered"


class LoadState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"  # request not sent or rejected, or no answer before the deadline
