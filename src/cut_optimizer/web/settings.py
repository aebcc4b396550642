"""Server settings passed explicitly to the application factory."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServerSettings:
    """Settings for the HTTP service.

    Attributes:
        ip: Address to listen on.
        port: Port to listen on.
        max_content_length: Largest accepted request body in bytes.
        timeout: Seconds a request may take before it is answered with 408.
            The optimizer's budget is capped to this value.
        max_requests: Requests processed concurrently before shedding load.
        workers: Worker processes per optimization.
    """

    ip: str = "127.0.0.1"
    port: int = 3030
    max_content_length: int = 32896
    timeout: float = 30.0
    max_requests: int = 100
    workers: int = 1

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError("Port must be between 1 and 65535")
        if self.max_content_length <= 0:
            raise ValueError("Max content length must be positive")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
        if self.max_requests < 1:
            raise ValueError("Max requests must be at least 1")
        if self.workers < 1:
            raise ValueError("Workers must be at least 1")
