"""Telemetry source ABC. Implementations must provide run()."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TelemetrySource(ABC):
    """Abstract base for backends that report statistics about one profile."""

    @abstractmethod
    def run(self, profile_dir: str, mode: str) -> dict | list:
        """Query one profile.

        Args:
            profile_dir: The profile's directory, used as working context.
            mode: One of ``QueryMode.ALL``.

        Returns:
            The decoded JSON object or array reported by the backend.

        Raises:
            SourceError: the invocation failed or emitted no usable JSON.
        """

    @abstractmethod
    def get_backend_name(self) -> str:
        """Return the backend identifier."""
