from __future__ import annotations

from abc import ABC, abstractmethod

from studio_desk.domain.entities.dance_class import DanceClass


class ClassCatalogPort(ABC):
    @abstractmethod
    def list_classes(self) -> list[DanceClass]:
        """Return every class on the schedule. Raises UpstreamUnavailable on failure."""
        raise NotImplementedError
