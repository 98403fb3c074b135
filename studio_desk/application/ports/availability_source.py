from __future__ import annotations

from abc import ABC, abstractmethod

from studio_desk.domain.entities.availability import AvailabilityRule


class AvailabilitySourcePort(ABC):
    @abstractmethod
    def load_rules(self) -> list[AvailabilityRule]:
        """
        Read the owner's call-back availability, one rule per row.
        Raises UpstreamUnavailable if the source cannot be reached.
        """
        raise NotImplementedError
