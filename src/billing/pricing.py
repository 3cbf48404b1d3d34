"""
Service Pricing Resolver

Maps a service id to its flat price, display name and billing day.
Unknown ids resolve to None; a change log entry can outlive the service
row it points at, and callers are expected to cope with that.
"""

from typing import Iterable, Optional

from src.models.records import Service
from src.models.report import ServicePrice


class ServicePricingResolver:
    """Id-keyed lookup over one snapshot's services."""

    def __init__(self, services: Iterable[Service]):
        self._services: dict[str, Service] = {}
        for service in services:
            # First row wins when an id is duplicated
            self._services.setdefault(service.id, service)

    def resolve(self, service_id: Optional[str]) -> Optional[ServicePrice]:
        if service_id is None:
            return None
        service = self._services.get(service_id)
        if service is None:
            return None
        return ServicePrice(
            service_id=service.id,
            name=service.name,
            price=service.price,
            pay_day=service.pay_day,
        )

    def pay_day_of(self, service_id: Optional[str]) -> Optional[int]:
        """Billing anchor day of month, or None if unknown."""
        resolved = self.resolve(service_id)
        return resolved.pay_day if resolved else None

    @property
    def service_names(self) -> list[str]:
        """Known service names in source order, skipping unnamed rows."""
        return [s.name for s in self._services.values() if s.name]
