"""Business services built on the generic repositories."""

from tms.services.companies import TransportCompanyService

__all__ = ["TransportCompanyService"]
