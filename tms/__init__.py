"""
Transport management persistence core.

Generic repositories, seeding and company reports over the transport
domain (companies, drivers, qualifications, vehicles, clients and
transport services).
"""

__version__ = "0.1.0"
