"""Demo records written into a freshly created database."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from devtrack.storage.record_store import RecordStore

log = logging.getLogger(__name__)

__all__ = ["DEMO_RECORDS", "seed_demo_data"]

DEMO_RECORDS: Mapping[str, Sequence[Mapping[str, Any]]] = MappingProxyType(
    {
        "clients": (
            {"id": "CLI-100", "name": "Internal Dev Division", "code": "100", "address": "Bratislava"},
            {"id": "CLI-200", "name": "External Services Ltd.", "code": "200", "address": "Košice"},
        ),
        "customers": (
            {
                "id": "CUST-001",
                "clientId": "CLI-100",
                "name": "Alza.sk s.r.o.",
                "address": "Bottova 6654/7, 811 09 Bratislava",
            },
            {
                "id": "CUST-002",
                "clientId": "CLI-200",
                "name": "Slovenská sporiteľňa, a.s.",
                "address": "Tomášikova 48, 832 37 Bratislava",
            },
        ),
        "tickets": (
            {
                "id": "TIC-101",
                "clientId": "CLI-100",
                "customerId": "CUST-001",
                "sapId": "80001234",
                "sapModule": "SD",
                "title": "Implementácia platobnej brány",
                "description": "Prepojenie s TatraPay a CardPay.",
                "priority": "Vysoká",
                "status": "V riešení",
                "budget": 80,
                "estimation": 100,
                "date": "2024-06-30",
                "createdAt": "2024-03-01",
            },
        ),
        "worklogs": (
            {
                "id": "LOG-001",
                "clientId": "CLI-100",
                "customerId": "CUST-001",
                "ticketId": "TIC-101",
                "date": "2024-03-10",
                "hours": 4,
                "description": "Analýza API dokumentácie",
            },
        ),
    }
)


def seed_demo_data(store: RecordStore) -> bool:
    """Write :data:`DEMO_RECORDS` if ``store`` was created by this start. Returns whether it did."""

    if not store.is_new:
        return False
    for table, records in DEMO_RECORDS.items():
        store.bulk_put(table, records)
    log.info("Seeded demo data into %s", store.path)
    return True
