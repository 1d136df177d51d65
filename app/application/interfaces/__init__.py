"""Application interfaces (ports): store accessor and repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import (
    Document,
    IDocumentCollection,
    IRoomRepository,
    ISiteRepository,
    IWorkerRepository,
    QueryFilter,
    Unsubscribe,
)

__all__ = [
    "Document",
    "IDocumentCollection",
    "IRoomRepository",
    "ISiteRepository",
    "IWorkerRepository",
    "QueryFilter",
    "Unsubscribe",
]
