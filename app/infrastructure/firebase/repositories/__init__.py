"""Firestore-backed repository implementations (one per collection)."""

from app.infrastructure.firebase.repositories.room_repo_firestore import (
    FirestoreRoomRepository,
)
from app.infrastructure.firebase.repositories.site_repo_firestore import (
    FirestoreSiteRepository,
)
from app.infrastructure.firebase.repositories.worker_repo_firestore import (
    FirestoreWorkerRepository,
)

__all__ = [
    "FirestoreRoomRepository",
    "FirestoreSiteRepository",
    "FirestoreWorkerRepository",
]
