"""Firestore integration: REST client, collection accessor, repositories."""

from app.infrastructure.firebase.accessor import FirestoreCollection
from app.infrastructure.firebase.client import (
    check_connection,
    close_firebase,
    get_firestore_client,
    init_firebase,
)

__all__ = [
    "FirestoreCollection",
    "check_connection",
    "close_firebase",
    "get_firestore_client",
    "init_firebase",
]
