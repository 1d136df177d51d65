"""Firestore collections and document field names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written. Collection names are configurable
(Settings.collection_*); field names below are the single source of truth
for the document shapes.

Example:
    from app.infrastructure.firebase.collections import SiteFields

    await db.collection("sites").document(site_id).update({
        SiteFields.TOTAL_ROOMS: 20,
        SiteFields.TOTAL_CAPACITY: 80,
    })
"""

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


class SiteFields:
    NAME = "name"
    TOTAL_ROOMS = "totalRooms"
    TOTAL_CAPACITY = "totalCapacity"
    ADMIN_IDS = "adminIds"


class RoomFields:
    NUMBER = "number"
    SITE_ID = "siteId"
    GENDER = "gender"
    CAPACITY = "roomCapacity"
    CURRENT_OCCUPANCY = "currentOccupancy"
    OCCUPANT_REFS = "occupantRefs"


class WorkerFields:
    FULL_NAME = "fullName"
    NATIONAL_ID = "nationalId"
    PHONE = "phone"
    GENDER = "gender"
    AGE = "age"
    BIRTH_YEAR = "birthYear"
    SITE_ID = "siteId"
    ROOM_NUMBER = "roomNumber"
    DORMITORY_LABEL = "dormitoryLabel"
    STATUS = "status"
    ENTRY_DATE = "entryDate"
    EXIT_DATE = "exitDate"
    EXIT_REASON = "exitReason"
