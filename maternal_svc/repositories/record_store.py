"""
Append-only, per-patient store for health records.

Each patient's records live under their own key (``healthRecords_<patientId>``)
as one JSON array, newest first. An append prepends the new record and replaces
the whole array in a single write. Every load reads the stored array, so all
stores sharing a database see the latest successful write.

Architecture:
    RecordStore is the data access layer for health records.
    It should be obtained via maternal_svc.core.dependencies.get_record_store().

There is no update or delete: a correction is a new record.
"""
import logging
import sqlite3
from typing import List, Tuple

from pydantic import ValidationError as PydanticValidationError

from maternal_svc.core.exceptions import InvariantViolation, PersistenceError
from maternal_svc.repositories.base import Database
from maternal_svc.schemas.health_record import HealthRecord, health_record_list_adapter

logger = logging.getLogger(__name__)

# Bump when the persisted record shape changes; older blobs are refused, not misread
RECORD_FORMAT_VERSION = 1


class RecordStore:
    """
    Durable per-patient record collections.

    Writes are synchronous: a successful append is visible to the next load.
    """

    def __init__(self, db: Database, key_prefix: str = "healthRecords_"):
        """
        Initialize the record store.

        Args:
            db: Key-value database the collections are persisted in.
            key_prefix: Prefix of the per-patient storage key.
        """
        self._db = db
        self._key_prefix = key_prefix

    def key_for(self, patient_id: str) -> str:
        """Storage key of a patient's collection."""
        return f"{self._key_prefix}{patient_id}"

    def load(self, patient_id: str) -> List[HealthRecord]:
        """
        Get all records of a patient, newest first.

        A patient with no stored collection simply has no records.

        Raises:
            PersistenceError: If the stored collection cannot be read or decoded.
        """
        return list(self._read(patient_id))

    def append(self, patient_id: str, record: HealthRecord) -> HealthRecord:
        """
        Add a record at the head of a patient's collection and persist it.

        Args:
            patient_id: Patient whose collection receives the record.
            record: The new record; must belong to ``patient_id``.

        Returns:
            The appended record.

        Raises:
            InvariantViolation: If the record belongs to a different patient.
            PersistenceError: If the write fails. The collection is left unchanged.
        """
        if record.patient_id != patient_id:
            raise InvariantViolation(
                f"Record belongs to patient '{record.patient_id}', not '{patient_id}'",
                record_id=record.id,
            )

        key = self.key_for(patient_id)
        updated = (record,) + tuple(self.load(patient_id))
        blob = health_record_list_adapter.dump_json(list(updated), by_alias=True).decode("utf-8")

        try:
            self._db.put(key, blob, RECORD_FORMAT_VERSION)
        except sqlite3.Error as e:
            logger.error(
                f"Failed to persist record collection: {e}",
                exc_info=True,
                extra={"key": key, "record_id": record.id},
            )
            raise PersistenceError(operation="append", key=key) from e

        logger.info(
            "Record appended",
            extra={"key": key, "record_id": record.id, "record_type": record.type, "total": len(updated)},
        )
        return record

    def _read(self, patient_id: str) -> Tuple[HealthRecord, ...]:
        key = self.key_for(patient_id)

        try:
            stored = self._db.get(key)
        except sqlite3.Error as e:
            logger.error(f"Failed to read record collection: {e}", exc_info=True, extra={"key": key})
            raise PersistenceError(operation="load", key=key) from e

        if stored is None:
            logger.debug("No stored records", extra={"key": key})
            return ()

        blob, format_version = stored
        if format_version != RECORD_FORMAT_VERSION:
            logger.error(
                "Unsupported record format version",
                extra={"key": key, "format_version": format_version},
            )
            raise PersistenceError(
                operation="load",
                key=key,
                detail=f"Unsupported record format version {format_version}",
            )

        try:
            records = health_record_list_adapter.validate_json(blob)
        except PydanticValidationError as e:
            logger.error(f"Stored record collection is corrupt: {e}", extra={"key": key})
            raise PersistenceError(operation="load", key=key, detail="Stored record collection is corrupt") from e

        foreign = [r.id for r in records if r.patient_id != patient_id]
        if foreign:
            raise InvariantViolation(
                f"Collection '{key}' holds records of another patient",
                record_id=foreign[0],
            )

        return tuple(records)
