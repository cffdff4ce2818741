"""Lifecycle of remote-stored files attached to content documents.

Ordering rule: a new object is always stored before the object it replaces
is deleted, and superseded objects are only deleted once the document write
that stops referencing them has succeeded. Deletes are best-effort: their
failures are reported in a :class:`CleanupReport` and logged, never raised.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Collection, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from wellness_api.core.errors import AssetStoreError, AssetUploadFailed, RequiredAssetMissing, ValidationError
from wellness_api.domains.content.entities import AssetKind, AssetReference, AssetSlotConfig, UploadedAsset
from wellness_api.infrastructure.storage.base import RemoteAssetStore

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {"jpeg", "jpg", "png", "gif", "webp"}
IMAGE_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

DEFAULT_MAX_BYTES = {
    AssetKind.IMAGE: 5 * 1024 * 1024,
    AssetKind.RAW: 20 * 1024 * 1024,
    AssetKind.VIDEO: 200 * 1024 * 1024,
}


class SlotAction(enum.Enum):
    UPLOAD = "upload"
    CLEAR = "clear"
    KEEP = "keep"
    EMPTY = "empty"


def decide_slot_action(
    existing: Optional[AssetReference],
    incoming: Optional[UploadedAsset],
    explicit_clear: bool,
) -> SlotAction:
    """Decision table for one slot, evaluated top to bottom."""
    if incoming is not None:
        return SlotAction.UPLOAD
    if existing is not None and explicit_clear:
        return SlotAction.CLEAR
    if existing is not None:
        return SlotAction.KEEP
    return SlotAction.EMPTY


def validate_upload(slot: AssetSlotConfig, upload: UploadedAsset) -> None:
    """Reject files whose type or size does not fit the slot"""
    if upload.size == 0:
        raise ValidationError(f"{slot.label} file is empty.")

    max_bytes = slot.max_bytes or DEFAULT_MAX_BYTES[slot.kind]
    if upload.size > max_bytes:
        raise ValidationError(f"{slot.label} file exceeds the {max_bytes // (1024 * 1024)}MB limit.")

    content_type = (upload.content_type or "").lower()
    if slot.kind == AssetKind.IMAGE:
        if upload.extension not in IMAGE_EXTENSIONS or content_type not in IMAGE_MIME_TYPES:
            raise ValidationError("Invalid file type. Only images (jpeg, jpg, png, gif, webp) are allowed.")
    elif slot.kind == AssetKind.RAW:
        if upload.extension != "pdf" or content_type != "application/pdf":
            raise ValidationError("Invalid file type. Only PDF files are allowed.")
    elif slot.kind == AssetKind.VIDEO:
        if not content_type.startswith("video/"):
            raise ValidationError("Invalid file type. Only video files are allowed.")


@dataclass(frozen=True)
class AssetCleanupFailed:
    """Diagnostic for a best-effort delete that did not go through"""
    slot: str
    remote_key: str
    kind: AssetKind
    reason: str


@dataclass
class CleanupReport:
    attempted: List[Tuple[str, str]] = field(default_factory=list)
    failures: List[AssetCleanupFailed] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def merge(self, other: "CleanupReport") -> "CleanupReport":
        self.attempted.extend(other.attempted)
        self.failures.extend(other.failures)
        return self


@dataclass
class AssetChangeSet:
    """Outcome of staging every slot of one create or update"""
    references: Dict[str, Optional[AssetReference]] = field(default_factory=dict)
    uploaded: Dict[str, AssetReference] = field(default_factory=dict)
    superseded: Dict[str, AssetReference] = field(default_factory=dict)
    slots: Dict[str, AssetSlotConfig] = field(default_factory=dict)

    def apply_to(self, document) -> None:
        for name, reference in self.references.items():
            self.slots[name].write(document, reference)


class AssetLifecycleManager:
    """Keeps documents' asset references and the remote store consistent."""

    def __init__(self, store: RemoteAssetStore):
        self.store = store

    async def upsert_asset(
        self,
        existing: Optional[AssetReference],
        incoming: Optional[UploadedAsset],
        explicit_clear: bool,
        slot: AssetSlotConfig,
    ) -> Optional[AssetReference]:
        """Apply the decision table to one slot, cleaning up immediately."""
        action = decide_slot_action(existing, incoming, explicit_clear)

        if action == SlotAction.UPLOAD:
            validate_upload(slot, incoming)
            reference = await self._upload(slot, incoming)
            if existing is not None:
                await self._destroy_all([(slot, existing)])
            return reference

        if action == SlotAction.CLEAR:
            await self._destroy_all([(slot, existing)])
            return None

        return existing

    async def prepare(
        self,
        slots: Sequence[AssetSlotConfig],
        existing: Mapping[str, Optional[AssetReference]],
        incoming: Mapping[str, UploadedAsset],
        clears: Collection[str],
        is_new: bool,
    ) -> AssetChangeSet:
        """Stage all slots of a document before it is written.

        Uploads run concurrently. Nothing is deleted here: superseded objects
        are returned for :meth:`commit`, new objects for :meth:`rollback`.

        Raises:
            RequiredAssetMissing: a mandatory slot is empty on create.
            ValidationError: an incoming file does not fit its slot.
            AssetUploadFailed: the store rejected an upload; objects already
                stored for this request are destroyed before raising.
        """
        changes = AssetChangeSet(slots={slot.name: slot for slot in slots})
        actions: Dict[str, SlotAction] = {}

        for slot in slots:
            current = existing.get(slot.name)
            upload = incoming.get(slot.name)
            action = decide_slot_action(current, upload, slot.name in clears)
            if is_new and slot.required_on_create and action == SlotAction.EMPTY:
                raise RequiredAssetMissing(slot.name, slot.label)
            if action == SlotAction.UPLOAD:
                validate_upload(slot, upload)
            actions[slot.name] = action

        to_upload = [slot for slot in slots if actions[slot.name] == SlotAction.UPLOAD]
        results = await asyncio.gather(
            *(self._upload(slot, incoming[slot.name]) for slot in to_upload),
            return_exceptions=True,
        )

        failure: Optional[BaseException] = None
        for slot, result in zip(to_upload, results):
            if isinstance(result, BaseException):
                failure = failure or result
            else:
                changes.uploaded[slot.name] = result

        if failure is not None:
            await self.rollback(changes)
            raise failure

        for slot in slots:
            action = actions[slot.name]
            current = existing.get(slot.name)
            if action == SlotAction.UPLOAD:
                changes.references[slot.name] = changes.uploaded[slot.name]
                if current is not None:
                    changes.superseded[slot.name] = current
            elif action == SlotAction.CLEAR:
                changes.references[slot.name] = None
                changes.superseded[slot.name] = current
            else:
                changes.references[slot.name] = current

        return changes

    async def commit(self, changes: AssetChangeSet) -> CleanupReport:
        """Delete objects the written document no longer references"""
        return await self._destroy_all(
            (changes.slots[name], reference) for name, reference in changes.superseded.items()
        )

    async def rollback(self, changes: AssetChangeSet) -> CleanupReport:
        """Delete objects uploaded for a write that did not happen"""
        report = await self._destroy_all(
            (changes.slots[name], reference) for name, reference in changes.uploaded.items()
        )
        if report.attempted:
            logger.info("Rolled back %d uploaded asset(s)", len(report.attempted))
        return report

    async def release(self, slots: Sequence[AssetSlotConfig], document) -> CleanupReport:
        """Delete every populated slot of a deleted document"""
        pairs = []
        for slot in slots:
            reference = slot.read(document)
            if reference is not None:
                pairs.append((slot, reference))
        return await self._destroy_all(pairs)

    async def _upload(self, slot: AssetSlotConfig, upload: UploadedAsset) -> AssetReference:
        try:
            reference = await self.store.put(
                upload.content,
                folder=slot.folder,
                kind=slot.kind,
                filename=upload.filename,
                content_type=upload.content_type,
            )
        except AssetStoreError as e:
            logger.error("Upload of '%s' to folder '%s' failed: %s", slot.name, slot.folder, e)
            raise AssetUploadFailed(slot.name, str(e)) from e
        logger.debug("Stored '%s' as %s", slot.name, reference.remote_key)
        return reference

    async def _destroy_all(self, pairs: Iterable[Tuple[AssetSlotConfig, AssetReference]]) -> CleanupReport:
        report = CleanupReport()
        targets = [(slot, reference) for slot, reference in pairs if reference.remote_key]
        if not targets:
            return report

        results = await asyncio.gather(
            *(self.store.destroy(reference.remote_key, slot.kind) for slot, reference in targets),
            return_exceptions=True,
        )
        for (slot, reference), result in zip(targets, results):
            report.attempted.append((slot.name, reference.remote_key))
            if isinstance(result, Exception):
                failure = AssetCleanupFailed(
                    slot=slot.name,
                    remote_key=reference.remote_key,
                    kind=slot.kind,
                    reason=str(result) or result.__class__.__name__,
                )
                report.failures.append(failure)
                logger.warning(
                    "Best-effort delete of %s (%s) failed: %s",
                    failure.remote_key, failure.slot, failure.reason,
                )
        return report
