import pytest

from wellness_api.core.errors import AssetUploadFailed, RequiredAssetMissing, ValidationError
from wellness_api.domains.content.assets import (
    AssetLifecycleManager,
    SlotAction,
    decide_slot_action,
    validate_upload,
)
from wellness_api.domains.content.entities import AssetKind, AssetReference, AssetSlotConfig, UploadedAsset
from tests.conftest import PDF_BYTES, PNG_BYTES, FakeAssetStore

THUMBNAIL = AssetSlotConfig("thumbnail", "thumbs", AssetKind.IMAGE, "Thumbnail image")
PDF = AssetSlotConfig("pdf", "pdfs", AssetKind.RAW, "PDF file")
OPTIONAL_THUMBNAIL = AssetSlotConfig("thumbnail", "thumbs", AssetKind.IMAGE, "Thumbnail image", required_on_create=False)

OLD = AssetReference(remote_key="thumbs/old", url="https://cdn.test/thumbs/old")
PNG = UploadedAsset(PNG_BYTES, "cover.png", "image/png")
PDF_UPLOAD = UploadedAsset(PDF_BYTES, "book.pdf", "application/pdf")


class Document:
    thumbnail_key = None
    thumbnail_url = None
    pdf_key = None
    pdf_url = None


@pytest.fixture
def store():
    store = FakeAssetStore()
    store.objects[OLD.remote_key] = b"old"
    return store


@pytest.fixture
def manager(store):
    return AssetLifecycleManager(store)


@pytest.mark.parametrize("existing, incoming, clear, expected", [
    (None, PNG, False, SlotAction.UPLOAD),
    (OLD, PNG, True, SlotAction.UPLOAD),
    (OLD, None, True, SlotAction.CLEAR),
    (OLD, None, False, SlotAction.KEEP),
    (None, None, True, SlotAction.EMPTY),
    (None, None, False, SlotAction.EMPTY),
])
def test_decision_table(existing, incoming, clear, expected):
    assert decide_slot_action(existing, incoming, clear) == expected


class TestValidateUpload:

    def test_accepts_matching_types(self):
        validate_upload(THUMBNAIL, PNG)
        validate_upload(PDF, PDF_UPLOAD)

    def test_rejects_wrong_image_type(self):
        with pytest.raises(ValidationError, match="Only images"):
            validate_upload(THUMBNAIL, UploadedAsset(b"text", "notes.txt", "text/plain"))

    def test_rejects_non_pdf(self):
        with pytest.raises(ValidationError, match="Only PDF"):
            validate_upload(PDF, UploadedAsset(PNG_BYTES, "book.png", "image/png"))

    def test_rejects_empty_file(self):
        with pytest.raises(ValidationError, match="empty"):
            validate_upload(THUMBNAIL, UploadedAsset(b"", "cover.png", "image/png"))

    def test_rejects_oversized_file(self):
        small = AssetSlotConfig("thumbnail", "thumbs", AssetKind.IMAGE, "Thumbnail image", max_bytes=1024 * 1024)
        with pytest.raises(ValidationError, match="limit"):
            validate_upload(small, UploadedAsset(b"x" * (1024 * 1024 + 1), "cover.png", "image/png"))


class TestUpsertAsset:

    async def test_replace_stores_new_object_before_deleting_old(self, manager, store):
        reference = await manager.upsert_asset(OLD, PNG, False, THUMBNAIL)

        assert reference.remote_key in store.objects
        assert store.calls == [("put", "thumbs"), ("destroy", OLD.remote_key)]
        assert OLD.remote_key not in store.objects

    async def test_explicit_clear_deletes_old_object(self, manager, store):
        assert await manager.upsert_asset(OLD, None, True, THUMBNAIL) is None
        assert store.calls == [("destroy", OLD.remote_key)]

    async def test_keep_makes_no_calls(self, manager, store):
        assert await manager.upsert_asset(OLD, None, False, THUMBNAIL) == OLD
        assert store.calls == []

    async def test_failed_cleanup_of_replaced_object_is_not_raised(self, manager, store):
        store.fail_destroys = True
        reference = await manager.upsert_asset(OLD, PNG, False, THUMBNAIL)
        assert reference is not None
        assert store.destroys == [OLD.remote_key]

    async def test_upload_failure_keeps_old_object(self, manager, store):
        store.failing_folders.add("thumbs")

        with pytest.raises(AssetUploadFailed) as excinfo:
            await manager.upsert_asset(OLD, PNG, False, THUMBNAIL)

        assert excinfo.value.slot == "thumbnail"
        assert store.destroys == []
        assert OLD.remote_key in store.objects


class TestPrepare:

    async def test_missing_required_asset_makes_no_remote_calls(self, manager, store):
        with pytest.raises(RequiredAssetMissing) as excinfo:
            await manager.prepare((THUMBNAIL, PDF), {}, {"thumbnail": PNG}, (), is_new=True)

        assert excinfo.value.slot == "pdf"
        assert store.calls == []

    async def test_required_slots_are_only_enforced_on_create(self, manager, store):
        changes = await manager.prepare((THUMBNAIL,), {"thumbnail": None}, {}, (), is_new=False)
        assert changes.references == {"thumbnail": None}
        assert store.calls == []

    async def test_optional_slot_can_stay_empty(self, manager):
        changes = await manager.prepare((OPTIONAL_THUMBNAIL,), {}, {}, (), is_new=True)
        assert changes.references == {"thumbnail": None}

    async def test_invalid_file_is_rejected_before_any_upload(self, manager, store):
        bad_pdf = UploadedAsset(b"text", "book.txt", "text/plain")
        with pytest.raises(ValidationError):
            await manager.prepare((THUMBNAIL, PDF), {}, {"thumbnail": PNG, "pdf": bad_pdf}, (), is_new=True)
        assert store.calls == []

    async def test_superseded_objects_survive_until_commit(self, manager, store):
        changes = await manager.prepare((THUMBNAIL,), {"thumbnail": OLD}, {"thumbnail": PNG}, (), is_new=False)

        assert changes.superseded == {"thumbnail": OLD}
        assert OLD.remote_key in store.objects
        new_reference = changes.references["thumbnail"]

        report = await manager.commit(changes)

        assert report.ok
        assert report.attempted == [("thumbnail", OLD.remote_key)]
        assert OLD.remote_key not in store.objects
        assert new_reference.remote_key in store.objects

    async def test_clear_is_applied_on_commit(self, manager, store):
        changes = await manager.prepare((THUMBNAIL,), {"thumbnail": OLD}, {}, {"thumbnail"}, is_new=False)
        assert changes.references == {"thumbnail": None}
        assert store.calls == []

        await manager.commit(changes)
        assert store.destroys == [OLD.remote_key]

    async def test_failed_upload_destroys_sibling_uploads(self, manager, store):
        store.failing_folders.add("pdfs")

        with pytest.raises(AssetUploadFailed):
            await manager.prepare((THUMBNAIL, PDF), {}, {"thumbnail": PNG, "pdf": PDF_UPLOAD}, (), is_new=True)

        assert sorted(store.puts) == ["pdfs", "thumbs"]
        assert len(store.destroys) == 1
        assert store.objects == {OLD.remote_key: b"old"}

    async def test_rollback_destroys_only_new_uploads(self, manager, store):
        changes = await manager.prepare((THUMBNAIL,), {"thumbnail": OLD}, {"thumbnail": PNG}, (), is_new=False)
        new_key = changes.uploaded["thumbnail"].remote_key

        report = await manager.rollback(changes)

        assert report.attempted == [("thumbnail", new_key)]
        assert OLD.remote_key in store.objects

    async def test_apply_to_writes_slot_columns(self, manager):
        changes = await manager.prepare((THUMBNAIL, PDF), {}, {"thumbnail": PNG, "pdf": PDF_UPLOAD}, (), is_new=True)
        document = Document()

        changes.apply_to(document)

        assert document.thumbnail_key == changes.references["thumbnail"].remote_key
        assert document.pdf_url == changes.references["pdf"].url


class TestRelease:

    async def test_deletes_every_populated_slot(self, manager, store):
        document = Document()
        THUMBNAIL.write(document, OLD)
        PDF.write(document, AssetReference("pdfs/old", "https://cdn.test/pdfs/old"))

        report = await manager.release((THUMBNAIL, PDF), document)

        assert sorted(store.destroys) == ["pdfs/old", "thumbs/old"]
        assert report.ok

    async def test_failures_are_reported_not_raised(self, manager, store):
        store.fail_destroys = True
        document = Document()
        THUMBNAIL.write(document, OLD)

        report = await manager.release((THUMBNAIL, PDF), document)

        assert not report.ok
        assert len(report.attempted) == 1
        failure = report.failures[0]
        assert failure.slot == "thumbnail"
        assert failure.remote_key == OLD.remote_key
        assert "refused" in failure.reason

    async def test_empty_slots_make_no_calls(self, manager, store):
        report = await manager.release((THUMBNAIL, PDF), Document())
        assert report.attempted == []
        assert store.calls == []
