"""Store submission and administrator review."""

import pytest

from fakes import ADMIN, OTHER_USER, OWNER
from verifylink.services.badges import render_badge_snippet
from verifylink.services.errors import (
    ConcurrentModification,
    Forbidden,
    InvalidTransition,
    NotFound,
    StorageError,
    Unauthenticated,
    ValidationError,
)
from verifylink.services.statuses import VerificationStatus
from verifylink.services.verification import VerificationService


async def _submit_acme(service: VerificationService):
    return await service.submit_store(OWNER, name="Acme", url="https://acme.test", contact_email="ops@acme.test")


@pytest.mark.asyncio
async def test_new_store_starts_pending(verification_service: VerificationService):
    store = await _submit_acme(verification_service)
    assert store.verification_status == VerificationStatus.PENDING
    assert store.owner_id == OWNER.user_id
    assert store.version == 1


@pytest.mark.asyncio
async def test_submit_store_requires_sign_in(verification_service: VerificationService):
    with pytest.raises(Unauthenticated):
        await verification_service.submit_store(None, name="Acme", url="https://acme.test")


@pytest.mark.asyncio
async def test_submit_store_rejects_bad_url(verification_service: VerificationService, store_repo):
    with pytest.raises(ValidationError):
        await verification_service.submit_store(OWNER, name="Acme", url="javascript:alert(1)")
    assert store_repo.items == {}


@pytest.mark.asyncio
async def test_acme_approval_scenario(verification_service: VerificationService, badge_service, settings):
    store = await _submit_acme(verification_service)
    created_at = store.created_at
    updated_before = store.updated_at

    approved = await verification_service.set_verification_status(ADMIN, store.id, "verified")
    assert approved.verification_status == VerificationStatus.VERIFIED
    assert approved.updated_at > updated_before
    assert approved.created_at == created_at
    assert approved.version == 2

    badge = await badge_service.issue_badge(store.id, "topbar")
    snippet = render_badge_snippet(badge.registration_number, "topbar", settings=settings)
    assert badge.registration_number in snippet


@pytest.mark.asyncio
async def test_approval_auto_issues_default_badges(verification_service, badge_repo):
    store = await _submit_acme(verification_service)
    await verification_service.set_verification_status(ADMIN, store.id, "verified")
    issued = await badge_repo.list_for_store(store.id)
    assert sorted(b.badge_type.value for b in issued) == ["footer", "topbar"]


@pytest.mark.asyncio
async def test_repeating_verified_is_a_noop(verification_service, badge_repo):
    store = await _submit_acme(verification_service)
    first = await verification_service.set_verification_status(ADMIN, store.id, "verified")
    version = first.version
    updated_at = first.updated_at

    again = await verification_service.set_verification_status(ADMIN, store.id, "verified")
    assert again.verification_status == VerificationStatus.VERIFIED
    assert again.version == version
    assert again.updated_at == updated_at
    assert len(await badge_repo.list_for_store(store.id)) == 2
    assert badge_repo.create_calls == 2


@pytest.mark.asyncio
async def test_rejected_store_cannot_be_approved(verification_service, badge_repo):
    store = await _submit_acme(verification_service)
    await verification_service.set_verification_status(ADMIN, store.id, "rejected")
    with pytest.raises(InvalidTransition):
        await verification_service.set_verification_status(ADMIN, store.id, "verified")
    assert (await verification_service.stores.get(store.id)).verification_status == VerificationStatus.REJECTED
    assert badge_repo.items == {}


@pytest.mark.asyncio
async def test_pending_is_not_a_review_target(verification_service):
    store = await _submit_acme(verification_service)
    with pytest.raises(ValidationError):
        await verification_service.set_verification_status(ADMIN, store.id, "pending")


@pytest.mark.asyncio
async def test_only_admins_change_status(verification_service):
    store = await _submit_acme(verification_service)
    with pytest.raises(Forbidden):
        await verification_service.set_verification_status(OWNER, store.id, "verified")
    with pytest.raises(Unauthenticated):
        await verification_service.set_verification_status(None, store.id, "verified")
    assert (await verification_service.stores.get(store.id)).verification_status == VerificationStatus.PENDING


@pytest.mark.asyncio
async def test_unknown_store_is_not_found(verification_service):
    with pytest.raises(NotFound):
        await verification_service.set_verification_status(ADMIN, "missing", "verified")


@pytest.mark.asyncio
async def test_stale_expected_version_conflicts(verification_service):
    store = await _submit_acme(verification_service)
    with pytest.raises(ConcurrentModification):
        await verification_service.set_verification_status(ADMIN, store.id, "verified", expected_version=7)
    assert (await verification_service.stores.get(store.id)).verification_status == VerificationStatus.PENDING


@pytest.mark.asyncio
async def test_lost_race_raises_conflict_instead_of_overwriting(verification_service, store_repo, badge_repo):
    store = await _submit_acme(verification_service)
    store_repo.lose_next_update = True
    with pytest.raises(ConcurrentModification) as exc:
        await verification_service.set_verification_status(ADMIN, store.id, "rejected")
    assert exc.value.outcome == "retry"
    assert badge_repo.items == {}


@pytest.mark.asyncio
async def test_store_details_are_private_to_owner_and_admin(verification_service):
    store = await _submit_acme(verification_service)
    await verification_service.add_document(
        OWNER, store.id, document_type="business_license", document_url="https://files.test/license.pdf"
    )

    details = await verification_service.get_store(OWNER, store.id)
    assert [d.document_type.value for d in details.documents] == ["business_license"]
    assert (await verification_service.get_store(ADMIN, store.id)).store.id == store.id
    with pytest.raises(Forbidden):
        await verification_service.get_store(OTHER_USER, store.id)


@pytest.mark.asyncio
async def test_add_document_rejects_unknown_type(verification_service):
    store = await _submit_acme(verification_service)
    with pytest.raises(ValidationError):
        await verification_service.add_document(
            OWNER, store.id, document_type="selfie", document_url="https://files.test/x.pdf"
        )


@pytest.mark.asyncio
async def test_upload_document_stores_file_then_attaches(verification_service, storage, settings):
    store = await _submit_acme(verification_service)
    document = await verification_service.upload_document(
        OWNER,
        store.id,
        document_type="tax_certificate",
        filename="certificate",
        content_type="application/pdf",
        data=b"%PDF-1.4",
    )
    bucket, path, _, content_type = storage.uploads[0]
    assert bucket == settings.documents_bucket
    assert path.startswith(f"{store.id}/tax_certificate/")
    assert path.endswith(".pdf")
    assert content_type == "application/pdf"
    assert document.document_url.endswith(path)
    assert document.status == VerificationStatus.PENDING


@pytest.mark.asyncio
async def test_document_review_is_independent_of_store(verification_service):
    store = await _submit_acme(verification_service)
    document = await verification_service.add_document(
        OWNER, store.id, document_type="business_license", document_url="https://files.test/license.pdf"
    )
    reviewed = await verification_service.set_document_status(ADMIN, document.id, "rejected")
    assert reviewed.status == VerificationStatus.REJECTED
    assert (await verification_service.stores.get(store.id)).verification_status == VerificationStatus.PENDING
    with pytest.raises(InvalidTransition):
        await verification_service.set_document_status(ADMIN, document.id, "verified")


@pytest.mark.asyncio
async def test_list_stores_filters_by_status(verification_service, store_repo):
    await store_repo.add("v1", VerificationStatus.VERIFIED)
    await store_repo.add("p1", VerificationStatus.PENDING)
    verified = await verification_service.list_stores(ADMIN, "verified")
    assert [s.id for s in verified] == ["v1"]
    with pytest.raises(ValidationError):
        await verification_service.list_stores(ADMIN, "approved")
    with pytest.raises(Forbidden):
        await verification_service.list_stores(OWNER)


@pytest.mark.asyncio
async def test_upload_document_without_storage(store_repo, document_repo, badge_service, settings):
    service = VerificationService(store_repo, document_repo, badge_service, storage=None, settings=settings)
    store = await _submit_acme(service)
    with pytest.raises(StorageError) as exc:
        await service.upload_document(
            OWNER,
            store.id,
            document_type="tax_certificate",
            filename="certificate",
            content_type="application/pdf",
            data=b"%PDF-1.4",
        )
    assert exc.value.outcome == "retry"
    assert document_repo.items == {}
