"""Store owner endpoints.

POST /v1/stores                          - Submit a store for verification
GET  /v1/stores/mine                     - Stores owned by the caller
GET  /v1/stores/{storeId}                - Store with documents (owner or admin)
POST /v1/stores/{storeId}/documents      - Attach a document already in storage
POST /v1/stores/{storeId}/documents/upload - Upload and attach a document
GET  /v1/stores/{storeId}/badges         - Issued badges with embed code

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from verifylink.auth import get_principal
from verifylink.routes.deps import get_badge_service, get_verification_service
from verifylink.schemas import (
    BadgeOut,
    DocumentCreate,
    DocumentOut,
    ErrorResponse,
    StoreCreate,
    StoreDetailOut,
    StoreOut,
)
from verifylink.services.badges import BadgeService
from verifylink.services.principal import Principal
from verifylink.services.verification import VerificationService

router = APIRouter(responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}})


@router.post("", response_model=StoreOut, status_code=201)
async def submit_store(
    request: StoreCreate,
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> StoreOut:
    """Submit a verification request. The store starts as pending."""
    store = await service.submit_store(
        principal,
        name=request.name,
        url=request.url,
        contact_email=request.contact_email,
        logo_url=request.logo_url,
        business_name=request.business_name,
        business_type=request.business_type,
        description=request.description,
    )
    return StoreOut.model_validate(store)


@router.get("/mine", response_model=list[StoreOut])
async def list_my_stores(
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> list[StoreOut]:
    return [StoreOut.model_validate(s) for s in await service.list_my_stores(principal)]


@router.get("/{store_id}", response_model=StoreDetailOut, responses={404: {"model": ErrorResponse}})
async def get_store(
    store_id: str,
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> StoreDetailOut:
    details = await service.get_store(principal, store_id)
    return StoreDetailOut(
        store=StoreOut.model_validate(details.store),
        documents=[DocumentOut.model_validate(d) for d in details.documents],
    )


@router.post("/{store_id}/documents", response_model=DocumentOut, status_code=201)
async def add_document(
    store_id: str,
    request: DocumentCreate,
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> DocumentOut:
    document = await service.add_document(
        principal,
        store_id,
        document_type=request.document_type,
        document_url=request.document_url,
    )
    return DocumentOut.model_validate(document)


@router.post("/{store_id}/documents/upload", response_model=DocumentOut, status_code=201)
async def upload_document(
    store_id: str,
    document_type: str = Form(...),
    file: UploadFile = File(...),
    principal: Principal | None = Depends(get_principal),
    service: VerificationService = Depends(get_verification_service),
) -> DocumentOut:
    """Upload a PDF or image (max 5MB) and attach it as a verification document."""
    data = await file.read()
    document = await service.upload_document(
        principal,
        store_id,
        document_type=document_type,
        filename=file.filename or "",
        content_type=file.content_type or "",
        data=data,
    )
    return DocumentOut.model_validate(document)


@router.get("/{store_id}/badges", response_model=list[BadgeOut])
async def list_badges(
    store_id: str,
    principal: Principal | None = Depends(get_principal),
    service: BadgeService = Depends(get_badge_service),
) -> list[BadgeOut]:
    """Badges issued to the store, each with its verify URL and embed snippet."""
    return [BadgeOut.from_embed(e) for e in await service.list_badges(principal, store_id)]
