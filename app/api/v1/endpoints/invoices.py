"""
Invoice management endpoints.
CRUD operations for invoices, status changes, summary and PDF download.
"""

from fastapi import APIRouter, Query, Response, status

from app.api.deps import AppSettings, DbSession, CurrentUser, PDFRenderer
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceUpdate,
    InvoiceResponse,
    InvoiceListResponse,
    InvoiceStatusUpdate,
    InvoiceSummaryResponse,
)
from app.schemas.base import MessageResponse
from app.services.invoice import InvoiceService


router = APIRouter()


def pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create invoice",
    description="Create an invoice with its items, billed to a client or an inline recipient",
)
async def create_invoice(
    data: InvoiceCreate,
    current_user: CurrentUser,
    db: DbSession,
    settings: AppSettings,
) -> InvoiceResponse:
    service = InvoiceService(db, settings.INVOICE_NUMBER_PREFIX)
    invoice = await service.create(current_user.id, data)
    return InvoiceResponse.model_validate(invoice)


@router.get(
    "",
    response_model=InvoiceListResponse,
    summary="List invoices",
    description="Paginated list of active invoices",
)
async def list_invoices(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Items per page"),
    status: str | None = Query(None, description="Filter by status (DRAFT, SENT, PAID)"),
    search: str | None = Query(None, description="Search number, notes or recipient"),
) -> InvoiceListResponse:
    service = InvoiceService(db)
    skip = (page - 1) * per_page

    invoices, total = await service.list(
        user_id=current_user.id,
        skip=skip,
        limit=per_page,
        status=status,
        search=search,
    )

    return InvoiceListResponse(
        items=[InvoiceResponse.model_validate(i) for i in invoices],
        total=total,
        page=page,
        per_page=per_page,
        pages=InvoiceListResponse.page_count(total, per_page),
    )


@router.get(
    "/summary",
    response_model=InvoiceSummaryResponse,
    summary="Revenue summary",
    description="Total of paid invoices and total of all invoices",
)
async def get_invoice_summary(
    current_user: CurrentUser,
    db: DbSession,
) -> InvoiceSummaryResponse:
    service = InvoiceService(db)
    return InvoiceSummaryResponse.model_validate(await service.summary(current_user.id))


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Invoice details",
)
async def get_invoice(
    invoice_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> InvoiceResponse:
    service = InvoiceService(db)
    invoice = await service.get_or_404(invoice_id, current_user.id)
    return InvoiceResponse.model_validate(invoice)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Update invoice",
    description=(
        "Update invoice fields. Items with an id are updated, items without "
        "one are added and stored items left out are removed."
    ),
)
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> InvoiceResponse:
    service = InvoiceService(db)
    invoice = await service.update(invoice_id, current_user.id, data)
    return InvoiceResponse.model_validate(invoice)


@router.patch(
    "/{invoice_id}/status",
    response_model=InvoiceResponse,
    summary="Change invoice status",
)
async def update_invoice_status(
    invoice_id: int,
    data: InvoiceStatusUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> InvoiceResponse:
    service = InvoiceService(db)
    invoice = await service.update_status(invoice_id, current_user.id, data.status)
    return InvoiceResponse.model_validate(invoice)


@router.delete(
    "/{invoice_id}",
    response_model=MessageResponse,
    summary="Delete invoice",
)
async def delete_invoice(
    invoice_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    service = InvoiceService(db)
    await service.delete(invoice_id, current_user.id)
    return MessageResponse(message="Invoice deleted")


@router.get(
    "/{invoice_id}/pdf",
    response_class=Response,
    summary="Download invoice PDF",
)
async def download_invoice_pdf(
    invoice_id: int,
    current_user: CurrentUser,
    db: DbSession,
    pdf: PDFRenderer,
) -> Response:
    service = InvoiceService(db)
    invoice = await service.get_or_404(invoice_id, current_user.id)
    return pdf_response(pdf.render_invoice(invoice, current_user), pdf.filename(invoice))
