"""
Public endpoints.
Invoice PDF preview without an account.
"""

from fastapi import APIRouter, Response

from app.api.deps import PDFRenderer
from app.api.v1.endpoints.invoices import pdf_response
from app.schemas.invoice import InvoicePreviewRequest
from app.services.invoice import InvoiceService


router = APIRouter()


@router.post(
    "/invoices/generate-pdf",
    response_class=Response,
    summary="Generate invoice PDF",
    description="Render an invoice PDF from the request body; nothing is stored",
)
async def generate_invoice_pdf(
    data: InvoicePreviewRequest,
    pdf: PDFRenderer,
) -> Response:
    invoice, sender = InvoiceService.build_preview(data)
    return pdf_response(pdf.render_invoice(invoice, sender), pdf.filename(invoice))
