"""
PDF Generation Service.
Renders invoice PDFs in memory using ReportLab.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from app.models.invoice import Invoice
from app.models.user import User


class PDFService:
    """Service for generating invoice PDFs."""

    def __init__(self, currency: str = "IDR", footer: str | None = None):
        self.currency = currency
        self.footer = footer

        # Colors
        self.primary_color = colors.HexColor("#2563EB")  # Blue
        self.secondary_color = colors.HexColor("#1E40AF")  # Dark blue
        self.gray_color = colors.HexColor("#6B7280")
        self.light_gray = colors.HexColor("#F3F4F6")
        self.border_color = colors.HexColor("#E5E7EB")

    def _get_styles(self):
        """Get custom paragraph styles."""
        styles = getSampleStyleSheet()

        styles.add(ParagraphStyle(
            name='InvoiceTitle',
            parent=styles['Heading1'],
            fontSize=24,
            textColor=self.primary_color,
            spaceAfter=6*mm,
        ))
        styles.add(ParagraphStyle(
            name='Subtitle',
            parent=styles['Normal'],
            fontSize=10,
            textColor=self.gray_color,
        ))
        styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=styles['Heading2'],
            fontSize=12,
            textColor=self.secondary_color,
            spaceBefore=4*mm,
            spaceAfter=2*mm,
        ))
        styles.add(ParagraphStyle(
            name='NormalText',
            parent=styles['Normal'],
            fontSize=10,
            textColor=colors.black,
        ))
        styles.add(ParagraphStyle(
            name='SmallText',
            parent=styles['Normal'],
            fontSize=8,
            textColor=self.gray_color,
        ))
        styles.add(ParagraphStyle(
            name='RightAlign',
            parent=styles['Normal'],
            fontSize=10,
            alignment=TA_RIGHT,
        ))
        styles.add(ParagraphStyle(
            name='Bold',
            parent=styles['Normal'],
            fontSize=10,
            fontName='Helvetica-Bold',
        ))

        return styles

    def _format_currency(self, amount: Decimal) -> str:
        """Format amount as currency."""
        return f"{self.currency} {amount:,.2f}"

    def _format_date(self, d: date) -> str:
        return d.strftime("%d %B %Y")

    def _text(self, value: str | None) -> str:
        # Paragraph parses its input as markup
        return escape(value or "")

    def _party_block(self, lines: list[str]) -> str:
        return "<br/>".join(line for line in lines if line)

    def render_invoice(self, invoice: Invoice, sender: User) -> bytes:
        """
        Render an invoice as a PDF document.

        Args:
            invoice: Stored or transient invoice with its items
            sender: Issuer printed in the From block, including banking details

        Returns:
            The PDF file content
        """
        styles = self._get_styles()
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20*mm,
            leftMargin=20*mm,
            topMargin=20*mm,
            bottomMargin=20*mm,
            title=f"Invoice {invoice.invoice_number}",
        )

        elements = []

        # ===== HEADER =====
        header_data = [
            [
                Paragraph(f"<b>{self._text(sender.name)}</b>", styles['Bold']),
                Paragraph("<b>INVOICE</b>", styles['InvoiceTitle']),
            ],
            [
                Paragraph(self._text(sender.address), styles['SmallText']),
                Paragraph(f"No. {self._text(invoice.invoice_number)}", styles['Subtitle']),
            ],
            [
                Paragraph(f"Phone: {self._text(sender.phone) or 'N/A'}", styles['SmallText']),
                Paragraph(f"Date: {self._format_date(invoice.issue_date)}", styles['SmallText']),
            ],
            [
                Paragraph(f"Email: {self._text(sender.email)}", styles['SmallText']),
                Paragraph(f"Due: {self._format_date(invoice.due_date)}", styles['SmallText']),
            ],
        ]

        header_table = Table(header_data, colWidths=[95*mm, 75*mm])
        header_table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ]))
        elements.append(header_table)
        elements.append(Spacer(1, 10*mm))

        # ===== BILL TO =====
        recipient = invoice.recipient
        elements.append(Paragraph("BILL TO", styles['SectionHeader']))
        elements.append(Paragraph(
            self._party_block([
                f"<b>{self._text(recipient.name)}</b>",
                self._text(recipient.address),
                f"Email: {self._text(recipient.email)}" if recipient.email else "",
                f"Phone: {self._text(recipient.phone)}" if recipient.phone else "",
            ]),
            styles['NormalText'],
        ))
        elements.append(Spacer(1, 8*mm))

        # ===== ITEMS TABLE =====
        elements.append(Paragraph("DETAILS", styles['SectionHeader']))

        items_data = [
            [
                Paragraph("<b>Description</b>", styles['Bold']),
                Paragraph("<b>Qty</b>", styles['Bold']),
                Paragraph("<b>Unit price</b>", styles['Bold']),
                Paragraph("<b>Total</b>", styles['Bold']),
            ]
        ]
        for item in invoice.items:
            items_data.append([
                Paragraph(self._text(item.description), styles['NormalText']),
                Paragraph(str(item.quantity), styles['NormalText']),
                Paragraph(self._format_currency(item.unit_price), styles['RightAlign']),
                Paragraph(self._format_currency(item.total), styles['RightAlign']),
            ])

        items_table = Table(
            items_data,
            colWidths=[80*mm, 20*mm, 35*mm, 35*mm],
            repeatRows=1,
        )
        items_table.setStyle(TableStyle([
            # Header style
            ('BACKGROUND', (0, 0), (-1, 0), self.primary_color),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 10),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 4*mm),
            ('TOPPADDING', (0, 0), (-1, 0), 4*mm),

            # Body style
            ('FONTSIZE', (0, 1), (-1, -1), 9),
            ('BOTTOMPADDING', (0, 1), (-1, -1), 3*mm),
            ('TOPPADDING', (0, 1), (-1, -1), 3*mm),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),

            # Borders
            ('LINEBELOW', (0, 0), (-1, 0), 1, self.primary_color),
            ('LINEBELOW', (0, 1), (-1, -1), 0.5, self.border_color),

            # Alternating row colors
            *[('BACKGROUND', (0, i), (-1, i), self.light_gray)
              for i in range(2, len(items_data), 2)],
        ]))
        elements.append(items_table)
        elements.append(Spacer(1, 6*mm))

        # ===== TOTALS =====
        totals_data = [
            ["Subtotal", self._format_currency(invoice.subtotal)],
            [f"Tax ({invoice.tax_rate}%)", self._format_currency(invoice.tax)],
            ["Delivery fee", self._format_currency(invoice.delivery_fee)],
            ["Total", self._format_currency(invoice.total)],
        ]
        totals_table = Table(totals_data, colWidths=[125*mm, 45*mm])
        totals_table.setStyle(TableStyle([
            ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('TOPPADDING', (0, 0), (-1, -1), 2*mm),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2*mm),
            ('LINEABOVE', (0, -1), (-1, -1), 1, self.primary_color),
            ('BACKGROUND', (0, -1), (-1, -1), self.light_gray),
        ]))
        elements.append(totals_table)
        elements.append(Spacer(1, 8*mm))

        # ===== PAYMENT =====
        if sender.bank_name or sender.bank_account_number:
            elements.append(Paragraph("PAYMENT DETAILS", styles['SectionHeader']))
            elements.append(Paragraph(
                self._party_block([
                    f"Bank: {self._text(sender.bank_name)}",
                    f"Account name: {self._text(sender.bank_account_name)}",
                    f"Account number: {self._text(sender.bank_account_number)}",
                ]),
                styles['NormalText'],
            ))
            elements.append(Spacer(1, 4*mm))

        # ===== NOTES =====
        if invoice.notes:
            elements.append(Paragraph("NOTES", styles['SectionHeader']))
            elements.append(Paragraph(self._text(invoice.notes), styles['NormalText']))
            elements.append(Spacer(1, 4*mm))

        # ===== FOOTER =====
        elements.append(Spacer(1, 10*mm))
        generated_on = self._format_date(datetime.now(timezone.utc).date())
        footer_text = self._text(self.footer) if self.footer else f"Generated on {generated_on}"
        elements.append(Paragraph(f"<i>{footer_text}</i>", styles['SmallText']))

        doc.build(elements)
        return buffer.getvalue()

    @staticmethod
    def filename(invoice: Invoice) -> str:
        return f"invoice_{invoice.invoice_number.replace('/', '-')}.pdf"
