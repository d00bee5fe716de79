"""
Export service: stock sheet as an Excel file.

Writes the merged snapshot (local toggles included) so sales marked in the
admin view can be copied into the Google Sheet before the next refresh
discards them.
"""

from datetime import datetime
from io import BytesIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Border, Side
import structlog

from models.product import Product

logger = structlog.get_logger(__name__)

EXPORT_COLUMNS = ["ID", "Nombre", "Genero", "Talla", "Disponibles", "Vendidas", "Total"]


class ExportService:
    """Service for generating inventory export files."""

    def generate_stock_excel(
        self,
        products: list[Product],
        generated_at: Optional[datetime] = None,
    ) -> BytesIO:
        """
        Generate Excel file with one row per product size.

        Args:
            products: Products with local overrides applied
            generated_at: Timestamp for the title row (defaults to now)

        Returns:
            BytesIO containing the Excel file
        """
        if generated_at is None:
            generated_at = datetime.now()

        logger.info("generating_stock_export", product_count=len(products))

        wb = Workbook()
        ws = wb.active
        ws.title = "INVENTARIO"

        # Styles
        bold_font = Font(bold=True)
        header_font = Font(bold=True, size=14)
        thin_border = Border(
            bottom=Side(style="thin", color="000000")
        )

        # Set column widths
        for letter, width in zip("ABCDEFG", (14, 32, 10, 10, 12, 10, 8)):
            ws.column_dimensions[letter].width = width

        # Row 1: Title
        ws["A1"] = f"Inventario local {generated_at.strftime('%d/%m/%Y %H:%M')}"
        ws["A1"].font = header_font

        # Row 3: Column headers
        for col, title in enumerate(EXPORT_COLUMNS, start=1):
            cell = ws.cell(row=3, column=col, value=title)
            cell.font = bold_font
            cell.border = thin_border

        # Sizes (starting row 4)
        row = 4
        total_available = 0
        total_sold = 0

        for product in products:
            for bucket in product.sizes:
                sold = bucket.total - bucket.available
                values = [
                    product.id,
                    product.name,
                    product.audience,
                    bucket.size,
                    bucket.available,
                    sold,
                    bucket.total,
                ]
                for col, value in enumerate(values, start=1):
                    cell = ws.cell(row=row, column=col, value=value)
                    if isinstance(value, str):
                        # Sheet text starting with "=" must stay text, not a formula
                        cell.data_type = "s"

                total_available += bucket.available
                total_sold += sold
                row += 1

        # Total row
        row += 1
        ws.cell(row=row, column=1, value="TOTAL").font = bold_font
        ws.cell(row=row, column=5, value=total_available).font = bold_font
        ws.cell(row=row, column=6, value=total_sold).font = bold_font
        ws.cell(row=row, column=7, value=total_available + total_sold).font = bold_font

        logger.info(
            "stock_export_generated",
            rows=row - 5,
            available=total_available,
            sold=total_sold
        )

        # Save to BytesIO
        output = BytesIO()
        wb.save(output)
        output.seek(0)

        return output


# Singleton instance for convenience
_export_service: Optional[ExportService] = None

def get_export_service() -> ExportService:
    """Get or create ExportService instance."""
    global _export_service
    if _export_service is None:
        _export_service = ExportService()
    return _export_service
