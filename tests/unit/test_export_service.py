"""
Unit tests for ExportService.
"""

from datetime import datetime

from openpyxl import load_workbook

from services.export_service import ExportService, EXPORT_COLUMNS
from tests.factories import ProductFactory


class TestGenerateStockExcel:
    """Tests for ExportService.generate_stock_excel()"""

    def test_one_row_per_size_with_local_toggles(self, loaded_store):
        loaded_store.toggle_unit_status("nina-1", 0, "nina-1-0-0")
        products = loaded_store.get_products()

        output = ExportService().generate_stock_excel(products, generated_at=datetime(2026, 3, 1, 9, 30))

        ws = load_workbook(output).active
        assert ws.title == "INVENTARIO"
        assert ws["A1"].value == "Inventario local 01/03/2026 09:30"
        assert [c.value for c in ws[3]] == EXPORT_COLUMNS
        rows = [[c.value for c in row] for row in ws.iter_rows(min_row=4, max_row=7)]
        assert rows == [
            ["nina-1", "Vestido Niña", "niña", "2", 1, 1, 2],
            ["nina-1", "Vestido Niña", "niña", "4", 1, 0, 1],
            ["nino-1", "Camisa Niño", "niño", "S", 1, 0, 1],
            ["uni-1", "Gorro Algodón", "unisex", "U", 3, 0, 3],
        ]

    def test_total_row(self, loaded_store):
        loaded_store.toggle_unit_status("uni-1", 0, "uni-1-0-2")

        output = ExportService().generate_stock_excel(loaded_store.get_products())

        ws = load_workbook(output).active
        total = [c.value for c in ws[9]]
        assert total[0] == "TOTAL"
        assert total[4:7] == [6, 1, 7]

    def test_empty_inventory(self):
        output = ExportService().generate_stock_excel([])

        ws = load_workbook(output).active
        assert ws["A5"].value == "TOTAL"
        assert ws["G5"].value == 0

    def test_formula_like_text_stays_text(self, store):
        name = '=HYPERLINK("http://evil.example","x")'
        store.replace([ProductFactory.create(id="=1+1", name=name, sizes={"S": 1})])

        output = ExportService().generate_stock_excel(store.get_products())

        ws = load_workbook(output).active
        assert ws["A4"].value == "=1+1"
        assert ws["A4"].data_type == "s"
        assert ws["B4"].value == name
        assert ws["B4"].data_type == "s"
