import io

import pandas as pd
import pytest
from docx import Document

from interior_manager.core.errors import ImportFileError
from interior_manager.server.services.boq_import import (
    map_columns,
    normalize_column_name,
    parse_file,
    parse_quantity,
    parse_rate,
    parse_rows,
    read_table,
)


def _docx_bytes(*tables):
    document = Document()
    for rows in tables:
        table = document.add_table(rows=len(rows), cols=len(rows[0]))
        for r, values in enumerate(rows):
            for c, value in enumerate(values):
                table.cell(r, c).text = value
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestCellParsing:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("12", (12.0, None)),
            ("12.5", (12.5, None)),
            ("12 kg", (12.0, "kg")),
            ("3sqft", (3.0, "sqft")),
            ("1/2", (0.5, None)),
            ("1/0", (0.0, None)),
            ("", (0.0, None)),
            ("lumpsum", (0.0, "lumpsum")),
        ],
    )
    def test_parse_quantity(self, value, expected):
        assert parse_quantity(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2450.50", 2450.5),
            ("₹2,450.50", 2450.5),
            ("INR 1,200", 1200.0),
            ("", 0.0),
            ("n/a", 0.0),
            ("-300", 0.0),
        ],
    )
    def test_parse_rate(self, value, expected):
        assert parse_rate(value) == expected


class TestColumnMapping:
    def test_aliases(self):
        assert map_columns(["Particulars", "Qty", "UOM", "Unit Rate", "Notes"]) == {
            0: "item_name",
            1: "quantity",
            2: "unit",
            3: "rate",
        }

    def test_header_is_case_and_space_insensitive(self):
        assert normalize_column_name("  ITEM NAME ") == "item_name"
        assert normalize_column_name("Remarks") is None

    def test_repeated_header_claims_next_field(self):
        # The first "Description" names the item, the second describes it.
        assert map_columns(["Description", "Description", "Qty"]) == {
            0: "item_name",
            1: "description",
            2: "quantity",
        }

    def test_blank_headers_are_ignored(self):
        assert map_columns(["", "Name", "", "Qty"]) == {1: "item_name", 3: "quantity"}


class TestParseRows:
    def test_defaults_and_units(self):
        preview = parse_rows(
            [
                ["Item Name", "Qty", "UOM", "Rate", "Category"],
                ["Plywood", "10 sqft", "", "₹85", ""],
                ["Laminate", "4", "sheet", "1,150", "Carpentry"],
            ]
        )

        assert preview.errors == []
        plywood, laminate = preview.rows
        assert plywood.unit == "sqft"
        assert plywood.category == "Uncategorized"
        assert plywood.item_type == "material"
        assert plywood.source == "bought_out"
        assert plywood.rate == 85.0
        assert laminate.unit == "sheet"
        assert laminate.category == "Carpentry"
        assert laminate.quantity == 4.0

    def test_unit_column_overrides_quantity_suffix(self):
        preview = parse_rows([["Name", "Qty", "Unit"], ["Skirting", "20 ft", "rft"]])
        assert preview.rows[0].unit == "rft"

    def test_unit_defaults_to_nos(self):
        preview = parse_rows([["Name", "Qty"], ["Handles", "24"]])
        assert preview.rows[0].unit == "Nos"

    def test_blank_rows_are_skipped_silently(self):
        preview = parse_rows([["Name", "Qty"], ["", ""], ["Hinges", "8"]])
        assert [row.item_name for row in preview.rows] == ["Hinges"]
        assert preview.errors == []

    def test_short_rows_are_padded(self):
        preview = parse_rows([["Name", "Qty", "Rate"], ["Hinges"]])
        assert preview.rows[0].quantity == 0
        assert preview.rows[0].rate == 0

    def test_error_list_is_capped(self):
        rows = [["Name", "Qty"], ["Tiles", "4"]] + [["", "1"] for _ in range(7)]
        preview = parse_rows(rows)

        assert len(preview.rows) == 1
        assert preview.errors == [
            "Row 3: Skipped (Missing item name)",
            "Row 4: Skipped (Missing item name)",
            "Row 5: Skipped (Missing item name)",
            "Row 6: Skipped (Missing item name)",
            "Row 7: Skipped (Missing item name)",
            "...and 2 more issues",
        ]

    def test_header_only(self):
        with pytest.raises(ImportFileError, match="at least a header row"):
            parse_rows([["Name", "Qty"]])

    def test_missing_required_columns(self):
        with pytest.raises(ImportFileError) as exc_info:
            parse_rows([["Name", "Rate"], ["Tiles", "40"]])

        assert exc_info.value.errors == [
            "Missing required columns: quantity.",
            "Found columns: Name, Rate",
        ]

    def test_no_valid_rows(self):
        with pytest.raises(ImportFileError, match="No valid rows"):
            parse_rows([["Name", "Qty"], ["", "4"]])


class TestReadTable:
    def test_csv(self):
        content = "\ufeffItem Name,Qty,Rate\nTiles,4,\"1,200\"\n".encode("utf-8")
        assert read_table("boq.csv", content) == [["Item Name", "Qty", "Rate"], ["Tiles", "4", "1,200"]]

    def test_xlsx(self):
        buffer = io.BytesIO()
        pd.DataFrame([["Tiles", 4]], columns=["Item Name", "Qty"]).to_excel(buffer, index=False, engine="openpyxl")

        preview = parse_file("BOQ.XLSX", buffer.getvalue())

        assert preview.rows[0].item_name == "Tiles"
        assert preview.rows[0].quantity == 4.0

    def test_csv_rows_wider_than_header(self):
        content = b"Item Name,Qty,Rate\nSink,1,500\nHob,2,300,extra note\nChimney,1\n"

        preview = parse_file("boq.csv", content)

        assert [row.item_name for row in preview.rows] == ["Sink", "Hob", "Chimney"]
        assert preview.rows[1].rate == 300
        assert preview.rows[2].rate == 0

    def test_xlsx_numeric_cells(self):
        buffer = io.BytesIO()
        pd.DataFrame(
            [["Plywood", 12.5, "sqft", 85], ["Handles", 24, None, 1150.75]],
            columns=["Particulars", "Qty", "UOM", "Unit Rate"],
        ).to_excel(buffer, index=False, engine="openpyxl")

        preview = parse_file("boq.xlsx", buffer.getvalue())

        plywood, handles = preview.rows
        assert (plywood.quantity, plywood.unit, plywood.rate) == (12.5, "sqft", 85.0)
        assert (handles.quantity, handles.unit, handles.rate) == (24.0, "Nos", 1150.75)

    def test_docx_tables(self):
        content = _docx_bytes([["Item Name", "Qty", "Rate"], ["Tiles", "4 sqm", "1,200"], ["", "", ""]])

        preview = parse_file("boq.docx", content)

        assert preview.errors == []
        assert len(preview.rows) == 1
        assert preview.rows[0].item_name == "Tiles"
        assert preview.rows[0].unit == "sqm"
        assert preview.rows[0].rate == 1200

    def test_docx_tables_are_combined(self):
        content = _docx_bytes([["Name", "Qty"], ["Wardrobe", "1"]], [["Loft", "2"]])
        assert read_table("boq.docx", content) == [["Name", "Qty"], ["Wardrobe", "1"], ["Loft", "2"]]

    def test_docx_without_tables(self):
        document = Document()
        document.add_paragraph("Kitchen: 12 rft base units")
        buffer = io.BytesIO()
        document.save(buffer)

        with pytest.raises(ImportFileError, match="No tables found"):
            read_table("boq.docx", buffer.getvalue())

    def test_unsupported_extension(self):
        with pytest.raises(ImportFileError, match="Unsupported file type '.pdf'"):
            read_table("boq.pdf", b"%PDF-1.4")

    def test_unreadable_workbook(self):
        with pytest.raises(ImportFileError, match="Failed to parse file"):
            read_table("boq.xlsx", b"not a zip archive")

    def test_empty_upload(self):
        with pytest.raises(ImportFileError, match="empty"):
            parse_file("boq.csv", b"")
