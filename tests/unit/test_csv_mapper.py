"""
Unit Tests - CSV Import Mapper
"""
import pytest

from inventory_analytics.database.records import Store
from inventory_analytics.exceptions import CsvFormatError
from inventory_analytics.ingestion.csv_mapper import (
    PLACEHOLDER_CATEGORY_ID,
    SAMPLE_COLUMNS,
    SAMPLE_PRODUCTS,
    CsvProductMapper,
    FieldMapping,
    default_store_id,
    read_rows,
    sample_csv,
)


class TestReadRows:
    """Tests for read_rows"""

    def test_header_paired_rows(self):
        rows = read_rows("name,sku\nWidget,W1\nGadget,G1\n")

        assert rows == [[("name", "Widget"), ("sku", "W1")], [("name", "Gadget"), ("sku", "G1")]]

    def test_cells_trimmed(self):
        assert read_rows(" name , sku \n Widget , W1 ") == [[("name", "Widget"), ("sku", "W1")]]

    def test_blank_lines_ignored(self):
        assert read_rows("name,sku\n\nWidget,W1\n\n") == [[("name", "Widget"), ("sku", "W1")]]

    def test_quoted_fields(self):
        rows = read_rows('name,sku,description\n"Desk, oak",D1,"The ""big"" one"\n')

        assert rows == [[("name", "Desk, oak"), ("sku", "D1"), ("description", 'The "big" one')]]

    def test_empty_cells(self):
        assert read_rows("name,sku,cost\nWidget,,\n") == [[("name", "Widget"), ("sku", ""), ("cost", "")]]

    @pytest.mark.parametrize("text", ["", "\n\n", None])
    def test_empty_input(self, text):
        assert read_rows(text) == []

    def test_header_only(self):
        assert read_rows("name,sku\n") == []

    def test_repeated_headers_keep_every_cell(self):
        rows = read_rows("name,color,color\nLamp,red,blue\n")

        assert rows == [[("name", "Lamp"), ("color", "red"), ("color", "blue")]]

    def test_unterminated_quote_rejected(self):
        with pytest.raises(CsvFormatError):
            read_rows('name,sku\n"Widget,W1\nGadget,G1\n')


class TestCsvProductMapper:
    """Tests for CsvProductMapper"""

    def test_basic_row(self):
        """The documented example maps to one accepted draft"""
        result = CsvProductMapper().map_text("name,sku,cost,price,quantity\nWidget,W1,5,10,20\n")

        assert len(result.accepted) == 1
        draft = result.accepted[0]
        assert draft.name == "Widget"
        assert draft.sku == "W1"
        assert draft.cost_price == 5.0
        assert draft.selling_price == 10.0
        assert draft.quantity == 20
        assert draft.reorder_level == 10

    def test_row_without_sku_dropped(self):
        result = CsvProductMapper().map_text("name,sku,price\nWidget,W1,10\nNo Code,,4\n")

        assert [d.sku for d in result.accepted] == ["W1"]
        assert result.skipped == 1
        assert len(result.drafts) == 2

    def test_row_without_name_dropped(self):
        result = CsvProductMapper().map_text("name,sku\n,W1\n")

        assert result.accepted == []

    def test_synonyms(self):
        text = "product_name,product_code,cost_price,selling_price,stock,min_stock\nLamp,L1,3.5,9.99,7,2\n"

        draft = CsvProductMapper().map_text(text).accepted[0]

        assert draft.name == "Lamp"
        assert draft.sku == "L1"
        assert draft.cost_price == 3.5
        assert draft.selling_price == 9.99
        assert draft.quantity == 7
        assert draft.reorder_level == 2

    def test_headers_case_insensitive(self):
        draft = CsvProductMapper().map_text("Name,SKU,Price\nLamp,L1,9\n").accepted[0]

        assert (draft.name, draft.sku, draft.selling_price) == ("Lamp", "L1", 9.0)

    def test_unparseable_numbers_default(self):
        draft = CsvProductMapper().map_text("name,sku,cost,quantity,reorder_level\nLamp,L1,n/a,lots,0\n").accepted[0]

        assert draft.cost_price == 0.0
        assert draft.quantity == 0
        assert draft.reorder_level == 10

    def test_numeric_prefix_parsed(self):
        draft = CsvProductMapper().map_text("name,sku,price,quantity\nLamp,L1,12.5 USD,20 units\n").accepted[0]

        assert draft.selling_price == 12.5
        assert draft.quantity == 20

    def test_unknown_columns_folded_into_description(self):
        draft = CsvProductMapper().map_text("name,sku,color,size\nLamp,L1,red,\n").accepted[0]

        assert draft.description == " color: red"

    def test_unknown_columns_appended_to_description(self):
        draft = CsvProductMapper().map_text("name,sku,description,color\nLamp,L1,Desk lamp,red\n").accepted[0]

        assert draft.description == "Desk lamp color: red"

    def test_repeated_unknown_columns_all_appended(self):
        draft = CsvProductMapper().map_text("name,sku,color,color\nLamp,L1,red,blue\n").accepted[0]

        assert draft.description == " color: red color: blue"

    def test_map_row_accepts_mapping(self):
        draft = CsvProductMapper().map_row({"name": "Lamp", "sku": "L1", "price": "4"})

        assert (draft.name, draft.sku, draft.selling_price) == ("Lamp", "L1", 4.0)

    def test_store_and_category_assigned(self):
        draft = CsvProductMapper(store_id="store-2").map_text("name,sku\nLamp,L1\n").accepted[0]

        assert draft.store_id == "store-2"
        assert draft.category_id == PLACEHOLDER_CATEGORY_ID

    def test_custom_mappings(self):
        mapper = CsvProductMapper(mappings={"title": FieldMapping("name"), "code": FieldMapping("sku")})

        draft = mapper.map_text("TITLE,code\nLamp,L1\n").accepted[0]

        assert (draft.name, draft.sku) == ("Lamp", "L1")

    def test_mapping_to_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            CsvProductMapper(mappings={"colour": FieldMapping("colour")})

    def test_draft_record_omits_missing_values(self):
        draft = CsvProductMapper().map_text("name,sku\nLamp,L1\n").accepted[0]

        record = draft.to_record()

        assert "description" not in record
        assert "store_id" not in record
        assert record["category_id"] == PLACEHOLDER_CATEGORY_ID


class TestDefaultStore:
    """Tests for default_store_id"""

    def test_current_store_preferred(self):
        stores = [Store(id="s1", name="A"), Store(id="s2", name="B")]

        assert default_store_id(stores[1], stores) == "s2"

    def test_first_store_fallback(self):
        assert default_store_id(None, [Store(id="s1", name="A")]) == "s1"

    def test_no_stores(self):
        assert default_store_id(None, []) is None


class TestSampleCsv:
    """Tests for sample_csv"""

    def test_header_and_rows(self):
        lines = sample_csv().splitlines()

        assert lines[0] == ",".join(SAMPLE_COLUMNS)
        assert len(lines) == len(SAMPLE_PRODUCTS) + 1

    def test_sample_maps_cleanly(self):
        result = CsvProductMapper().map_text(sample_csv())

        assert len(result.accepted) == len(SAMPLE_PRODUCTS)
        assert result.accepted[0].name == "Laptop Computer"
        assert result.accepted[0].reorder_level == 5
        assert result.accepted[-1].description == "USB-C cable 6ft"
