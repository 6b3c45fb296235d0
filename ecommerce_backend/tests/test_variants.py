from types import SimpleNamespace

import pytest
from sqlalchemy import select

from src.core.errors import ValidationError
from src.db.models import Attribute
from src.services import variants

COLOR = {"name": "Color", "options": ["Red", "White"], "for_variations": True}
SIZE = {"name": "Size", "options": ["XL", "Free Size"], "for_variations": True}
MATERIAL = {"name": "Material", "options": ["Cotton"], "for_variations": False}


class TestAbbreviate:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Free Size", "FS"),
            ("XL", "XL"),
            ("red", "RED"),
            ("White", "WHT"),
            ("Aqua", "AQU"),
            ("", "VAR"),
            (None, "VAR"),
        ],
    )
    def test_abbreviations(self, value, expected):
        assert variants.abbreviate(value) == expected

    def test_sku_prefix_defaults(self):
        assert variants.sku_prefix("Clothing", "T-Shirt") == "CLO-T-S"
        assert variants.sku_prefix(None, None) == "GEN-PRO"


class TestGenerateVariants:
    def test_cartesian_product_in_attribute_order(self):
        generated = variants.generate_variants([COLOR, SIZE, MATERIAL], 50000, category_name="Clothing", product_name="Shirt")
        assert [v["attribute_values"] for v in generated] == [
            {"Color": "Red", "Size": "XL"},
            {"Color": "Red", "Size": "Free Size"},
            {"Color": "White", "Size": "XL"},
            {"Color": "White", "Size": "Free Size"},
        ]
        assert [v["sku"] for v in generated] == [
            "CLO-SHI-RED-XL",
            "CLO-SHI-RED-FS",
            "CLO-SHI-WHT-XL",
            "CLO-SHI-WHT-FS",
        ]

    def test_base_sku_gives_numbered_skus(self):
        generated = variants.generate_variants([COLOR], 50000, sku="TS01")
        assert [v["sku"] for v in generated] == ["TS01-1", "TS01-2"]

    def test_prices_stock_and_image(self):
        generated = variants.generate_variants([COLOR], 50000, 45000, images=["a.jpg", "b.jpg"])
        for variant in generated:
            assert variant["price_cents"] == 45000
            assert variant["original_price_cents"] == 50000
            assert variant["stock"] == 100
            assert variant["image"] == "a.jpg"

    def test_nothing_selected_is_an_error(self):
        with pytest.raises(ValidationError):
            variants.generate_variants([MATERIAL], 1000)
        with pytest.raises(ValidationError):
            variants.generate_variants([{"name": "Color", "options": [], "for_variations": True}], 1000)

    def test_accepts_objects(self):
        attr = SimpleNamespace(name="Weight", options=["1kg", "5kg"], for_variations=True)
        assert len(variants.generate_variants([attr], 1000)) == 2


class TestRegeneratedSkus:
    def test_sorted_attribute_keys(self):
        rows = [SimpleNamespace(attribute_values={"Size": "XL", "Color": "White"})]
        prefix, skus = variants.regenerated_skus("Clothing", "Shirt", rows)
        assert prefix == "CLO-SHI"
        assert skus == ["CLO-SHI-WHT-XL"]


class TestReconstructAttributes:
    def test_flags_attributes_used_by_variants(self):
        product = SimpleNamespace(
            attributes=[{"name": "Color", "options": ["Red"]}, {"name": "Material", "options": ["Cotton"]}],
            variants=[SimpleNamespace(attribute_values={"Color": "Red"})],
        )
        assert variants.reconstruct_attributes(product) == [
            {"name": "Color", "options": ["Red"], "for_variations": True},
            {"name": "Material", "options": ["Cotton"], "for_variations": False},
        ]

    def test_legacy_products_derive_from_variants(self):
        product = SimpleNamespace(
            attributes=[],
            variants=[
                SimpleNamespace(attribute_values={"Color": "Red", "Size": "S"}),
                SimpleNamespace(attribute_values={"Color": "Blue", "Size": "S"}),
            ],
        )
        assert variants.reconstruct_attributes(product) == [
            {"name": "Color", "options": ["Red", "Blue"], "for_variations": True},
            {"name": "Size", "options": ["S"], "for_variations": True},
        ]


def test_sync_global_attributes_merges_case_insensitively(session):
    session.add(Attribute(name="Color", values=["Red"]))
    session.commit()

    touched = variants.sync_global_attributes(
        session,
        [{"name": "color", "options": ["red", "Blue"]}, {"name": "Size", "options": ["S", "M"]}],
    )
    session.commit()

    by_name = {a.name: a.values for a in session.scalars(select(Attribute))}
    assert by_name == {"Color": ["Red", "Blue"], "Size": ["S", "M"]}
    assert len(touched) == 2


def test_parse_values_input():
    assert variants.parse_values_input(" Red, Blue ,,Green ") == ["Red", "Blue", "Green"]
