from collections import Counter

import pytest
from sqlalchemy import select

from src.db.models import Banner, Brand, Category, HomeSection, Order, OrderItem, Product
from src.services import sections


def names(cards):
    return [card["name"] for card in cards]


@pytest.fixture
def ctx(session, catalog):
    return sections.HomeContext(
        products=list(session.scalars(select(Product).order_by(Product.id.desc()))),
        categories=list(session.scalars(select(Category).order_by(Category.id))),
        brands=list(session.scalars(select(Brand))),
        sales=Counter({catalog["apple"].id: 3, catalog["milk"].id: 1}),
    )


def section(type, **fields):
    fields.setdefault("filter_type", "all")
    fields.setdefault("title", type.title())
    fields.setdefault("is_active", True)
    fields.setdefault("sort_order", 0)
    return HomeSection(type=type, **fields)


class TestSectionProducts:
    def test_category_filter_includes_subcategories(self, ctx):
        found = sections.section_products(section("slider", filter_type="category", filter_value="fruits"), ctx)
        assert {p.name for p in found} == {"Apple", "Orange"}

    @pytest.mark.parametrize("filter_type", ["sale", "featured"])
    def test_sale_and_featured(self, ctx, filter_type):
        assert [p.name for p in sections.section_products(section("slider", filter_type=filter_type), ctx)] == ["Orange"]

    def test_view_all_link(self):
        assert sections.view_all_link(section("slider", filter_type="category", filter_value=" Fruits ")) == "/products?category=fruits"
        assert sections.view_all_link(section("slider")) == "/products"
        encoded = sections.view_all_link(section("slider", filter_type="category", filter_value="Fresh Fruits & Veg"))
        assert encoded == "/products?category=fresh%20fruits%20%26%20veg"


class TestRenderers:
    def test_tabbed_slider_best_selling_only_lists_sold_products(self, ctx):
        rendered = sections.render_section(section("tabbed-slider"), ctx)
        tabs = {tab["label"]: tab["products"] for tab in rendered["tabs"]}
        assert list(tabs) == ["NEW ARRIVAL", "ON SALE", "BEST SELLING"]
        assert set(names(tabs["NEW ARRIVAL"])) == {"Apple", "Orange", "Milk"}
        assert names(tabs["ON SALE"]) == ["Orange"]
        assert names(tabs["BEST SELLING"]) == ["Apple", "Milk"]

    def test_category_grid_counts_products(self, ctx, catalog):
        rendered = sections.render_section(section("category-grid", category_ids=[catalog["dairy"].id, 999]), ctx)
        assert [(c["name"], c["item_count"]) for c in rendered["categories"]] == [("Dairy", 1)]

    def test_category_grid_without_categories_is_skipped(self, ctx):
        assert sections.render_section(section("category-grid", category_ids=[]), ctx) is None

    def test_three_column_banners_need_banners(self, ctx):
        assert sections.render_section(section("three-column-banners", grid_banners=[]), ctx) is None
        rendered = sections.render_section(section("three-column-banners", grid_banners=[{"image_url": "a.jpg"}]), ctx)
        assert rendered["banners"] == [{"image_url": "a.jpg"}]

    def test_brand_tabs(self, ctx):
        rendered = sections.render_section(section("brand-tabs", brand_names=["Fresh Farm", "Nobody"]), ctx)
        assert [(tab["brand"], set(names(tab["products"]))) for tab in rendered["tabs"]] == [
            ("Fresh Farm", {"Apple", "Milk"}),
            ("Nobody", set()),
        ]

    def test_brand_logos_need_a_logo(self, ctx):
        rendered = sections.render_section(section("brand-logos"), ctx)
        assert [b["name"] for b in rendered["brands"]] == ["Fresh Farm"]
        assert sections.render_section(section("brand-logos", brand_names=["Other"]), ctx) is None

    def test_featured_categories_grid(self, ctx, catalog):
        grid = [{"image_url": f"{i}.jpg", "title": "Fruit", "category_id": catalog["fruits"].id} for i in range(6)]
        rendered = sections.render_section(section("featured-categories-grid", grid_banners=grid), ctx)
        assert len(rendered["items"]) == 4
        assert rendered["items"][0]["product_count"] == 1

    def test_featured_collection_scroll(self, ctx):
        banner = {"image_url": "bg.jpg", "link": "/sale", "description": "Summer picks"}
        rendered = sections.render_section(section("featured-collection-scroll", filter_type="sale", banner=banner), ctx)
        assert rendered["background"] == "bg.jpg"
        assert rendered["description"] == "Summer picks"
        assert names(rendered["products"]) == ["Orange"]

    def test_product_cards_carry_display_price(self, ctx):
        rendered = sections.render_section(section("featured-product-grid", filter_type="featured", banner={"link": "/featured"}), ctx)
        [card] = rendered["products"]
        assert card["on_sale"] is True
        assert card["display_price"] == {"mrp": 20000, "sale": 18000}
        assert rendered["view_all_link"] == "/featured"

    def test_unknown_type_renders_nothing(self, ctx):
        assert sections.render_section(section("carousel-3d"), ctx) is None


def test_render_sections_orders_and_filters(ctx):
    layout = [
        section("slider", title="Second", sort_order=2),
        section("slider", title="Hidden", sort_order=0, is_active=False),
        section("single-banner", title="Empty", sort_order=1),
        section("slider", title="First", sort_order=1),
    ]
    assert [s["title"] for s in sections.render_sections(layout, ctx)] == ["First", "Second"]


def test_sales_counts_ignore_cancelled_orders(session, catalog):
    apple, orange = catalog["apple"], catalog["orange"]

    def order(status, product, quantity):
        return Order(
            customer_name="C",
            status=status,
            items=[OrderItem(product_id=product.id, product_name=product.name, quantity=quantity, unit_price_cents=1, total_price_cents=quantity)],
        )

    session.add_all([order("Delivered", apple, 2), order("Pending", apple, 1), order("Cancelled", orange, 5)])
    session.commit()
    assert sections.sales_counts(session) == Counter({apple.id: 3})


def test_render_home(session, catalog):
    session.add_all(
        [Banner(type="hero_grid", image_url=f"grid-{i}.jpg", sort_order=i) for i in range(6)]
        + [
            Banner(type="slider", image_url="b.jpg", sort_order=2),
            Banner(type="slider", image_url="a.jpg", sort_order=1),
            Banner(type="slider", image_url="off.jpg", is_active=False),
            HomeSection(type="slider", title="Fresh", filter_type="category", filter_value="fruits"),
        ]
    )
    session.commit()

    home = sections.render_home(session)
    assert [b["image_url"] for b in home["hero_slider"]] == ["a.jpg", "b.jpg"]
    assert len(home["hero_grid"]) == 4
    assert home["home_banners"] == []
    assert [s["title"] for s in home["sections"]] == ["Fresh"]
    assert names(home["sections"][0]["products"]) == ["Orange", "Apple"]
