"""
DocumentStore mutations: property edits, deletes, adds, moves.

Every failed mutation must leave the store exactly as it was; the tests
check the live template object is untouched, not just equal.
"""

import pytest

from editor.kernel.catalog import default_catalog
from editor.kernel.errors import LockedNode, NotFound, SchemaViolation
from editor.kernel.hydration import deserialize, serialize
from editor.kernel.types import Colors, NodePath, Rect, Spacing

RECT = Rect(top=100, left=0, width=1200, height=400)


def section_ids(store):
    return [s.id for s in store.template.sections]


class TestUpdateProperty:
    def test_element_property(self, business):
        path = NodePath("hero", "hero-banner", "title")
        assert business.update_property(path, "text", "Hello") == []
        assert business.node(path).properties["text"] == "Hello"

    def test_string_path(self, business):
        business.update_property("hero/hero-banner/cta", "url", "#signup")
        assert business.node("hero/hero-banner/cta").properties["url"] == "#signup"

    def test_schema_failure_is_a_warning(self, business):
        warnings = business.update_property("products/product-1/price", "amount", -5)
        assert [w.code for w in warnings] == ["SCHEMA_VIOLATION"]
        assert warnings[0].message == "Price.amount must not be negative"
        assert business.node("products/product-1/price").properties["amount"] == -5

    def test_value_is_copied_in(self, business):
        links = [{"text": "Home", "url": "/"}]
        business.update_property("header/navbar/nav", "links", links)
        links.append({"text": "Later", "url": "/later"})
        assert len(business.node("header/navbar/nav").properties["links"]) == 1

    def test_component_parameters(self, business):
        business.update_property("hero/hero-banner", "overlay", 0.4)
        assert business.node("hero/hero-banner").parameters == {"overlay": 0.4}

    def test_section_attributes(self, business):
        business.update_property("hero", "background", "#000000")
        business.update_property("hero", "spacing", {"top": 0, "bottom": 96})
        business.update_property("hero", "heading", "Welcome")

        hero = business.node("hero")
        assert hero.background == "#000000"
        assert hero.spacing == Spacing(top=0, bottom=96)
        assert hero.properties == {"heading": "Welcome"}

    def test_invalid_section_attribute_raises(self, business):
        before = business.template
        with pytest.raises(SchemaViolation):
            business.update_property("hero", "name", "")
        assert business.template is before
        assert business.node("hero").name == "Hero Section"

    def test_template_attributes(self, business):
        business.update_property(NodePath(), "title", "Acme Inc.")
        business.update_property(NodePath(), "colors", {"primary": "#111111", "secondary": "#222222"})
        business.update_property(NodePath(), "logoUrl", "https://example.com/logo.png")
        business.update_property(NodePath(), "subtitle", "We build things")

        template = business.template
        assert template.title == "Acme Inc."
        assert template.colors == Colors(primary="#111111", secondary="#222222")
        assert template.logo_url == "https://example.com/logo.png"
        assert template.metadata["subtitle"] == "We build things"

    def test_invalid_template_attribute_raises(self, business):
        before = business.template
        with pytest.raises(SchemaViolation):
            business.update_property(NodePath(), "colors", {"primary": "#111111"})
        assert business.template is before

    def test_missing_path(self, business):
        with pytest.raises(NotFound):
            business.update_property("hero/hero-banner/nope", "text", "x")

    def test_no_template(self, store):
        with pytest.raises(NotFound):
            store.update_property(NodePath(), "title", "x")


class TestEditability:
    def test_locked_edit_blocks_descendants(self, showcase):
        before = showcase.template
        with pytest.raises(LockedNode) as exc:
            showcase.update_property("hero/video/title", "text", "Changed")
        assert exc.value.path == NodePath("hero")
        assert exc.value.editable == "locked-edit"
        assert showcase.template is before
        assert showcase.node("hero/video/title").properties["text"] == "Meet Nova"

    def test_locked_edit_blocks_the_node_itself(self, showcase):
        with pytest.raises(LockedNode):
            showcase.update_property("hero", "background", "#000000")
        assert not showcase.can_edit("hero")

    def test_locked_edit_does_not_leak_to_siblings(self, showcase):
        showcase.update_property("products/product-1/name", "text", "Nova Mini")
        assert showcase.can_edit("products/product-1/name")

    def test_locked_replacing_allows_content_edits(self, business):
        assert business.can_edit("header/navbar/logo")
        assert not business.can_remove("header")
        business.update_property("header", "background", "#fafafa")
        assert business.node("header").background == "#fafafa"

    def test_root_cannot_be_removed(self, business):
        assert not business.can_remove(NodePath())


class TestDelete:
    def test_delete_node(self, business):
        business.delete_node("products/product-2")
        assert [c.id for c in business.node("products").components] == ["product-1", "product-3"]

    def test_delete_selected_clears_selection(self, business):
        business.select_component("product-2", rect=RECT)
        assert business.delete_selected_item() is True
        assert business.current_focused_element_id is None
        assert business.selected_item_rect is None
        assert [c.id for c in business.node("products").components] == ["product-1", "product-3"]

    def test_confirm_can_cancel(self, business):
        business.select_component("product-2")
        asked = []

        def confirm(path):
            asked.append(path)
            return False

        assert business.delete_selected_item(confirm) is False
        assert asked == [NodePath("products", "product-2")]
        assert business.current_focused_element_id == NodePath("products", "product-2")
        assert len(business.node("products").components) == 3

    def test_nothing_selected(self, business):
        assert business.delete_selected_item() is False

    def test_deleting_ancestor_clears_selection(self, business):
        business.select_element("price", component_id="product-1")
        business.delete_node("products")
        assert business.current_focused_element_id is None

    def test_deleting_unrelated_node_keeps_selection(self, business):
        business.select_element("price", component_id="product-1", rect=RECT)
        business.delete_node("testimonials")
        assert business.current_focused_element_id == NodePath("products", "product-1", "price")
        assert business.selected_item_rect == RECT

    @pytest.mark.parametrize(
        "path,locked_at",
        [
            ("header", "header"),
            ("header/navbar", "header/navbar"),
            ("header/navbar/logo", "header/navbar"),
            ("footer/footer-content", "footer"),
        ],
    )
    def test_locked_replacing(self, business, path, locked_at):
        before = business.template
        with pytest.raises(LockedNode) as exc:
            business.delete_node(path)
        assert str(exc.value.path) == locked_at
        assert business.template is before

    def test_grandchild_of_locked_container_is_removable(self, business):
        business.delete_node("footer/footer-content/about")
        assert business.node("footer/footer-content").find_element("about") is None

    def test_failed_delete_keeps_selection(self, business):
        business.select_component("navbar")
        with pytest.raises(LockedNode):
            business.delete_selected_item()
        assert business.current_focused_element_id == NodePath("header", "navbar")

    def test_required_price_cannot_be_deleted(self, business):
        business.select_element("price", component_id="product-1")
        before = business.template
        with pytest.raises(SchemaViolation) as exc:
            business.delete_selected_item()
        assert exc.value.errors == ["ProductCard requires a Price element"]
        assert business.template is before
        assert business.current_focused_element_id == NodePath("products", "product-1", "price")

    def test_last_testimonial_text_cannot_be_deleted(self, business):
        business.delete_node("testimonials/testimonial-1/quote")
        with pytest.raises(SchemaViolation):
            business.delete_node("testimonials/testimonial-1/author")
        assert business.node("testimonials/testimonial-1").find_element("author") is not None

    def test_deletes_keep_template_loadable(self, business):
        business.delete_node("products/product-1/description")
        business.delete_node("testimonials/testimonial-1/quote")
        payload = serialize(business.template)
        assert serialize(deserialize(payload)) == payload

    def test_root(self, business):
        with pytest.raises(ValueError):
            business.delete_node(NodePath())

    def test_missing(self, business):
        with pytest.raises(NotFound):
            business.delete_node("products/product-9")


class TestAdd:
    def test_add_section(self, business):
        path = business.add_section("TestimonialsSection", index=1)
        assert path == NodePath("testimonials-section")
        assert section_ids(business)[:3] == ["header", "testimonials-section", "hero"]
        assert business.node(path).name == "Testimonials"

    def test_generated_ids_stay_unique(self, business):
        first = business.add_section("HeroSection")
        second = business.add_section("HeroSection", name="Second Hero")
        assert first == NodePath("hero-section")
        assert second == NodePath("hero-section-2")
        assert business.node(second).name == "Second Hero"

    def test_add_component(self, business):
        path = business.add_component("products", "ProductCard")
        assert path == NodePath("products", "product-card")
        card = business.node(path)
        assert [e.type for e in card.elements] == ["Image", "Heading", "Paragraph", "Price", "Button"]

    def test_add_element(self, business):
        path = business.add_element("hero", "hero-banner", "Badge", properties={"text": "Sale"}, index=0)
        assert path == NodePath("hero", "hero-banner", "badge")
        assert business.node("hero/hero-banner").elements[0].properties == {"text": "Sale"}

    def test_properties_are_copied_in(self, business):
        links = [{"text": "Home", "url": "/"}]
        path = business.add_element("hero", "hero-banner", "Navigation", properties={"links": links})
        before = serialize(business.template)
        links.append({"text": "Injected", "url": "/injected"})
        links[0]["text"] = "Changed"
        assert business.node(path).properties["links"] == [{"text": "Home", "url": "/"}]
        assert serialize(business.template) == before

    def test_invalid_element_rejected(self, business):
        before = business.template
        with pytest.raises(SchemaViolation):
            business.add_element("hero", "hero-banner", "Heading", properties={"level": "h9"})
        assert business.template is before

    def test_unknown_type_rejected(self, business):
        with pytest.raises(SchemaViolation):
            business.add_section("BlogSection")

    def test_locked_replacing_container(self, business):
        with pytest.raises(LockedNode):
            business.add_component("header", "Header")
        with pytest.raises(LockedNode):
            business.add_element("header", "navbar", "Badge")

    def test_locked_edit_container(self, showcase):
        with pytest.raises(LockedNode):
            showcase.add_element("hero", "video", "Badge")


class TestMoveSection:
    def test_move_up(self, business):
        assert business.move_section("products", "up") is True
        assert section_ids(business) == ["header", "products", "hero", "testimonials", "footer"]

    def test_move_keeps_focus_drops_rect(self, business):
        business.select_section("products", RECT)
        business.move_section("products", "down")
        assert business.current_focused_element_id == NodePath("products")
        assert business.selected_item_rect is None

    def test_cannot_swap_with_locked_neighbour(self, business):
        with pytest.raises(LockedNode):
            business.move_section("hero", "up")
        with pytest.raises(LockedNode):
            business.move_section("testimonials", "down")
        assert section_ids(business) == ["header", "hero", "products", "testimonials", "footer"]

    def test_locked_section_cannot_move(self, business):
        with pytest.raises(LockedNode):
            business.move_section("footer", "up")

    def test_at_the_edge(self, business):
        business.add_section("HeroSection")
        assert business.move_section("hero-section", "down") is False

    def test_bad_direction(self, business):
        with pytest.raises(ValueError):
            business.move_section("hero", "left")


class TestPreviewIsolation:
    def test_mutations_are_no_ops(self, business):
        business.toggle_preview_mode()
        before = serialize(business.template)

        assert business.update_property("hero/hero-banner/title", "text", "x") == []
        business.delete_node("products/product-1")
        assert business.add_section("HeroSection") is None
        assert business.add_component("products", "ProductCard") is None
        assert business.add_element("hero", "hero-banner", "Badge") is None
        assert business.move_section("products", "up") is False
        assert business.delete_selected_item() is False
        assert business.select_template("portfolio") is False
        assert business.load_template(default_catalog.payload("portfolio")) is False

        assert serialize(business.template) == before
        assert business.mode == "previewing"

    def test_tool_frozen_device_mode_not(self, business):
        business.toggle_preview_mode()
        business.set_active_tool("media")
        business.set_device_mode("mobile")
        assert business.active_tool == "sections"
        assert business.device_mode == "mobile"

    def test_toggle_back(self, business):
        assert business.toggle_preview_mode() is True
        assert business.toggle_preview_mode() is False
        assert business.mode == "editing"

    def test_nothing_to_preview(self, store):
        assert store.toggle_preview_mode() is False
        assert store.mode == "unselected"


class TestSessionState:
    def test_active_tool(self, business):
        business.set_active_tool("text")
        assert business.active_tool == "text"
        with pytest.raises(ValueError):
            business.set_active_tool("paint")
        assert business.active_tool == "text"

    def test_device_mode(self, store):
        with pytest.raises(ValueError):
            store.set_device_mode("watch")

    def test_reset(self, business):
        generation = business.generation
        business.set_active_tool("media")
        business.reset()
        assert business.mode == "unselected"
        assert business.active_tool == "sections"
        assert business.generation == generation + 1
