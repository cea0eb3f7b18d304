"""
Hydration: serialize / deserialize / dumps.

Law under test: deserialize(serialize(t)) == t for every valid tree, and
deserialize reports every violation in one HydrationError.
"""

import copy

import pytest

from editor.kernel.catalog import default_catalog
from editor.kernel.errors import HydrationError
from editor.kernel.hydration import deserialize, dumps, hash_template, read_project, serialize


class TestRoundTrip:
    @pytest.mark.parametrize("template_id", ["business", "portfolio", "showcase"])
    def test_round_trip(self, template_id):
        template = default_catalog.get(template_id)
        assert deserialize(serialize(template)) == template

    def test_child_order_preserved(self):
        data = serialize(default_catalog.get("business"))
        assert [s["id"] for s in data["sections"]] == ["header", "hero", "products", "testimonials", "footer"]
        products = data["sections"][2]["components"]
        assert [c["id"] for c in products] == ["product-1", "product-2", "product-3"]

    def test_serialize_is_independent_of_the_tree(self):
        template = default_catalog.get("business")
        data = serialize(template)
        data["sections"][0]["name"] = "Changed"
        data["sections"][0]["components"][0]["elements"][0]["properties"]["text"] = "Changed"

        assert template.sections[0].name == "Header"
        assert template.sections[0].components[0].elements[0].properties["text"] == "Business Name"

    def test_serialize_matches_payload(self, business_payload):
        assert serialize(deserialize(business_payload)) == business_payload

    def test_deserialize_does_not_touch_input(self, business_payload):
        before = copy.deepcopy(business_payload)
        template = deserialize(business_payload)
        template.sections[0].name = "Changed"
        assert business_payload == before

    def test_numeric_template_id(self, business_payload):
        business_payload["id"] = 42
        assert deserialize(business_payload).id == 42


class TestUnknownKeys:
    def test_extras_survive_round_trip(self, business_payload):
        business_payload["builderVersion"] = 3
        business_payload["sections"][1]["animation"] = "fade"
        business_payload["sections"][1]["components"][0]["analyticsId"] = "hero-1"
        business_payload["sections"][1]["components"][0]["elements"][0]["ariaLabel"] = "Main heading"

        template = deserialize(business_payload)
        assert template.extra == {"builderVersion": 3}
        assert template.sections[1].extra == {"animation": "fade"}

        data = serialize(template)
        assert data["builderVersion"] == 3
        assert data["sections"][1]["animation"] == "fade"
        assert data["sections"][1]["components"][0]["analyticsId"] == "hero-1"
        assert data["sections"][1]["components"][0]["elements"][0]["ariaLabel"] == "Main heading"

    def test_extras_inside_colors_and_spacing(self, business_payload):
        business_payload["colors"]["muted"] = "#eeeeee"
        business_payload["sections"][1]["spacing"]["left"] = 16

        data = serialize(deserialize(business_payload))
        assert data["colors"]["muted"] == "#eeeeee"
        assert data["sections"][1]["spacing"] == {"top": 48, "bottom": 48, "left": 16}


class TestDumps:
    def test_same_tree_same_bytes(self, business_payload):
        a = deserialize(business_payload)
        b = deserialize(dict(reversed(list(business_payload.items()))))
        assert dumps(a) == dumps(b)

    def test_is_utf8_json(self):
        raw = dumps(default_catalog.get("business"))
        assert isinstance(raw, bytes)
        assert "©".encode() in raw

    def test_hash_tracks_content(self, business_payload):
        template = deserialize(business_payload)
        digest = hash_template(template)
        assert len(digest) == 16
        assert hash_template(deserialize(business_payload)) == digest

        template.sections[0].name = "Top"
        assert hash_template(template) != digest


class TestDiagnostics:
    def test_not_an_object(self):
        with pytest.raises(HydrationError) as exc:
            deserialize([])
        assert exc.value.errors == ["template: must be an object"]

    def test_missing_root_fields(self):
        with pytest.raises(HydrationError) as exc:
            deserialize({"id": "x"})
        assert exc.value.errors == [
            "template: missing required field 'name'",
            "template: missing required field 'title'",
        ]

    def test_every_violation_is_reported(self, business_payload):
        sections = business_payload["sections"]
        sections[2]["id"] = "hero"
        sections[1]["components"][0]["elements"][0]["properties"]["level"] = "h9"
        del sections[4]["components"][0]["elements"][1]["type"]
        sections[3]["editable"] = "sometimes"

        with pytest.raises(HydrationError) as exc:
            deserialize(business_payload)

        errors = exc.value.errors
        assert "template: Duplicate section id: 'hero'" in errors
        assert (
            "template.sections[1].components[0].elements[0]: Heading.level must be one of h1..h6, got 'h9'"
            in errors
        )
        assert "template.sections[4].components[0].elements[1]: missing required field 'type'" in errors
        assert "template.sections[3]: Unknown editable value: 'sometimes'" in errors
        assert len(errors) == 4

    def test_children_must_be_lists(self, business_payload):
        business_payload["sections"][0]["components"] = {"navbar": {}}
        with pytest.raises(HydrationError) as exc:
            deserialize(business_payload)
        assert exc.value.errors == ["template.sections[0]: 'components' must be a list"]


class TestReadProject:
    def test_saved_page(self, business_payload):
        project = read_project(
            {
                "template": business_payload,
                "activeTool": "media",
                "templateSelected": True,
                "deviceMode": "tablet",
            }
        )
        assert project.template.id == "business"
        assert project.active_tool == "media"
        assert project.template_selected is True
        assert project.device_mode == "tablet"

    def test_bare_template(self, business_payload):
        project = read_project(business_payload)
        assert project.template.id == "business"
        assert project.active_tool is None
        assert project.device_mode is None

    def test_session_and_tree_errors_reported_together(self, business_payload):
        del business_payload["title"]
        with pytest.raises(HydrationError) as exc:
            read_project({"template": business_payload, "activeTool": "paint", "deviceMode": "watch"})
        assert exc.value.errors == [
            "project: unknown activeTool 'paint'",
            "project: unknown deviceMode 'watch'",
            "template: missing required field 'title'",
        ]

    def test_not_an_object(self):
        with pytest.raises(HydrationError):
            read_project("business")
