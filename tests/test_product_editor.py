"""Tests for the ProductEditor form controller."""

import json

import pytest

import schemas
from conftest import FakeProductAPI, make_product
from product_api import ProductAPIError
from services import product_editor
from services.product_editor import EditorMode, ProductEditor


PNG = schemas.UploadedImage(filename="mug.png", content_type="image/png", content=b"\x89PNG")


def filled_editor(api, notifier, product_id=None, **kwargs) -> ProductEditor:
    editor = ProductEditor(api, notifier, product_id=product_id, **kwargs)
    editor.name = "Mug"
    editor.price = "12.50"
    editor.update_attribute(0, key="color", value="red")
    editor.set_image(PNG)
    return editor


class TestCreate:

    def test_valid_submit_creates_once_and_redirects(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)

        result = editor.submit()

        assert result.ok
        assert result.redirect_to == "/"
        assert len(fake_api.created) == 1
        payload = fake_api.created[0]
        assert sorted(payload.part_names()) == ["attributes", "image", "name", "price"]
        assert payload.field("name") == "Mug"
        assert payload.field("price") == "12.50"
        assert json.loads(payload.field("attributes")) == [{"key": "color", "value": "red"}]
        assert payload.files()["image"] == ("mug.png", b"\x89PNG", "image/png")
        assert [t["message"] for t in notifier.drain()] == ["Product saved successfully"]

    def test_missing_image_blocks_submit(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)
        editor.remove_image()

        result = editor.submit()

        assert not result.ok
        assert result.errors == {"image": product_editor.IMAGE_REQUIRED}
        assert fake_api.created == []

    def test_non_image_upload_is_rejected(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)
        editor.set_image(schemas.UploadedImage(filename="notes.txt", content_type="text/plain"))

        result = editor.submit()

        assert result.errors["image"] == product_editor.IMAGE_NOT_IMAGE
        assert fake_api.created == []

    def test_failure_keeps_entered_values(self, fake_api, notifier):
        fake_api.save_error = ProductAPIError("Name already taken", status=409, path="/create")
        editor = filled_editor(fake_api, notifier)

        result = editor.submit()

        assert not result.ok
        assert result.redirect_to is None
        assert editor.name == "Mug"
        assert editor.price == "12.50"
        assert editor.image == PNG
        assert [(t["level"], t["message"]) for t in notifier.drain()] == [("error", "Name already taken")]

    def test_failure_already_notified_by_client(self, fake_api, notifier):
        fake_api.save_error = ProductAPIError("Unauthorized", status=401, path="/create", notified=True)
        filled_editor(fake_api, notifier).submit()
        assert notifier.drain() == []

    def test_new_mode_labels(self, fake_api, notifier):
        editor = ProductEditor(fake_api, notifier)
        assert editor.mode is EditorMode.NEW
        assert editor.title == "Create Product"
        assert editor.submit_label == "Create Product"
        assert len(editor.attributes) == 1


class TestValidation:

    @pytest.mark.parametrize("price", ["10", "10.5", "10.55", "0.01"])
    def test_valid_prices(self, fake_api, notifier, price):
        editor = filled_editor(fake_api, notifier)
        editor.price = price
        assert "price" not in editor.validate()

    @pytest.mark.parametrize("price,message", [
        ("", product_editor.PRICE_REQUIRED),
        ("abc", product_editor.PRICE_INVALID),
        ("1.234", product_editor.PRICE_INVALID),
        ("-1", product_editor.PRICE_INVALID),
        ("0", product_editor.PRICE_INVALID),
        ("0.00", product_editor.PRICE_INVALID),
    ])
    def test_invalid_prices(self, fake_api, notifier, price, message):
        editor = filled_editor(fake_api, notifier)
        editor.price = price
        assert editor.validate()["price"] == message

    def test_blank_name(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)
        editor.name = "   "
        assert editor.validate()["name"] == product_editor.NAME_REQUIRED

    def test_long_name(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)
        editor.name = "x" * 101
        assert editor.validate()["name"] == product_editor.TOO_LONG

    def test_attribute_rows_need_key_and_value(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)
        row = editor.add_attribute()
        editor.update_attribute(1, value="large")

        errors = editor.validate()

        assert errors == {f"attributes.{row.row_id}.key": product_editor.KEY_REQUIRED}

    def test_duplicate_keys_are_allowed(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)
        editor.add_attribute()
        editor.update_attribute(1, key="color", value="blue")
        assert editor.validate() == {}


class TestAttributeRows:

    def test_removing_last_row_leaves_none_and_blocks_submit(self, fake_api, notifier):
        editor = filled_editor(fake_api, notifier)
        editor.remove_attribute(0)

        assert editor.attributes == []
        result = editor.submit()
        assert result.errors == {"attributes": product_editor.ATTRIBUTES_REQUIRED}
        assert fake_api.created == []

    def test_row_ids_survive_removal(self, fake_api, notifier):
        editor = ProductEditor(fake_api, notifier)
        editor.add_attribute()
        editor.add_attribute()
        ids = [r.row_id for r in editor.attributes]

        editor.remove_attribute(0)

        assert [r.row_id for r in editor.attributes] == ids[1:]

    def test_remove_by_row_id(self, fake_api, notifier):
        editor = ProductEditor(fake_api, notifier)
        second = editor.add_attribute()
        editor.remove_attribute_row(second.row_id)
        assert second not in editor.attributes
        assert len(editor.attributes) == 1

    def test_remove_out_of_range_is_ignored(self, fake_api, notifier):
        editor = ProductEditor(fake_api, notifier)
        editor.remove_attribute(5)
        assert len(editor.attributes) == 1


class TestEdit:

    @pytest.fixture
    def api(self):
        api = FakeProductAPI()
        api.stored["7"] = make_product(7, name="Teapot", price=19.99, image="teapot.png",
                                       attributes=[{"key": "size", "value": "L"}])
        api.stored["8"] = make_product(8, attributes=[])
        return api

    def test_load_populates_fields_but_not_image(self, api, notifier):
        editor = ProductEditor(api, notifier, product_id="7")

        assert editor.load()

        assert editor.mode is EditorMode.EDIT
        assert editor.name == "Teapot"
        assert editor.price == "19.99"
        assert [(r.key, r.value) for r in editor.attributes] == [("size", "L")]
        assert editor.image is None
        assert editor.submit_label == "Update Product"

    def test_load_without_attributes_gives_one_empty_row(self, api, notifier):
        editor = ProductEditor(api, notifier, product_id="8")
        editor.load()
        assert [(r.key, r.value) for r in editor.attributes] == [("", "")]

    def test_load_failure_notifies_and_keeps_form(self, api, notifier):
        api.fetch_error = ProductAPIError(None, status=404, path="/fetch/9")
        editor = ProductEditor(api, notifier, product_id="9")

        assert not editor.load()

        assert editor.load_failed
        assert [t["message"] for t in notifier.drain()] == [product_editor.LOAD_FAILED_MESSAGE]

    def test_submit_updates_with_id(self, api, notifier):
        editor = ProductEditor(api, notifier, product_id="7")
        editor.load()
        editor.set_image(PNG)

        result = editor.submit()

        assert result.ok
        assert api.created == []
        assert [pid for pid, _ in api.updated] == ["7"]

    def test_update_requires_image_by_default(self, api, notifier):
        editor = ProductEditor(api, notifier, product_id="7")
        editor.load()
        assert editor.submit().errors == {"image": product_editor.IMAGE_REQUIRED}
        assert api.updated == []

    def test_update_without_image_when_allowed(self, api, notifier):
        editor = ProductEditor(api, notifier, product_id="7", require_image_on_update=False)
        editor.load()

        result = editor.submit()

        assert result.ok
        _, payload = api.updated[0]
        assert not payload.has_file("image")
