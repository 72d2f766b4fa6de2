"""Tests for admin form payload builders."""

import pytest

from novara.domain.errors import ValidationError
from novara.services.admin_forms import (
    ImageUpload,
    ProductForm,
    category_payload,
    coupon_payload,
    slide_multipart,
    slugify,
)

PNG = ImageUpload(filename="ring.png", content_type="image/png", content=b"\x89PNG")


class TestCouponPayload:
    def test_payload(self):
        payload = coupon_payload(
            {
                "code": " diwali25 ",
                "discountType": "percentage",
                "discountValue": "25",
                "minOrderAmount": "",
                "maxDiscount": "1000",
                "expiresAt": "2030-11-01",
                "usageLimit": "50",
            }
        )
        assert payload == {
            "code": "DIWALI25",
            "discountType": "percentage",
            "discountValue": 25.0,
            "minOrderAmount": 0,
            "maxDiscount": 1000.0,
            "expiresAt": "2030-11-01",
            "usageLimit": 50,
            "description": "",
        }

    @pytest.mark.parametrize("missing", ["code", "discountValue", "expiresAt"])
    def test_required_fields(self, missing):
        form = {"code": "X", "discountValue": 10, "expiresAt": "2030-01-01"}
        form[missing] = ""
        with pytest.raises(ValidationError):
            coupon_payload(form)

    @pytest.mark.parametrize("value", [0, -5, 101])
    def test_percentage_range(self, value):
        with pytest.raises(ValidationError):
            coupon_payload({"code": "X", "discountValue": value, "expiresAt": "2030-01-01"})

    def test_full_percentage_allowed(self):
        assert coupon_payload({"code": "X", "discountValue": 100, "expiresAt": "2030-01-01"})["discountValue"] == 100.0

    def test_fixed_must_be_positive(self):
        with pytest.raises(ValidationError):
            coupon_payload({"code": "X", "discountType": "fixed", "discountValue": 0, "expiresAt": "2030-01-01"})

    def test_non_numeric_value(self):
        with pytest.raises(ValidationError) as exc:
            coupon_payload({"code": "X", "discountValue": "ten", "expiresAt": "2030-01-01"})
        assert exc.value.field == "discountValue"


class TestCategoryPayload:
    def test_slug_derived_from_name(self):
        payload = category_payload({"name": "Gold Rings", "displayOrder": "3"})
        assert payload["slug"] == "gold-rings"
        assert payload["displayOrder"] == 3
        assert payload["showInNavbar"] is True

    def test_name_required(self):
        with pytest.raises(ValidationError):
            category_payload({"name": "  "})

    def test_bad_display_order_falls_back_to_zero(self):
        assert category_payload({"name": "Rings", "displayOrder": "first"})["displayOrder"] == 0

    def test_slugify(self):
        assert slugify("Rings & Bands") == "rings-bands"


class TestProductForm:
    def make(self, **overrides):
        data = dict(
            itemname="Solitaire Ring",
            item_code="sr-01",
            base_price="15000",
            category="cat1",
            new_images=[PNG],
        )
        data.update(overrides)
        return ProductForm(**data)

    def test_multipart(self):
        fields, files = self.make(net_weight="3.2", gross_weight="3.5", in_stock=False).to_multipart()

        assert fields["itemCode"] == "SR-01"
        assert fields["inStock"] == "false"
        assert fields["weight[netWeight]"] == "3.2"
        assert fields["weight[unit]"] == "grams"
        assert files == [("itemImages", ("ring.png", b"\x89PNG", "image/png"))]

    def test_existing_images_are_kept(self):
        fields, files = self.make(existing_images=["a.jpg"], new_images=[]).to_multipart()
        assert fields["existingImages"] == ["a.jpg"]
        assert files == []

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            self.make(base_price="0").validate()

    def test_at_least_one_image(self):
        with pytest.raises(ValidationError):
            self.make(new_images=[]).validate()

    def test_at_most_five_images(self):
        with pytest.raises(ValidationError):
            self.make(existing_images=["1", "2", "3"], new_images=[PNG, PNG, PNG]).validate()

    def test_rejects_non_images(self):
        pdf = ImageUpload(filename="brochure.pdf", content_type="application/pdf", content=b"%PDF")
        with pytest.raises(ValidationError):
            self.make(new_images=[pdf]).validate()

    def test_rejects_large_images(self):
        big = ImageUpload(filename="big.png", content_type="image/png", content=b"0" * (5 * 1024 * 1024 + 1))
        with pytest.raises(ValidationError):
            self.make(new_images=[big]).validate()


class TestSlideMultipart:
    def test_new_slide_needs_image(self):
        with pytest.raises(ValidationError):
            slide_multipart("Bridal", "", None, require_image=True)

    def test_edit_without_image(self):
        fields, files = slide_multipart("Bridal", "New season", None, require_image=False)
        assert fields == {"title": "Bridal", "subtitle": "New season"}
        assert files == []
