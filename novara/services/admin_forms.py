# novara/services/admin_forms.py
"""
Payload builders for the admin back-office forms.

Each builder validates what the admin typed and returns the exact payload
the backend expects, or raises ValidationError before any request is made.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from novara.domain.errors import ValidationError

MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_PRODUCT_IMAGES = 5
DELIVERY_TYPES = ("ready-to-ship", "made-to-order")
WEIGHT_UNITS = ("grams", "carats", "kg")


def _number(value, field_name: str, label: str) -> float | None:
    if value is None or str(value).strip() == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number", field=field_name)


def _integer(value, field_name: str, label: str) -> int | None:
    number = _number(value, field_name, label)
    if number is None:
        return None
    if number != int(number):
        raise ValidationError(f"{label} must be a whole number", field=field_name)
    return int(number)


# ---------------- coupons ----------------

def coupon_payload(form: Dict[str, Any]) -> Dict[str, Any]:
    code = str(form.get("code") or "").strip()
    discount_type = str(form.get("discountType") or "percentage").strip().lower()
    expires_at = str(form.get("expiresAt") or "").strip()
    discount_value = _number(form.get("discountValue"), "discountValue", "Discount value")

    if not code or discount_value is None or not expires_at:
        raise ValidationError(
            "Please fill in all required fields (Code, Discount Value, Expiry Date)"
        )
    if discount_type not in ("percentage", "fixed"):
        raise ValidationError("Discount type must be 'percentage' or 'fixed'", field="discountType")
    if discount_type == "percentage" and not (0 < discount_value <= 100):
        raise ValidationError("Percentage discount must be between 1 and 100", field="discountValue")
    if discount_type == "fixed" and discount_value <= 0:
        raise ValidationError("Fixed discount must be greater than 0", field="discountValue")

    return {
        "code": code.upper(),
        "discountType": discount_type,
        "discountValue": discount_value,
        "minOrderAmount": _number(form.get("minOrderAmount"), "minOrderAmount", "Minimum order") or 0,
        "maxDiscount": _number(form.get("maxDiscount"), "maxDiscount", "Maximum discount"),
        "expiresAt": expires_at,
        "usageLimit": _integer(form.get("usageLimit"), "usageLimit", "Usage limit"),
        "description": str(form.get("description") or ""),
    }


# ---------------- categories ----------------

def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower())


def category_payload(form: Dict[str, Any]) -> Dict[str, Any]:
    name = str(form.get("name") or "").strip()
    if not name:
        raise ValidationError("Please enter category name", field="name")

    slug = str(form.get("slug") or "").strip() or slugify(name)
    try:
        display_order = int(form.get("displayOrder") or 0)
    except (TypeError, ValueError):
        display_order = 0

    return {
        "name": name,
        "slug": slug,
        "displayOrder": display_order,
        "showInNavbar": bool(form.get("showInNavbar", True)),
        "description": str(form.get("description") or "").strip(),
    }


# ---------------- uploads ----------------

@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def as_file(self, field_name: str) -> Tuple[str, Tuple[str, bytes, str]]:
        return field_name, (self.filename, self.content, self.content_type)


def check_image(upload: ImageUpload) -> None:
    if not (upload.content_type or "").startswith("image/"):
        raise ValidationError(f"{upload.filename} is not an image", field="images")
    if upload.size > MAX_IMAGE_BYTES:
        raise ValidationError("Each image must be under 5MB", field="images")


# ---------------- products ----------------

@dataclass
class ProductForm:
    """Product create/edit form, current pricing model (base price + weights)."""

    itemname: str
    item_code: str
    base_price: Any
    category: str
    description: str = ""
    delivery_type: str = "ready-to-ship"
    in_stock: bool = True
    net_weight: Any = None
    gross_weight: Any = None
    weight_unit: str = "grams"
    existing_images: List[str] = field(default_factory=list)
    new_images: List[ImageUpload] = field(default_factory=list)

    def validate(self) -> None:
        if not (self.itemname or "").strip():
            raise ValidationError("Please enter product name", field="itemname")
        if not (self.item_code or "").strip():
            raise ValidationError("Please enter product code", field="itemCode")
        price = _number(self.base_price, "basePrice", "Base price")
        if price is None or price <= 0:
            raise ValidationError("Please enter a valid base price", field="basePrice")
        if not self.category:
            raise ValidationError("Please select a category", field="category")
        if self.delivery_type not in DELIVERY_TYPES:
            raise ValidationError("Unknown delivery type", field="deliveryType")

        net = _number(self.net_weight, "netWeight", "Net weight")
        if net is not None and net < 0:
            raise ValidationError("Net weight cannot be negative", field="netWeight")
        gross = _number(self.gross_weight, "grossWeight", "Gross weight")
        if gross is not None and gross < 0:
            raise ValidationError("Gross weight cannot be negative", field="grossWeight")
        if self.weight_unit not in WEIGHT_UNITS:
            raise ValidationError("Unknown weight unit", field="weightUnit")

        if len(self.existing_images) + len(self.new_images) > MAX_PRODUCT_IMAGES:
            raise ValidationError("Maximum 5 images allowed", field="images")
        if not self.existing_images and not self.new_images:
            raise ValidationError("Please keep at least one product image", field="images")
        for upload in self.new_images:
            check_image(upload)

    def to_multipart(self) -> Tuple[Dict[str, Any], list]:
        self.validate()
        fields = {
            "itemname": self.itemname.strip(),
            "itemCode": self.item_code.strip().upper(),
            "basePrice": str(self.base_price),
            "category": self.category,
            "description": (self.description or "").strip(),
            "deliveryType": self.delivery_type,
            "inStock": "true" if self.in_stock else "false",
        }
        if self.existing_images:
            fields["existingImages"] = list(self.existing_images)
        if _has_value(self.net_weight) or _has_value(self.gross_weight):
            fields["weight[netWeight]"] = str(float(self.net_weight or 0))
            fields["weight[grossWeight]"] = str(float(self.gross_weight or 0))
            fields["weight[unit]"] = self.weight_unit
        files = [upload.as_file("itemImages") for upload in self.new_images]
        return fields, files


def _has_value(value) -> bool:
    return value is not None and str(value).strip() != ""


# ---------------- carousel ----------------

def slide_multipart(
    title: str, subtitle: str, image: ImageUpload | None, require_image: bool
) -> Tuple[Dict[str, Any], list]:
    if require_image and image is None:
        raise ValidationError("Please choose a slide image", field="image")
    files = []
    if image is not None:
        if image.size > MAX_IMAGE_BYTES:
            raise ValidationError("Image size should be less than 5MB", field="image")
        files.append(image.as_file("image"))
    return {"title": title or "", "subtitle": subtitle or ""}, files
