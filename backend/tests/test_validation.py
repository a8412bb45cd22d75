import unittest
from datetime import datetime

from purchasing.errors import ValidationError
from purchasing.models import INTEGER_MAX, Item, User
from purchasing.services.purchase_order_service import DetailRequest
from purchasing.validation import (
    ITEM_POLICY,
    MAX_MONEY,
    USER_POLICY,
    validate_payload,
    validate_purchase_order_payload,
)


def _field_errors(fn, *args, **kwargs) -> dict:
    try:
        fn(*args, **kwargs)
    except ValidationError as exc:
        return exc.field_errors or {}
    raise AssertionError("expected ValidationError")


class PayloadValidationTests(unittest.TestCase):
    def test_item_patch_uses_column_names(self):
        patch = validate_payload(
            model=Item,
            payload={"name": " Tape ", "description": "", "price": "15", "cost": 9},
            policy=ITEM_POLICY,
            partial=False,
        )
        self.assertEqual(patch, {"name": "Tape", "description": None, "price": 15, "cost": 9})

    def test_user_patch_maps_camel_case(self):
        patch = validate_payload(
            model=User,
            payload={"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"},
            policy=USER_POLICY,
            partial=False,
        )
        self.assertEqual(patch, {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"})

    def test_partial_ignores_nulls(self):
        patch = validate_payload(
            model=User, payload={"firstName": None, "phone": "555"}, policy=USER_POLICY, partial=True
        )
        self.assertEqual(patch, {"phone": "555"})

    def test_integer_coercion_is_strict(self):
        for bad in (1.5, True, "1e3", "12.0", "abc", [1]):
            errors = _field_errors(
                validate_payload,
                model=Item,
                payload={"name": "x", "price": bad, "cost": 1},
                policy=ITEM_POLICY,
                partial=False,
            )
            self.assertIn("price", errors, bad)

    def test_money_ceiling(self):
        errors = _field_errors(
            validate_payload,
            model=Item,
            payload={"name": "x", "price": MAX_MONEY + 1, "cost": MAX_MONEY},
            policy=ITEM_POLICY,
            partial=False,
        )
        self.assertEqual(set(errors), {"price"})

    def test_name_length_limit(self):
        errors = _field_errors(
            validate_payload,
            model=Item,
            payload={"name": "n" * 501, "price": 1, "cost": 1},
            policy=ITEM_POLICY,
            partial=False,
        )
        self.assertEqual(errors["name"], "name must not exceed 500 characters")

    def test_non_object_payload(self):
        with self.assertRaises(ValidationError):
            validate_payload(model=Item, payload=["x"], policy=ITEM_POLICY, partial=False)


class PurchaseOrderPayloadTests(unittest.TestCase):
    def _body(self, **overrides):
        body = {
            "datetime": "2025-01-15T10:30:00",
            "description": " Office supplies ",
            "totalPrice": 300,
            "totalCost": 240,
            "details": [{"itemId": 1, "quantity": 3}],
        }
        body.update(overrides)
        return body

    def test_full_body(self):
        cleaned = validate_purchase_order_payload(self._body(), partial=False)

        self.assertEqual(cleaned["order_datetime"], datetime(2025, 1, 15, 10, 30))
        self.assertIsNone(cleaned["order_datetime"].tzinfo)
        self.assertEqual(cleaned["description"], "Office supplies")
        self.assertEqual(cleaned["total_price"], 300)
        self.assertEqual(cleaned["total_cost"], 240)
        self.assertEqual(cleaned["details"], [DetailRequest(item_id=1, quantity=3)])

    def test_detail_overrides_keep_zero(self):
        cleaned = validate_purchase_order_payload(
            self._body(details=[{"itemId": 2, "quantity": 1, "unitPrice": 0, "cost": 0}]), partial=False
        )
        self.assertEqual(cleaned["details"], [DetailRequest(item_id=2, quantity=1, unit_price=0, unit_cost=0)])

    def test_missing_required_fields(self):
        errors = _field_errors(validate_purchase_order_payload, {}, partial=False)
        self.assertEqual(set(errors), {"datetime", "totalPrice", "totalCost", "details"})

    def test_bad_datetime_shapes(self):
        for value in ("2025-01-15", "2025-01-15 10:30:00", "yesterday", 1736937000):
            errors = _field_errors(validate_purchase_order_payload, self._body(datetime=value), partial=False)
            self.assertIn("datetime", errors, value)

    def test_detail_errors_are_indexed(self):
        errors = _field_errors(
            validate_purchase_order_payload,
            self._body(details=[{"itemId": 1, "quantity": 1}, {"itemId": "x", "quantity": -2}, "oops"]),
            partial=False,
        )
        self.assertEqual(set(errors), {"details[1].itemId", "details[1].quantity", "details[2]"})

    def test_description_too_long(self):
        errors = _field_errors(validate_purchase_order_payload, self._body(description="d" * 501), partial=False)
        self.assertEqual(errors, {"description": "Description must not exceed 500 characters"})

    def test_partial_returns_only_supplied_keys(self):
        cleaned = validate_purchase_order_payload({"description": "new"}, partial=True)
        self.assertEqual(cleaned, {"description": "new"})

    def test_partial_still_rejects_empty_details(self):
        errors = _field_errors(validate_purchase_order_payload, {"details": []}, partial=True)
        self.assertEqual(errors, {"details": "Purchase order details cannot be empty"})

    def test_blank_description_is_kept_for_clearing(self):
        cleaned = validate_purchase_order_payload({"description": "  "}, partial=True)
        self.assertEqual(cleaned, {"description": ""})

    def test_item_id_and_quantity_fit_integer_column(self):
        errors = _field_errors(
            validate_purchase_order_payload,
            self._body(details=[{"itemId": INTEGER_MAX + 1, "quantity": INTEGER_MAX + 1}]),
            partial=False,
        )
        self.assertEqual(set(errors), {"details[0].itemId", "details[0].quantity"})

        cleaned = validate_purchase_order_payload(
            self._body(details=[{"itemId": INTEGER_MAX, "quantity": INTEGER_MAX}]), partial=False
        )
        self.assertEqual(cleaned["details"][0].quantity, INTEGER_MAX)

    def test_override_line_total_must_fit_bigint(self):
        errors = _field_errors(
            validate_purchase_order_payload,
            self._body(details=[{"itemId": 1, "quantity": INTEGER_MAX, "cost": MAX_MONEY}]),
            partial=False,
        )
        self.assertEqual(set(errors), {"details[0].cost"})


if __name__ == "__main__":
    unittest.main()
