import tempfile
import unittest
from pathlib import Path
from typing import Any

from jsonrows import connector as connector_module
from jsonrows.config import ConnectorConfig, load_config
from jsonrows.errors import ConnectorError, InvalidMode, InvalidRootShape, ModeMismatch, UnknownField
from jsonrows.types import Aggregation, SchemaMode, SemanticType


ORDERS = [
    {"Order Id": 1, "Customer": {"Name": "Ada", "City": "London"}, "Placed": "2021-03-05T14:30:00Z"},
    {"Order Id": 2, "Customer": {"Name": "Bo", "City": None}, "Placed": "2021-03-06T09:00:00Z"},
    None,
]

ANNOTATED = {
    "revenue": {
        "name": "Revenue",
        "description": "",
        "type": "NUMBER",
        "aggregation": "NONE",
        "value": 42,
    }
}


class DescribeSchemaTests(unittest.TestCase):
    def test_inline_schema_from_first_record(self) -> None:
        schema = connector_module.describe_schema(ORDERS, ConnectorConfig())
        self.assertEqual(schema.ids, ["order_id", "customer.name", "customer.city", "placed"])
        self.assertEqual(schema["placed"].semantic_type, SemanticType.YEAR_MONTH_DAY_HOUR)

    def test_bare_object_root_is_wrapped(self) -> None:
        schema = connector_module.describe_schema({"a": 1}, ConnectorConfig())
        self.assertEqual(schema.ids, ["a"])

    def test_invalid_roots(self) -> None:
        for document in ([], [1, 2], "text", None, [None]):
            with self.subTest(document=document):
                with self.assertRaises(InvalidRootShape):
                    connector_module.describe_schema(document, ConnectorConfig())

    def test_annotated_schema(self) -> None:
        schema = connector_module.describe_schema(ANNOTATED, ConnectorConfig(annotated=True))
        self.assertEqual(schema.mode, SchemaMode.ANNOTATED)
        self.assertEqual(schema["revenue"].aggregation, Aggregation.SUM)


class ProjectRowsTests(unittest.TestCase):
    def test_rows_for_requested_fields(self) -> None:
        rows = connector_module.project_rows(
            ORDERS, ["order_id", "customer.name", "customer.city", "placed"], ConnectorConfig()
        )
        self.assertEqual(
            rows,
            [
                [1, "Ada", "London", "2021030514"],
                [2, "Bo", "", "2021030609"],
                ["", "", "", ""],
            ],
        )

    def test_annotated_projection(self) -> None:
        config = ConnectorConfig(annotated=True)
        rows = connector_module.project_rows(
            ANNOTATED, ["revenue"], config, described_mode=SchemaMode.ANNOTATED
        )
        self.assertEqual(rows, [[42]])

    def test_mode_mismatch(self) -> None:
        with self.assertRaises(ModeMismatch) as ctx:
            connector_module.project_rows(
                ANNOTATED, ["revenue"], ConnectorConfig(), described_mode=SchemaMode.ANNOTATED
            )
        self.assertEqual(ctx.exception.described, "annotated")
        self.assertEqual(ctx.exception.requested, "heuristic")

    def test_unknown_field(self) -> None:
        with self.assertRaises(UnknownField):
            connector_module.project_rows(ORDERS, ["nope"], ConnectorConfig())


class HostRequestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fetched: list[Any] = []

    def _fetch(self, document: Any):
        def _fake_fetch(url: str, timeout: float = 30.0) -> Any:
            self.fetched.append((url, timeout))
            return document

        return _fake_fetch

    def test_get_schema(self) -> None:
        request = {"configParams": {"url": "https://example.com/orders.json", "nestedData": "json"}}
        result = connector_module.get_schema(request, fetch=self._fetch(ORDERS))
        names = [entry["name"] for entry in result["schema"]]
        self.assertEqual(names, ["order_id", "customer", "placed"])
        self.assertEqual(self.fetched, [("https://example.com/orders.json", 30.0)])

    def test_get_data(self) -> None:
        request = {
            "configParams": {"url": "https://example.com/orders.json"},
            "fields": [{"name": "customer.name"}, {"name": "order_id"}],
        }
        result = connector_module.get_data(request, fetch=self._fetch(ORDERS))
        self.assertEqual([entry["name"] for entry in result["schema"]], ["customer.name", "order_id"])
        self.assertEqual(
            result["rows"],
            [{"values": ["Ada", 1]}, {"values": ["Bo", 2]}, {"values": ["", ""]}],
        )

    def test_get_data_annotated_flag_as_string(self) -> None:
        request = {
            "configParams": {"url": "https://example.com/a.json", "annotated": "true"},
            "fields": [{"name": "revenue"}],
            "describedMode": "annotated",
        }
        result = connector_module.get_data(request, fetch=self._fetch([ANNOTATED]))
        self.assertEqual(result["rows"], [{"values": [42]}])
        self.assertEqual(result["schema"][0]["defaultAggregationType"], "SUM")

    def test_get_data_rejects_mode_mismatch_before_fetching(self) -> None:
        request = {
            "configParams": {"url": "https://example.com/a.json"},
            "fields": [{"name": "revenue"}],
            "describedMode": "annotated",
        }
        with self.assertRaises(ModeMismatch):
            connector_module.get_data(request, fetch=self._fetch([ANNOTATED]))
        self.assertEqual(self.fetched, [])

    def test_get_data_accepts_described_mode_in_any_case(self) -> None:
        request = {
            "configParams": {"url": "https://example.com/orders.json"},
            "fields": [{"name": "order_id"}],
            "describedMode": "HEURISTIC",
        }
        result = connector_module.get_data(request, fetch=self._fetch(ORDERS))
        self.assertEqual(result["rows"][0], {"values": [1]})

    def test_get_data_unknown_described_mode_is_user_error(self) -> None:
        request = {
            "configParams": {"url": "https://example.com/orders.json"},
            "fields": [{"name": "order_id"}],
            "describedMode": "sniffed",
        }
        with self.assertRaises(InvalidMode) as ctx:
            connector_module.get_data(request, fetch=self._fetch(ORDERS))
        self.assertIsInstance(ctx.exception, ConnectorError)
        self.assertEqual(ctx.exception.value, "sniffed")
        self.assertIn("sniffed", ctx.exception.message)
        self.assertEqual(self.fetched, [])


class ConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = ConnectorConfig()
        self.assertTrue(config.is_inline)
        self.assertEqual(config.mode, SchemaMode.HEURISTIC)

    def test_validation(self) -> None:
        with self.assertRaises(ValueError):
            ConnectorConfig(nested_data="flat")
        with self.assertRaises(ValueError):
            ConnectorConfig(max_depth=0)

    def test_from_request(self) -> None:
        config = ConnectorConfig.from_request(
            {"url": "https://x.test", "nestedData": "json", "annotated": "TRUE", "maxDepth": "4"}
        )
        self.assertFalse(config.is_inline)
        self.assertEqual(config.mode, SchemaMode.ANNOTATED)
        self.assertEqual(config.max_depth, 4)
        self.assertEqual(ConnectorConfig.from_request(None).mode, SchemaMode.HEURISTIC)

    def test_load_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "connector.yaml"
            path.write_text("url: https://x.test/data.json\nnested_data: json\nannotated: yes\n")
            config = load_config(path)
            self.assertEqual(config.url, "https://x.test/data.json")
            self.assertFalse(config.is_inline)
            self.assertTrue(config.annotated)

            path.write_text("colour: blue\n")
            with self.assertRaises(ValueError):
                load_config(path)


if __name__ == "__main__":
    unittest.main()
