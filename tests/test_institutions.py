import json
import tempfile
import unittest
from pathlib import Path

from omnivox.adapters import ChamplainAdapter, MaisonneuveAdapter
from omnivox.errors import UnknownInstitutionError
from omnivox.institutions import default_registry
from omnivox.sessions import ChamplainSession, MaisonneuveSession


class TestRegistry(unittest.TestCase):
    def test_builtins(self) -> None:
        registry = default_registry()
        self.assertEqual(registry.keys(), ["champlain", "maisonneuve"])
        session, adapter = registry.get("Maisonneuve").build()
        self.assertIsInstance(session, MaisonneuveSession)
        self.assertIsInstance(adapter, MaisonneuveAdapter)

    def test_unknown_institution(self) -> None:
        with self.assertRaises(UnknownInstitutionError) as ctx:
            default_registry().get("harvard")
        self.assertIn("champlain", str(ctx.exception))

    def test_load_file(self) -> None:
        registry = default_registry()
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "institutions.json"
            p.write_text(
                json.dumps(
                    {
                        "dawson": {
                            "name": "Dawson",
                            "session": "omnivox.sessions:ChamplainSession",
                            "adapter": "omnivox.adapters:ChamplainAdapter",
                        }
                    }
                ),
                encoding="utf-8",
            )
            added = registry.load_file(p)

        self.assertEqual([i.key for i in added], ["dawson"])
        self.assertIn("dawson", registry)
        dawson = registry.get("dawson")
        self.assertEqual(dawson.name, "Dawson")
        self.assertIs(dawson.session_cls, ChamplainSession)
        self.assertIs(dawson.adapter_cls, ChamplainAdapter)

    def test_load_file_rejects_wrong_classes(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "bad.json"
            p.write_text(
                json.dumps({"x": {"session": "omnivox.adapters:ChamplainAdapter", "adapter": "omnivox.adapters:ChamplainAdapter"}}),
                encoding="utf-8",
            )
            with self.assertRaises(ValueError):
                default_registry().load_file(p)

            p.write_text(json.dumps({"x": {"session": "no-colon"}}), encoding="utf-8")
            with self.assertRaises(ValueError):
                default_registry().load_file(p)


if __name__ == "__main__":
    unittest.main()
