import json
import tempfile
import unittest
from pathlib import Path

from ruleforge.catalogs import register_builtin_games
from ruleforge.core.engine import GameRuleEngine
from ruleforge.core.errors import ParseError, ValidationError
from ruleforge.core.models import ConfigurationMetadata, GameModification
from ruleforge.core.registry import RuleRegistry
from ruleforge.core.serializer import export_filename


def _record(**fields) -> str:
    payload = {
        "schemaVersion": 1,
        "gameId": "CONFIG_1_001",
        "baseGame": "chess",
        "name": "Imported",
        "description": "",
        "activeRules": ["chess-board-size"],
        "parameterOverrides": {"chess-board-size": {"width": 10}},
    }
    payload.update(fields)
    return json.dumps(payload)


class ConfigurationSerializerTest(unittest.TestCase):
    def setUp(self) -> None:
        registry = RuleRegistry()
        register_builtin_games(registry)
        self.engine = GameRuleEngine(registry)
        snapshot = self.engine.create_configuration("chess", "My Chess", "desc")
        self.game_id = snapshot.game_id

    def test_export_layout(self) -> None:
        self.engine.set_rule_parameter(self.game_id, "chess-board-size", "width", 10)
        payload = json.loads(self.engine.export_configuration(self.game_id))

        self.assertEqual(payload["schemaVersion"], 1)
        self.assertEqual(payload["gameId"], self.game_id)
        self.assertEqual(payload["baseGame"], "chess")
        self.assertEqual(payload["name"], "My Chess")
        self.assertEqual(payload["parameterOverrides"]["chess-board-size"]["width"], 10)
        self.assertIn("chess-board-size", payload["activeRules"])

    def test_export_is_canonical(self) -> None:
        text = self.engine.export_configuration(self.game_id)
        self.assertEqual(text, json.dumps(json.loads(text), indent=2, sort_keys=True, ensure_ascii=False))
        self.assertEqual(text, self.engine.export_configuration(self.game_id))

    def test_export_unknown_returns_none(self) -> None:
        self.assertIsNone(self.engine.export_configuration("missing"))

    def test_round_trip_gets_new_id(self) -> None:
        self.engine.enable_rule(self.game_id, "chess-ai-behavior")
        self.engine.set_rule_parameter(self.game_id, "chess-ai-behavior", "difficulty", "hard")

        imported_id = self.engine.import_configuration(self.engine.export_configuration(self.game_id))

        self.assertNotEqual(imported_id, self.game_id)
        self.assertTrue(imported_id.startswith("IMPORT_"))

        original = self.engine.get_configuration(self.game_id)
        imported = self.engine.get_configuration(imported_id)
        self.assertEqual(imported.active_rules, original.active_rules)
        self.assertEqual(imported.parameter_overrides, original.parameter_overrides)
        self.assertEqual(imported.values, original.values)
        self.assertEqual(imported.name, original.name)

    def test_hidden_overrides_survive_round_trip(self) -> None:
        self.engine.set_rule_parameter(self.game_id, "chess-board-size", "width", 10)
        self.engine.disable_rule(self.game_id, "chess-board-size")

        payload = json.loads(self.engine.export_configuration(self.game_id))
        self.assertEqual(payload["parameterOverrides"]["chess-board-size"]["width"], 10)

        imported_id = self.engine.import_configuration(json.dumps(payload))
        self.assertEqual(self.engine.get_rule_parameter_value(imported_id, "chess-board-size", "width"), 8)
        self.engine.enable_rule(imported_id, "chess-board-size")
        self.assertEqual(self.engine.get_rule_parameter_value(imported_id, "chess-board-size", "width"), 10)

    def test_import_clamps_numbers(self) -> None:
        imported_id = self.engine.import_configuration(
            _record(parameterOverrides={"chess-board-size": {"width": 50}})
        )
        self.assertEqual(self.engine.get_rule_parameter_value(imported_id, "chess-board-size", "width"), 12)

    def test_import_without_schema_version(self) -> None:
        payload = json.loads(_record())
        del payload["schemaVersion"]
        imported_id = self.engine.import_configuration(json.dumps(payload))
        self.assertIsNotNone(self.engine.get_configuration(imported_id))

    def test_import_rejects_foreign_rules(self) -> None:
        before = len(self.engine.list_configurations())
        with self.assertRaises(ValidationError):
            self.engine.import_configuration(
                _record(baseGame="tictactoe", activeRules=["chess-board-size"], parameterOverrides={})
            )
        with self.assertRaises(ValidationError):
            self.engine.import_configuration(
                _record(activeRules=[], parameterOverrides={"tictactoe-players": {"numPlayers": 3}})
            )
        self.assertEqual(len(self.engine.list_configurations()), before)

    def test_import_rejects_unknown_game_and_keys(self) -> None:
        with self.assertRaises(ValidationError):
            self.engine.import_configuration(_record(baseGame="checkers", activeRules=[], parameterOverrides={}))
        with self.assertRaises(ValidationError):
            self.engine.import_configuration(
                _record(parameterOverrides={"chess-board-size": {"depth": 3}})
            )

    def test_import_malformed_payloads(self) -> None:
        for data in ("{not json", "[]", json.dumps({"name": "no base game"}), _record(schemaVersion=2)):
            with self.subTest(data=data):
                with self.assertRaises(ParseError):
                    self.engine.import_configuration(data)
        self.assertEqual(len(self.engine.list_configurations()), 1)

    def test_parse_error_is_not_validation_error(self) -> None:
        self.assertFalse(issubclass(ParseError, ValidationError))

    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self.engine.save_configuration(self.game_id, tmp)
            self.assertEqual(path, Path(tmp) / "my-chess-rules.json")
            self.assertTrue(path.exists())

            imported_id = self.engine.load_configuration(path)
            self.assertEqual(self.engine.get_configuration(imported_id).name, "My Chess")

        self.assertIsNone(self.engine.save_configuration("missing", "."))

    def test_export_filename(self) -> None:
        self.assertEqual(export_filename("My Chess!"), "my-chess-rules.json")
        self.assertEqual(export_filename("  "), "configuration-rules.json")
        self.assertEqual(self.engine.export_filename(self.game_id), "my-chess-rules.json")
        self.assertIsNone(self.engine.export_filename("missing"))

    def test_load_rejects_undecodable_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "latin1.json"
            path.write_bytes(b'{"baseGame": "chess", "name": "Caf\xe9"}')
            with self.assertRaises(ParseError):
                self.engine.load_configuration(path)
        self.assertEqual(len(self.engine.list_configurations()), 1)

    def test_metadata_round_trip(self) -> None:
        self.engine.update_configuration(
            self.game_id,
            metadata=ConfigurationMetadata(author="ana", version="2.1.0", tags=["blitz", "blitz", "casual"]),
        )
        payload = json.loads(self.engine.export_configuration(self.game_id))
        self.assertEqual(payload["metadata"]["author"], "ana")
        self.assertEqual(payload["metadata"]["tags"], ["blitz", "casual"])
        self.assertIn("created", payload["metadata"])
        self.assertIn("modified", payload["metadata"])

        imported = self.engine.get_configuration(self.engine.import_configuration(json.dumps(payload)))
        self.assertEqual(imported.metadata.author, "ana")
        self.assertEqual(imported.metadata.version, "2.1.0")
        self.assertEqual(imported.metadata.tags, ["blitz", "casual"])

    def test_import_without_metadata_uses_defaults(self) -> None:
        imported = self.engine.get_configuration(self.engine.import_configuration(_record()))
        self.assertEqual(imported.metadata, ConfigurationMetadata())


class GameModificationTest(unittest.TestCase):
    def setUp(self) -> None:
        registry = RuleRegistry()
        register_builtin_games(registry)
        self.engine = GameRuleEngine(registry)
        snapshot = self.engine.create_configuration(
            "chess", "Speed Chess", "Five minutes", ConfigurationMetadata(author="ana", tags=["blitz"])
        )
        self.game_id = snapshot.game_id
        self.engine.enable_rule(self.game_id, "chess-time-control")
        self.engine.set_rule_parameter(self.game_id, "chess-time-control", "timeEnabled", True)

    def test_create_lists_rules_with_parameters(self) -> None:
        modification = self.engine.create_game_modification(self.game_id)

        self.assertTrue(modification.id.startswith("MOD_"))
        self.assertEqual(modification.base_game_id, "chess")
        self.assertEqual(modification.name, "Speed Chess")
        self.assertEqual(modification.metadata.author, "ana")
        self.assertEqual(modification.metadata.tags, ["blitz"])
        self.assertEqual(modification.metadata.downloads, 0)

        snapshot = self.engine.get_configuration(self.game_id)
        self.assertEqual([rule.rule_id for rule in modification.rules], snapshot.active_rules)
        self.assertTrue(all(rule.enabled for rule in modification.rules))
        time_control = next(rule for rule in modification.rules if rule.rule_id == "chess-time-control")
        self.assertTrue(time_control.parameters["timeEnabled"])

    def test_create_unknown_returns_none(self) -> None:
        self.assertIsNone(self.engine.create_game_modification("missing"))

    def test_apply_recreates_configuration(self) -> None:
        self.engine.set_rule_parameter(self.game_id, "chess-board-size", "width", 10)
        self.engine.disable_rule(self.game_id, "chess-board-size")
        modification = self.engine.create_game_modification(self.game_id)
        board = next(rule for rule in modification.rules if rule.rule_id == "chess-board-size")
        self.assertFalse(board.enabled)

        new_id = self.engine.apply_game_modification(modification.to_json())

        original = self.engine.get_configuration(self.game_id)
        applied = self.engine.get_configuration(new_id)
        self.assertNotEqual(new_id, self.game_id)
        self.assertEqual(applied.active_rules, original.active_rules)
        self.assertEqual(applied.values, original.values)
        self.assertEqual(applied.metadata.author, "ana")
        self.assertEqual(applied.revision, 0)

        self.engine.enable_rule(new_id, "chess-board-size")
        self.assertEqual(self.engine.get_rule_parameter_value(new_id, "chess-board-size", "width"), 10)

    def test_apply_clamps_parameters(self) -> None:
        modification = GameModification(
            id="MOD_1_001",
            base_game_id="chess",
            rules=[{"ruleId": "chess-board-size", "enabled": True, "parameters": {"width": 50}}],
        )
        new_id = self.engine.apply_game_modification(modification)
        self.assertEqual(self.engine.get_rule_parameter_value(new_id, "chess-board-size", "width"), 12)

    def test_apply_rejects_foreign_rules(self) -> None:
        before = len(self.engine.list_configurations())
        modification = GameModification(
            id="MOD_1_002",
            base_game_id="chess",
            rules=[{"ruleId": "platformer-gravity", "enabled": True}],
        )
        with self.assertRaises(ValidationError):
            self.engine.apply_game_modification(modification)

        unknown_game = modification.model_copy(update={"base_game_id": "checkers", "rules": []})
        with self.assertRaises(ValidationError):
            self.engine.apply_game_modification(unknown_game)
        self.assertEqual(len(self.engine.list_configurations()), before)

    def test_apply_rejects_malformed_text(self) -> None:
        for data in ("{not json", json.dumps({"id": "MOD_1_003"}), "[]"):
            with self.subTest(data=data):
                with self.assertRaises(ParseError):
                    self.engine.apply_game_modification(data)


if __name__ == "__main__":
    unittest.main()
