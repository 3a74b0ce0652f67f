import json
import tempfile
import unittest
from pathlib import Path

from ruleforge.catalogs import (
    BUILTIN_CATALOGS,
    CATALOG_DIR,
    CatalogLoader,
    register_builtin_game,
    register_builtin_games,
    register_chess_rules,
    register_platformer_rules,
    register_tictactoe_rules,
)
from ruleforge.core.engine import GameRuleEngine
from ruleforge.core.errors import CatalogError, DuplicateRegistrationError
from ruleforge.core.models import ColorParameter
from ruleforge.core.registry import RuleRegistry

EXTRA_CATALOG = """
base_game: checkers
rules:
  - id: checkers-flying-kings
    name: Flying Kings
    category: movement
    tags: [default]
    parameters:
      - key: enabled
        type: boolean
        default_value: true
  - id: checkers-forced-capture
    name: Forced Capture
    requires: [checkers-flying-kings]
"""


class BuiltinCatalogTest(unittest.TestCase):
    def test_builtin_files_exist(self) -> None:
        for filename in BUILTIN_CATALOGS.values():
            self.assertTrue((CATALOG_DIR / filename).exists(), filename)

    def test_register_all_games(self) -> None:
        registry = RuleRegistry()
        register_builtin_games(registry)

        self.assertEqual(registry.list_games(), ["chess", "platformer", "tictactoe"])
        self.assertEqual(len(registry.get_rules_for_game("chess")), 8)
        self.assertEqual(len(registry.get_rules_for_game("platformer")), 10)
        self.assertEqual(len(registry.get_rules_for_game("tictactoe")), 8)

    def test_reregistration_is_noop(self) -> None:
        registry = RuleRegistry()
        self.assertEqual(len(register_chess_rules(registry)), 8)
        self.assertEqual(register_chess_rules(registry), [])
        self.assertEqual(len(registry), 8)

    def test_individual_entry_points(self) -> None:
        registry = RuleRegistry()
        register_platformer_rules(registry)
        register_tictactoe_rules(registry)
        self.assertEqual(registry.list_games(), ["platformer", "tictactoe"])

    def test_default_rules(self) -> None:
        registry = RuleRegistry()
        register_builtin_games(registry)

        self.assertEqual(registry.default_rule_ids("chess"), [
            "chess-board-size",
            "chess-piece-movement",
            "chess-special-moves",
            "chess-win-conditions",
        ])
        self.assertEqual(registry.default_rule_ids("platformer"), [
            "platformer-gravity",
            "platformer-character-movement",
            "platformer-jump-mechanics",
        ])
        self.assertEqual(registry.default_rule_ids("tictactoe"), [
            "tictactoe-board-setup",
            "tictactoe-win-conditions",
            "tictactoe-players",
        ])

    def test_default_configurations_are_valid(self) -> None:
        registry = RuleRegistry()
        register_builtin_games(registry)
        engine = GameRuleEngine(registry)

        for game in registry.list_games():
            with self.subTest(game=game):
                snapshot = engine.create_configuration(game, f"Default {game}")
                self.assertTrue(snapshot.validation.valid, snapshot.validation.errors)
                self.assertEqual(snapshot.validation.warnings, [])

    def test_catalog_content(self) -> None:
        registry = RuleRegistry()
        register_builtin_games(registry)

        board = registry.get_rule("chess-board-size")
        self.assertEqual(board.default_values(), {"width": 8, "height": 8})
        self.assertEqual(board.get_parameter("width").constraints.max, 12)

        jump = registry.get_rule("platformer-jump-mechanics")
        self.assertEqual(jump.requires, ("platformer-gravity",))

        theme = registry.get_rule("tictactoe-visual-theme")
        self.assertIsInstance(theme.get_parameter("gridColor"), ColorParameter)
        self.assertEqual(theme.get_parameter("backgroundColor").default_value, "#ffffff")

    def test_unknown_builtin_game(self) -> None:
        with self.assertRaises(CatalogError):
            register_builtin_game(RuleRegistry(), "checkers")


class CatalogLoaderTest(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.registry = RuleRegistry()
        self.loader = CatalogLoader(self.registry)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, text: str) -> Path:
        path = self.dir / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_load_yaml_injects_base_game(self) -> None:
        added = self.loader.load_file(self._write("checkers.yaml", EXTRA_CATALOG))

        self.assertEqual([rule.id for rule in added], ["checkers-flying-kings", "checkers-forced-capture"])
        self.assertEqual(self.registry.get_rule("checkers-forced-capture").base_game, "checkers")
        self.assertEqual(self.registry.default_rule_ids("checkers"), ["checkers-flying-kings"])

    def test_load_json(self) -> None:
        data = {"base_game": "go", "rules": [{"id": "go-komi", "name": "Komi"}]}
        self.loader.load_file(self._write("go.json", json.dumps(data)))
        self.assertTrue(self.registry.has_game("go"))

    def test_read_file_does_not_register(self) -> None:
        rules = self.loader.read_file(self._write("checkers.yml", EXTRA_CATALOG))
        self.assertEqual(len(rules), 2)
        self.assertEqual(len(self.registry), 0)

    def test_missing_and_unsupported_files(self) -> None:
        with self.assertRaises(CatalogError):
            self.loader.load_file(self.dir / "missing.yaml")
        with self.assertRaises(CatalogError):
            self.loader.load_file(self._write("rules.txt", "base_game: x"))

    def test_malformed_catalogs(self) -> None:
        cases = {
            "broken.yaml": "base_game: [unclosed",
            "nogame.yaml": "rules: []",
            "notlist.yaml": "base_game: x\nrules: {id: a}",
            "badrule.yaml": "base_game: x\nrules:\n  - id: a\n    unknown_field: 1",
            "badparam.yaml": (
                "base_game: x\nrules:\n  - id: a\n    parameters:\n"
                "      - {key: n, type: number, default_value: 50, constraints: {min: 0, max: 10}}"
            ),
            "broken.json": "{",
        }
        for name, text in cases.items():
            with self.subTest(name=name):
                with self.assertRaises(CatalogError):
                    self.loader.load_file(self._write(name, text))
        self.assertEqual(len(self.registry), 0)

    def test_duplicate_id_is_fatal_and_atomic(self) -> None:
        self.loader.load_file(self._write("checkers.yaml", EXTRA_CATALOG))
        clash = (
            "base_game: checkers\nrules:\n"
            "  - id: checkers-new-rule\n"
            "  - id: checkers-flying-kings\n    name: Something Else\n"
        )
        with self.assertRaises(DuplicateRegistrationError):
            self.loader.load_file(self._write("clash.yaml", clash))
        self.assertNotIn("checkers-new-rule", self.registry)

    def test_load_directory(self) -> None:
        self._write("checkers.yaml", EXTRA_CATALOG)
        self._write("notes.md", "ignored")
        added = self.loader.load_directory(self.dir)
        self.assertEqual(len(added), 2)

    def test_missing_directory_returns_empty(self) -> None:
        self.assertEqual(self.loader.load_directory(self.dir / "nope"), [])


if __name__ == "__main__":
    unittest.main()
