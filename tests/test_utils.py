import logging
import tempfile
import unittest
from pathlib import Path

from ruleforge.utils.ids import (
    generate_configuration_id,
    generate_id,
    generate_import_id,
    generate_modification_id,
    is_valid_id,
    parse_id,
)
from ruleforge.utils.logging import (
    RuleForgeFormatter,
    get_logger,
    log_error,
    log_operation,
    setup_logging,
)


class IdsTest(unittest.TestCase):
    def test_prefixed_ids(self) -> None:
        config_id = generate_configuration_id()
        import_id = generate_import_id()
        self.assertTrue(config_id.startswith("CONFIG_"))
        self.assertTrue(import_id.startswith("IMPORT_"))
        self.assertTrue(generate_modification_id().startswith("MOD_"))

        prefix, timestamp, count = parse_id(config_id)
        self.assertEqual(prefix, "CONFIG")
        self.assertGreater(timestamp, 0)
        self.assertGreater(count, 0)

    def test_ids_are_unique(self) -> None:
        ids = [generate_id("T") for _ in range(50)]
        self.assertEqual(len(set(ids)), 50)

    def test_is_valid_id(self) -> None:
        self.assertTrue(is_valid_id("CONFIG_1704067200_001"))
        self.assertTrue(is_valid_id(generate_id()))
        self.assertFalse(is_valid_id("not-an-id"))
        self.assertFalse(is_valid_id(None))


class LoggingTest(unittest.TestCase):
    def tearDown(self) -> None:
        setup_logging(level="WARNING", console_output=True, file_output=False)

    def test_get_logger_namespaces(self) -> None:
        self.assertEqual(get_logger("core.store").name, "ruleforge.core.store")
        self.assertIs(get_logger("ruleforge.core.store"), get_logger("core.store"))

    def test_log_helpers(self) -> None:
        logger = get_logger("tests.helpers")
        with self.assertLogs(logger, level="DEBUG") as logs:
            log_operation(logger, "Created configuration", {"game_id": "CONFIG_1_001"})
            log_operation(logger, "Ping", level=logging.DEBUG)
            log_error(logger, "import", ValueError("bad"), {"path": "x.json"})

        self.assertEqual(logs.output[0], "INFO:ruleforge.tests.helpers:Created configuration: game_id=CONFIG_1_001")
        self.assertEqual(logs.output[1], "DEBUG:ruleforge.tests.helpers:Ping")
        self.assertIn("FAILED import: ValueError: bad | Context: path=x.json", logs.output[2])

    def test_formatter_strips_root_name(self) -> None:
        record = logging.LogRecord("ruleforge.core.store", logging.INFO, __file__, 1, "hello", None, None)
        text = RuleForgeFormatter(use_colors=False, include_timestamp=False).format(record)
        self.assertIn("[core.store", text)
        self.assertTrue(text.endswith("hello"))

    def test_file_output(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            setup_logging(level="INFO", log_dir=tmp, console_output=False, file_output=True)
            get_logger("tests.file").info("written")
            for handler in logging.getLogger("ruleforge").handlers:
                handler.flush()
                handler.close()
            self.assertIn("written", (Path(tmp) / "ruleforge.log").read_text(encoding="utf-8"))
            logging.getLogger("ruleforge").handlers = []


if __name__ == "__main__":
    unittest.main()
