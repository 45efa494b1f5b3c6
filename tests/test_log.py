import json
import logging

from pcbuilder.log import setup_logger


def test_unknown_level_name_falls_back_to_info():
    logger = setup_logger("pcbuilder.test.level", level="BASIC_FORMAT")
    assert logger.level == logging.INFO

    logger = setup_logger("pcbuilder.test.level", level="nonsense")
    assert logger.level == logging.INFO


def test_level_name_is_case_insensitive():
    logger = setup_logger("pcbuilder.test.case", level="debug")
    assert logger.level == logging.DEBUG


def test_json_format_writes_one_object_per_record(capsys):
    logger = setup_logger("pcbuilder.test.json", level="INFO", log_format="json")

    logger.info("session %s started", "abc")
    logger.debug("hidden")

    lines = [line for line in capsys.readouterr().out.splitlines() if line]
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["level"] == "INFO"
    assert record["logger"] == "pcbuilder.test.json"
    assert record["message"] == "session abc started"


def test_text_format_includes_level_and_logger(capsys):
    logger = setup_logger("pcbuilder.test.text", level="INFO", log_format="text")

    logger.warning("budget %s matches no category", 9000)

    out = capsys.readouterr().out
    assert "WARNING" in out
    assert "pcbuilder.test.text - budget 9000 matches no category" in out
