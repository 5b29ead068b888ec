import json
import logging

from podaccess.config.logging_config import JsonFormatter, build_logging_config


def test_json_formatter_adds_fields():
    record = logging.LogRecord("podaccess.test", logging.INFO, "/x/y.py", 12, "hello %s", ("there",), None)
    out = json.loads(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s").format(record))
    assert out["message"] == "hello there"
    assert out["level"] == "INFO"
    assert out["logger"] == "podaccess.test"
    assert out["lineno"] == 12


def test_unknown_format_falls_back_to_json():
    conf = build_logging_config(level="DEBUG", fmt="xml")
    assert conf["handlers"]["console"]["formatter"] == "json"
    assert conf["root"]["level"] == "DEBUG"
