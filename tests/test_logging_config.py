import json
import logging

from prettier_bot.logging_config import JSONFormatter, conversation_logger, get_logger


def make_record(**extra):
    record = logging.LogRecord("prettier.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "prettier.test"
        assert data["message"] == "hello world"
        assert "context" not in data

    def test_context_is_included(self):
        data = json.loads(JSONFormatter().format(make_record(context={"chat_id": "42"})))
        assert data["context"] == {"chat_id": "42"}


class TestLoggers:
    def test_get_logger_namespace(self):
        assert get_logger("store").name == "prettier.store"

    def test_conversation_logger_merges_context(self):
        adapter = conversation_logger(get_logger("test"), "42")
        msg, kwargs = adapter.process("msg", {"context": {"command_id": "shorter"}})
        assert kwargs["extra"] == {"context": {"chat_id": "42", "command_id": "shorter"}}
