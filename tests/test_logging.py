"""Tests for log formatting and the operation/request log lines."""
import json
import logging

import pytest

from errors import LotNotInitialized
from log_setup import JsonFormatter, ServiceHandler, TextFormatter, configure_logging


def _record(msg="Parking Lot Operation: park-car", level=logging.INFO, **extra):
    record = logging.LogRecord("parking_lot", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestFormatters:

    def test_json_formatter_emits_extras(self):
        line = JsonFormatter().format(_record(carId="KA-01-HH-1234", slotNumber=1))
        payload = json.loads(line)
        assert payload["level"] == "info"
        assert payload["logger"] == "parking_lot"
        assert payload["message"] == "Parking Lot Operation: park-car"
        assert payload["carId"] == "KA-01-HH-1234"
        assert payload["slotNumber"] == 1
        assert "timestamp" in payload

    def test_json_formatter_without_extras(self):
        payload = json.loads(JsonFormatter().format(_record()))
        assert "carId" not in payload
        assert "args" not in payload

    def test_text_formatter_appends_extras(self):
        line = TextFormatter().format(_record(capacity=3))
        assert "INFO: parking_lot - Parking Lot Operation: park-car" in line
        assert line.endswith('{"capacity": 3}')

    def test_text_formatter_plain_message(self):
        line = TextFormatter().format(_record(msg="ready"))
        assert line.endswith("parking_lot - ready")


class TestConfigureLogging:

    def test_second_call_reuses_handler(self, restore_root_logger):
        configure_logging("INFO", "text")
        configure_logging("DEBUG", "json")
        ours = [h for h in restore_root_logger.handlers if isinstance(h, ServiceHandler)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JsonFormatter)
        assert restore_root_logger.level == logging.DEBUG


class TestOperationLogging:

    def test_lot_operations_logged_at_info(self, five_slot_lot, caplog):
        caplog.set_level(logging.INFO)
        five_slot_lot.park_car("KA-01-HH-1234")
        five_slot_lot.unpark_car(1)

        ops = [r for r in caplog.records if r.name == "parking_lot"]
        assert [r.getMessage() for r in ops] == [
            "Parking Lot Operation: park-car",
            "Parking Lot Operation: unpark-car",
        ]
        assert all(r.levelno == logging.INFO for r in ops)
        assert ops[0].carId == "KA-01-HH-1234"
        assert ops[0].slotNumber == 1

    def test_failed_operation_not_logged(self, lot, caplog):
        caplog.set_level(logging.INFO)
        with pytest.raises(LotNotInitialized):
            lot.park_car("KA-01-HH-1234")
        assert not [r for r in caplog.records if r.name == "parking_lot"]


class TestRequestLogging:

    def _request_records(self, caplog):
        return [r for r in caplog.records if r.getMessage() == "HTTP Request"]

    def test_success_logged_at_info(self, client, caplog):
        caplog.set_level(logging.INFO)
        client.get('/api/health')
        (record,) = self._request_records(caplog)
        assert record.levelno == logging.INFO
        assert record.method == "GET"
        assert record.url == "/api/health"
        assert record.statusCode == 200

    def test_client_error_logged_at_warning(self, client, caplog):
        caplog.set_level(logging.INFO)
        client.get('/api/status')
        (record,) = self._request_records(caplog)
        assert record.levelno == logging.WARNING
        assert record.statusCode == 400
