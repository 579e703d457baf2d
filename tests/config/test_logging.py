"""Tests for logging setup and sensitive data masking."""

import logging

from forma.config.logging import setup_logging
from forma.config.logging_filters import MASK, SensitiveDataFilter
from forma.config.settings import load_config


def make_record(msg, *args):
    return logging.LogRecord('forma.test', logging.INFO, __file__, 1, msg, args, None)

def test_masks_key_value_pairs():
    record = make_record("sign in | Context: email=a@b.cr | password=hunter22")
    SensitiveDataFilter().filter(record)
    assert 'hunter22' not in record.getMessage()
    assert f"password={MASK}" in record.getMessage()
    assert 'email=a@b.cr' in record.getMessage()

def test_masks_dict_reprs():
    record = make_record("payload %s", {'api_key': 'abc123', 'gymId': 'gym-1'})
    SensitiveDataFilter().filter(record)
    assert 'abc123' not in record.getMessage()
    assert 'gym-1' in record.getMessage()

def test_custom_fields():
    record = make_record("activation_key=xyz")
    SensitiveDataFilter({'activation_key'}).filter(record)
    assert record.getMessage() == f"activation_key={MASK}"

def test_setup_logging_levels(tmp_path):
    config = load_config(str(tmp_path))
    log_file = tmp_path / 'logs' / 'forma.log'

    setup_logging(config, verbose=True, log_file=str(log_file))
    root = logging.getLogger()
    try:
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        logging.getLogger('forma.test').info("token=abc")
        for handler in root.handlers:
            handler.flush()
        assert 'abc' not in log_file.read_text(encoding='utf-8')
    finally:
        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)
