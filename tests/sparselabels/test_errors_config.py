import pickle

import pytest

from sparselabels.config import DEFAULT_CONFIG, LabelsConfig, resolve_config
from sparselabels.diagnostics import collecting_sink, log_event, print_sink
from sparselabels.errors import (
    NOT_FOUND,
    CategoryConflict,
    DuplicateLabel,
    InvalidRecord,
    LabelIndexError,
    LossyConversion,
    UnknownCategory,
)


def test_error_taxonomy_derives_from_builtins():
    for exc in (DuplicateLabel, CategoryConflict, LossyConversion, InvalidRecord):
        assert issubclass(exc, LabelIndexError)
        assert issubclass(exc, ValueError)
    assert issubclass(UnknownCategory, KeyError)
    assert str(UnknownCategory("no such category")) == "no such category"


def test_not_found_is_falsy_singleton():
    assert not NOT_FOUND
    assert repr(NOT_FOUND) == "NOT_FOUND"
    assert pickle.loads(pickle.dumps(NOT_FOUND)) is NOT_FOUND


def test_config_defaults_and_validation():
    assert resolve_config(None) is DEFAULT_CONFIG
    cfg = LabelsConfig(collapse_prefix="any_")
    assert resolve_config(cfg) is cfg
    assert cfg.collapsed_label("cities") == "any_cities"
    assert DEFAULT_CONFIG.collapsed_label("cities") == "all__cities"
    with pytest.raises(ValueError):
        LabelsConfig(collapse_prefix="")
    with pytest.raises(ValueError):
        LabelsConfig(max_display_items=-1)


def test_sinks(capsys):
    sink, lines = collecting_sink()
    log_event("one", sink)
    log_event("two", None)
    assert lines == ["one"]

    print_sink("hello")
    assert capsys.readouterr().out == "[sparselabels] hello\n"
