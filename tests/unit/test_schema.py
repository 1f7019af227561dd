import copy

import pytest

from ruian_addresses.common.errors import ConfigError
from ruian_addresses.common.schema import validate_pipeline_config

BASE = {
    "decoding": {"errors": "strict"},
    "workers": {"executor": "thread", "max_workers": 4, "max_buffered_entries": 0},
    "source": {
        "url_template": "https://example.test/{archive_date}.zip",
        "cache_dir": "data",
        "timeout": {"connect": 1, "read": 2},
        "retry": {"max_attempts": 1, "multiplier": 1, "max_wait": 1},
    },
    "logging": {"level": "INFO"},
}


def _config(**section_overrides):
    cfg = copy.deepcopy(BASE)
    for dotted, value in section_overrides.items():
        section, key = dotted.split("__")
        cfg[section][key] = value
    return cfg


def test_validate_pipeline_config_accepts_valid_shape():
    assert validate_pipeline_config(copy.deepcopy(BASE))["workers"]["max_workers"] == 4


def test_validate_pipeline_config_rejects_unknown_key_by_default():
    bad = copy.deepcopy(BASE)
    bad["unexpected"] = True
    with pytest.raises(ConfigError):
        validate_pipeline_config(bad)


def test_validate_pipeline_config_allows_unknown_when_enabled():
    okay = copy.deepcopy(BASE)
    okay["extra"] = 1
    okay["workers"]["affinity"] = "none"
    validate_pipeline_config(okay, allow_unknown=True)


def test_validate_pipeline_config_rejects_missing_section():
    bad = copy.deepcopy(BASE)
    del bad["source"]
    with pytest.raises(ConfigError):
        validate_pipeline_config(bad)


@pytest.mark.parametrize(
    "overrides",
    [
        {"decoding__errors": "ignore"},
        {"workers__executor": "fiber"},
        {"workers__max_workers": 0},
        {"workers__max_workers": True},
        {"workers__max_buffered_entries": -1},
        {"source__url_template": "https://example.test/latest.zip"},
        {"logging__level": "LOUD"},
    ],
)
def test_validate_pipeline_config_rejects_bad_values(overrides):
    with pytest.raises(ConfigError):
        validate_pipeline_config(_config(**overrides))


def test_validate_pipeline_config_rejects_non_mapping():
    with pytest.raises(ConfigError):
        validate_pipeline_config(["decoding"])
