"""Property-based tests for configuration service."""

import json
import tempfile
from dataclasses import replace
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from bgg_climb.models import ClimbConfig, Mode
from bgg_climb.models.config import FALLBACK_POLICIES, USERS_RATED_FILTERS
from bgg_climb.services import ConfigurationService
from bgg_climb.services.errors import ConfigurationError


# Strategies for generating valid configuration data
valid_min_ratings = st.integers(min_value=0, max_value=100000)
valid_ratio = st.floats(min_value=0.0, max_value=1.0, allow_nan=False, allow_infinity=False)

valid_config_strategy = st.builds(
    ClimbConfig,
    min_ratings_rank=valid_min_ratings,
    min_ratings_bayes=valid_min_ratings,
    period_days=st.integers(min_value=1, max_value=365),
    max_periods=st.integers(min_value=2, max_value=104),
    min_new_rating_ratio=valid_ratio,
    rating_scale_min=st.just(1.0),
    rating_scale_max=st.floats(min_value=2.0, max_value=100.0, allow_nan=False, allow_infinity=False),
    users_rated_filter=st.sampled_from(USERS_RATED_FILTERS),
    fallback_policy=st.sampled_from(FALLBACK_POLICIES),
)


@given(valid_config_strategy)
def test_configuration_round_trip(config: ClimbConfig) -> None:
    """Saving a valid configuration and reloading it preserves every value."""
    with tempfile.TemporaryDirectory() as temp_dir:
        config_path = Path(temp_dir) / "test_config.json"
        service = ConfigurationService(config_path)

        service.save_config(config)
        loaded_config = service.load_config()

        assert loaded_config == config


@given(valid_config_strategy)
def test_configuration_validation_accepts_valid(config: ClimbConfig) -> None:
    result = ConfigurationService().validate_config(config)

    assert result.is_valid
    assert len(result.errors) == 0


invalid_config_strategy = st.one_of(
    st.builds(ClimbConfig, min_ratings_rank=st.integers(max_value=-1)),
    st.builds(ClimbConfig, period_days=st.integers(max_value=0)),
    st.builds(ClimbConfig, max_periods=st.integers(max_value=1)),
    st.builds(ClimbConfig, min_new_rating_ratio=st.floats(min_value=1.01, max_value=10.0)),
    st.builds(ClimbConfig, rating_scale_min=st.floats(min_value=10.0, max_value=20.0)),
    st.builds(ClimbConfig, users_rated_filter=st.text().filter(lambda x: x not in USERS_RATED_FILTERS)),
    st.builds(ClimbConfig, fallback_policy=st.text().filter(lambda x: x not in FALLBACK_POLICIES)),
)


@given(invalid_config_strategy)
def test_configuration_validation_rejects_invalid(config: ClimbConfig) -> None:
    result = ConfigurationService().validate_config(config)

    assert not result.is_valid
    assert len(result.errors) > 0
    assert all(isinstance(error, str) for error in result.errors)


class TestConfigurationService:
    """Unit tests for loading and saving configuration files."""

    def test_defaults(self) -> None:
        config = ClimbConfig()

        assert config.min_ratings_for(Mode.RANK) == 100
        assert config.min_ratings_for(Mode.BAYES) == 0
        assert config.period_days == 7
        assert config.max_periods == 12
        assert config.rating_scale == (1.0, 10.0)
        assert config.users_rated_filter == "strict"
        assert config.fallback_policy == "after_max"

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        service = ConfigurationService(tmp_path / "missing.json")

        assert service.load_config() == ClimbConfig()
        assert not (tmp_path / "missing.json").exists()

    def test_partial_file_keeps_other_defaults(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"period_days": 14, "users_rated_filter": "legacy"}))

        config = ConfigurationService(config_path).load_config()

        assert config == replace(ClimbConfig(), period_days=14, users_rated_filter="legacy")

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"max_periods": 4, "theme": "dark"}))

        assert ConfigurationService(config_path).load_config().max_periods == 4

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            json.dumps({"period_days": 0}),
            json.dumps({"fallback_policy": "middle"}),
            json.dumps(["period_days", 7]),
        ],
    )
    def test_invalid_file_falls_back_to_defaults(self, tmp_path: Path, content: str) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(content)

        assert ConfigurationService(config_path).load_config() == ClimbConfig()

    def test_save_rejects_invalid_config(self, tmp_path: Path) -> None:
        service = ConfigurationService(tmp_path / "config.json")

        with pytest.raises(ConfigurationError) as exc_info:
            service.save_config(ClimbConfig(max_periods=1))

        assert "max_periods" in exc_info.value.message
        assert not (tmp_path / "config.json").exists()

    def test_save_creates_parent_directories(self, tmp_path: Path) -> None:
        config_path = tmp_path / "nested" / "dir" / "config.json"

        ConfigurationService(config_path).save_config(ClimbConfig(period_days=1))

        assert json.loads(config_path.read_text())["period_days"] == 1
