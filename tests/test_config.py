r"""
Tests for write_bench.config module.
"""

import pytest

from write_bench.config import DEFAULT_PROFILE, ENV_PREFIX, PROFILES, get_env, get_profile


class TestProfiles:
    def test_profiles_defined(self):
        assert "default" in PROFILES
        assert "small" in PROFILES
        assert "smoke" in PROFILES

    def test_default_profile(self):
        profile = PROFILES["default"]
        assert profile.name == "default"
        assert profile.total_objects == 10_000
        assert profile.batch_sizes == (100, 500, 1000, 5000)
        assert profile.contention_ratios == (0.1, 0.5, 0.9)
        assert profile.runs == 10

    def test_smoke_profile_is_seeded(self):
        assert PROFILES["smoke"].seed is not None

    def test_default_name(self):
        assert DEFAULT_PROFILE == "default"

    def test_batch_sizes_fit_domain(self):
        for profile in PROFILES.values():
            assert all(size >= 1 for size in profile.batch_sizes)
            assert all(0.0 <= ratio <= 1.0 for ratio in profile.contention_ratios)


class TestGetProfile:
    def test_get_valid_profile(self):
        assert get_profile("small").name == "small"

    def test_get_invalid_profile(self):
        with pytest.raises(ValueError, match="Unknown profile"):
            get_profile("invalid")


class TestGetEnv:
    def test_get_env_not_set(self):
        assert get_env("TEST_NOT_SET") is None

    def test_get_env_with_default(self):
        assert get_env("TEST_NOT_SET", default="default_value") == "default_value"

    def test_get_env_set(self, monkeypatch):
        monkeypatch.setenv(f"{ENV_PREFIX}TEST_VAR", "test_value")
        assert get_env("TEST_VAR") == "test_value"

    def test_prefix(self):
        assert ENV_PREFIX == "WRITE_BENCH_"
