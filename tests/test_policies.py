"""
Tests for per-key policies, compression helpers and size formatting.
"""
import pytest

from content_cache.cache import (
    CONTENT_CACHE_CONFIG,
    CacheConfig,
    CompressedValue,
    Priority,
    RawValue,
    get_policy_for_key,
    resolve_entry_options,
)
from content_cache.cache.compression import compress, decompress, estimate_size
from content_cache.utils.helpers import format_size
from config.settings import Settings


class TestKeyPolicies:
    """Resolution order: explicit options, per-key table, defaults."""

    def test_known_key_uses_table(self):
        ttl, priority, tags = resolve_entry_options("home.hero", default_ttl=300)
        assert ttl == 30 * 60
        assert priority is Priority.CRITICAL
        assert tags == frozenset({"home", "hero", "landing"})

    def test_unknown_key_uses_defaults(self):
        ttl, priority, tags = resolve_entry_options("careers.jobs", default_ttl=300)
        assert ttl == 300
        assert priority is Priority.MEDIUM
        assert tags == frozenset()

    def test_explicit_options_win(self):
        ttl, priority, tags = resolve_entry_options(
            "home.policies", default_ttl=300, ttl=12, priority="high", tags=["legal"]
        )
        assert ttl == 12
        assert priority is Priority.HIGH
        assert tags == frozenset({"legal"})

    def test_invalid_ttl_falls_through(self):
        ttl, _, _ = resolve_entry_options("home.stats", default_ttl=300, ttl="soon")
        assert ttl == 10 * 60
        ttl, _, _ = resolve_entry_options("other", default_ttl=300, ttl=-5)
        assert ttl == 300

    def test_non_finite_ttl_falls_through(self):
        ttl, _, _ = resolve_entry_options("home.hero", default_ttl=300, ttl=float("nan"))
        assert ttl == 30 * 60
        ttl, _, _ = resolve_entry_options("other", default_ttl=300, ttl=float("inf"))
        assert ttl == 300

    def test_invalid_tags_fall_through(self):
        _, _, tags = resolve_entry_options("home.stats", default_ttl=300, tags=5)
        assert tags == frozenset({"home", "stats", "numbers"})
        _, _, tags = resolve_entry_options("other", default_ttl=300, tags=[["a"]])
        assert tags == frozenset()

    def test_single_string_tag(self):
        _, _, tags = resolve_entry_options("other", default_ttl=300, tags="blog")
        assert tags == frozenset({"blog"})

    def test_priority_accepts_enum_and_case(self):
        assert resolve_entry_options("k", 1, priority=Priority.LOW)[1] is Priority.LOW
        assert resolve_entry_options("k", 1, priority="CRITICAL")[1] is Priority.CRITICAL

    def test_priority_scores_are_ordered(self):
        scores = [p.score for p in (Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL)]
        assert scores == [1, 2, 3, 4]

    def test_table_covers_home_sections(self):
        assert get_policy_for_key("home.newsletter").ttl == 24 * 60 * 60
        assert get_policy_for_key("home.missing") is None
        assert all(key.startswith("home.") for key in CONTENT_CACHE_CONFIG)


class TestCompression:
    """Size estimation and the compress/decompress adapter."""

    def test_estimate_size_is_serialized_length(self):
        assert estimate_size({"a": 1}) == len('{"a":1}')
        assert estimate_size("héllo") == len('"héllo"'.encode("utf-8"))

    def test_estimate_size_fallback(self):
        value = {1, 2, 3}
        assert estimate_size(value) == len(repr(value)) * 2

    def test_estimate_size_of_stored_values(self):
        assert estimate_size(CompressedValue(b"12345")) == 5
        assert estimate_size(RawValue([1, 2])) == len("[1,2]")

    def test_compress_round_trip(self):
        value = {"items": [{"name": "n" * 50, "n": i} for i in range(30)]}
        stored = compress(value)
        assert isinstance(stored, CompressedValue)
        assert decompress(stored) == value

    def test_compress_failure_returns_raw(self):
        value = {"fn": lambda: None}
        stored = compress(value)
        assert isinstance(stored, RawValue)
        assert decompress(stored) is value

    def test_corrupt_payload_returned_as_is(self):
        stored = CompressedValue(b"not zlib")
        assert decompress(stored) == b"not zlib"


class TestFormatSize:

    @pytest.mark.parametrize("num_bytes,expected", [
        (0, "0.0 B"),
        (512, "512.0 B"),
        (1536, "1.5 KB"),
        (50 * 1024 * 1024, "50.0 MB"),
        (3 * 1024 ** 4, "3072.0 GB"),
    ])
    def test_format_size(self, num_bytes, expected):
        assert format_size(num_bytes) == expected


class TestConfig:

    def test_config_from_settings(self):
        settings = Settings(
            cache_max_size=2048,
            cache_max_entries=10,
            cache_default_ttl_seconds=30,
            cache_cleanup_interval_seconds=5,
            cache_compression_threshold=512,
        )
        config = CacheConfig.from_settings(settings)
        assert config == CacheConfig(
            max_size=2048,
            max_entries=10,
            default_ttl=30,
            cleanup_interval=5,
            compression_threshold=512,
        )

    def test_defaults(self):
        config = CacheConfig()
        assert config.max_size == 50 * 1024 * 1024
        assert config.max_entries == 1000
        assert config.default_ttl == 300
        assert config.cleanup_interval == 60
        assert config.compression_threshold == 100 * 1024
