"""Tests for the content-addressed model cache."""

from bloques import DictModelCache, resolve
from bloques.cache import hash_config, hash_content
from bloques.config import EngineConfig


class TestHashing:
    def test_content_hash_is_stable(self) -> None:
        assert hash_content("# a") == hash_content("# a")
        assert hash_content("# a") != hash_content("# b")

    def test_config_hash_ignores_render_settings(self) -> None:
        assert hash_config(EngineConfig()) == hash_config(EngineConfig(copy_glyph="[copy]"))

    def test_config_hash_tracks_header_level(self) -> None:
        assert hash_config(EngineConfig()) != hash_config(EngineConfig(max_header_level=3))


class TestDictModelCache:
    def test_miss_then_hit(self) -> None:
        cache = DictModelCache()
        first = resolve("**a**", cache=cache)
        assert len(cache) == 1
        second = resolve("**a**", cache=cache)
        assert second is first

    def test_hit_is_restamped_with_version(self) -> None:
        cache = DictModelCache()
        first = resolve("**a**", cache=cache, version=1)
        second = resolve("**a**", cache=cache, version=2)
        assert second.version == 2
        assert second.annotations == first.annotations

    def test_different_config_is_a_different_entry(self) -> None:
        cache = DictModelCache()
        resolve("### a", cache=cache)
        model = resolve("### a", cache=cache, config=EngineConfig(max_header_level=2))
        assert model.annotations == ()
        assert len(cache) == 2

    def test_clear(self) -> None:
        cache = DictModelCache()
        resolve("x", cache=cache)
        cache.clear()
        assert len(cache) == 0
