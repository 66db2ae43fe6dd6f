"""
Tests for sprite loading and the asset table.
"""

import asyncio

import pygame
import pytest

from ski_adventure.ski_core.config_loader import load_config
from ski_adventure.ski_core.sprite_loader import (
    AssetLoadError,
    AssetTable,
    Sprite,
    load_assets,
    load_assets_async,
    placeholder_assets,
)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def image_dir(tmp_path, config):
    """Directory with a small PNG for every configured sprite."""
    for i, filename in enumerate(config.assets.files.values()):
        surface = pygame.Surface((20 + i, 10 + i), pygame.SRCALPHA)
        surface.fill((10 * i % 255, 100, 200, 255))
        pygame.image.save(surface, str(tmp_path / filename))
    return tmp_path


class TestAssetTable:
    """Test the read-only sprite mapping."""

    def test_mapping_access(self):
        table = AssetTable.from_sizes({"skier": (600, 900), "tree": (10, 20)})
        assert table["skier"] == Sprite(600, 900)
        assert table.get("nope") is None
        assert set(table) == {"skier", "tree"}
        assert len(table) == 2

    def test_missing(self):
        table = AssetTable.from_sizes({"skier": (1, 1)})
        assert table.missing(["skier", "tree", "snowman"]) == ("tree", "snowman")

    def test_not_mutable(self):
        table = AssetTable.from_sizes({"skier": (1, 1)})
        with pytest.raises(TypeError):
            table["tree"] = Sprite(1, 1)

    def test_source_dict_copied(self):
        sprites = {"skier": Sprite(1, 1)}
        table = AssetTable(sprites)
        sprites["tree"] = Sprite(2, 2)
        assert "tree" not in table

    def test_scaled_size(self):
        assert Sprite(200, 100).scaled_size(0.5) == (100, 50)


class TestLoadAssets:
    """Test loading from disk."""

    def test_loads_every_sprite(self, config, image_dir):
        table = load_assets(config, image_dir)
        assert set(table) == set(config.assets.files)
        first = next(iter(config.assets.files))
        assert (table[first].width, table[first].height) == (20, 10)
        assert table[first].surface is not None

    def test_missing_files_are_fatal(self, config, tmp_path):
        with pytest.raises(AssetLoadError) as excinfo:
            load_assets(config, tmp_path)
        assert set(excinfo.value.failures) == set(config.assets.files)

    def test_one_missing_file_is_fatal(self, config, image_dir):
        (image_dir / config.assets.files["snowman"]).unlink()
        with pytest.raises(AssetLoadError) as excinfo:
            load_assets(config, image_dir)
        assert list(excinfo.value.failures) == ["snowman"]
        assert "snowman" in str(excinfo.value)

    def test_corrupt_file_is_fatal(self, config, image_dir):
        (image_dir / config.assets.files["bass"]).write_bytes(b"not a png")
        with pytest.raises(AssetLoadError) as excinfo:
            load_assets(config, image_dir)
        assert "bass" in excinfo.value.failures

    def test_async_load_joins_all(self, config, image_dir):
        table = asyncio.run(load_assets_async(config, image_dir))
        assert set(table) == set(config.assets.files)

    def test_async_load_failure_is_fatal(self, config, tmp_path):
        with pytest.raises(AssetLoadError):
            asyncio.run(load_assets_async(config, tmp_path))


class TestPlaceholders:
    """Test generated placeholder sprites."""

    def test_every_required_key(self, config):
        table = placeholder_assets(config)
        assert table.missing(config.required_sprites) == ()
        assert all(sprite.surface is not None for sprite in table.values())

    def test_size_only_table(self, config):
        table = placeholder_assets(config, draw=False)
        assert all(sprite.surface is None for sprite in table.values())
        drawn = placeholder_assets(config)
        assert {k: (s.width, s.height) for k, s in table.items()} == {
            k: (s.width, s.height) for k, s in drawn.items()
        }
