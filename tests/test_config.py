"""Scene configuration defaults, validation and loading."""
import json

import pytest

from qrdots.config import SceneConfig, load_config
from qrdots.layout import LayoutParams
from qrdots.render import Palette


def test_defaults_match_demo():
    config = SceneConfig()
    assert config.data == "Merry christmas NERDS!"
    assert config.ecc == "M"
    assert config.layout_params == LayoutParams(10.0, 7, 70.0)
    assert config.palette == Palette((0, 0, 0), (255, 255, 255))
    assert config.window_size == (1280, 720)
    assert config.overlay_rect == (620, 400, 50, 50)
    assert config.overlay_path is None


def test_lists_become_tuples():
    config = SceneConfig(window_size=[640, 480], fg=[10, 20, 30])
    assert config.window_size == (640, 480)
    assert config.fg == (10, 20, 30)
    hash(config)


def test_ecc_is_normalized():
    assert SceneConfig(ecc="h").ecc == "H"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"data": ""},
        {"ecc": "Z"},
        {"block_size": 0},
        {"center_exclusion_size": -1},
        {"fg": (0, 0, 300)},
        {"clear_color": (1, 2)},
        {"window_size": (0, 10)},
        {"overlay_rect": (0, 0, 10, 0)},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SceneConfig(**kwargs)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="colour"):
        SceneConfig.from_dict({"colour": "red"})


def test_dict_round_trip():
    config = SceneConfig(data="hello", block_size=4)
    assert SceneConfig.from_dict(config.to_dict()) == config


def test_load_config(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps({
        "data": "from file",
        "block_size": 6,
        "window_size": [400, 300],
        "overlay_rect": [175, 125, 50, 50],
    }), encoding="utf-8")
    config = load_config(path)
    assert config.data == "from file"
    assert config.block_size == 6.0
    assert config.window_size == (400, 300)
    assert config.overlay_rect == (175, 125, 50, 50)
    assert config.corner_marker_size == 7


def test_load_config_requires_object(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_bool_block_size_is_rejected():
    with pytest.raises(TypeError):
        SceneConfig.from_dict({"block_size": True})
