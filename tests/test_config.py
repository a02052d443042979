import dataclasses
import math

import pytest

import melodrift.config
import melodrift.errors


def test_default_preset () -> None:

	"""Preset 1 is the quarter-note style at 80 bpm."""

	config = melodrift.config.get_preset("1")

	assert config.harmony == "quarter"
	assert config.tempo == 80
	assert (config.min_len, config.max_len) == (1, 4)
	assert config.steady == pytest.approx(math.pi)
	assert (config.harmony_base, config.melody_base) == (-12, 12)
	assert (config.gravity, config.drag, config.nudge, config.stutter) == (0.15, 0.22, 1.5, 0.05)


def test_preset_1_1 () -> None:

	"""Preset 1.1 differs only in harmony style and note lengths."""

	base = melodrift.config.get_preset("1")
	config = melodrift.config.get_preset("1.1")

	assert config.harmony == "center-8ths"
	assert (config.min_len, config.max_len) == (1.15, 3.5)
	assert dataclasses.replace(config, harmony=base.harmony, min_len=base.min_len, max_len=base.max_len) == base


def test_unknown_preset () -> None:

	with pytest.raises(melodrift.errors.ConfigurationError, match="Unknown preset"):
		melodrift.config.get_preset("2")


def test_presets_are_valid () -> None:

	for config in melodrift.config.PRESETS.values():
		melodrift.config.validate(config)


def test_resolve_defaults () -> None:

	assert melodrift.config.resolve() == melodrift.config.get_preset(melodrift.config.DEFAULT_PRESET)


def test_overrides_ignore_none () -> None:

	"""Unset CLI flags arrive as None and leave the preset alone."""

	config = melodrift.config.resolve(overrides={"tempo": 120, "gravity": None})

	assert config.tempo == 120
	assert config.gravity == 0.15


def test_unknown_override () -> None:

	with pytest.raises(melodrift.errors.ConfigurationError, match="Unknown option"):
		melodrift.config.resolve(overrides={"swing": 0.5})


def test_config_file_layer (tmp_path) -> None:

	"""File values override the preset; explicit overrides win over the file."""

	path = tmp_path / "piece.yaml"
	path.write_text("preset: '1.1'\ntempo: 100\nmin-len: 1.5\ndrag: 0.3\n")

	config = melodrift.config.resolve(config_path=str(path), overrides={"drag": 0.1})

	assert config.harmony == "center-8ths"
	assert config.tempo == 100
	assert config.min_len == 1.5
	assert config.drag == 0.1


def test_explicit_preset_beats_file_preset (tmp_path) -> None:

	path = tmp_path / "piece.yaml"
	path.write_text("preset: '1.1'\n")

	config = melodrift.config.resolve(preset="1", config_path=str(path))

	assert config.harmony == "quarter"


def test_empty_config_file (tmp_path) -> None:

	path = tmp_path / "empty.yaml"
	path.write_text("")

	assert melodrift.config.load_config_file(str(path)) == {}


def test_missing_config_file (tmp_path) -> None:

	with pytest.raises(melodrift.errors.ConfigurationError, match="not found"):
		melodrift.config.load_config_file(str(tmp_path / "nope.yaml"))


def test_invalid_yaml (tmp_path) -> None:

	path = tmp_path / "bad.yaml"
	path.write_text("tempo: [80\n")

	with pytest.raises(melodrift.errors.ConfigurationError, match="not valid YAML"):
		melodrift.config.load_config_file(str(path))


def test_config_file_must_be_mapping (tmp_path) -> None:

	path = tmp_path / "list.yaml"
	path.write_text("- 1\n- 2\n")

	with pytest.raises(melodrift.errors.ConfigurationError, match="mapping"):
		melodrift.config.load_config_file(str(path))


@pytest.mark.parametrize("changes", [
	{"tempo": 0},
	{"tempo": 0.3},
	{"tempo": 3.5},
	{"min_len": 0},
	{"min_len": 5, "max_len": 4},
	{"steady": 0},
	{"stutter": 1.5},
	{"stutter": -0.1},
	{"gravity": -1},
	{"nudge": -1},
	{"drag": 2},
	{"harmony_base": -6},
	{"pre_beat": 4},
	{"volume": 128},
	{"volume": 0},
	{"tempo": "fast"},
	{"tempo": float("nan")},
	{"melody_base": 12.5},
	{"harmony": "waltz"},
	{"harmony": "quarter+"},
])
def test_validation_errors (changes: dict) -> None:

	config = dataclasses.replace(melodrift.config.get_preset("1"), **changes)

	with pytest.raises(melodrift.errors.ConfigurationError):
		melodrift.config.validate(config)


def test_equal_lengths_are_valid () -> None:

	"""min_len may equal max_len, giving a constant note length."""

	config = dataclasses.replace(melodrift.config.get_preset("1"), min_len=3, max_len=3)

	melodrift.config.validate(config)


def test_configuration_error_is_value_error () -> None:

	assert issubclass(melodrift.errors.ConfigurationError, ValueError)
	assert issubclass(melodrift.errors.OutputConflict, FileExistsError)
	assert issubclass(melodrift.errors.IOFailure, OSError)


def test_slowest_valid_tempo_and_softest_volume () -> None:

	"""Tempo 4 and velocity 1 are the lowest accepted values."""

	config = dataclasses.replace(melodrift.config.get_preset("1"), tempo=melodrift.config.MIN_TEMPO, volume=1)

	melodrift.config.validate(config)


def test_config_path_is_directory (tmp_path) -> None:

	with pytest.raises(melodrift.errors.ConfigurationError, match="cannot be read"):
		melodrift.config.load_config_file(str(tmp_path))


def test_config_file_not_utf8 (tmp_path) -> None:

	path = tmp_path / "latin1.yaml"
	path.write_bytes(b"harmony: \xe9\xff\n")

	with pytest.raises(melodrift.errors.ConfigurationError, match="UTF-8"):
		melodrift.config.load_config_file(str(path))
