"""Generation options, named presets, and validation.

A :class:`Config` bundles every numeric parameter of a piece.  Values are
resolved in three layers, later layers overriding earlier ones:

1. a named preset (``"1"`` or ``"1.1"``),
2. an optional YAML config file,
3. explicit options (typically CLI flags).

:func:`validate` is called before generation begins; every problem it finds
raises :class:`~melodrift.errors.ConfigurationError`.
"""

import dataclasses
import logging
import math
import os
import typing

import yaml

import melodrift.constants
import melodrift.errors
import melodrift.harmony


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Config:

	"""
	All parameters that shape a generated piece.

	Attributes:
		harmony: Harmony style name or combination expression
			(e.g. ``"quarter"``, ``"quarter+center-8ths"``, ``"quarter*center-8ths"``).
		tempo: Beats per minute.
		min_len: Shortest note length in ticks, ignoring stutter.
		max_len: Longest note length in ticks, ignoring stutter.
		harmony_base: Pitch of the accompaniment's lowest register, a multiple of 12.
		melody_base: Pitch the melody oscillates around.
		steady: Length of one note-speed cycle, in measures.
		gravity: How strongly the melody is pulled back to ``melody_base``.
		drag: Fraction of the melody's velocity lost each tick.
		nudge: Size of the random push applied to the melody each tick.
		stutter: Probability of a delayed or early note onset.
		pre_beat: Number of ticks before each beat in which notes ignore the harmony.
		volume: MIDI note-on velocity for the performance output.
	"""

	harmony: str = "quarter"
	tempo: float = 80
	min_len: float = 1.0
	max_len: float = 4.0
	harmony_base: int = -12
	melody_base: int = 12
	steady: float = math.pi
	gravity: float = 0.15
	drag: float = 0.22
	nudge: float = 1.5
	stutter: float = 0.05
	pre_beat: int = 1
	volume: int = 100


PRESETS: typing.Dict[str, Config] = {
	"1": Config(),
	"1.1": Config(harmony="center-8ths", min_len=1.15, max_len=3.5),
}

DEFAULT_PRESET = "1"

# A MIDI set_tempo message holds at most 0xFFFFFF microseconds per beat (about 3.6 bpm).
MIN_TEMPO = 4


def option_names () -> typing.List[str]:

	"""Return the field names of :class:`Config` in declaration order."""

	return [field.name for field in dataclasses.fields(Config)]


def get_preset (name: str) -> Config:

	"""Return the preset called ``name``."""

	if name not in PRESETS:
		raise melodrift.errors.ConfigurationError(
			f"Unknown preset {name!r} (available: {', '.join(PRESETS)})"
		)

	return PRESETS[name]


def load_config_file (config_path: str) -> typing.Dict[str, typing.Any]:

	"""
	Load option overrides from a YAML file.

	Keys may use either dashes or underscores (``min-len`` or ``min_len``).
	An optional ``preset`` key selects the base preset.
	"""

	if not os.path.exists(config_path):
		raise melodrift.errors.ConfigurationError(f"Config file {config_path} not found")

	try:
		with open(config_path, 'r', encoding='utf-8') as f:
			data = yaml.safe_load(f)
	except yaml.YAMLError as e:
		raise melodrift.errors.ConfigurationError(f"Config file {config_path} is not valid YAML: {e}") from e
	except UnicodeDecodeError as e:
		raise melodrift.errors.ConfigurationError(f"Config file {config_path} is not UTF-8 text: {e}") from e
	except OSError as e:
		raise melodrift.errors.ConfigurationError(f"Config file {config_path} cannot be read: {e}") from e

	if data is None:
		return {}

	if not isinstance(data, dict):
		raise melodrift.errors.ConfigurationError(f"Config file {config_path} must contain a mapping")

	return {str(key).replace("-", "_"): value for key, value in data.items()}


def apply_overrides (config: Config, overrides: typing.Mapping[str, typing.Any]) -> Config:

	"""Return ``config`` with every non-None override applied.

	Unknown keys raise ConfigurationError.
	"""

	known = set(option_names())
	changes: typing.Dict[str, typing.Any] = {}

	for key, value in overrides.items():

		if key not in known:
			raise melodrift.errors.ConfigurationError(f"Unknown option {key!r}")

		if value is not None:
			changes[key] = value

	return dataclasses.replace(config, **changes)


def resolve (
	preset: typing.Optional[str] = None,
	config_path: typing.Optional[str] = None,
	overrides: typing.Optional[typing.Mapping[str, typing.Any]] = None
) -> Config:

	"""
	Build a validated Config from a preset, a YAML file, and explicit overrides.

	Parameters:
		preset: Preset name.  When omitted, the file's ``preset`` key or
			:data:`DEFAULT_PRESET` is used.
		config_path: Optional YAML file with option values.
		overrides: Explicit option values; ``None`` values are ignored.

	Raises:
		ConfigurationError: If any layer is invalid.
	"""

	file_options: typing.Dict[str, typing.Any] = {}

	if config_path is not None:
		file_options = load_config_file(config_path)
		logger.info(f"Loaded config file {config_path}")

	file_preset = file_options.pop("preset", None)
	preset_name = preset if preset is not None else (str(file_preset) if file_preset is not None else DEFAULT_PRESET)

	config = get_preset(preset_name)
	config = apply_overrides(config, file_options)
	config = apply_overrides(config, overrides or {})

	validate(config)

	return config


def _is_number (value: typing.Any) -> bool:

	return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate (config: Config) -> None:

	"""
	Check every option, raising ConfigurationError on the first problem.
	"""

	for name in ("tempo", "min_len", "max_len", "steady", "gravity", "drag", "nudge", "stutter"):
		if not _is_number(getattr(config, name)):
			raise melodrift.errors.ConfigurationError(f"{name} must be a number, got {getattr(config, name)!r}")

	for name in ("harmony_base", "melody_base", "pre_beat", "volume"):
		if not isinstance(getattr(config, name), int) or isinstance(getattr(config, name), bool):
			raise melodrift.errors.ConfigurationError(f"{name} must be an integer, got {getattr(config, name)!r}")

	if config.tempo < MIN_TEMPO:
		raise melodrift.errors.ConfigurationError(f"Tempo must be at least {MIN_TEMPO} beats per minute")

	if config.min_len <= 0 or config.max_len <= 0:
		raise melodrift.errors.ConfigurationError("Note lengths must be positive")

	if config.min_len > config.max_len:
		raise melodrift.errors.ConfigurationError(
			f"min_len ({config.min_len}) cannot be greater than max_len ({config.max_len})"
		)

	if config.steady <= 0:
		raise melodrift.errors.ConfigurationError("Steady must be positive")

	if config.stutter < 0 or config.stutter > 1:
		raise melodrift.errors.ConfigurationError("Stutter must be between 0 and 1")

	if config.gravity < 0 or config.nudge < 0:
		raise melodrift.errors.ConfigurationError("Gravity and nudge must not be negative")

	if config.drag < 0 or config.drag > 1:
		raise melodrift.errors.ConfigurationError("Drag must be between 0 and 1")

	if config.harmony_base % melodrift.constants.OCTAVE != 0:
		raise melodrift.errors.ConfigurationError("Harmony can only be adjusted by multiples of 12")

	if config.pre_beat < 0 or config.pre_beat >= melodrift.constants.TICKS_PER_BEAT:
		raise melodrift.errors.ConfigurationError(
			f"pre_beat must be between 0 and {melodrift.constants.TICKS_PER_BEAT - 1}"
		)

	if config.volume < 1 or config.volume > 127:
		raise melodrift.errors.ConfigurationError("Volume must be between 1 and 127")

	# Parse only; style choices are drawn later, during generation.
	melodrift.harmony.parse_expression(config.harmony)
