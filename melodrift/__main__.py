"""Command-line entry point.

Usage::

    melodrift OUTPUT.ly [--midi OUTPUT.mid] [--force] [--repeat N]
                        [--preset NAME] [--config FILE.yaml] [--seed N]
                        [--harmony EXPR] [--tempo BPM] [--min-len TICKS] ...

Options not given on the command line come from the config file, then from
the preset.  Exits with status 1 on invalid options, an existing output file
without ``--force``, or a write failure.
"""

import argparse
import logging
import sys
import typing

import melodrift.composition
import melodrift.config
import melodrift.errors
import melodrift.harmony


logger = logging.getLogger(__name__)


def build_parser () -> argparse.ArgumentParser:

	"""
	Create the argument parser.
	"""

	parser = argparse.ArgumentParser(
		prog="melodrift",
		description="Generates simple music as LilyPond files (and optionally MIDI).",
	)

	parser.add_argument("output",                                   help="Path to the LilyPond output")
	parser.add_argument("--midi",         default=None,             help="Path to an additional MIDI output")
	parser.add_argument("-f", "--force",  action="store_true",      help="Overwrite existing output files")
	parser.add_argument("-r", "--repeat", type=int, default=1,      help="Times to repeat the accompaniment (default: 1)")
	parser.add_argument("--preset",       default=None,             help=f"Preset defaults: {', '.join(melodrift.config.PRESETS)} (default: {melodrift.config.DEFAULT_PRESET})")
	parser.add_argument("--config",       default=None,             help="YAML file with option values")
	parser.add_argument("--seed",         type=int, default=None,   help="Seed for reproducible output (default: random)")
	parser.add_argument("-v", "--verbose", action="store_true",     help="Log debug detail")

	options = parser.add_argument_group("generation options (override the preset)")
	options.add_argument("--harmony",      default=None,            help=f"Harmony style or expression with + and *: {', '.join(melodrift.harmony.STYLE_NAMES)}")
	options.add_argument("--tempo",        type=float, default=None, help="Beats per minute")
	options.add_argument("--min-len",      type=float, default=None, help="Minimum note length in sixteenths (ignoring stutter)")
	options.add_argument("--max-len",      type=float, default=None, help="Maximum note length in sixteenths (ignoring stutter)")
	options.add_argument("--harmony-base", type=int,   default=None, help="Pitch of the harmony's lowest note, a multiple of 12")
	options.add_argument("--melody-base",  type=int,   default=None, help="Pitch of the melody's centre")
	options.add_argument("--steady",       type=float, default=None, help="Measures per cycle of note-speed change")
	options.add_argument("--gravity",      type=float, default=None, help="How strongly the melody oscillates around its centre")
	options.add_argument("--drag",         type=float, default=None, help="How strongly the melody's velocity declines")
	options.add_argument("--nudge",        type=float, default=None, help="Amount of random influence on the melody")
	options.add_argument("--stutter",      type=float, default=None, help="Amount of random influence on note timing (0-1)")
	options.add_argument("--pre-beat",     type=int,   default=None, help="Ticks before each beat where notes may leave the harmony")
	options.add_argument("--volume",       type=int,   default=None, help="MIDI note velocity (0-127)")

	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Parse arguments, generate the piece, and write the outputs.

	Returns the process exit status.
	"""

	args = build_parser().parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	overrides: typing.Dict[str, typing.Any] = {
		name: getattr(args, name) for name in melodrift.config.option_names()
	}

	try:
		config = melodrift.config.resolve(
			preset = args.preset,
			config_path = args.config,
			overrides = overrides,
		)

		composition = melodrift.composition.Composition(config, seed=args.seed, repeat=args.repeat)
		composition.write(args.output, midi_path=args.midi, force=args.force)

	except melodrift.errors.MelodriftError as e:
		logger.error(str(e))
		return 1

	logger.info(f"Done (seed {composition.seed})")

	return 0


if __name__ == "__main__":
	sys.exit(main())
