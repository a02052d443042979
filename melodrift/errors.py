"""Exception types raised by melodrift.

Every error is fatal for a single generation run.  Each class also derives from
the closest built-in exception so callers can catch either.
"""


class MelodriftError (Exception):

	"""Base class for all melodrift errors."""


class ConfigurationError (MelodriftError, ValueError):

	"""An option is out of range or a harmony expression cannot be parsed."""


class OutputConflict (MelodriftError, FileExistsError):

	"""An output path already exists and overwriting was not confirmed."""


class IOFailure (MelodriftError, OSError):

	"""Writing an output file failed."""
