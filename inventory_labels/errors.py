"""
Error types raised by the label engine.

Every error is terminal for the current call: no artifact is produced.
"""


class LabelEngineError(Exception):
	"""
	Base class for label engine failures.
	"""


class InvalidGridError(LabelEngineError, ValueError):
	"""
	Grid dimensions are non-positive, out of bounds, or produce empty cells.
	"""


class EmptyBatchError(LabelEngineError):
	"""
	No records were resolved for a rendering call.
	"""


class QrEncodingError(LabelEngineError):
	"""
	A QR payload cannot be represented at any supported symbol version.
	"""


class FontUnavailableError(LabelEngineError):
	"""
	The font needed to render label text is missing or unreadable.
	"""


class EncodingError(LabelEngineError):
	"""
	Serializing the final document or image failed.
	"""


class DataAccessError(LabelEngineError):
	"""
	The inventory database could not be opened or queried.
	"""
