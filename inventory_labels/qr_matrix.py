"""
QR symbol matrices and nearest-neighbour module scaling.
"""

# Standard Library
import dataclasses

# PIP3 modules
import qrcode
import qrcode.constants
import qrcode.exceptions

# local repo modules
import inventory_labels as invl
import inventory_labels.config
import inventory_labels.errors


QrEncodingError = invl.errors.QrEncodingError

QR_ERROR_CORRECTION = invl.config.QR_ERROR_CORRECTION

ERROR_CORRECTION_LEVELS = {
	"L": qrcode.constants.ERROR_CORRECT_L,
	"M": qrcode.constants.ERROR_CORRECT_M,
	"Q": qrcode.constants.ERROR_CORRECT_Q,
	"H": qrcode.constants.ERROR_CORRECT_H,
}


@dataclasses.dataclass(frozen=True)
class QRMatrix:
	modules: tuple[tuple[bool, ...], ...]

	@property
	def side(self) -> int:
		return len(self.modules)

	def is_dark(self, x: int, y: int) -> bool:
		return self.modules[y][x]


#============================================
def build_qr_code(
	payload: str,
	error_correction: str = QR_ERROR_CORRECTION,
	box_size: int = 1,
	border: int = 0,
) -> qrcode.QRCode:
	"""
	Fit a payload into the smallest QR version that holds it.

	Args:
		payload: Text to encode.
		error_correction: Error correction level, one of L, M, Q, H.
		box_size: Pixels per module for library-rendered images.
		border: Quiet zone width in modules.

	Returns:
		qrcode.QRCode with its modules built.
	"""
	if not payload:
		raise QrEncodingError("QR payload is empty")
	level = ERROR_CORRECTION_LEVELS.get(error_correction.upper())
	if level is None:
		raise QrEncodingError(f"unknown error correction level {error_correction!r}")
	qr = qrcode.QRCode(
		version=None,
		error_correction=level,
		box_size=box_size,
		border=border,
	)
	qr.add_data(payload)
	try:
		qr.make(fit=True)
	except qrcode.exceptions.DataOverflowError as error:
		raise QrEncodingError(
			f"QR payload of {len(payload)} characters exceeds symbol capacity"
		) from error
	return qr


#============================================
def encode_qr_matrix(payload: str, error_correction: str = QR_ERROR_CORRECTION) -> QRMatrix:
	"""
	Encode a payload into a QR module matrix.

	Args:
		payload: Text to encode.
		error_correction: Error correction level, one of L, M, Q, H.

	Returns:
		QRMatrix without a quiet zone.
	"""
	qr = build_qr_code(payload, error_correction)
	rows = qr.get_matrix()
	modules = tuple(tuple(bool(value) for value in row) for row in rows)
	return QRMatrix(modules=modules)


#============================================
def compute_module_size(side: int, target_size: float) -> int:
	"""
	Compute the integer block size for each module.

	Args:
		side: Matrix side length in modules.
		target_size: Requested extent in device units.

	Returns:
		floor(target_size / side); the rendered extent never exceeds the target.
	"""
	if side <= 0 or target_size <= 0:
		return 0
	return int(target_size // side)


#============================================
def iter_dark_modules(matrix: QRMatrix):
	"""
	Yield (x, y) positions of dark modules, row by row.
	"""
	for y, row in enumerate(matrix.modules):
		for x, dark in enumerate(row):
			if dark:
				yield (x, y)
