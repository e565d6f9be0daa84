"""
Shared configuration, constants and record types.
"""

import dataclasses


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4
POINTS_PER_MM = POINTS_PER_INCH / MM_PER_INCH

MAX_GRID_DIMENSION = 10
DEFAULT_COLUMNS = 2
DEFAULT_ROWS = 5
DEFAULT_PAPER_SIZE = "A4"
DEFAULT_LOCALE = "zh-CN"

# physical page sizes in millimetres (width, height)
PAPER_SIZES = {
	"A4": (210.0, 297.0),
	"LETTER": (215.9, 279.4),
	"A5": (148.0, 210.0),
}

DOCUMENT_TITLE = "Item Labels"
PDF_MEDIA_TYPE = "application/pdf"
PNG_MEDIA_TYPE = "image/png"

CELL_PADDING_MM = 3.0
BORDER_WIDTH_PT = 1.0
BORDER_WIDTH_PX = 1
QR_ERROR_CORRECTION = "M"
# vector QR modules snap to this grid so module edges stay crisp
VECTOR_QR_QUANTUM_PT = 0.25

NAME_FONT_SIZE = 12.0
SPEC_FONT_SIZE = 9.0
QUANTITY_FONT_SIZE = 10.0
LOCATION_FONT_SIZE = 9.0
# fixed baseline-to-baseline pitch after each line, in points
NAME_LINE_PITCH = 15.0
SPEC_LINE_PITCH = 12.0
QUANTITY_LINE_PITCH = 12.0
MISSING_GLYPH_ADVANCE = 0.5
MISSING_GLYPH_BOX_HEIGHT = 0.7

SPEC_PREFIX = "规格: "
QUANTITY_PREFIX = "数量: "
LOCATION_PREFIX = "位置: "
DEFAULT_UNIT = "个"

RASTER_DPI = 300.0
RASTER_CELL_WIDTH_PX = 600
RASTER_CELL_HEIGHT_PX = 300

LOCATION_QR_MODULE_PX = 8
LOCATION_QR_BORDER_MODULES = 4

FONT_CACHE_LIMIT = 16


@dataclasses.dataclass(frozen=True)
class LabelRecord:
	identifier: int
	name: str
	specification: str | None = None
	quantity: int = 0
	unit: str | None = None
	location_name: str | None = None
	qr_payload: str | None = None

	def __post_init__(self) -> None:
		if self.quantity < 0:
			raise ValueError(f"quantity must be non-negative, got {self.quantity}")

	def effective_qr_payload(self) -> str:
		"""
		Return the QR payload, falling back to the decimal identifier.
		"""
		if self.qr_payload:
			return self.qr_payload
		return str(self.identifier)


@dataclasses.dataclass(frozen=True)
class GridSpec:
	page_width: float
	page_height: float
	columns: int
	rows: int

	@property
	def cells_per_page(self) -> int:
		return self.columns * self.rows

	@property
	def cell_width(self) -> float:
		return self.page_width / self.columns

	@property
	def cell_height(self) -> float:
		return self.page_height / self.rows


@dataclasses.dataclass(frozen=True)
class PageAssignment:
	page: int
	row: int
	col: int


@dataclasses.dataclass(frozen=True)
class CellBox:
	x: float
	y: float
	width: float
	height: float

	def inset(self, padding: float) -> "CellBox":
		return CellBox(
			x=self.x + padding,
			y=self.y + padding,
			width=max(0.0, self.width - 2.0 * padding),
			height=max(0.0, self.height - 2.0 * padding),
		)


@dataclasses.dataclass(frozen=True)
class TextLimits:
	name: int
	specification: int
	location: int


DOCUMENT_TEXT_LIMITS = TextLimits(name=30, specification=40, location=40)
IMAGE_TEXT_LIMITS = TextLimits(name=20, specification=30, location=25)


@dataclasses.dataclass(frozen=True)
class LabelStyle:
	padding: float = CELL_PADDING_MM
	name_size: float = NAME_FONT_SIZE
	spec_size: float = SPEC_FONT_SIZE
	quantity_size: float = QUANTITY_FONT_SIZE
	location_size: float = LOCATION_FONT_SIZE
	name_pitch: float = NAME_LINE_PITCH
	spec_pitch: float = SPEC_LINE_PITCH
	quantity_pitch: float = QUANTITY_LINE_PITCH
	metric_leading: bool = False
	spec_prefix: str = SPEC_PREFIX
	quantity_prefix: str = QUANTITY_PREFIX
	location_prefix: str = LOCATION_PREFIX
	default_unit: str = DEFAULT_UNIT


#============================================
def points_to_mm(value: float) -> float:
	"""
	Convert points to millimetres.

	Args:
		value: Points value.

	Returns:
		Millimetres value.
	"""
	return value / POINTS_PER_MM


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimetres to points.

	Args:
		value: Millimetres value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_MM


#============================================
def pixels_per_mm(dpi: float) -> float:
	"""
	Convert a resolution in dots per inch to pixels per millimetre.
	"""
	return dpi / MM_PER_INCH
