"""
Font loading, glyph runs and the two paint targets.

A glyph run is laid out once in millimetres and can be painted into either a
reportlab canvas (vector) or a Pillow grayscale image (raster).
"""

# Standard Library
import dataclasses
import hashlib
import io

# PIP3 modules
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts
import reportlab.pdfgen.canvas

# local repo modules
import inventory_labels as invl
import inventory_labels.config
import inventory_labels.errors
import inventory_labels.qr_matrix


CellBox = invl.config.CellBox
FontUnavailableError = invl.errors.FontUnavailableError
compute_module_size = invl.qr_matrix.compute_module_size
points_to_mm = invl.config.points_to_mm
mm_to_points = invl.config.mm_to_points

BORDER_WIDTH_PT = invl.config.BORDER_WIDTH_PT
BORDER_WIDTH_PX = invl.config.BORDER_WIDTH_PX
VECTOR_QR_QUANTUM_PT = invl.config.VECTOR_QR_QUANTUM_PT
MISSING_GLYPH_ADVANCE = invl.config.MISSING_GLYPH_ADVANCE
MISSING_GLYPH_BOX_HEIGHT = invl.config.MISSING_GLYPH_BOX_HEIGHT
FONT_CACHE_LIMIT = invl.config.FONT_CACHE_LIMIT

# parsed fonts keyed by sha256 of the font bytes and subfont index,
# oldest entry dropped once FONT_CACHE_LIMIT is reached
_FONT_CACHE: dict[tuple[str, int], "LoadedFont"] = {}


class LoadedFont:
	"""
	A parsed TrueType font usable by both paint targets.
	"""

	def __init__(
		self,
		name: str,
		data: bytes,
		subfont_index: int,
		ttfont: reportlab.pdfbase.ttfonts.TTFont,
	) -> None:
		self.name = name
		self.data = data
		self.subfont_index = subfont_index
		self.ttfont = ttfont
		self._pil_fonts: dict[int, PIL.ImageFont.FreeTypeFont] = {}

	def has_glyph(self, char: str) -> bool:
		return ord(char) in self.ttfont.face.charToGlyph

	def advance_mm(self, char: str, size_pt: float) -> float:
		return points_to_mm(self.ttfont.stringWidth(char, size_pt))

	def line_height_mm(self, size_pt: float) -> float:
		"""
		Ascent plus descent for a font size, used for metric leading.
		"""
		face = self.ttfont.face
		return points_to_mm((face.ascent - face.descent) * size_pt / 1000.0)

	def pil_font(self, pixel_size: int) -> PIL.ImageFont.FreeTypeFont:
		pixel_size = max(1, pixel_size)
		font = self._pil_fonts.get(pixel_size)
		if font is None:
			try:
				font = PIL.ImageFont.truetype(
					io.BytesIO(self.data),
					size=pixel_size,
					index=self.subfont_index,
				)
			except OSError as error:
				raise FontUnavailableError(f"cannot rasterize font {self.name}: {error}") from error
			self._pil_fonts[pixel_size] = font
		return font


@dataclasses.dataclass(frozen=True)
class GlyphPlacement:
	char: str
	advance: float
	present: bool


@dataclasses.dataclass(frozen=True)
class GlyphRun:
	font: LoadedFont
	size_pt: float
	glyphs: tuple[GlyphPlacement, ...]

	@property
	def width(self) -> float:
		return sum(glyph.advance for glyph in self.glyphs)


#============================================
def load_font(data: bytes, subfont_index: int = 0) -> LoadedFont:
	"""
	Parse font bytes and register them for PDF embedding.

	Args:
		data: TrueType or TrueType collection bytes.
		subfont_index: Face index inside a collection.

	Returns:
		LoadedFont, shared for identical bytes.
	"""
	if not data:
		raise FontUnavailableError("font data is empty")
	digest = hashlib.sha256(data).hexdigest()
	key = (digest, subfont_index)
	cached = _FONT_CACHE.get(key)
	if cached is not None:
		return cached

	name = f"LabelFont-{digest[:12]}-{subfont_index}"
	try:
		ttfont = reportlab.pdfbase.ttfonts.TTFont(
			name,
			io.BytesIO(data),
			subfontIndex=subfont_index,
		)
	except reportlab.pdfbase.ttfonts.TTFError as error:
		raise FontUnavailableError(f"unsupported font data: {error}") from error
	reportlab.pdfbase.pdfmetrics.registerFont(ttfont)

	font = LoadedFont(name, data, subfont_index, ttfont)
	while len(_FONT_CACHE) >= FONT_CACHE_LIMIT:
		_FONT_CACHE.pop(next(iter(_FONT_CACHE)))
	_FONT_CACHE[key] = font
	return font


#============================================
def layout_run(font: LoadedFont, text: str, size_pt: float) -> GlyphRun:
	"""
	Lay out one line of text as a sequence of glyph advances.

	Args:
		font: Loaded font.
		text: Text already truncated by the caller.
		size_pt: Font size in points.

	Returns:
		GlyphRun with one placement per character.
	"""
	missing_advance = points_to_mm(size_pt * MISSING_GLYPH_ADVANCE)
	glyphs: list[GlyphPlacement] = []
	for char in text:
		if font.has_glyph(char):
			glyphs.append(GlyphPlacement(char, font.advance_mm(char, size_pt), True))
		else:
			glyphs.append(GlyphPlacement(char, missing_advance, False))
	return GlyphRun(font=font, size_pt=size_pt, glyphs=tuple(glyphs))


#============================================
def paint(run: GlyphRun, origin_x: float, origin_y: float, sink, bold: bool = False) -> float:
	"""
	Paint a glyph run on a fixed baseline.

	Args:
		run: GlyphRun to paint.
		origin_x: Left edge in millimetres.
		origin_y: Baseline in millimetres from the page top.
		sink: VectorSink or RasterSink.
		bold: Simulate a bold weight.

	Returns:
		The x position after the last glyph.
	"""
	box_height = points_to_mm(run.size_pt * MISSING_GLYPH_BOX_HEIGHT)
	cursor = origin_x
	for glyph in run.glyphs:
		if glyph.present:
			sink.show_glyph(run.font, run.size_pt, cursor, origin_y, glyph.char, bold)
		else:
			# hollow box stands in for the missing glyph
			inset = glyph.advance * 0.15
			sink.stroke_rect(
				CellBox(
					x=cursor + inset,
					y=origin_y - box_height,
					width=glyph.advance - 2.0 * inset,
					height=box_height,
				)
			)
		cursor += glyph.advance
	return cursor


class VectorSink:
	"""
	Paint target emitting PDF operators on a reportlab canvas.
	"""

	def __init__(self, canvas: reportlab.pdfgen.canvas.Canvas, page_height: float) -> None:
		self.canvas = canvas
		self.page_height = page_height

	def to_pdf_point(self, x: float, y: float) -> tuple[float, float]:
		"""
		Flip a top-left millimetre position into PDF points.

		This is the only place the y axis is inverted.
		"""
		return (mm_to_points(x), mm_to_points(self.page_height - y))

	def stroke_rect(self, box: CellBox) -> None:
		left, bottom = self.to_pdf_point(box.x, box.y + box.height)
		self.canvas.setLineWidth(BORDER_WIDTH_PT)
		self.canvas.setStrokeColorRGB(0.0, 0.0, 0.0)
		self.canvas.rect(
			left,
			bottom,
			mm_to_points(box.width),
			mm_to_points(box.height),
			stroke=1,
			fill=0,
		)

	def fill_rect(self, box: CellBox) -> None:
		left, bottom = self.to_pdf_point(box.x, box.y + box.height)
		self.canvas.setFillColorRGB(0.0, 0.0, 0.0)
		self.canvas.rect(
			left,
			bottom,
			mm_to_points(box.width),
			mm_to_points(box.height),
			stroke=0,
			fill=1,
		)

	def module_size(self, side: int, target: float) -> float:
		"""
		Quantized QR module size in millimetres.
		"""
		target_units = mm_to_points(target) / VECTOR_QR_QUANTUM_PT
		block = compute_module_size(side, target_units)
		return points_to_mm(block * VECTOR_QR_QUANTUM_PT)

	def snap(self, value: float) -> float:
		return value

	def show_glyph(
		self,
		font: LoadedFont,
		size_pt: float,
		x: float,
		y: float,
		char: str,
		bold: bool,
	) -> None:
		pdf_x, pdf_y = self.to_pdf_point(x, y)
		text = self.canvas.beginText(pdf_x, pdf_y)
		text.setFont(font.name, size_pt)
		self.canvas.setFillColorRGB(0.0, 0.0, 0.0)
		if bold:
			self.canvas.setStrokeColorRGB(0.0, 0.0, 0.0)
			self.canvas.setLineWidth(size_pt * 0.04)
		text.setTextRenderMode(2 if bold else 0)
		text.textOut(char)
		self.canvas.drawText(text)


class RasterSink:
	"""
	Paint target writing into a Pillow grayscale image.
	"""

	def __init__(self, image: PIL.Image.Image, pixels_per_mm: float) -> None:
		self.image = image
		self.pixels_per_mm = pixels_per_mm
		self.draw = PIL.ImageDraw.Draw(image)

	def to_pixel(self, value: float) -> int:
		return int(round(value * self.pixels_per_mm))

	def stroke_rect(self, box: CellBox) -> None:
		x0 = self.to_pixel(box.x)
		y0 = self.to_pixel(box.y)
		x1 = self.to_pixel(box.x + box.width) - 1
		y1 = self.to_pixel(box.y + box.height) - 1
		if x1 < x0 or y1 < y0:
			return
		self.draw.rectangle([x0, y0, x1, y1], outline=0, width=BORDER_WIDTH_PX)

	def fill_rect(self, box: CellBox) -> None:
		x0 = self.to_pixel(box.x)
		y0 = self.to_pixel(box.y)
		width = self.to_pixel(box.width)
		height = self.to_pixel(box.height)
		if width <= 0 or height <= 0:
			return
		self.draw.rectangle([x0, y0, x0 + width - 1, y0 + height - 1], fill=0)

	def module_size(self, side: int, target: float) -> float:
		"""
		Whole-pixel QR module size in millimetres.
		"""
		target_pixels = target * self.pixels_per_mm
		block = compute_module_size(side, target_pixels)
		return block / self.pixels_per_mm

	def snap(self, value: float) -> float:
		"""
		Round a millimetre position onto the pixel grid.
		"""
		return self.to_pixel(value) / self.pixels_per_mm

	def show_glyph(
		self,
		font: LoadedFont,
		size_pt: float,
		x: float,
		y: float,
		char: str,
		bold: bool,
	) -> None:
		pixel_size = int(round(points_to_mm(size_pt) * self.pixels_per_mm))
		pil_font = font.pil_font(pixel_size)
		# anti-aliased coverage over white lands as 255 * (1 - coverage)
		self.draw.text(
			(self.to_pixel(x), self.to_pixel(y)),
			char,
			font=pil_font,
			fill=0,
			anchor="ls",
			stroke_width=1 if bold else 0,
			stroke_fill=0,
		)
