"""
Document and image encoding for composed label pages.
"""

# Standard Library
import base64
import io

# PIP3 modules
import PIL.Image
import reportlab.pdfbase.pdfdoc
import reportlab.pdfgen.canvas

# local repo modules
import inventory_labels as invl
import inventory_labels.compose
import inventory_labels.config
import inventory_labels.errors
import inventory_labels.glyphs
import inventory_labels.layout
import inventory_labels.qr_matrix


LabelRecord = invl.config.LabelRecord
GridSpec = invl.config.GridSpec
LabelStyle = invl.config.LabelStyle
TextLimits = invl.config.TextLimits
FontSet = invl.compose.FontSet
EncodingError = invl.errors.EncodingError
InvalidGridError = invl.errors.InvalidGridError

mm_to_points = invl.config.mm_to_points
compose_page = invl.compose.compose_page
plan_layout = invl.layout.plan_layout
validate_grid = invl.layout.validate_grid

DOCUMENT_TITLE = invl.config.DOCUMENT_TITLE
DOCUMENT_TEXT_LIMITS = invl.config.DOCUMENT_TEXT_LIMITS
IMAGE_TEXT_LIMITS = invl.config.IMAGE_TEXT_LIMITS
PDF_MEDIA_TYPE = invl.config.PDF_MEDIA_TYPE
PNG_MEDIA_TYPE = invl.config.PNG_MEDIA_TYPE
LOCATION_QR_MODULE_PX = invl.config.LOCATION_QR_MODULE_PX
LOCATION_QR_BORDER_MODULES = invl.config.LOCATION_QR_BORDER_MODULES


#============================================
def encode_document(
	records: list[LabelRecord],
	grid: GridSpec,
	fonts: FontSet,
	style: LabelStyle | None = None,
	limits: TextLimits = DOCUMENT_TEXT_LIMITS,
) -> bytes:
	"""
	Render records into a multi-page PDF.

	Args:
		records: Records in placement order.
		grid: Grid specification in millimetres.
		fonts: Regular and bold fonts.
		style: Optional label style.
		limits: Text truncation limits.

	Returns:
		PDF bytes.
	"""
	validate_grid(grid)
	plan = plan_layout(len(records), grid.columns, grid.rows)
	buffer = io.BytesIO()
	page_size = (mm_to_points(grid.page_width), mm_to_points(grid.page_height))
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=page_size)
	pdf.setTitle(DOCUMENT_TITLE)
	for page in range(plan.total_pages):
		sink = invl.glyphs.VectorSink(pdf, grid.page_height)
		compose_page(records[plan.page_slice(page)], grid, fonts, sink, style, limits)
		pdf.showPage()
	try:
		pdf.save()
	except (reportlab.pdfbase.pdfdoc.PDFError, OSError, ValueError) as error:
		raise EncodingError(f"PDF serialization failed: {error}") from error
	return buffer.getvalue()


#============================================
def encode_image(
	records: list[LabelRecord],
	grid: GridSpec,
	fonts: FontSet,
	pixels_per_mm: float,
	style: LabelStyle | None = None,
	limits: TextLimits = IMAGE_TEXT_LIMITS,
) -> bytes:
	"""
	Render records into a single PNG sheet.

	Args:
		records: Records in placement order, at most one page worth.
		grid: Grid specification in millimetres.
		fonts: Regular and bold fonts.
		pixels_per_mm: Raster resolution.
		style: Optional label style.
		limits: Text truncation limits.

	Returns:
		PNG bytes.
	"""
	validate_grid(grid)
	plan = plan_layout(len(records), grid.columns, grid.rows)
	if plan.total_pages > 1:
		raise InvalidGridError(
			f"image output holds one page of {plan.cells_per_page} labels, got {plan.record_count}"
		)
	width = int(round(grid.page_width * pixels_per_mm))
	height = int(round(grid.page_height * pixels_per_mm))
	image = PIL.Image.new("L", (width, height), 255)
	sink = invl.glyphs.RasterSink(image, pixels_per_mm)
	compose_page(records, grid, fonts, sink, style, limits)
	return save_png(image)


#============================================
def render_qr_image(
	payload: str,
	module_px: int = LOCATION_QR_MODULE_PX,
	border_modules: int = LOCATION_QR_BORDER_MODULES,
) -> PIL.Image.Image:
	"""
	Render a payload as a standalone QR image with a quiet zone.

	Args:
		payload: Text to encode.
		module_px: Pixels per module.
		border_modules: Quiet zone width in modules.

	Returns:
		Grayscale PIL image.
	"""
	qr = invl.qr_matrix.build_qr_code(payload, box_size=module_px, border=border_modules)
	qr_image = qr.make_image(fill_color="black", back_color="white")
	get_image = getattr(qr_image, "get_image", None)
	if callable(get_image):
		qr_image = get_image()
	return qr_image.convert("L")


#============================================
def save_png(image: PIL.Image.Image) -> bytes:
	"""
	Encode an image as PNG bytes.
	"""
	buffer = io.BytesIO()
	try:
		image.save(buffer, format="PNG")
	except (OSError, ValueError) as error:
		raise EncodingError(f"PNG serialization failed: {error}") from error
	return buffer.getvalue()


#============================================
def to_data_uri(data: bytes, media_type: str) -> str:
	"""
	Wrap bytes in a base64 data URI.

	Args:
		data: Encoded document bytes.
		media_type: MIME type such as "application/pdf".

	Returns:
		Data URI string.
	"""
	encoded = base64.b64encode(data).decode("ascii")
	return f"data:{media_type};base64,{encoded}"
