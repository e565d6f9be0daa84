"""
Cell composition: borders, text stack and QR block for one page.
"""

# Standard Library
import dataclasses

# local repo modules
import inventory_labels as invl
import inventory_labels.config
import inventory_labels.errors
import inventory_labels.glyphs
import inventory_labels.layout
import inventory_labels.qr_matrix


LabelRecord = invl.config.LabelRecord
GridSpec = invl.config.GridSpec
CellBox = invl.config.CellBox
LabelStyle = invl.config.LabelStyle
TextLimits = invl.config.TextLimits
LoadedFont = invl.glyphs.LoadedFont
QrEncodingError = invl.errors.QrEncodingError

points_to_mm = invl.config.points_to_mm
cell_box = invl.layout.cell_box
truncate_text = invl.layout.truncate_text
layout_run = invl.glyphs.layout_run
paint = invl.glyphs.paint
encode_qr_matrix = invl.qr_matrix.encode_qr_matrix
iter_dark_modules = invl.qr_matrix.iter_dark_modules

DOCUMENT_TEXT_LIMITS = invl.config.DOCUMENT_TEXT_LIMITS


@dataclasses.dataclass(frozen=True)
class FontSet:
	regular: LoadedFont
	bold: LoadedFont


@dataclasses.dataclass(frozen=True)
class TextLine:
	text: str
	size: float
	pitch: float
	bold: bool


#============================================
def split_content_box(content: CellBox, cell_height: float, padding: float) -> tuple[CellBox, CellBox]:
	"""
	Split a cell content area into a text column and a square QR column.

	Args:
		content: Padded content box.
		cell_height: Full cell height.
		padding: Padding applied around the content.

	Returns:
		Tuple of (text_box, qr_box).
	"""
	qr_size = max(0.0, cell_height - 2.0 * padding)
	qr_size = min(qr_size, content.width)
	qr_box = CellBox(
		x=content.x + content.width - qr_size,
		y=content.y + (content.height - qr_size) / 2.0,
		width=qr_size,
		height=qr_size,
	)
	text_box = CellBox(
		x=content.x,
		y=content.y,
		width=max(0.0, content.width - qr_size - padding),
		height=content.height,
	)
	return (text_box, qr_box)


#============================================
def build_text_lines(record: LabelRecord, style: LabelStyle, limits: TextLimits) -> list[TextLine]:
	"""
	Build the text stack for a record, top to bottom.

	Args:
		record: Label record.
		style: Label style.
		limits: Truncation limits.

	Returns:
		List of TextLine entries.
	"""
	lines = [
		TextLine(truncate_text(record.name, limits.name), style.name_size, style.name_pitch, True),
	]
	if record.specification:
		text = truncate_text(style.spec_prefix + record.specification, limits.specification)
		lines.append(TextLine(text, style.spec_size, style.spec_pitch, False))
	unit = record.unit or style.default_unit
	quantity_text = f"{style.quantity_prefix}{record.quantity} {unit}"
	lines.append(TextLine(quantity_text, style.quantity_size, style.quantity_pitch, True))
	if record.location_name:
		text = truncate_text(style.location_prefix + record.location_name, limits.location)
		lines.append(TextLine(text, style.location_size, 0.0, False))
	return lines


#============================================
def draw_text_stack(
	sink,
	lines: list[TextLine],
	text_box: CellBox,
	fonts: FontSet,
	style: LabelStyle,
) -> None:
	"""
	Paint stacked text lines at a fixed pitch from the top of the text box.
	"""
	baseline = text_box.y + points_to_mm(lines[0].size) if lines else text_box.y
	for line in lines:
		font = fonts.bold if line.bold else fonts.regular
		run = layout_run(font, line.text, line.size)
		paint(run, text_box.x, baseline, sink, bold=line.bold and fonts.bold is fonts.regular)
		if style.metric_leading:
			baseline += font.line_height_mm(line.size)
		else:
			baseline += points_to_mm(line.pitch)


#============================================
def draw_qr_block(sink, payload: str, qr_box: CellBox) -> None:
	"""
	Encode a payload and blit it centred in the QR box.
	"""
	matrix = encode_qr_matrix(payload)
	module = sink.module_size(matrix.side, qr_box.width)
	if module <= 0.0:
		raise QrEncodingError(
			f"QR block of {qr_box.width:.1f} mm cannot hold {matrix.side} modules"
		)
	extent = module * matrix.side
	origin_x = sink.snap(qr_box.x + (qr_box.width - extent) / 2.0)
	origin_y = sink.snap(qr_box.y + (qr_box.height - extent) / 2.0)
	for x, y in iter_dark_modules(matrix):
		sink.fill_rect(
			CellBox(
				x=origin_x + x * module,
				y=origin_y + y * module,
				width=module,
				height=module,
			)
		)


#============================================
def draw_cell(
	sink,
	record: LabelRecord,
	box: CellBox,
	fonts: FontSet,
	style: LabelStyle,
	limits: TextLimits,
) -> None:
	"""
	Draw one label into its cell.
	"""
	content = box.inset(style.padding)
	text_box, qr_box = split_content_box(content, box.height, style.padding)
	draw_qr_block(sink, record.effective_qr_payload(), qr_box)
	lines = build_text_lines(record, style, limits)
	draw_text_stack(sink, lines, text_box, fonts, style)


#============================================
def compose_page(
	page_items: list[LabelRecord],
	grid: GridSpec,
	fonts: FontSet,
	sink,
	style: LabelStyle | None = None,
	limits: TextLimits = DOCUMENT_TEXT_LIMITS,
):
	"""
	Compose one page of labels into a sink.

	Args:
		page_items: Records for this page, in cell order.
		grid: Grid specification.
		fonts: Regular and bold fonts.
		sink: VectorSink or RasterSink for the page.
		style: Label style, defaults to LabelStyle().
		limits: Text truncation limits.

	Returns:
		The sink holding the rendered page.
	"""
	if style is None:
		style = LabelStyle()
	if len(page_items) > grid.cells_per_page:
		raise invl.errors.InvalidGridError(
			f"{len(page_items)} records do not fit {grid.cells_per_page} cells"
		)
	for row in range(grid.rows):
		for col in range(grid.columns):
			sink.stroke_rect(cell_box(grid, row, col))

	for index, record in enumerate(page_items):
		assignment = invl.layout.assign_cell(index, grid.columns, grid.rows)
		box = cell_box(grid, assignment.row, assignment.col)
		draw_cell(sink, record, box, fonts, style, limits)
	return sink
