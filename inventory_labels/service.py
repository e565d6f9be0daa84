"""
Boundary operations: resolve records and fonts, render, return data URIs.
"""

# Standard Library
import dataclasses

# local repo modules
import inventory_labels as invl
import inventory_labels.compose
import inventory_labels.config
import inventory_labels.encode
import inventory_labels.errors
import inventory_labels.glyphs
import inventory_labels.layout
import inventory_labels.store


LabelRecord = invl.config.LabelRecord
GridSpec = invl.config.GridSpec
LabelStyle = invl.config.LabelStyle
FontSet = invl.compose.FontSet
LocationQr = invl.store.LocationQr
EmptyBatchError = invl.errors.EmptyBatchError
FontUnavailableError = invl.errors.FontUnavailableError

DEFAULT_LOCALE = invl.config.DEFAULT_LOCALE
RASTER_DPI = invl.config.RASTER_DPI
RASTER_CELL_WIDTH_PX = invl.config.RASTER_CELL_WIDTH_PX
RASTER_CELL_HEIGHT_PX = invl.config.RASTER_CELL_HEIGHT_PX
PDF_MEDIA_TYPE = invl.config.PDF_MEDIA_TYPE
PNG_MEDIA_TYPE = invl.config.PNG_MEDIA_TYPE


@dataclasses.dataclass(frozen=True)
class QrCodeResult:
	id: int
	name: str
	qr_data: str


#============================================
def collect_records(record_ids: list[int], fetch_record, verbose: bool = False) -> list[LabelRecord]:
	"""
	Fetch records one by one, skipping ids that are not found.

	Args:
		record_ids: Requested identifiers, in output order.
		fetch_record: Callable returning a LabelRecord or None.
		verbose: Print a resolution summary.

	Returns:
		Resolved records.
	"""
	records: list[LabelRecord] = []
	missing: list[int] = []
	for record_id in record_ids:
		record = fetch_record(record_id)
		if record is None:
			missing.append(record_id)
			continue
		records.append(record)
	if verbose:
		print(f"Records resolved: {len(records)} of {len(record_ids)}")
		if missing:
			print(f"Records not found: {', '.join(str(value) for value in missing)}")
	if not records:
		raise EmptyBatchError("No items found")
	return records


#============================================
def resolve_fonts(load_font, locale: str) -> FontSet:
	"""
	Load the label font for a locale.

	Args:
		load_font: Callable taking a locale and returning bytes or None.
		locale: Locale such as "zh-CN".

	Returns:
		FontSet using the same face for regular and bold text.
	"""
	data = load_font(locale)
	if not data:
		raise FontUnavailableError(f"no font available for locale {locale!r}")
	font = invl.glyphs.load_font(data)
	return FontSet(regular=font, bold=font)


#============================================
def image_grid_spec(columns: int, rows: int) -> GridSpec:
	"""
	Build the grid of a raster sheet from the fixed cell size in pixels.
	"""
	invl.layout.validate_dimensions(columns, rows)
	pixels_per_mm = invl.config.pixels_per_mm(RASTER_DPI)
	grid = GridSpec(
		page_width=columns * RASTER_CELL_WIDTH_PX / pixels_per_mm,
		page_height=rows * RASTER_CELL_HEIGHT_PX / pixels_per_mm,
		columns=columns,
		rows=rows,
	)
	invl.layout.validate_grid(grid)
	return grid


#============================================
def generate_document_labels(
	record_ids: list[int],
	paper_size: str,
	columns: int,
	rows: int,
	fetch_record,
	load_font,
	locale: str = DEFAULT_LOCALE,
	style: LabelStyle | None = None,
	verbose: bool = False,
) -> str:
	"""
	Generate a PDF label sheet.

	Args:
		record_ids: Item identifiers in output order.
		paper_size: "A4", "Letter" or "A5"; anything else uses A4.
		columns: Columns per page.
		rows: Rows per page.
		fetch_record: Callable returning a LabelRecord or None.
		load_font: Callable taking a locale and returning font bytes or None.
		locale: Font locale.
		style: Optional label style.
		verbose: Print progress.

	Returns:
		PDF data URI.
	"""
	grid = invl.layout.build_grid_spec(paper_size, columns, rows)
	records = collect_records(record_ids, fetch_record, verbose)
	fonts = resolve_fonts(load_font, locale)
	plan = invl.layout.plan_layout(len(records), columns, rows)
	if verbose:
		print(f"Paper: {grid.page_width}x{grid.page_height} mm, grid {columns}x{rows}")
		print(f"Pages: {plan.total_pages}")
	data = invl.encode.encode_document(records, grid, fonts, style)
	if verbose:
		print(f"PDF bytes: {len(data)}")
	return invl.encode.to_data_uri(data, PDF_MEDIA_TYPE)


#============================================
def generate_image_labels(
	record_ids: list[int],
	columns: int,
	rows: int,
	fetch_record,
	load_font,
	locale: str = DEFAULT_LOCALE,
	style: LabelStyle | None = None,
	verbose: bool = False,
) -> str:
	"""
	Generate a single PNG label sheet.

	Args:
		record_ids: Item identifiers in output order.
		columns: Columns, 1 to 10.
		rows: Rows, 1 to 10.
		fetch_record: Callable returning a LabelRecord or None.
		load_font: Callable taking a locale and returning font bytes or None.
		locale: Font locale.
		style: Optional label style.
		verbose: Print progress.

	Returns:
		PNG data URI.
	"""
	grid = image_grid_spec(columns, rows)
	records = collect_records(record_ids, fetch_record, verbose)
	fonts = resolve_fonts(load_font, locale)
	pixels_per_mm = invl.config.pixels_per_mm(RASTER_DPI)
	data = invl.encode.encode_image(records, grid, fonts, pixels_per_mm, style)
	if verbose:
		print(f"PNG bytes: {len(data)}")
	return invl.encode.to_data_uri(data, PNG_MEDIA_TYPE)


#============================================
def location_qr_data_uri(location: LocationQr) -> str:
	"""
	Render one location's QR code as a PNG data URI.
	"""
	payload = location.qr_code_id or str(location.identifier)
	image = invl.encode.render_qr_image(payload)
	data = invl.encode.save_png(image)
	return invl.encode.to_data_uri(data, PNG_MEDIA_TYPE)


#============================================
def generate_location_qr(location_id: int, fetch_location) -> str:
	"""
	Generate the QR code image for one location.

	Args:
		location_id: Location identifier.
		fetch_location: Callable returning a LocationQr or None.

	Returns:
		PNG data URI.
	"""
	location = fetch_location(location_id)
	if location is None:
		raise EmptyBatchError("Location not found")
	return location_qr_data_uri(location)


#============================================
def generate_batch_qr(location_ids: list[int], fetch_location) -> list[QrCodeResult]:
	"""
	Generate QR code images for several locations, skipping unknown ids.
	"""
	results: list[QrCodeResult] = []
	for location_id in location_ids:
		location = fetch_location(location_id)
		if location is None:
			continue
		results.append(
			QrCodeResult(
				id=location.identifier,
				name=location.name,
				qr_data=location_qr_data_uri(location),
			)
		)
	return results
