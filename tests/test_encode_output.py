import base64
import io

import PIL.Image
import pypdf
import pytest

import inventory_labels.config
import inventory_labels.encode
import inventory_labels.errors
import inventory_labels.layout
import inventory_labels.qr_matrix
import inventory_labels.service


encode = inventory_labels.encode
LabelRecord = inventory_labels.config.LabelRecord


#============================================
def build_records(count: int) -> list[LabelRecord]:
	"""
	Build a batch of simple records.
	"""
	return [
		LabelRecord(
			identifier=index + 1,
			name=f"Part {index + 1}",
			specification="M4" if index % 2 else None,
			quantity=index,
			location_name="Bin 4" if index % 3 == 0 else None,
		)
		for index in range(count)
	]


#============================================
def test_document_pages_sized_to_paper(font_set) -> None:
	"""
	13 records on a 3x3 A4 grid produce two A4 pages.
	"""
	grid = inventory_labels.layout.build_grid_spec("A4", 3, 3)
	data = encode.encode_document(build_records(13), grid, font_set)
	assert data.startswith(b"%PDF")
	reader = pypdf.PdfReader(io.BytesIO(data))
	assert len(reader.pages) == 2
	for page in reader.pages:
		assert float(page.mediabox.width) == pytest.approx(595.28, abs=0.05)
		assert float(page.mediabox.height) == pytest.approx(841.89, abs=0.05)
	assert reader.metadata.title == inventory_labels.config.DOCUMENT_TITLE


#============================================
def test_document_embeds_each_font_once(font_set) -> None:
	grid = inventory_labels.layout.build_grid_spec("Letter", 2, 2)
	data = encode.encode_document(build_records(9), grid, font_set)
	reader = pypdf.PdfReader(io.BytesIO(data))
	assert len(reader.pages) == 3
	# one subset each for the regular and bold faces across all pages
	assert data.count(b"/FontFile2") == 2


#============================================
def test_image_sheet_dimensions(font_set) -> None:
	grid = inventory_labels.service.image_grid_spec(3, 2)
	pixels_per_mm = inventory_labels.config.pixels_per_mm(inventory_labels.config.RASTER_DPI)
	data = encode.encode_image(build_records(5), grid, font_set, pixels_per_mm)
	image = PIL.Image.open(io.BytesIO(data))
	assert image.format == "PNG"
	assert image.mode == "L"
	assert image.size == (
		3 * inventory_labels.config.RASTER_CELL_WIDTH_PX,
		2 * inventory_labels.config.RASTER_CELL_HEIGHT_PX,
	)


#============================================
def test_image_refuses_second_page(font_set) -> None:
	grid = inventory_labels.service.image_grid_spec(2, 2)
	with pytest.raises(inventory_labels.errors.InvalidGridError):
		encode.encode_image(build_records(5), grid, font_set, 10.0)


#============================================
def test_empty_document_rejected(font_set) -> None:
	grid = inventory_labels.layout.build_grid_spec("A4", 2, 2)
	with pytest.raises(inventory_labels.errors.EmptyBatchError):
		encode.encode_document([], grid, font_set)


#============================================
def test_qr_image_has_quiet_zone() -> None:
	matrix = inventory_labels.qr_matrix.encode_qr_matrix("LOC-1a2b3c4d")
	image = encode.render_qr_image("LOC-1a2b3c4d", module_px=8, border_modules=4)
	assert image.mode == "L"
	assert image.size == ((matrix.side + 8) * 8, (matrix.side + 8) * 8)
	quiet = image.crop((0, 0, image.size[0], 32))
	assert min(quiet.getdata()) == 255
	assert image.getpixel((32, 32)) == 0


#============================================
def test_data_uri_round_trip() -> None:
	uri = encode.to_data_uri(b"\x89PNG", inventory_labels.config.PNG_MEDIA_TYPE)
	header, payload = uri.split(",", 1)
	assert header == "data:image/png;base64"
	assert base64.b64decode(payload) == b"\x89PNG"


#============================================
def test_qr_image_modules_match_matrix() -> None:
	"""
	Each module of the standalone image is an 8 px block of the symbol.
	"""
	matrix = inventory_labels.qr_matrix.encode_qr_matrix("LOC-0001")
	image = encode.render_qr_image("LOC-0001", module_px=8, border_modules=4)
	for y in range(matrix.side):
		for x in range(matrix.side):
			pixel = image.getpixel((32 + x * 8 + 4, 32 + y * 8 + 4))
			assert (pixel == 0) == matrix.is_dark(x, y)


#============================================
def test_qr_image_rejects_empty_payload() -> None:
	with pytest.raises(inventory_labels.errors.QrEncodingError):
		encode.render_qr_image("")
