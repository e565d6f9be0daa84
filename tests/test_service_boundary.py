import base64
import functools
import io
import pathlib
import sqlite3

import PIL.Image
import pypdf
import pytest

import inventory_labels.config
import inventory_labels.errors
import inventory_labels.service
import inventory_labels.store


service = inventory_labels.service


#============================================
def decode(data_uri: str) -> tuple[str, bytes]:
	"""
	Split a data URI into its header and decoded bytes.
	"""
	header, payload = data_uri.split(",", 1)
	return (header, base64.b64decode(payload))


#============================================
def test_fetch_item_record_joins_location(inventory_db: pathlib.Path) -> None:
	connection = inventory_labels.store.open_database(inventory_db)
	try:
		record = inventory_labels.store.fetch_item_record(connection, 10)
		assert record.name == "M3 screws"
		assert record.location_name == "Shelf A"
		assert record.effective_qr_payload() == "LOC-1a2b3c4d"

		loose = inventory_labels.store.fetch_item_record(connection, 11)
		assert loose.location_name is None
		assert loose.effective_qr_payload() == "11"

		assert inventory_labels.store.fetch_item_record(connection, 999) is None
	finally:
		connection.close()


#============================================
def test_document_labels_skip_missing_ids(inventory_db: pathlib.Path, font_loader) -> None:
	connection = inventory_labels.store.open_database(inventory_db)
	try:
		fetch_record = functools.partial(inventory_labels.store.fetch_item_record, connection)
		data_uri = service.generate_document_labels(
			[10, 999, 11, 12],
			"A5",
			1,
			2,
			fetch_record,
			font_loader,
		)
	finally:
		connection.close()
	header, data = decode(data_uri)
	assert header == "data:application/pdf;base64"
	reader = pypdf.PdfReader(io.BytesIO(data))
	# three records on a 1x2 grid
	assert len(reader.pages) == 2
	assert float(reader.pages[0].mediabox.width) == pytest.approx(148.0 * inventory_labels.config.POINTS_PER_MM, abs=0.05)


#============================================
def test_no_records_found_is_an_error(font_loader) -> None:
	with pytest.raises(inventory_labels.errors.EmptyBatchError):
		service.generate_document_labels([1, 2], "A4", 2, 2, lambda record_id: None, font_loader)


#============================================
def test_missing_font_is_an_error() -> None:
	record = inventory_labels.config.LabelRecord(identifier=1, name="x", quantity=1)
	with pytest.raises(inventory_labels.errors.FontUnavailableError):
		service.generate_document_labels([1], "A4", 1, 1, lambda record_id: record, lambda locale: None)


#============================================
def test_image_bounds_checked_before_fetch(font_loader) -> None:
	calls = []

	def fetch_record(record_id: int):
		calls.append(record_id)
		return None

	with pytest.raises(inventory_labels.errors.InvalidGridError):
		service.generate_image_labels([1], 11, 1, fetch_record, font_loader)
	with pytest.raises(inventory_labels.errors.InvalidGridError):
		service.generate_image_labels([1], 1, 0, fetch_record, font_loader)
	assert calls == []


#============================================
def test_image_labels_png(inventory_db: pathlib.Path, font_loader) -> None:
	connection = inventory_labels.store.open_database(inventory_db)
	try:
		fetch_record = functools.partial(inventory_labels.store.fetch_item_record, connection)
		data_uri = service.generate_image_labels([10, 11, 12], 2, 2, fetch_record, font_loader)
	finally:
		connection.close()
	header, data = decode(data_uri)
	assert header == "data:image/png;base64"
	image = PIL.Image.open(io.BytesIO(data))
	assert image.size == (1200, 600)


#============================================
def test_location_qr_and_batch(inventory_db: pathlib.Path) -> None:
	connection = inventory_labels.store.open_database(inventory_db)
	try:
		fetch_location = functools.partial(inventory_labels.store.fetch_location_qr, connection)
		header, data = decode(service.generate_location_qr(1, fetch_location))
		assert header == "data:image/png;base64"
		assert PIL.Image.open(io.BytesIO(data)).format == "PNG"

		with pytest.raises(inventory_labels.errors.EmptyBatchError):
			service.generate_location_qr(999, fetch_location)

		results = service.generate_batch_qr([1, 999, 2], fetch_location)
	finally:
		connection.close()
	assert [result.id for result in results] == [1, 2]
	assert [result.name for result in results] == ["Shelf A", "Drawer 3"]
	assert all(result.qr_data.startswith("data:image/png;base64,") for result in results)


#============================================
def test_store_wraps_database_errors(tmp_path: pathlib.Path) -> None:
	with pytest.raises(inventory_labels.errors.DataAccessError):
		inventory_labels.store.open_database(tmp_path / "absent.db")

	empty_path = tmp_path / "empty.db"
	sqlite3.connect(empty_path).close()
	connection = inventory_labels.store.open_database(empty_path)
	try:
		with pytest.raises(inventory_labels.errors.DataAccessError):
			inventory_labels.store.fetch_item_record(connection, 1)
	finally:
		connection.close()
