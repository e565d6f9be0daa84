"""
SQLite access for label records and location QR codes.
"""

# Standard Library
import dataclasses
import pathlib
import sqlite3

# local repo modules
import inventory_labels as invl
import inventory_labels.config
import inventory_labels.errors


LabelRecord = invl.config.LabelRecord
DataAccessError = invl.errors.DataAccessError

ITEM_LABEL_QUERY = (
	"SELECT i.id, i.name, i.specifications, i.quantity, i.unit, "
	"l.name AS location_name, l.qr_code_id "
	"FROM items i LEFT JOIN locations l ON i.location_id = l.id "
	"WHERE i.id = ?"
)
LOCATION_QR_QUERY = "SELECT id, name, qr_code_id FROM locations WHERE id = ?"


@dataclasses.dataclass(frozen=True)
class LocationQr:
	identifier: int
	name: str
	qr_code_id: str


#============================================
def open_database(path: pathlib.Path) -> sqlite3.Connection:
	"""
	Open the inventory database read-only.

	Args:
		path: SQLite database path.

	Returns:
		Connection with row access by column name.
	"""
	uri = f"{pathlib.Path(path).resolve().as_uri()}?mode=ro"
	try:
		connection = sqlite3.connect(uri, uri=True)
	except sqlite3.Error as error:
		raise DataAccessError(f"cannot open database {path}: {error}") from error
	connection.row_factory = sqlite3.Row
	return connection


#============================================
def query_one(connection: sqlite3.Connection, query: str, params: tuple) -> sqlite3.Row | None:
	"""
	Run a parameterized query and return its first row.
	"""
	try:
		return connection.execute(query, params).fetchone()
	except sqlite3.Error as error:
		raise DataAccessError(f"database query failed: {error}") from error


#============================================
def fetch_item_record(connection: sqlite3.Connection, item_id: int) -> LabelRecord | None:
	"""
	Fetch the label fields for one item.

	Args:
		connection: Open database connection.
		item_id: Item identifier.

	Returns:
		LabelRecord, or None when the item does not exist. The QR payload is
		the item's location QR id when the item has a location.
	"""
	row = query_one(connection, ITEM_LABEL_QUERY, (item_id,))
	if row is None:
		return None
	return LabelRecord(
		identifier=int(row["id"]),
		name=row["name"] or "",
		specification=row["specifications"],
		quantity=max(0, int(row["quantity"] or 0)),
		unit=row["unit"],
		location_name=row["location_name"],
		qr_payload=row["qr_code_id"],
	)


#============================================
def fetch_location_qr(connection: sqlite3.Connection, location_id: int) -> LocationQr | None:
	"""
	Fetch the QR code id of one location.
	"""
	row = query_one(connection, LOCATION_QR_QUERY, (location_id,))
	if row is None:
		return None
	return LocationQr(
		identifier=int(row["id"]),
		name=row["name"] or "",
		qr_code_id=row["qr_code_id"] or "",
	)
