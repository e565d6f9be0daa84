"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import os
import pathlib
import sqlite3
import sys

# PIP3 modules
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()
import reportlab

import inventory_labels.compose
import inventory_labels.glyphs


SCHEMA = [
	"CREATE TABLE locations (id INTEGER PRIMARY KEY, name TEXT NOT NULL, qr_code_id TEXT)",
	(
		"CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT NOT NULL, specifications TEXT, "
		"quantity INTEGER NOT NULL DEFAULT 0, unit TEXT, location_id INTEGER)"
	),
]


#============================================
def vera_font_path(bold: bool = False) -> pathlib.Path:
	"""
	Locate the Bitstream Vera fonts bundled with reportlab.

	Args:
		bold: Return the bold face.

	Returns:
		Font path.
	"""
	name = "VeraBd.ttf" if bold else "Vera.ttf"
	return pathlib.Path(reportlab.__file__).parent / "fonts" / name


@pytest.fixture
def font_bytes() -> bytes:
	return vera_font_path().read_bytes()


@pytest.fixture
def font_set(font_bytes: bytes) -> inventory_labels.compose.FontSet:
	regular = inventory_labels.glyphs.load_font(font_bytes)
	bold = inventory_labels.glyphs.load_font(vera_font_path(bold=True).read_bytes())
	return inventory_labels.compose.FontSet(regular=regular, bold=bold)


@pytest.fixture
def inventory_db(tmp_path: pathlib.Path) -> pathlib.Path:
	"""
	Build a small inventory database file.
	"""
	path = tmp_path / "inventory.db"
	connection = sqlite3.connect(path)
	for statement in SCHEMA:
		connection.execute(statement)
	connection.executemany(
		"INSERT INTO locations (id, name, qr_code_id) VALUES (?, ?, ?)",
		[
			(1, "Shelf A", "LOC-1a2b3c4d"),
			(2, "Drawer 3", None),
		],
	)
	connection.executemany(
		"INSERT INTO items (id, name, specifications, quantity, unit, location_id) VALUES (?, ?, ?, ?, ?, ?)",
		[
			(10, "M3 screws", "M3x8 stainless", 120, "pcs", 1),
			(11, "Resistor 10k", None, 42, None, None),
			(12, "电容 100uF", "25V", 7, "个", 2),
		],
	)
	connection.commit()
	connection.close()
	return path


@pytest.fixture
def font_loader():
	"""
	Font loader returning the Vera face for any locale.
	"""
	def load_font(locale: str) -> bytes:
		return vera_font_path().read_bytes()

	return load_font


@pytest.fixture
def font_path() -> pathlib.Path:
	return vera_font_path()
