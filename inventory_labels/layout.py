"""
Grid planning: page counts, cell assignment and cell geometry.

All geometry here uses millimetres with the origin at the top-left corner of
the page and y increasing downward. Output sinks convert at paint time.
"""

# Standard Library
import dataclasses

# local repo modules
import inventory_labels as invl
import inventory_labels.config
import inventory_labels.errors


GridSpec = invl.config.GridSpec
CellBox = invl.config.CellBox
PageAssignment = invl.config.PageAssignment
InvalidGridError = invl.errors.InvalidGridError
EmptyBatchError = invl.errors.EmptyBatchError

MAX_GRID_DIMENSION = invl.config.MAX_GRID_DIMENSION
PAPER_SIZES = invl.config.PAPER_SIZES
DEFAULT_PAPER_SIZE = invl.config.DEFAULT_PAPER_SIZE


@dataclasses.dataclass(frozen=True)
class LayoutPlan:
	record_count: int
	columns: int
	rows: int
	cells_per_page: int
	total_pages: int

	def assignment(self, index: int) -> PageAssignment:
		if index < 0 or index >= self.record_count:
			raise IndexError(f"record index {index} outside 0..{self.record_count - 1}")
		return assign_cell(index, self.columns, self.rows)

	def page_slice(self, page: int) -> slice:
		"""
		Return the slice of record indexes placed on a page.
		"""
		start = page * self.cells_per_page
		end = min(start + self.cells_per_page, self.record_count)
		return slice(start, end)


#============================================
def validate_dimensions(columns: int, rows: int) -> None:
	"""
	Check column and row counts against the supported bounds.

	Args:
		columns: Column count.
		rows: Row count.
	"""
	for label, value in (("columns", columns), ("rows", rows)):
		if value < 1:
			raise InvalidGridError(f"{label} must be at least 1, got {value}")
		if value > MAX_GRID_DIMENSION:
			raise InvalidGridError(
				f"{label} must be at most {MAX_GRID_DIMENSION}, got {value}"
			)


#============================================
def validate_grid(grid: GridSpec) -> None:
	"""
	Validate a grid spec including the derived cell size.

	Args:
		grid: Grid specification.
	"""
	validate_dimensions(grid.columns, grid.rows)
	if not grid.cell_width > 0.0 or not grid.cell_height > 0.0:
		raise InvalidGridError(
			"cell size must be positive, got "
			f"{grid.page_width}x{grid.page_height} mm over {grid.columns}x{grid.rows}"
		)


#============================================
def build_grid_spec(paper_size: str, columns: int, rows: int) -> GridSpec:
	"""
	Build a grid spec for a named paper size.

	Args:
		paper_size: Paper name such as "A4", "Letter" or "A5".
		columns: Column count.
		rows: Row count.

	Returns:
		Validated GridSpec. Unknown paper names use A4.
	"""
	key = (paper_size or "").strip().upper()
	page_width, page_height = PAPER_SIZES.get(key, PAPER_SIZES[DEFAULT_PAPER_SIZE])
	grid = GridSpec(page_width=page_width, page_height=page_height, columns=columns, rows=rows)
	validate_grid(grid)
	return grid


#============================================
def assign_cell(index: int, columns: int, rows: int) -> PageAssignment:
	"""
	Map a record index to its page and grid cell.

	Args:
		index: Zero-based record index.
		columns: Column count.
		rows: Row count.

	Returns:
		PageAssignment with row 0 as the top row.
	"""
	cells_per_page = columns * rows
	slot = index % cells_per_page
	return PageAssignment(
		page=index // cells_per_page,
		row=slot // columns,
		col=slot % columns,
	)


#============================================
def plan_layout(record_count: int, columns: int, rows: int) -> LayoutPlan:
	"""
	Plan how many pages a batch needs.

	Args:
		record_count: Number of records to place.
		columns: Column count.
		rows: Row count.

	Returns:
		LayoutPlan.
	"""
	validate_dimensions(columns, rows)
	if record_count <= 0:
		raise EmptyBatchError("no records to render")
	cells_per_page = columns * rows
	total_pages = (record_count + cells_per_page - 1) // cells_per_page
	return LayoutPlan(
		record_count=record_count,
		columns=columns,
		rows=rows,
		cells_per_page=cells_per_page,
		total_pages=total_pages,
	)


#============================================
def cell_box(grid: GridSpec, row: int, col: int) -> CellBox:
	"""
	Compute the box of a grid cell.

	Args:
		grid: Grid specification.
		row: Row index, 0 at the top.
		col: Column index, 0 at the left.

	Returns:
		CellBox in millimetres, top-left origin.
	"""
	return CellBox(
		x=col * grid.cell_width,
		y=row * grid.cell_height,
		width=grid.cell_width,
		height=grid.cell_height,
	)


#============================================
def truncate_text(text: str, limit: int) -> str:
	"""
	Truncate text to a number of characters.

	Python strings index by code point, so multi-byte CJK characters are
	never split.
	"""
	if limit <= 0:
		return ""
	return text[:limit]
