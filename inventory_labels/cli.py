"""
CLI entry points for inventory label generation.
"""

# Standard Library
import argparse
import base64
import functools
import pathlib
import sys
import time

# local repo modules
import inventory_labels as invl
import inventory_labels.config
import inventory_labels.errors
import inventory_labels.fonts
import inventory_labels.service
import inventory_labels.store


DEFAULT_COLUMNS = invl.config.DEFAULT_COLUMNS
DEFAULT_ROWS = invl.config.DEFAULT_ROWS
DEFAULT_PAPER_SIZE = invl.config.DEFAULT_PAPER_SIZE
DEFAULT_LOCALE = invl.config.DEFAULT_LOCALE
LabelEngineError = invl.errors.LabelEngineError


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Generate inventory item labels and location QR codes.")
	parser.add_argument("ids", nargs="+", type=int, help="Item ids (pdf, png) or location ids (qr).")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-d", "--database", dest="database_path", required=True, help="SQLite inventory database.")
	input_group.add_argument("-F", "--font", dest="font_path", default=None, help="Font file; probed by locale when omitted.")
	input_group.add_argument("-L", "--locale", dest="locale", default=DEFAULT_LOCALE, help="Locale used to pick a font.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument(
		"-f",
		"--format",
		dest="output_format",
		choices=("pdf", "png", "qr"),
		default="pdf",
		help="Output kind.",
	)
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Write decoded bytes here instead of printing the data URI.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-s", "--paper-size", dest="paper_size", default=DEFAULT_PAPER_SIZE, help="A4, Letter or A5.")
	layout_group.add_argument("-c", "--columns", dest="columns", type=int, default=DEFAULT_COLUMNS, help="Labels per row.")
	layout_group.add_argument("-r", "--rows", dest="rows", type=int, default=DEFAULT_ROWS, help="Label rows per page.")
	layout_group.add_argument("-m", "--metric-leading", dest="metric_leading", action="store_true", help="Space lines by font metrics.")

	args = parser.parse_args(argv)
	return args


#============================================
def build_font_loader(args: argparse.Namespace):
	"""
	Pick the font loader from CLI args.
	"""
	if args.font_path:
		return invl.fonts.font_loader_for_path(pathlib.Path(args.font_path))
	return invl.fonts.FontResolver().load_font


#============================================
def decode_data_uri(data_uri: str) -> bytes:
	"""
	Decode the payload of a base64 data URI.
	"""
	_header, encoded = data_uri.split(",", 1)
	return base64.b64decode(encoded)


#============================================
def emit(data_uri: str, output_path: pathlib.Path | None) -> None:
	"""
	Write decoded bytes to a file or print the data URI.
	"""
	if output_path is None:
		print(data_uri)
		return
	data = decode_data_uri(data_uri)
	output_path.write_bytes(data)
	print(f"Output written: {output_path} ({len(data)} bytes)")


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run one generation request.

	Args:
		args: Parsed argparse namespace.
	"""
	output_path = None
	if args.output_path:
		output_path = pathlib.Path(args.output_path)
	verbose = output_path is not None
	if verbose:
		print("Inventory label pipeline")
		print(f"Database: {args.database_path}")
		print(f"Format: {args.output_format}")

	start_time = time.perf_counter()
	connection = invl.store.open_database(pathlib.Path(args.database_path))
	try:
		if args.output_format == "qr":
			fetch_location = functools.partial(invl.store.fetch_location_qr, connection)
			results = invl.service.generate_batch_qr(args.ids, fetch_location)
			if not results:
				raise invl.errors.EmptyBatchError("Location not found")
			for index, result in enumerate(results):
				if output_path is None:
					print(f"{result.id}\t{result.name}\t{result.qr_data}")
					continue
				target = output_path
				if len(results) > 1:
					target = output_path.with_name(f"{output_path.stem}_{index + 1}{output_path.suffix}")
				emit(result.qr_data, target)
			return

		fetch_record = functools.partial(invl.store.fetch_item_record, connection)
		load_font = build_font_loader(args)
		style = invl.config.LabelStyle(metric_leading=args.metric_leading)
		if args.output_format == "png":
			data_uri = invl.service.generate_image_labels(
				args.ids,
				args.columns,
				args.rows,
				fetch_record,
				load_font,
				locale=args.locale,
				style=style,
				verbose=verbose,
			)
		else:
			data_uri = invl.service.generate_document_labels(
				args.ids,
				args.paper_size,
				args.columns,
				args.rows,
				fetch_record,
				load_font,
				locale=args.locale,
				style=style,
				verbose=verbose,
			)
		emit(data_uri, output_path)
	finally:
		connection.close()
	if verbose:
		total_time = time.perf_counter() - start_time
		print(f"Timing: total={total_time:.2f}s")


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except LabelEngineError as error:
		print(f"Error: {error}", file=sys.stderr)
		return 1
	return 0
