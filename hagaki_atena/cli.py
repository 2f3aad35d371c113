"""
CLI entry points for postcard address printing.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import hagaki_atena as ha
import hagaki_atena.address_book
import hagaki_atena.canvas
import hagaki_atena.config
import hagaki_atena.render


DEFAULT_CONFIG_PATH = "config.json"


#============================================
def add_config_argument(parser: argparse.ArgumentParser) -> None:
	parser.add_argument(
		"-c", "--config", dest="config_path", default=DEFAULT_CONFIG_PATH,
		help="JSON config file path.",
	)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Print vertical Japanese addresses on postcards.")
	subparsers = parser.add_subparsers(dest="command", required=True)

	generate_parser = subparsers.add_parser("generate", help="Render the address PDF.")
	add_config_argument(generate_parser)
	generate_parser.add_argument(
		"-a", "--all", dest="include_all", action="store_true",
		help="Include rows already sent or in mourning.",
	)
	generate_parser.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	generate_parser.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	generate_parser.add_argument(
		"--calibration", dest="calibration", action="store_true",
		help="Add a page with postal box and region outlines.",
	)

	list_parser = subparsers.add_parser("list", help="List addresses and their status.")
	add_config_argument(list_parser)

	mark_parser = subparsers.add_parser("mark-sent", help="Mark printed rows as sent.")
	add_config_argument(mark_parser)
	mark_parser.add_argument(
		"-n", "--dry-run", dest="dry_run", action="store_true",
		help="Show the rows without writing.",
	)

	parser.set_defaults(include_all=False, calibration=False, dry_run=False)
	args = parser.parse_args(argv)
	return args


#============================================
def run_generate(args: argparse.Namespace) -> None:
	"""
	Render the PDF for every address that still needs a card.

	Args:
		args: Parsed argparse namespace.
	"""
	config = ha.config.load_config(pathlib.Path(args.config_path))
	output_path = config.output_file
	if args.output_path:
		output_path = pathlib.Path(args.output_path)

	print("Postcard address pipeline")
	print(f"Address file: {config.address_file}")
	print(f"Year: {config.year}")
	print(f"Output PDF: {output_path}")
	print(f"Include all: {args.include_all}")
	print(f"Calibration: {args.calibration}")

	start_time = time.perf_counter()
	book = ha.address_book.load_address_book(config.address_file, config.year)
	targets = ha.address_book.select_targets(book.records, book.statuses, args.include_all)
	load_end = time.perf_counter()
	print(f"Addresses found: {len(book.records)}")
	print(f"Addresses to print: {len(targets)}")
	if not targets:
		print("No addresses to print.")
		return

	layout = ha.config.build_default_layout()
	render_start = time.perf_counter()
	result = ha.render.render_addresses_to_pdf(
		targets,
		config.sender,
		output_path,
		config.font,
		layout,
		calibration=args.calibration,
		verbose=True,
	)
	render_end = time.perf_counter()
	print(f"Pages written: {result.total_pages}")
	if result.measure_failures:
		print(f"Glyph measure failures: {result.measure_failures}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	ha.render.write_manifest(
		pathlib.Path(manifest_path),
		config.address_file,
		output_path,
		result,
		config.font,
		layout,
	)
	total_time = time.perf_counter() - start_time
	print(
		"Timing: load={:.2f}s render={:.2f}s total={:.2f}s".format(
			load_end - start_time,
			render_end - render_start,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")


#============================================
def format_listing_line(record: ha.address_book.AddressRecord, status: ha.address_book.YearStatus) -> str:
	"""
	Format one address for the list command.

	Args:
		record: Address record.
		status: Year status for the record.

	Returns:
		Single display line.
	"""
	sent_mark = "○" if status.sent else " "
	received_mark = "○" if status.received else " "
	mourning_mark = "喪" if status.mourning else " "
	joint = " ほか" if record.joint_names else ""
	postal = ha.address_book.format_postal_code(record.postal_code)
	return (
		f"  [送:{sent_mark} 受:{received_mark} {mourning_mark}] "
		f"{record.family_name} {record.given_name}{joint}{record.honorific}  "
		f"〒{postal} {record.address_1}{record.address_2}"
	)


#============================================
def run_list(args: argparse.Namespace) -> None:
	config = ha.config.load_config(pathlib.Path(args.config_path))
	book = ha.address_book.load_address_book(config.address_file, config.year)
	print(f"--- {config.year} addresses ({len(book.records)}) ---")
	for record in book.records:
		status = book.statuses.get(record.row, ha.address_book.YearStatus())
		print(format_listing_line(record, status))


#============================================
def run_mark_sent(args: argparse.Namespace) -> None:
	"""
	Mark every row that is neither sent nor in mourning.

	Args:
		args: Parsed argparse namespace.
	"""
	config = ha.config.load_config(pathlib.Path(args.config_path))
	book = ha.address_book.load_address_book(config.address_file, config.year)
	targets = ha.address_book.select_targets(book.records, book.statuses, include_all=False)
	for record in targets:
		print(f"  {record.family_name} {record.given_name} ({record.address_1})")
	if not targets:
		print("No rows to update.")
		return
	if args.dry_run:
		print(f"{len(targets)} rows selected (dry run, nothing written).")
		return
	written = ha.address_book.mark_sent(config.address_file, config.year, [record.row for record in targets])
	print(f"Marked {written} rows as sent for {config.year}.")


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	commands = {
		"generate": run_generate,
		"list": run_list,
		"mark-sent": run_mark_sent,
	}
	try:
		commands[args.command](args)
	except (ValueError, ha.canvas.FontLoadError, ha.canvas.WriteError) as error:
		raise SystemExit(f"Error: {error}") from error
