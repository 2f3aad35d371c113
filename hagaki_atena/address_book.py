"""
Address book loading from local TSV or CSV files.

The header row names the columns; year status columns are named with the
year followed by a marker, for example 2026送, 2026受 and 2026喪中.
"""

# Standard Library
import csv
import dataclasses
import io
import pathlib

# local repo modules
import hagaki_atena as ha
import hagaki_atena.config
import hagaki_atena.glyphs
import hagaki_atena.records


AddressRecord = ha.records.AddressRecord
YearStatus = ha.records.YearStatus

DEFAULT_HONORIFIC = ha.config.DEFAULT_HONORIFIC
SENT_MARK = ha.config.SENT_MARK

COLUMN_FAMILY = "姓"
COLUMN_GIVEN = "名"
COLUMN_JOINT = "連名"
COLUMN_HONORIFIC = "敬称"
COLUMN_POSTAL = "郵便番号"
COLUMN_ADDRESS_1 = "住所1"
COLUMN_ADDRESS_2 = "住所2"

SUFFIX_SENT = "送"
SUFFIX_RECEIVED = "受"
SUFFIX_MOURNING = "喪中"

JOINT_SEPARATORS = ("、", "\n")
UTF8_BOM = b"\xef\xbb\xbf"
TEMP_SUFFIX = ".tmp"


@dataclasses.dataclass
class YearColumns:
	sent: int = -1
	received: int = -1
	mourning: int = -1


@dataclasses.dataclass
class AddressBook:
	path: pathlib.Path
	year: int
	records: list[AddressRecord]
	statuses: dict[int, YearStatus]


#============================================
def detect_delimiter(path: pathlib.Path) -> str:
	"""
	Pick the field delimiter from the file suffix.

	Args:
		path: Address file path.

	Returns:
		Tab for .tsv and .txt files, comma otherwise.
	"""
	if path.suffix.lower() in (".tsv", ".txt"):
		return "\t"
	return ","


#============================================
def read_rows(path: pathlib.Path) -> list[list[str]]:
	"""
	Read all rows of a delimited file.

	A UTF-8 byte order mark is dropped so it does not leak into the first
	header cell.

	Args:
		path: Address file path.

	Returns:
		List of rows, each a list of cell strings.
	"""
	path = pathlib.Path(path)
	try:
		text = path.read_text(encoding="utf-8-sig")
	except OSError as error:
		raise ValueError(f"cannot read address file {path}: {error}") from error
	reader = csv.reader(io.StringIO(text, newline=""), delimiter=detect_delimiter(path))
	try:
		rows = [row for row in reader]
	except csv.Error as error:
		raise ValueError(f"cannot parse address file {path}: {error}") from error
	return rows


#============================================
def has_bom(path: pathlib.Path) -> bool:
	"""
	Check whether a file starts with a UTF-8 byte order mark.

	Args:
		path: File path.

	Returns:
		True when the first bytes are the UTF-8 BOM.
	"""
	with pathlib.Path(path).open("rb") as handle:
		head = handle.read(len(UTF8_BOM))
	return head == UTF8_BOM


#============================================
def build_column_index(header: list[str]) -> dict[str, int]:
	index: dict[str, int] = {}
	for position, name in enumerate(header):
		index[name.strip()] = position
	return index


#============================================
def find_year_columns(header: list[str], year: int) -> YearColumns:
	"""
	Locate the sent, received and mourning columns for a year.

	Args:
		header: Header row.
		year: Target year.

	Returns:
		YearColumns with -1 for missing columns.
	"""
	columns = YearColumns()
	names = {
		f"{year}{SUFFIX_SENT}": "sent",
		f"{year}{SUFFIX_RECEIVED}": "received",
		f"{year}{SUFFIX_MOURNING}": "mourning",
	}
	for position, name in enumerate(header):
		field = names.get(name.strip())
		if field is not None:
			setattr(columns, field, position)
	return columns


#============================================
def get_cell(row: list[str], position: int | None) -> str:
	if position is None or position < 0 or position >= len(row):
		return ""
	return row[position].strip()


#============================================
def parse_joint_names(value: str) -> tuple[str, ...]:
	"""
	Split a joint-name cell into names.

	Args:
		value: Cell text separated by commas, ideographic commas or newlines.

	Returns:
		Tuple of names in column order.
	"""
	if not value:
		return ()
	for separator in JOINT_SEPARATORS:
		value = value.replace(separator, ",")
	names = [part.strip() for part in value.split(",")]
	return tuple(name for name in names if name)


#============================================
def format_postal_code(code: str) -> str:
	"""
	Format a seven digit postal code as NNN-NNNN.

	Args:
		code: Digit string.

	Returns:
		Formatted code, or the input when it is not seven characters.
	"""
	if len(code) == 7:
		return f"{code[:3]}-{code[3:]}"
	return code


#============================================
def parse_address_rows(
	rows: list[list[str]],
	year: int,
) -> tuple[list[AddressRecord], dict[int, YearStatus]]:
	"""
	Convert raw rows into address records and year statuses.

	Args:
		rows: Rows including the header.
		year: Year used to locate the status columns.

	Returns:
		Tuple of (records, statuses keyed by sheet row number).
	"""
	if len(rows) < 2:
		raise ValueError("address file has no address rows")
	header = rows[0]
	columns = build_column_index(header)
	year_columns = find_year_columns(header, year)

	records: list[AddressRecord] = []
	statuses: dict[int, YearStatus] = {}
	# sheet rows are 1-indexed and the header is row 1
	for row_number, row in enumerate(rows[1:], start=2):
		family_name = get_cell(row, columns.get(COLUMN_FAMILY))
		if not family_name:
			continue
		honorific = get_cell(row, columns.get(COLUMN_HONORIFIC)) or DEFAULT_HONORIFIC
		record = AddressRecord(
			family_name=family_name,
			given_name=get_cell(row, columns.get(COLUMN_GIVEN)),
			joint_names=parse_joint_names(get_cell(row, columns.get(COLUMN_JOINT))),
			honorific=honorific,
			postal_code=ha.glyphs.normalize_postal_code(get_cell(row, columns.get(COLUMN_POSTAL))),
			address_1=get_cell(row, columns.get(COLUMN_ADDRESS_1)),
			address_2=get_cell(row, columns.get(COLUMN_ADDRESS_2)),
			row=row_number,
		)
		records.append(record)
		statuses[row_number] = YearStatus(
			sent=bool(get_cell(row, year_columns.sent)),
			received=bool(get_cell(row, year_columns.received)),
			mourning=bool(get_cell(row, year_columns.mourning)),
		)
	return (records, statuses)


#============================================
def load_address_book(path: pathlib.Path, year: int) -> AddressBook:
	"""
	Load an address book file.

	Args:
		path: TSV or CSV path.
		year: Year used to locate the status columns.

	Returns:
		AddressBook.
	"""
	path = pathlib.Path(path)
	rows = read_rows(path)
	records, statuses = parse_address_rows(rows, year)
	return AddressBook(path=path, year=year, records=records, statuses=statuses)


#============================================
def select_targets(
	records: list[AddressRecord],
	statuses: dict[int, YearStatus],
	include_all: bool,
) -> list[AddressRecord]:
	"""
	Filter records down to the cards that still need printing.

	Args:
		records: Address records.
		statuses: Year status by sheet row.
		include_all: Keep sent and mourning rows too.

	Returns:
		Records in input order.
	"""
	if include_all:
		return list(records)
	targets: list[AddressRecord] = []
	for record in records:
		status = statuses.get(record.row, YearStatus())
		if status.sent or status.mourning:
			continue
		targets.append(record)
	return targets


#============================================
def mark_sent(path: pathlib.Path, year: int, rows: list[int]) -> int:
	"""
	Write the sent mark into the year column and save the file.

	A leading byte order mark is kept. The new contents replace the file
	only after they are fully written.

	Args:
		path: TSV or CSV path.
		year: Target year.
		rows: Sheet row numbers to mark.

	Returns:
		Number of rows written.
	"""
	path = pathlib.Path(path)
	table = read_rows(path)
	if not table:
		raise ValueError(f"address file {path} has no header row")
	sent_column = find_year_columns(table[0], year).sent
	if sent_column < 0:
		raise ValueError(f"column '{year}{SUFFIX_SENT}' not found in {path}; add it to the header")

	written = 0
	for row_number in rows:
		index = row_number - 1
		if index < 1 or index >= len(table):
			continue
		row = table[index]
		if len(row) <= sent_column:
			row.extend([""] * (sent_column + 1 - len(row)))
		row[sent_column] = SENT_MARK
		written += 1

	encoding = "utf-8-sig" if has_bom(path) else "utf-8"
	buffer = io.StringIO(newline="")
	writer = csv.writer(buffer, delimiter=detect_delimiter(path), lineterminator="\n")
	writer.writerows(table)
	# write beside the original, then swap it in
	temp_path = path.with_name(path.name + TEMP_SUFFIX)
	temp_path.write_text(buffer.getvalue(), encoding=encoding)
	temp_path.replace(path)
	return written
