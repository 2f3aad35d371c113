"""
Shared configuration, constants and the postcard layout table.
"""

# Standard Library
import dataclasses
import datetime
import json
import pathlib

# local repo modules
import hagaki_atena as ha
import hagaki_atena.records


SenderProfile = ha.records.SenderProfile

PT_TO_MM = 0.3528
LINE_PITCH_RATIO = 1.3

HAGAKI_WIDTH = 100.0
HAGAKI_HEIGHT = 148.0

DEFAULT_HONORIFIC = ha.records.DEFAULT_HONORIFIC
DEFAULT_CID_FONT = "HeiseiMin-W3"
DEFAULT_FONT_NAME = "atena"
DEFAULT_OUTPUT_FILE = "nenga.pdf"
POSTAL_DIGITS = 7
SENT_MARK = "○"
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10
GUIDE_LINE_WIDTH = 0.3
# tolerance for float rounding when a run exactly fills its region
LIMIT_EPSILON = 1e-9


@dataclasses.dataclass(frozen=True)
class RegionSpec:
	x: float
	y: float
	limit_y: float
	font_size: float


@dataclasses.dataclass(frozen=True)
class PostalSpec:
	x_positions: tuple[float, ...]
	center_y: float
	font_size: float
	box_width: float
	box_height: float


@dataclasses.dataclass(frozen=True)
class HagakiLayout:
	page_width: float
	page_height: float
	recipient_postal: PostalSpec
	recipient_address_1: RegionSpec
	recipient_address_2: RegionSpec
	recipient_name: RegionSpec
	joint_name_pitch: float
	sender_postal: PostalSpec
	sender_address_1: RegionSpec
	sender_address_2: RegionSpec
	sender_name: RegionSpec


@dataclasses.dataclass
class FontConfig:
	name: str
	font_file: pathlib.Path | None
	subfont_index: int
	cid_font: str


@dataclasses.dataclass
class AppConfig:
	address_file: pathlib.Path
	output_file: pathlib.Path
	year: int
	font: FontConfig
	sender: SenderProfile


#============================================
def build_default_layout() -> HagakiLayout:
	"""
	Build the standard 100 x 148 mm postcard layout.

	Postal digit x positions follow the printed postal code boxes.

	Returns:
		HagakiLayout.
	"""
	recipient_address_1 = RegionSpec(x=83.0, y=27.0, limit_y=110.0, font_size=11.0)
	sender_address_1 = RegionSpec(x=28.0, y=62.0, limit_y=116.0, font_size=7.5)
	return HagakiLayout(
		page_width=HAGAKI_WIDTH,
		page_height=HAGAKI_HEIGHT,
		recipient_postal=PostalSpec(
			x_positions=(44.8, 51.9, 59.0, 67.9, 75.0, 82.1, 89.2),
			center_y=13.5,
			font_size=16.0,
			box_width=5.7,
			box_height=8.0,
		),
		recipient_address_1=recipient_address_1,
		recipient_address_2=RegionSpec(
			x=74.0,
			y=recipient_address_1.y + 5.0,
			limit_y=recipient_address_1.limit_y,
			font_size=recipient_address_1.font_size - 1.5,
		),
		recipient_name=RegionSpec(x=56.0, y=32.0, limit_y=125.0, font_size=18.0),
		joint_name_pitch=9.0,
		sender_postal=PostalSpec(
			x_positions=(5.7, 9.6, 13.5, 18.9, 22.8, 26.7, 30.6),
			center_y=122.5,
			font_size=9.0,
			box_width=3.6,
			box_height=5.4,
		),
		sender_address_1=sender_address_1,
		sender_address_2=RegionSpec(
			x=23.5,
			y=sender_address_1.y + 2.0,
			limit_y=sender_address_1.limit_y,
			font_size=sender_address_1.font_size - 1.0,
		),
		sender_name=RegionSpec(x=17.0, y=68.0, limit_y=116.0, font_size=10.0),
	)


#============================================
def line_pitch(font_size: float) -> float:
	"""
	Compute the vertical advance per character.

	Args:
		font_size: Font size in points.

	Returns:
		Line pitch in millimeters.
	"""
	return font_size * PT_TO_MM * LINE_PITCH_RATIO


#============================================
def _require_text(data: dict, key: str, label: str) -> str:
	"""
	Fetch a required non-empty string from a JSON object.

	Args:
		data: Parsed JSON object.
		key: Key to look up.
		label: Dotted key name used in the error message.

	Returns:
		Stripped string value.
	"""
	value = data.get(key)
	if not isinstance(value, str) or not value.strip():
		raise ValueError(f"{label} is not set in the config file")
	return value.strip()


#============================================
def _resolve_path(base_dir: pathlib.Path, value: str) -> pathlib.Path:
	path = pathlib.Path(value).expanduser()
	if not path.is_absolute():
		path = base_dir / path
	return path


#============================================
def load_config(config_path: pathlib.Path) -> AppConfig:
	"""
	Load the JSON application config.

	Relative paths inside the file resolve against the config directory.

	Args:
		config_path: Path to the JSON config.

	Returns:
		AppConfig.
	"""
	config_path = pathlib.Path(config_path)
	try:
		text = config_path.read_text(encoding="utf-8")
	except OSError as error:
		raise ValueError(f"cannot read config file {config_path}: {error}") from error
	try:
		data = json.loads(text)
	except json.JSONDecodeError as error:
		raise ValueError(f"config file {config_path} is not valid JSON: {error}") from error
	if not isinstance(data, dict):
		raise ValueError(f"config file {config_path} must hold a JSON object")

	base_dir = config_path.resolve().parent
	address_file = _resolve_path(base_dir, _require_text(data, "address_file", "address_file"))

	sender_data = data.get("sender")
	if not isinstance(sender_data, dict):
		raise ValueError("sender.family_name is not set in the config file")
	sender = SenderProfile(
		family_name=_require_text(sender_data, "family_name", "sender.family_name"),
		given_name=str(sender_data.get("given_name", "")).strip(),
		postal_code=str(sender_data.get("postal_code", "")).strip(),
		address_1=str(sender_data.get("address1", "")).strip(),
		address_2=str(sender_data.get("address2", "")).strip(),
	)

	font_file = None
	font_value = str(data.get("font_file") or "").strip()
	if font_value:
		font_file = _resolve_path(base_dir, font_value)
	font = FontConfig(
		name=DEFAULT_FONT_NAME,
		font_file=font_file,
		subfont_index=int(data.get("font_subfont_index", 0)),
		cid_font=str(data.get("cid_font") or DEFAULT_CID_FONT),
	)

	output_value = str(data.get("output_file") or DEFAULT_OUTPUT_FILE)
	year = data.get("year")
	if year is None:
		year = datetime.date.today().year
	try:
		year = int(year)
	except (TypeError, ValueError) as error:
		raise ValueError(f"year must be an integer, got {year!r}") from error

	config = AppConfig(
		address_file=address_file,
		output_file=_resolve_path(base_dir, output_value),
		year=year,
		font=font,
		sender=sender,
	)
	return config
