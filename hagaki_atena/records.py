"""
Address records and glyph placements.
"""

# Standard Library
import dataclasses


DEFAULT_HONORIFIC = "様"


@dataclasses.dataclass(frozen=True)
class AddressRecord:
	family_name: str
	given_name: str = ""
	joint_names: tuple[str, ...] = ()
	honorific: str = DEFAULT_HONORIFIC
	postal_code: str = ""
	address_1: str = ""
	address_2: str = ""
	row: int = 0

	@property
	def full_name(self) -> str:
		return self.family_name + self.given_name


@dataclasses.dataclass(frozen=True)
class SenderProfile:
	family_name: str
	given_name: str = ""
	postal_code: str = ""
	address_1: str = ""
	address_2: str = ""

	@property
	def full_name(self) -> str:
		return self.family_name + self.given_name


@dataclasses.dataclass(frozen=True)
class YearStatus:
	sent: bool = False
	received: bool = False
	mourning: bool = False


@dataclasses.dataclass(frozen=True)
class GlyphPlacement:
	"""
	One character positioned on the card.

	x and y are the top-left of the glyph cell in millimeters from the
	top-left page corner, with the small-kana offset already applied.
	width is the measured advance and advance is the vertical line pitch.
	"""
	char: str
	x: float
	y: float
	font_size: float
	rotated: bool = False
	dx: float = 0.0
	dy: float = 0.0
	width: float = 0.0
	advance: float = 0.0
