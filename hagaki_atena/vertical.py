"""
Vertical text layout, shrink-to-fit sizing and postal code placement.
"""

# Standard Library
import typing

# local repo modules
import hagaki_atena as ha
import hagaki_atena.canvas
import hagaki_atena.config
import hagaki_atena.glyphs
import hagaki_atena.records


GlyphPlacement = ha.records.GlyphPlacement
GlyphMeasureError = ha.canvas.GlyphMeasureError

PT_TO_MM = ha.config.PT_TO_MM
POSTAL_DIGITS = ha.config.POSTAL_DIGITS
LIMIT_EPSILON = ha.config.LIMIT_EPSILON

MeasureFunc = typing.Callable[[str, float], float]


#============================================
def measure_or_zero(
	measure: MeasureFunc,
	char: str,
	font_size: float,
	failure_counter: list[int] | None = None,
) -> float:
	"""
	Measure a glyph advance, degrading to zero width on failure.

	A zero width means the glyph is drawn at the anchor without the
	half-width centering shift.

	Args:
		measure: Callable returning the advance width in millimeters.
		char: Glyph to measure.
		font_size: Font size in points.
		failure_counter: Optional one-item counter bumped on failure.

	Returns:
		Advance width in millimeters.
	"""
	try:
		return measure(char, font_size)
	except GlyphMeasureError:
		if failure_counter is not None:
			failure_counter[0] += 1
		return 0.0


#============================================
def iter_vertical_placements(
	text: str,
	anchor_x: float,
	start_y: float,
	font_size: float,
	limit_y: float,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> typing.Iterator[GlyphPlacement]:
	"""
	Lay out text top to bottom in a single column.

	Characters that would run past limit_y are dropped. The limit check
	allows LIMIT_EPSILON of overrun, so a run sized to fill its span
	exactly keeps its last character despite float rounding.

	Args:
		text: Text to set.
		anchor_x: Column center x in millimeters.
		start_y: Top of the first glyph cell in millimeters.
		font_size: Font size in points.
		limit_y: Lower bound of the region in millimeters.
		measure: Callable returning the advance width in millimeters.
		failure_counter: Optional one-item counter for measure failures.

	Yields:
		GlyphPlacement per drawn character, in reading order.
	"""
	if not text:
		return
	pitch = ha.config.line_pitch(font_size)
	font_size_mm = font_size * PT_TO_MM
	for index, char in enumerate(text):
		# rotated glyphs advance by the same pitch
		y = start_y + index * pitch
		if y + pitch > limit_y + LIMIT_EPSILON:
			break
		width = measure_or_zero(measure, char, font_size, failure_counter)
		dx, dy = ha.glyphs.glyph_offset(char, font_size_mm)
		yield GlyphPlacement(
			char=char,
			x=anchor_x - width / 2.0 + dx,
			y=y + dy,
			font_size=font_size,
			rotated=ha.glyphs.is_rotated(char),
			dx=dx,
			dy=dy,
			width=width,
			advance=pitch,
		)


#============================================
def layout_vertical(
	text: str,
	anchor_x: float,
	start_y: float,
	font_size: float,
	limit_y: float,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> list[GlyphPlacement]:
	"""
	Lay out a vertical column and collect the placements.

	Args:
		text: Text to set.
		anchor_x: Column center x in millimeters.
		start_y: Top of the first glyph cell in millimeters.
		font_size: Font size in points.
		limit_y: Lower bound of the region in millimeters.
		measure: Callable returning the advance width in millimeters.
		failure_counter: Optional one-item counter for measure failures.

	Returns:
		List of GlyphPlacement entries.
	"""
	return list(
		iter_vertical_placements(
			text,
			anchor_x,
			start_y,
			font_size,
			limit_y,
			measure,
			failure_counter,
		)
	)


#============================================
def needed_height(char_count: int, font_size: float) -> float:
	"""
	Height taken by a run of characters.

	Args:
		char_count: Number of characters.
		font_size: Font size in points.

	Returns:
		Height in millimeters.
	"""
	return char_count * ha.config.line_pitch(font_size)


#============================================
def fit_font_size(char_count: int, base_font_size: float, available_height: float) -> float:
	"""
	Shrink a font size so a run of characters fits a vertical span.

	Args:
		char_count: Number of characters, at least 1.
		base_font_size: Preferred font size in points.
		available_height: Vertical span in millimeters.

	Returns:
		base_font_size when it fits, otherwise the size that fills the span exactly.
	"""
	if char_count < 1:
		raise ValueError(f"char_count must be at least 1, got {char_count}")
	if needed_height(char_count, base_font_size) <= available_height:
		return base_font_size
	return available_height / (char_count * PT_TO_MM * ha.config.LINE_PITCH_RATIO)


#============================================
def layout_postal_code(
	digits: str,
	x_positions: typing.Sequence[float],
	center_y: float,
	font_size: float,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> list[GlyphPlacement]:
	"""
	Place postal code digits in their fixed boxes.

	At most seven digits are placed; shorter codes leave boxes empty.

	Args:
		digits: Normalized digit string.
		x_positions: Box center x per digit in millimeters.
		center_y: Box center y in millimeters.
		font_size: Font size in points.
		measure: Callable returning the advance width in millimeters.
		failure_counter: Optional one-item counter for measure failures.

	Returns:
		List of GlyphPlacement entries.
	"""
	font_size_mm = font_size * PT_TO_MM
	top_y = center_y - font_size_mm / 2.0
	count = min(POSTAL_DIGITS, len(digits), len(x_positions))
	placements: list[GlyphPlacement] = []
	for index in range(count):
		char = digits[index]
		width = measure_or_zero(measure, char, font_size, failure_counter)
		placements.append(
			GlyphPlacement(
				char=char,
				x=x_positions[index] - width / 2.0,
				y=top_y,
				font_size=font_size,
				width=width,
				advance=font_size_mm,
			)
		)
	return placements
