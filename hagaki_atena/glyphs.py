"""
Per-character rules for vertical Japanese text.
"""

# drawn turned 90 degrees inside a vertical column
ROTATED_CHARS = frozenset({
	"ー",
	"〜",
	"～",
	"…",
	"―",
})

SMALL_KANA = frozenset({
	"ぁ", "ぃ", "ぅ", "ぇ", "ぉ",
	"ゃ", "ゅ", "ょ", "っ",
	"ァ", "ィ", "ゥ", "ェ", "ォ",
	"ャ", "ュ", "ョ", "ッ",
})

SMALL_KANA_SHIFT = 0.1

# half-width digits to full-width, ASCII hyphen to the prolonged sound mark
VERTICAL_TRANSLATION = str.maketrans(
	{
		**{chr(ord("0") + index): chr(ord("０") + index) for index in range(10)},
		"-": "ー",
	}
)

POSTAL_DIGIT_TRANSLATION = str.maketrans(
	{chr(ord("０") + index): chr(ord("0") + index) for index in range(10)}
)


#============================================
def normalize_for_vertical(text: str) -> str:
	"""
	Convert half-width digits and hyphens for vertical setting.

	Full-width characters pass through, so the mapping is idempotent.

	Args:
		text: Address line text.

	Returns:
		Text with full-width digits and prolonged sound marks.
	"""
	if not text:
		return text
	return text.translate(VERTICAL_TRANSLATION)


#============================================
def is_rotated(char: str) -> bool:
	"""
	Check whether a character must be drawn rotated in a vertical column.

	Args:
		char: Single character.

	Returns:
		True for elongation, wave dash, ellipsis and dash glyphs.
	"""
	return char in ROTATED_CHARS


#============================================
def is_small_kana(char: str) -> bool:
	return char in SMALL_KANA


#============================================
def glyph_offset(char: str, font_size_mm: float) -> tuple[float, float]:
	"""
	Compute the positional nudge for a character.

	Small kana move right and up by a tenth of the font size.

	Args:
		char: Single character.
		font_size_mm: Font size converted to millimeters.

	Returns:
		Tuple of (dx, dy) in millimeters.
	"""
	if is_small_kana(char):
		return (font_size_mm * SMALL_KANA_SHIFT, -font_size_mm * SMALL_KANA_SHIFT)
	return (0.0, 0.0)


#============================================
def normalize_postal_code(code: str) -> str:
	"""
	Reduce a postal code to ASCII digits.

	Full-width digits become ASCII; hyphens, spaces and any other
	separators are dropped. No padding or truncation happens here.

	Args:
		code: Raw postal code text.

	Returns:
		Digit string.
	"""
	if not code:
		return ""
	converted = code.translate(POSTAL_DIGIT_TRANSLATION)
	return "".join(char for char in converted if "0" <= char <= "9")
