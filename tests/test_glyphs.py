import hagaki_atena.glyphs


#============================================
def test_normalize_for_vertical_digits_and_hyphen() -> None:
	"""
	Half-width digits become full-width and hyphens become prolonged marks.
	"""
	result = hagaki_atena.glyphs.normalize_for_vertical("12-34")
	assert result == "１２ー３４"


#============================================
def test_normalize_for_vertical_is_idempotent() -> None:
	"""
	Applying the mapping twice changes nothing further.
	"""
	text = "東京都千代田区1-1 ABC"
	once = hagaki_atena.glyphs.normalize_for_vertical(text)
	twice = hagaki_atena.glyphs.normalize_for_vertical(once)
	assert once == twice
	assert once == "東京都千代田区１ー１ ABC"


#============================================
def test_normalize_for_vertical_empty() -> None:
	assert hagaki_atena.glyphs.normalize_for_vertical("") == ""


#============================================
def test_rotated_characters() -> None:
	"""
	Elongation, wave dash, ellipsis and dash glyphs rotate; others do not.
	"""
	for char in ("ー", "〜", "～", "…", "―"):
		assert hagaki_atena.glyphs.is_rotated(char)
	for char in ("山", "あ", "1", "-", "ゃ"):
		assert not hagaki_atena.glyphs.is_rotated(char)


#============================================
def test_small_kana_offset() -> None:
	"""
	Small kana shift right and up by a tenth of the size.
	"""
	for char in ("ゃ", "っ", "ァ", "ッ", "ぉ"):
		assert hagaki_atena.glyphs.is_small_kana(char)
		dx, dy = hagaki_atena.glyphs.glyph_offset(char, 5.0)
		assert abs(dx - 0.5) < 1e-9
		assert abs(dy + 0.5) < 1e-9
	assert not hagaki_atena.glyphs.is_small_kana("や")
	assert hagaki_atena.glyphs.glyph_offset("や", 5.0) == (0.0, 0.0)


#============================================
def test_normalize_postal_code() -> None:
	"""
	Postal codes reduce to ASCII digits regardless of width and separators.
	"""
	normalize = hagaki_atena.glyphs.normalize_postal_code
	assert normalize("160-0022") == "1600022"
	assert normalize("１６０－００２２") == "1600022"
	assert normalize("160ー0022") == "1600022"
	assert normalize(" 160 0022 ") == "1600022"
	assert normalize("") == ""
	assert normalize("123456789") == "123456789"
