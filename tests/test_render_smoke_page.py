import json
import pathlib

import fitz
import PIL.Image
import pypdf
import pytest
import reportlab

import hagaki_atena.canvas
import hagaki_atena.config
import hagaki_atena.records
import hagaki_atena.render


DPI = 150
INK_THRESHOLD = 200
MM_PER_INCH = 25.4
PAGE_WIDTH_PT = 100.0 * 72.0 / MM_PER_INCH
PAGE_HEIGHT_PT = 148.0 * 72.0 / MM_PER_INCH


#============================================
def vera_font_path() -> pathlib.Path:
	"""
	Locate the Vera TrueType font bundled with ReportLab.
	"""
	path = pathlib.Path(reportlab.__file__).parent / "fonts" / "Vera.ttf"
	if not path.exists():
		pytest.skip("ReportLab Vera.ttf not available.")
	return path


#============================================
def cid_font_config() -> hagaki_atena.config.FontConfig:
	return hagaki_atena.config.FontConfig(
		name="atena",
		font_file=None,
		subfont_index=0,
		cid_font=hagaki_atena.config.DEFAULT_CID_FONT,
	)


#============================================
def japanese_records() -> list[hagaki_atena.records.AddressRecord]:
	return [
		hagaki_atena.records.AddressRecord(
			family_name="山田",
			given_name="太郎",
			postal_code="1000001",
			address_1="東京都千代田区1-1",
			row=2,
		),
		hagaki_atena.records.AddressRecord(
			family_name="鈴木",
			given_name="太郎",
			joint_names=("鈴木一郎", "鈴木次郎"),
			postal_code="5300001",
			address_1="大阪府大阪市北区ー",
			address_2="梅田ビル101",
			row=3,
		),
	]


#============================================
def japanese_sender() -> hagaki_atena.records.SenderProfile:
	return hagaki_atena.records.SenderProfile(
		family_name="鈴木",
		given_name="花子",
		postal_code="160-0022",
		address_1="東京都新宿区2-2",
	)


#============================================
def _render_pdf_first_page(path: pathlib.Path) -> PIL.Image.Image:
	"""
	Render the first page of a PDF to an image.

	Args:
		path: PDF path.

	Returns:
		PIL image.
	"""
	document = fitz.open(path)
	page = document[0]
	scale = DPI / 72.0
	matrix = fitz.Matrix(scale, scale)
	pixmap = page.get_pixmap(matrix=matrix, alpha=False)
	image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	document.close()
	return image


#============================================
def _count_ink_ratio(gray: PIL.Image.Image, threshold: int) -> float:
	"""
	Compute the ink ratio for a grayscale region.

	Args:
		gray: Grayscale image region.
		threshold: Pixel intensity threshold.

	Returns:
		Ink ratio.
	"""
	pixels = list(gray.getdata())
	if not pixels:
		return 0.0
	ink = sum(1 for value in pixels if value < threshold)
	return ink / len(pixels)


#============================================
def _crop_mm(gray: PIL.Image.Image, x0: float, y0: float, x1: float, y1: float) -> PIL.Image.Image:
	scale = DPI / MM_PER_INCH
	box = (
		int(round(x0 * scale)),
		int(round(y0 * scale)),
		int(round(x1 * scale)),
		int(round(y1 * scale)),
	)
	return gray.crop(box)


#============================================
def test_cid_font_document_pages(tmp_path: pathlib.Path) -> None:
	"""
	One postcard-sized page per record, plus an optional calibration page.
	"""
	output_pdf = tmp_path / "nenga.pdf"
	result = hagaki_atena.render.render_addresses_to_pdf(
		japanese_records(),
		japanese_sender(),
		output_pdf,
		cid_font_config(),
		calibration=True,
	)
	assert result.total_pages == 3
	assert result.address_pages == 2
	assert result.pages[1].joint_font_sizes == [18.0, 18.0]

	reader = pypdf.PdfReader(str(output_pdf))
	assert len(reader.pages) == 3
	for page in reader.pages:
		assert float(page.mediabox.width) == pytest.approx(PAGE_WIDTH_PT, abs=0.01)
		assert float(page.mediabox.height) == pytest.approx(PAGE_HEIGHT_PT, abs=0.01)

	manifest_path = tmp_path / "nenga.pdf.json"
	layout = hagaki_atena.config.build_default_layout()
	hagaki_atena.render.write_manifest(
		manifest_path,
		tmp_path / "addresses.tsv",
		output_pdf,
		result,
		cid_font_config(),
		layout,
	)
	manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert manifest["address_pages"] == 2
	assert manifest["pages"][0]["name"] == "山田太郎"
	assert manifest["layout"]["recipient_name"]["x"] == 56.0


#============================================
def test_postal_digits_have_ink(tmp_path: pathlib.Path) -> None:
	"""
	Rendered digits land inside the recipient and sender postal boxes.
	"""
	font = hagaki_atena.config.FontConfig(
		name="VeraTest",
		font_file=vera_font_path(),
		subfont_index=0,
		cid_font=hagaki_atena.config.DEFAULT_CID_FONT,
	)
	records = [
		hagaki_atena.records.AddressRecord(
			family_name="Yamada",
			given_name="Taro",
			honorific="",
			postal_code="1000001",
			address_1="Tokyo",
		),
	]
	sender = hagaki_atena.records.SenderProfile(family_name="Suzuki", postal_code="1600022")
	output_pdf = tmp_path / "latin.pdf"
	hagaki_atena.render.render_addresses_to_pdf(records, sender, output_pdf, font)

	gray = _render_pdf_first_page(output_pdf).convert("L")
	layout = hagaki_atena.config.build_default_layout()
	for postal in (layout.recipient_postal, layout.sender_postal):
		for box_x in postal.x_positions:
			region = _crop_mm(
				gray,
				box_x - postal.box_width / 2.0,
				postal.center_y - postal.box_height / 2.0,
				box_x + postal.box_width / 2.0,
				postal.center_y + postal.box_height / 2.0,
			)
			assert _count_ink_ratio(region, INK_THRESHOLD) > 0.0

	# nothing is drawn in the top-left corner of the card
	corner = _crop_mm(gray, 0.0, 0.0, 30.0, 8.0)
	assert _count_ink_ratio(corner, INK_THRESHOLD) == 0.0


#============================================
def test_missing_font_file_is_fatal(tmp_path: pathlib.Path) -> None:
	"""
	A missing font aborts before any output is written.
	"""
	font = hagaki_atena.config.FontConfig(
		name="missing",
		font_file=tmp_path / "missing.ttf",
		subfont_index=0,
		cid_font=hagaki_atena.config.DEFAULT_CID_FONT,
	)
	output_pdf = tmp_path / "never.pdf"
	with pytest.raises(hagaki_atena.canvas.FontLoadError):
		hagaki_atena.render.render_addresses_to_pdf(japanese_records(), japanese_sender(), output_pdf, font)
	assert not output_pdf.exists()


#============================================
def test_unparsable_font_file_is_fatal(tmp_path: pathlib.Path) -> None:
	bogus = tmp_path / "bogus.ttf"
	bogus.write_bytes(b"not a font")
	canvas = hagaki_atena.canvas.PostcardCanvas()
	with pytest.raises(hagaki_atena.canvas.FontLoadError):
		canvas.register_font("bogus", bogus)


#============================================
def test_write_failure_raises(tmp_path: pathlib.Path) -> None:
	output_pdf = tmp_path / "no_such_dir" / "nenga.pdf"
	with pytest.raises(hagaki_atena.canvas.WriteError):
		hagaki_atena.render.render_addresses_to_pdf(
			japanese_records(), japanese_sender(), output_pdf, cid_font_config(),
		)


#============================================
def test_measure_without_font_raises() -> None:
	canvas = hagaki_atena.canvas.PostcardCanvas()
	with pytest.raises(hagaki_atena.canvas.GlyphMeasureError):
		canvas.measure_advance_width("山", 10.0)
