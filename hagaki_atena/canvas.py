"""
ReportLab drawing surface for postcard pages.

All coordinates accepted here are millimeters from the top-left corner
of the card; conversion to PDF points with a bottom-left origin happens
only inside this module.
"""

# Standard Library
import io
import pathlib

# PIP3 modules
import reportlab.lib.units
import reportlab.pdfbase.cidfonts
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts
import reportlab.pdfgen.canvas

# local repo modules
import hagaki_atena as ha
import hagaki_atena.config
import hagaki_atena.records


GlyphPlacement = ha.records.GlyphPlacement
HagakiLayout = ha.config.HagakiLayout
RegionSpec = ha.config.RegionSpec

MM = reportlab.lib.units.mm
HAGAKI_WIDTH = ha.config.HAGAKI_WIDTH
HAGAKI_HEIGHT = ha.config.HAGAKI_HEIGHT
PT_TO_MM = ha.config.PT_TO_MM
GUIDE_LINE_WIDTH = ha.config.GUIDE_LINE_WIDTH


class FontLoadError(Exception):
	"""Raised when a font file is missing or cannot be parsed."""


class WriteError(Exception):
	"""Raised when the finished document cannot be written."""


class GlyphMeasureError(Exception):
	"""Raised when a glyph advance cannot be measured."""


class PostcardCanvas:
	"""
	Page-by-page PDF output for postcards.
	"""

	def __init__(self) -> None:
		self._buffer = io.BytesIO()
		self._pdf = reportlab.pdfgen.canvas.Canvas(
			self._buffer,
			pagesize=(HAGAKI_WIDTH * MM, HAGAKI_HEIGHT * MM),
		)
		self._page_height = HAGAKI_HEIGHT
		self._page_open = False
		self.font_name: str | None = None
		self.page_count = 0

	#============================================
	def register_font(self, name: str, font_path: pathlib.Path, subfont_index: int = 0) -> None:
		"""
		Register a TrueType font file and make it current.

		Args:
			name: Font name to register.
			font_path: Path to a .ttf or .ttc file.
			subfont_index: Face index inside a .ttc collection.
		"""
		path = pathlib.Path(font_path)
		if not path.is_file():
			raise FontLoadError(f"font file not found: {path}")
		try:
			font = reportlab.pdfbase.ttfonts.TTFont(name, str(path), subfontIndex=subfont_index)
		except (reportlab.pdfbase.ttfonts.TTFError, OSError) as error:
			raise FontLoadError(f"cannot load font {path}: {error}") from error
		reportlab.pdfbase.pdfmetrics.registerFont(font)
		self.font_name = name

	#============================================
	def register_cid_font(self, name: str) -> None:
		"""
		Register a built-in CJK font such as HeiseiMin-W3.

		Args:
			name: Adobe CID font face name.
		"""
		try:
			font = reportlab.pdfbase.cidfonts.UnicodeCIDFont(name)
		except (KeyError, ValueError) as error:
			raise FontLoadError(f"unknown CID font: {name}") from error
		reportlab.pdfbase.pdfmetrics.registerFont(font)
		self.font_name = name

	#============================================
	def begin_page(self, width_mm: float, height_mm: float) -> None:
		"""
		Start a new page, closing the previous one.

		Args:
			width_mm: Page width in millimeters.
			height_mm: Page height in millimeters.
		"""
		if self._page_open:
			self._pdf.showPage()
		self._pdf.setPageSize((width_mm * MM, height_mm * MM))
		self._page_height = height_mm
		self._page_open = True
		self.page_count += 1

	#============================================
	def _require_font(self) -> str:
		if self.font_name is None:
			raise FontLoadError("no font registered")
		return self.font_name

	#============================================
	def _to_pdf_y(self, y_mm: float) -> float:
		return (self._page_height - y_mm) * MM

	#============================================
	def measure_advance_width(self, glyph: str, font_size: float) -> float:
		"""
		Measure the horizontal advance of a glyph.

		Args:
			glyph: Character to measure.
			font_size: Font size in points.

		Returns:
			Advance width in millimeters.
		"""
		if self.font_name is None:
			raise GlyphMeasureError("no font registered")
		try:
			width = reportlab.pdfbase.pdfmetrics.stringWidth(glyph, self.font_name, font_size)
		except (KeyError, ValueError, UnicodeError) as error:
			raise GlyphMeasureError(f"cannot measure {glyph!r}: {error}") from error
		return width / MM

	#============================================
	def draw_glyph_at(
		self,
		glyph: str,
		x_mm: float,
		y_mm: float,
		font_size: float,
		rotation: int = 0,
		width_mm: float | None = None,
	) -> None:
		"""
		Draw one glyph with the top-left of its cell at (x_mm, y_mm).

		Rotated glyphs turn clockwise about the center of their cell, whose
		height is one line pitch. The rotation is undone before returning.

		Args:
			glyph: Character to draw.
			x_mm: Cell left edge in millimeters.
			y_mm: Cell top edge in millimeters.
			font_size: Font size in points.
			rotation: 0 or 90 degrees.
			width_mm: Known advance width; measured when None.
		"""
		font_name = self._require_font()
		ascent, descent = reportlab.pdfbase.pdfmetrics.getAscentDescent(font_name, font_size)
		self._pdf.setFont(font_name, font_size)
		if rotation == 0:
			self._pdf.drawString(x_mm * MM, self._to_pdf_y(y_mm) - ascent, glyph)
			return

		if width_mm is None:
			width_mm = self.measure_advance_width(glyph, font_size)
		width = width_mm * MM
		pitch = ha.config.line_pitch(font_size) * MM
		center_x = x_mm * MM + width / 2.0
		center_y = self._to_pdf_y(y_mm) - pitch / 2.0
		self._pdf.saveState()
		self._pdf.translate(center_x, center_y)
		self._pdf.rotate(-rotation)
		self._pdf.drawString(-width / 2.0, -(ascent + descent) / 2.0, glyph)
		self._pdf.restoreState()

	#============================================
	def draw_placement(self, placement: GlyphPlacement) -> None:
		"""
		Draw a computed glyph placement.

		Args:
			placement: GlyphPlacement to draw.
		"""
		rotation = 90 if placement.rotated else 0
		self.draw_glyph_at(
			placement.char,
			placement.x,
			placement.y,
			placement.font_size,
			rotation=rotation,
			width_mm=placement.width,
		)

	#============================================
	def _draw_region_outline(self, region: RegionSpec) -> None:
		column_width = region.font_size * PT_TO_MM
		self._pdf.rect(
			(region.x - column_width / 2.0) * MM,
			self._to_pdf_y(region.limit_y),
			column_width * MM,
			(region.limit_y - region.y) * MM,
			stroke=1,
			fill=0,
		)

	#============================================
	def draw_guides(self, layout: HagakiLayout) -> None:
		"""
		Draw postal digit boxes and text regions for printer calibration.

		Args:
			layout: Postcard layout.
		"""
		self._pdf.setLineWidth(GUIDE_LINE_WIDTH)
		self._pdf.setStrokeColorRGB(0.6, 0.6, 0.6)
		for postal in (layout.recipient_postal, layout.sender_postal):
			for x in postal.x_positions:
				self._pdf.rect(
					(x - postal.box_width / 2.0) * MM,
					self._to_pdf_y(postal.center_y + postal.box_height / 2.0),
					postal.box_width * MM,
					postal.box_height * MM,
					stroke=1,
					fill=0,
				)
		for region in (
			layout.recipient_address_1,
			layout.recipient_address_2,
			layout.recipient_name,
			layout.sender_address_1,
			layout.sender_address_2,
			layout.sender_name,
		):
			self._draw_region_outline(region)
		self._pdf.setStrokeColorRGB(0.0, 0.0, 0.0)

	#============================================
	def finalize(self, output_path: pathlib.Path) -> None:
		"""
		Close the document and write it to disk.

		Args:
			output_path: Output PDF path.
		"""
		if self._page_open:
			self._pdf.showPage()
			self._page_open = False
		self._pdf.save()
		data = self._buffer.getvalue()
		try:
			pathlib.Path(output_path).write_bytes(data)
		except OSError as error:
			raise WriteError(f"cannot write {output_path}: {error}") from error
