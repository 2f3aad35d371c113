"""
Document rendering and manifest output.
"""

# Standard Library
import dataclasses
import json
import pathlib

# local repo modules
import hagaki_atena as ha
import hagaki_atena.canvas
import hagaki_atena.compose
import hagaki_atena.config
import hagaki_atena.records


AddressRecord = ha.records.AddressRecord
SenderProfile = ha.records.SenderProfile
FontConfig = ha.config.FontConfig
HagakiLayout = ha.config.HagakiLayout
PostcardCanvas = ha.canvas.PostcardCanvas

PROGRESS_BAR_WIDTH = ha.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = ha.config.PROGRESS_UPDATE_EVERY


@dataclasses.dataclass
class PageSummary:
	row: int
	name: str
	name_font_size: float
	joint_font_sizes: list[float]
	glyphs: int


@dataclasses.dataclass
class RenderResult:
	total_pages: int
	address_pages: int
	measure_failures: int
	pages: list[PageSummary]


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def register_font(canvas: PostcardCanvas, font: FontConfig) -> None:
	"""
	Register the configured font on the canvas.

	Args:
		canvas: Target canvas.
		font: Font configuration.
	"""
	if font.font_file is not None:
		canvas.register_font(font.name, font.font_file, font.subfont_index)
		return
	canvas.register_cid_font(font.cid_font)


#============================================
def render_addresses_to_pdf(
	records: list[AddressRecord],
	sender: SenderProfile,
	output_path: pathlib.Path,
	font: FontConfig,
	layout: HagakiLayout | None = None,
	calibration: bool = False,
	verbose: bool = False,
) -> RenderResult:
	"""
	Render one postcard page per address record.

	The font is registered before any page is drawn, so a font failure
	leaves no output file behind.

	Args:
		records: Address records in print order.
		sender: Sender profile.
		output_path: Output PDF path.
		font: Font configuration.
		layout: Postcard layout, the standard card when None.
		calibration: Add a leading page with guide outlines.
		verbose: Print a progress bar.

	Returns:
		RenderResult.
	"""
	if layout is None:
		layout = ha.config.build_default_layout()
	canvas = PostcardCanvas()
	register_font(canvas, font)

	if calibration:
		canvas.begin_page(layout.page_width, layout.page_height)
		canvas.draw_guides(layout)

	failure_counter = [0]
	summaries: list[PageSummary] = []
	total = len(records)
	for index, record in enumerate(records, start=1):
		plan = ha.compose.render_page(canvas, record, sender, layout, failure_counter)
		summaries.append(
			PageSummary(
				row=record.row,
				name=record.full_name,
				name_font_size=plan.name_block.font_size,
				joint_font_sizes=[column.font_size for column in plan.name_block.joint_columns],
				glyphs=len(plan.placements),
			)
		)
		if verbose and (index % PROGRESS_UPDATE_EVERY == 0 or index == total):
			print_progress("Pages", index, total)
	if verbose and total > 0:
		print()

	canvas.finalize(output_path)
	result = RenderResult(
		total_pages=canvas.page_count,
		address_pages=len(summaries),
		measure_failures=failure_counter[0],
		pages=summaries,
	)
	return result


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	address_file: pathlib.Path,
	output_path: pathlib.Path,
	result: RenderResult,
	font: FontConfig,
	layout: HagakiLayout,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		address_file: Source address file.
		output_path: Rendered PDF path.
		result: Render result.
		font: Font configuration.
		layout: Postcard layout.
	"""
	data = {
		"address_file": str(address_file),
		"output": str(output_path),
		"total_pages": result.total_pages,
		"address_pages": result.address_pages,
		"measure_failures": result.measure_failures,
		"pages": [dataclasses.asdict(page) for page in result.pages],
		"layout": dataclasses.asdict(layout),
		"font": {
			"name": font.name,
			"font_file": str(font.font_file) if font.font_file is not None else None,
			"subfont_index": font.subfont_index,
			"cid_font": font.cid_font,
		},
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True, ensure_ascii=False)
