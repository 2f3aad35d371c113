"""
Page composition: one postcard face per address record.
"""

# Standard Library
import dataclasses

# local repo modules
import hagaki_atena as ha
import hagaki_atena.canvas
import hagaki_atena.config
import hagaki_atena.glyphs
import hagaki_atena.records
import hagaki_atena.vertical


AddressRecord = ha.records.AddressRecord
SenderProfile = ha.records.SenderProfile
GlyphPlacement = ha.records.GlyphPlacement
HagakiLayout = ha.config.HagakiLayout
RegionSpec = ha.config.RegionSpec
PostalSpec = ha.config.PostalSpec
PostcardCanvas = ha.canvas.PostcardCanvas
MeasureFunc = ha.vertical.MeasureFunc


@dataclasses.dataclass
class JointColumn:
	name: str
	x: float
	font_size: float
	placements: list[GlyphPlacement]


@dataclasses.dataclass
class NameBlock:
	x: float
	start_y: float
	given_y: float
	font_size: float
	placements: list[GlyphPlacement]
	joint_columns: list[JointColumn] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class PagePlan:
	"""
	All placements for one card, grouped by region in drawing order.
	"""
	regions: dict[str, list[GlyphPlacement]]
	name_block: NameBlock

	@property
	def placements(self) -> list[GlyphPlacement]:
		result: list[GlyphPlacement] = []
		for placements in self.regions.values():
			result.extend(placements)
		return result


#============================================
def _run_length(text: str, font_size: float) -> float:
	return ha.vertical.needed_height(len(text), font_size)


#============================================
def layout_region(
	text: str,
	region: RegionSpec,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> list[GlyphPlacement]:
	"""
	Lay out text in a region at its base size, truncating at the limit.

	Args:
		text: Text to set.
		region: Region spec.
		measure: Glyph width callable.
		failure_counter: Optional one-item counter for measure failures.

	Returns:
		List of GlyphPlacement entries.
	"""
	return ha.vertical.layout_vertical(
		text,
		region.x,
		region.y,
		region.font_size,
		region.limit_y,
		measure,
		failure_counter,
	)


#============================================
def layout_address_line(
	text: str,
	region: RegionSpec,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> list[GlyphPlacement]:
	"""
	Lay out one address line with full-width digits.

	Args:
		text: Raw address line.
		region: Region spec.
		measure: Glyph width callable.
		failure_counter: Optional one-item counter for measure failures.

	Returns:
		List of GlyphPlacement entries.
	"""
	normalized = ha.glyphs.normalize_for_vertical(text)
	return layout_region(normalized, region, measure, failure_counter)


#============================================
def layout_postal_block(
	postal_code: str,
	postal: PostalSpec,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> list[GlyphPlacement]:
	digits = ha.glyphs.normalize_postal_code(postal_code)
	return ha.vertical.layout_postal_code(
		digits,
		postal.x_positions,
		postal.center_y,
		postal.font_size,
		measure,
		failure_counter,
	)


#============================================
def layout_recipient_name(
	address: AddressRecord,
	layout: HagakiLayout,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> NameBlock:
	"""
	Lay out the recipient name, honorific and joint-name columns.

	The main column shrinks to fit the name region. Leftover space moves
	the start down by a quarter of the slack, which keeps the name above
	true center. Joint names sit in their own columns to the left, each
	sized against the span below the given-name start.

	Args:
		address: Recipient record.
		layout: Postcard layout.
		measure: Glyph width callable.
		failure_counter: Optional one-item counter for measure failures.

	Returns:
		NameBlock.
	"""
	if not address.family_name:
		raise ValueError(f"address row {address.row} has no family name")
	region = layout.recipient_name
	honorific = address.honorific
	full_name = address.family_name + address.given_name + honorific
	available_height = region.limit_y - region.y
	font_size = ha.vertical.fit_font_size(len(full_name), region.font_size, available_height)

	start_y = region.y
	total_height = _run_length(full_name, font_size)
	if total_height < available_height:
		start_y += (available_height - total_height) / 4.0

	x = region.x
	# a column needs at least one glyph
	joint_names = [name for name in address.joint_names if name + honorific]
	if joint_names:
		x += len(joint_names) * layout.joint_name_pitch / 2.0

	placements = ha.vertical.layout_vertical(
		address.family_name, x, start_y, font_size, region.limit_y, measure, failure_counter,
	)
	given_y = start_y + _run_length(address.family_name, font_size)
	placements.extend(
		ha.vertical.layout_vertical(
			address.given_name, x, given_y, font_size, region.limit_y, measure, failure_counter,
		)
	)
	honorific_y = given_y + _run_length(address.given_name, font_size)
	placements.extend(
		ha.vertical.layout_vertical(
			honorific, x, honorific_y, font_size, region.limit_y, measure, failure_counter,
		)
	)

	block = NameBlock(
		x=x,
		start_y=start_y,
		given_y=given_y,
		font_size=font_size,
		placements=placements,
	)

	joint_span = region.limit_y - given_y
	for index, joint_name in enumerate(joint_names):
		if joint_span <= 0.0:
			break
		joint_x = x - (index + 1) * layout.joint_name_pitch
		joint_text = joint_name + honorific
		joint_size = ha.vertical.fit_font_size(len(joint_text), region.font_size, joint_span)
		joint_placements = ha.vertical.layout_vertical(
			joint_name, joint_x, given_y, joint_size, region.limit_y, measure, failure_counter,
		)
		joint_honorific_y = given_y + _run_length(joint_name, joint_size)
		joint_placements.extend(
			ha.vertical.layout_vertical(
				honorific, joint_x, joint_honorific_y, joint_size, region.limit_y, measure, failure_counter,
			)
		)
		block.joint_columns.append(
			JointColumn(name=joint_name, x=joint_x, font_size=joint_size, placements=joint_placements)
		)
	return block


#============================================
def compose_page(
	address: AddressRecord,
	sender: SenderProfile,
	layout: HagakiLayout,
	measure: MeasureFunc,
	failure_counter: list[int] | None = None,
) -> PagePlan:
	"""
	Compute every glyph placement for one card.

	Args:
		address: Recipient record.
		sender: Sender profile.
		layout: Postcard layout.
		measure: Glyph width callable.
		failure_counter: Optional one-item counter for measure failures.

	Returns:
		PagePlan.
	"""
	regions: dict[str, list[GlyphPlacement]] = {}
	regions["recipient_postal"] = layout_postal_block(
		address.postal_code, layout.recipient_postal, measure, failure_counter,
	)
	regions["recipient_address_1"] = layout_address_line(
		address.address_1, layout.recipient_address_1, measure, failure_counter,
	)
	if address.address_2:
		regions["recipient_address_2"] = layout_address_line(
			address.address_2, layout.recipient_address_2, measure, failure_counter,
		)

	name_block = layout_recipient_name(address, layout, measure, failure_counter)
	regions["recipient_name"] = name_block.placements
	for index, column in enumerate(name_block.joint_columns, start=1):
		regions[f"joint_name_{index}"] = column.placements

	regions["sender_postal"] = layout_postal_block(
		sender.postal_code, layout.sender_postal, measure, failure_counter,
	)
	regions["sender_address_1"] = layout_address_line(
		sender.address_1, layout.sender_address_1, measure, failure_counter,
	)
	if sender.address_2:
		regions["sender_address_2"] = layout_address_line(
			sender.address_2, layout.sender_address_2, measure, failure_counter,
		)
	# no honorific and no shrink for the sender name
	regions["sender_name"] = layout_region(
		sender.full_name, layout.sender_name, measure, failure_counter,
	)
	return PagePlan(regions=regions, name_block=name_block)


#============================================
def render_page(
	canvas: PostcardCanvas,
	address: AddressRecord,
	sender: SenderProfile,
	layout: HagakiLayout,
	failure_counter: list[int] | None = None,
) -> PagePlan:
	"""
	Compose one card and draw it on a new canvas page.

	Args:
		canvas: Target PostcardCanvas.
		address: Recipient record.
		sender: Sender profile.
		layout: Postcard layout.
		failure_counter: Optional one-item counter for measure failures.

	Returns:
		PagePlan that was drawn.
	"""
	plan = compose_page(address, sender, layout, canvas.measure_advance_width, failure_counter)
	canvas.begin_page(layout.page_width, layout.page_height)
	for placement in plan.placements:
		canvas.draw_placement(placement)
	return plan
