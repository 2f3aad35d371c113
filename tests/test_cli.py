import json
import pathlib

import pypdf
import pytest

import hagaki_atena.cli


HEADER = "姓\t名\t連名\t敬称\t郵便番号\t住所1\t住所2\t2026送\t2026受\t2026喪中"
ROWS = [
	"山田\t太郎\t\t\t100-0001\t東京都千代田区1-1\t\t\t\t",
	"佐藤\t次郎\t花子\t\t530-0001\t大阪府大阪市北区1\t\t○\t\t",
	"高橋\t三郎\t\t\t060-0001\t北海道札幌市\t\t\t\t○",
]


#============================================
def write_project(tmp_path: pathlib.Path) -> pathlib.Path:
	"""
	Write an address file and config into a temporary directory.

	Args:
		tmp_path: Temporary directory.

	Returns:
		Config path.
	"""
	address_path = tmp_path / "addresses.tsv"
	address_path.write_text("\n".join([HEADER] + ROWS) + "\n", encoding="utf-8")
	config_path = tmp_path / "config.json"
	payload = {
		"address_file": "addresses.tsv",
		"output_file": "out/nenga.pdf",
		"year": 2026,
		"sender": {"family_name": "鈴木", "given_name": "花子", "postal_code": "160-0022", "address1": "東京都新宿区2-2"},
	}
	config_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
	(tmp_path / "out").mkdir()
	return config_path


#============================================
def test_generate_skips_sent_and_mourning(tmp_path: pathlib.Path) -> None:
	"""
	Only rows that are neither sent nor in mourning are printed.
	"""
	config_path = write_project(tmp_path)
	hagaki_atena.cli.main(["generate", "-c", str(config_path)])
	output_pdf = tmp_path / "out" / "nenga.pdf"
	reader = pypdf.PdfReader(str(output_pdf))
	assert len(reader.pages) == 1
	manifest = json.loads((tmp_path / "out" / "nenga.pdf.json").read_text(encoding="utf-8"))
	assert [page["row"] for page in manifest["pages"]] == [2]


#============================================
def test_generate_all_with_output_override(tmp_path: pathlib.Path) -> None:
	config_path = write_project(tmp_path)
	output_pdf = tmp_path / "all.pdf"
	hagaki_atena.cli.main(["generate", "-c", str(config_path), "--all", "-o", str(output_pdf)])
	reader = pypdf.PdfReader(str(output_pdf))
	assert len(reader.pages) == 3


#============================================
def test_list_prints_status(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	config_path = write_project(tmp_path)
	hagaki_atena.cli.main(["list", "-c", str(config_path)])
	output = capsys.readouterr().out
	assert "山田 太郎様" in output
	assert "〒100-0001" in output
	assert "佐藤 次郎 ほか様" in output
	assert "喪" in output


#============================================
def test_mark_sent_dry_run_and_write(tmp_path: pathlib.Path, capsys: pytest.CaptureFixture) -> None:
	"""
	Dry run leaves the file alone; a real run marks the remaining row.
	"""
	config_path = write_project(tmp_path)
	address_path = tmp_path / "addresses.tsv"
	before = address_path.read_text(encoding="utf-8")
	hagaki_atena.cli.main(["mark-sent", "-c", str(config_path), "--dry-run"])
	assert address_path.read_text(encoding="utf-8") == before
	assert "dry run" in capsys.readouterr().out

	hagaki_atena.cli.main(["mark-sent", "-c", str(config_path)])
	lines = address_path.read_text(encoding="utf-8").splitlines()
	assert lines[1].split("\t")[7] == "○"
	assert lines[3].split("\t")[7] == ""


#============================================
def test_config_error_exits(tmp_path: pathlib.Path) -> None:
	with pytest.raises(SystemExit, match="Error"):
		hagaki_atena.cli.main(["list", "-c", str(tmp_path / "missing.json")])
