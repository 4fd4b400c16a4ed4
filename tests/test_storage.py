import json
from pathlib import Path

import pytest

from gflights_scraper.storage import dump_json, save_json


@pytest.mark.asyncio
async def test_save_json_writes_file_and_reports_size(tmp_path: Path):
    data = {"date_grid": [{"date": "2026-11-03", "price": 300}], "cheapest": None, "currency": "USD"}
    out, size = await save_json(data, tmp_path / "out" / "grid.json")

    assert out.exists(), "Output file should be created with its parent directory"
    assert size == out.stat().st_size
    assert json.loads(out.read_text()) == data


def test_dump_json_is_indented_utf8():
    raw = dump_json({"name": "Aéroport de Paris-Charles de Gaulle"})
    assert raw.startswith(b"{\n  ")
    assert "Aéroport".encode("utf-8") in raw
