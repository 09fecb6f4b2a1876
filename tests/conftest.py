import os

os.environ.setdefault("MPLBACKEND", "Agg")

from pathlib import Path

import pytest

HEADER = "EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP,STATE\n"

EXAMPLE_ROWS = (
    "TORNADO,5,10,1,K,0,,AL\n"
    "tornado ,2,0,0,,0,,AL\n"
    "FLOOD,0,0,2,B,0,,TX\n"
)


@pytest.fixture
def write_csv(tmp_path):
    """Write `body` under the standard header and return the file path."""
    def _write(body: str, name: str = "storm.csv", header: str = HEADER) -> Path:
        path = tmp_path / name
        path.write_text(header + body, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def example_csv(write_csv):
    return write_csv(EXAMPLE_ROWS)
