"""
Pytest fixtures for the jurisdiction query engine tests.

Provides small in-memory versions of the two Census CSV files that exercise
every filtering rule, plus helpers to write them to disk.
"""
import csv
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

PLACE_HEADER = ["SUMLEV", "STATE", "COUNTY", "PLACE", "NAME", "STNAME", "POPESTIMATE2023", "POPESTIMATE2024"]
COUNTY_HEADER = ["SUMLEV", "STATE", "COUNTY", "STNAME", "CTYNAME", "POPESTIMATE2023", "POPESTIMATE2024"]


def place(sumlev, state, place_code, name, stname, pop2023, pop2024, county="000"):
    return {
        "SUMLEV": sumlev, "STATE": state, "COUNTY": county, "PLACE": place_code,
        "NAME": name, "STNAME": stname,
        "POPESTIMATE2023": pop2023, "POPESTIMATE2024": pop2024,
    }


def county(sumlev, state, county_code, name, stname, pop2023, pop2024):
    return {
        "SUMLEV": sumlev, "STATE": state, "COUNTY": county_code,
        "STNAME": stname, "CTYNAME": name,
        "POPESTIMATE2023": pop2023, "POPESTIMATE2024": pop2024,
    }


@pytest.fixture
def place_rows():
    return [
        # State summary row: contributes to the catalog only
        place("040", "06", "00000", "California", "California", "39198693", "39431263"),
        place("162", "06", "00002", "Alpine", "California", "4950", "5000"),
        place("162", "06", "02000", "Anaheim city", "California", "344461", "345940"),
        # Same place repeated at the place-within-county level
        place("157", "06", "02000", "Anaheim city", "California", "1", "1", county="059"),
        place("162", "06", "00562", "Alameda city", "California", "76999", "78280"),
        # Missing place code
        place("162", "06", "", "Nowhere", "California", "10", "10"),
        place("162", "32", "40000", "Las Vegas city", "Nevada", "", "678922"),
        place("162", "32", "31900", "Henderson city", "Nevada", "(X)", "(X)"),
    ]


@pytest.fixture
def county_rows():
    return [
        # Statewide totals embedded in the county file
        county("040", "06", "000", "California", "California", "39198693", "39431263"),
        county("050", "06", "000", "California", "California", "39198693", "39431263"),
        county("050", "06", "001", "Alameda County", "California", "1641869", "1649060"),
        county("050", "06", "003", "Alpine County", "California", "1190", "1141"),
        # Unpadded codes
        county("050", "6", "5", "Amador County", "California", "41811", "42026"),
        county("050", "35", "015", "Eddy County", "New Mexico", "62314", "62702"),
        county("050", "35", "013", "Doña Ana County", "New Mexico", "225210", "227008"),
        county("050", "35", "011", "de Baca County", "New Mexico", "1698", "1681"),
        county("050", "35", "001", "Bernalillo County", "New Mexico", "676444", "677692"),
        county("050", "35", "017", "Dora County", "New Mexico", "100", "100"),
    ]


def write_csv(path, header, rows, encoding="latin-1"):
    with open(path, "w", newline="", encoding=encoding) as f:
        writer = csv.DictWriter(f, fieldnames=header)
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def csv_files(tmp_path, place_rows, county_rows):
    """Write both fixture datasets as Latin-1 CSV files; returns (places, counties)."""
    places_path = write_csv(tmp_path / "sub-est2024.csv", PLACE_HEADER, place_rows)
    counties_path = write_csv(tmp_path / "co-est2024-alldata.csv", COUNTY_HEADER, county_rows)
    return str(places_path), str(counties_path)
