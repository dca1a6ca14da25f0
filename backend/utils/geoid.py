"""GEOID / FIPS code construction from raw state, place and county codes."""

STATE_WIDTH = 2
PLACE_WIDTH = 5
COUNTY_WIDTH = 3


def _pad(code: str, width: int) -> str:
    # Longer inputs pass through untouched
    return code.rjust(width, '0')


def pad_state(state: str) -> str:
    return _pad(state, STATE_WIDTH)


def pad_place(place: str) -> str:
    return _pad(place, PLACE_WIDTH)


def pad_county(county: str) -> str:
    return _pad(county, COUNTY_WIDTH)


def place_id(state: str, place: str) -> str:
    """
    Build a 7-digit place GEOID.

    Args:
        state: State FIPS code, possibly unpadded (e.g. "6")
        place: Place code, possibly unpadded (e.g. "12345")

    Returns:
        State + place code, e.g. "0612345"
    """
    return pad_state(state) + pad_place(place)


def county_id(state: str, county: str) -> str:
    """Build a 5-digit county FIPS code, e.g. ("6", "1") -> "06001"."""
    return pad_state(state) + pad_county(county)
