from decimal import Decimal, ROUND_HALF_UP

from .malawi_data import MALAWI_DISTRICTS, LAND_USES

COORDINATE_PLACES = Decimal("0.000001")


def validate_malawi_district(district):
    """
    Validate that a district is one of Malawi's districts.
    Matching is exact and case-sensitive.
    Returns (is_valid, error_message)
    """
    if not district:
        return False, "District is required"

    if district not in MALAWI_DISTRICTS:
        return False, f"'{district}' is not a valid Malawian district"

    return True, "District is valid"


def validate_land_use(land_use):
    if not land_use:
        return False, "Land use is required"
    if land_use not in LAND_USES:
        return False, f"'{land_use}' is not a recognised land use"
    return True, "Land use is valid"


def quantize_coordinate(value):
    """Round a latitude/longitude to the 6 decimal places stored and displayed."""
    if value is None:
        return None
    return Decimal(str(value)).quantize(COORDINATE_PLACES, rounding=ROUND_HALF_UP)
