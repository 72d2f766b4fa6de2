# novara/services/address_service.py
import pycountry

from novara.utils.logging import get_logger

logger = get_logger(__name__)


def _lookup(database, **kwargs):
    try:
        return database.get(**kwargs)
    except (KeyError, LookupError):
        return None


def country_name(country_code: str | None) -> str:
    """Display name for an ISO 3166-1 alpha-2 code, or the input unchanged."""
    code = (country_code or "").strip()
    if not code:
        return ""
    country = _lookup(pycountry.countries, alpha_2=code.upper())
    return country.name if country else code


def state_name(country_code: str | None, state_code: str | None) -> str:
    """
    Display name for a state selection.
    Accepts the bare subdivision code ("MH") or the full one ("IN-MH");
    unknown values pass through as typed.
    """
    state = (state_code or "").strip()
    if not state:
        return ""
    full_code = state.upper()
    if "-" not in full_code and country_code:
        full_code = f"{country_code.strip().upper()}-{full_code}"
    subdivision = _lookup(pycountry.subdivisions, code=full_code)
    if subdivision is None:
        logger.info(f"No subdivision for {full_code}, keeping '{state}'")
        return state
    return subdivision.name


def build_shipping_address(
    address: str,
    city: str,
    state: str,
    country: str,
    zip_code: str,
) -> dict:
    return {
        "address": (address or "").strip(),
        "city": (city or "").strip(),
        "state": state_name(country, state),
        "country": country_name(country),
        "zipCode": (zip_code or "").strip(),
    }
