import logging

import httpx

logger = logging.getLogger("geocoding")

GOOGLE_GEOCODE_API_URL = "https://maps.googleapis.com/maps/api/geocode/json"


async def geocode_place(place: str, api_key: str | None) -> tuple[float, float] | None:
    """Geocode a birth place to lat/lon using the Google Geocode API.

    Args:
        place: A place name (e.g., "Lisbon, Portugal")
        api_key: Google Geocode API key; lookups are skipped without one

    Returns:
        A tuple of (latitude, longitude) or None if geocoding fails.
    """
    if not api_key or not place.strip():
        return None

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                GOOGLE_GEOCODE_API_URL,
                params={"address": place, "key": api_key},
                timeout=10.0,
            )
            response.raise_for_status()
            data = response.json()

        if data.get("status") != "OK" or not data.get("results"):
            logger.warning(f"Geocode API returned status {data.get('status')} for {place!r}")
            return None

        location = data["results"][0]["geometry"]["location"]
        lat, lng = float(location["lat"]), float(location["lng"])
    except Exception as e:
        logger.error(f"Failed to geocode {place!r}: {e}")
        return None

    logger.info(f"Geocoded {place!r} to {lat},{lng}")
    return (lat, lng)
