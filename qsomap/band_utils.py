"""Amateur band lookup for logs that carry FREQ but no BAND."""

# Band edges (MHz), ordered low to high
BANDS = {
    "160m": (1.8, 2.0),
    "80m": (3.5, 4.0),
    "60m": (5.3, 5.4),
    "40m": (7.0, 7.3),
    "30m": (10.1, 10.15),
    "20m": (14.0, 14.35),
    "17m": (18.068, 18.168),
    "15m": (21.0, 21.45),
    "12m": (24.89, 24.99),
    "10m": (28.0, 29.7),
    "6m": (50.0, 54.0),
    "2m": (144.0, 148.0),
    "70cm": (420.0, 450.0),
}


def freq_to_band(freq_mhz: float) -> str | None:
    """Convert frequency to band name.

    Args:
        freq_mhz: Frequency in MHz

    Returns:
        Band name (e.g., "20m") or None if not in a known band
    """
    for band, (low, high) in BANDS.items():
        if low <= freq_mhz <= high:
            return band
    return None


def band_from_field(freq: str | None) -> str | None:
    """Band for an ADIF FREQ field.

    Args:
        freq: FREQ value as logged (MHz as text)

    Returns:
        Band name, or None if the field is empty, not a number or out of band
    """
    if not freq:
        return None
    try:
        return freq_to_band(float(freq))
    except ValueError:
        return None
