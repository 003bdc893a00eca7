"""Calculation methods understood by the upstream timings provider.

The integer identifiers are the provider's own numbering and are sent on the
wire unchanged. Do not renumber.
"""

from enum import IntEnum


class CalculationMethod(IntEnum):
    """Astronomical convention used to compute prayer times."""

    JAFARI = 0
    KARACHI = 1
    ISNA = 2
    MWL = 3
    MAKKAH = 4
    EGYPT = 5
    TEHRAN = 7

    @property
    def authority(self) -> str:
        """Human-readable name of the authority behind the method."""
        return METHOD_AUTHORITIES[self]


METHOD_AUTHORITIES = {
    CalculationMethod.JAFARI: "Shia Ithna-Ashari, Leva Institute, Qum",
    CalculationMethod.KARACHI: "University of Islamic Sciences, Karachi",
    CalculationMethod.ISNA: "Islamic Society of North America",
    CalculationMethod.MWL: "Muslim World League",
    CalculationMethod.MAKKAH: "Umm Al-Qura University, Makkah",
    CalculationMethod.EGYPT: "Egyptian General Authority of Survey",
    CalculationMethod.TEHRAN: "Institute of Geophysics, University of Tehran",
}

# Short names accepted from callers (case-insensitive)
METHOD_ALIASES = {
    "jafari": CalculationMethod.JAFARI,
    "karachi": CalculationMethod.KARACHI,
    "isna": CalculationMethod.ISNA,
    "mwl": CalculationMethod.MWL,
    "makkah": CalculationMethod.MAKKAH,
    "egypt": CalculationMethod.EGYPT,
    "tehran": CalculationMethod.TEHRAN,
}


def resolve_method(value: int | str | CalculationMethod | None, default: int = CalculationMethod.MWL) -> CalculationMethod:
    """Resolve a method id or alias to a CalculationMethod.

    Args:
        value: Integer id, alias such as "ISNA", or None for the default
        default: Method id used when value is None

    Returns:
        The matching CalculationMethod

    Raises:
        ValueError: If the value names no known method
    """
    if value is None:
        return CalculationMethod(default)

    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            value = int(stripped)
        else:
            try:
                return METHOD_ALIASES[stripped.lower()]
            except KeyError:
                raise ValueError(f"Unknown calculation method: {value!r}") from None

    try:
        return CalculationMethod(value)
    except ValueError:
        raise ValueError(f"Unknown calculation method: {value!r}") from None


class AsrSchool(IntEnum):
    """Juristic school used for the Asr shadow length."""

    STANDARD = 0  # Shafi'i, Maliki, Hanbali
    HANAFI = 1


SCHOOL_ALIASES = {
    "standard": AsrSchool.STANDARD,
    "shafi": AsrSchool.STANDARD,
    "hanafi": AsrSchool.HANAFI,
}


def resolve_school(value: int | str | AsrSchool | None, default: int = AsrSchool.STANDARD) -> AsrSchool:
    """Resolve a school id or name ("hanafi") to an AsrSchool.

    Raises:
        ValueError: If the value names no known school
    """
    if value is None:
        return AsrSchool(default)

    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            value = int(stripped)
        else:
            try:
                return SCHOOL_ALIASES[stripped.lower()]
            except KeyError:
                raise ValueError(f"Unknown Asr school: {value!r}") from None

    try:
        return AsrSchool(value)
    except ValueError:
        raise ValueError(f"Unknown Asr school: {value!r}") from None
