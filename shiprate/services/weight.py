"""Weight unit conversion."""

LBS_TO_KG_FACTOR = 0.453592
KG_TO_LBS_FACTOR = 2.20462

SUPPORTED_UNITS = ("kg", "lbs")


class WeightConverter:
    """Converts catalog weights stored in ``unit`` to kg or lbs."""

    def __init__(self, unit: str = "kg"):
        unit = unit.lower()
        if unit not in SUPPORTED_UNITS:
            raise ValueError(f"Unsupported weight unit '{unit}'")
        self.unit = unit

    def to_kg(self, weight: float) -> float:
        if self.unit == "lbs":
            return float(weight) * LBS_TO_KG_FACTOR
        return float(weight)

    def to_lbs(self, weight: float) -> float:
        if self.unit == "kg":
            return float(weight) * KG_TO_LBS_FACTOR
        return float(weight)
