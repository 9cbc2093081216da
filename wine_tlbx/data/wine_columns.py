"""Column definitions for the Wine Quality dataset."""

from enum import StrEnum

from .base_columns import BaseColumn, ColumnMetadata


class WineColumn(BaseColumn):
    """Columns of the [Wine Quality dataset](https://archive.ics.uci.edu/dataset/186/wine+quality) (Cortez et al., 2009).

    Both colour variants (red and white *vinho verde*) share this schema.

    Columns:
    - ``fixed_acidity``: float - Tartaric acid (g/dm^3)
    - ``volatile_acidity``: float - Acetic acid (g/dm^3)
    - ``citric_acid``: float - Citric acid (g/dm^3)
    - ``residual_sugar``: float - Residual sugar (g/dm^3)
    - ``chlorides``: float - Sodium chloride (g/dm^3)
    - ``free_sulfur_dioxide``: float - Free SO2 (mg/dm^3)
    - ``total_sulfur_dioxide``: float - Total SO2 (mg/dm^3)
    - ``density``: float - Density (g/cm^3)
    - ``ph``: float - pH
    - ``sulphates``: float - Potassium sulphate (g/dm^3)
    - ``alcohol``: float - Alcohol (% vol.)
    - ``quality``: float - Median expert score 0-10 (target variable)
    """

    FIXED_ACIDITY = "fixed_acidity"
    VOLATILE_ACIDITY = "volatile_acidity"
    CITRIC_ACID = "citric_acid"
    RESIDUAL_SUGAR = "residual_sugar"
    CHLORIDES = "chlorides"
    FREE_SULFUR_DIOXIDE = "free_sulfur_dioxide"
    TOTAL_SULFUR_DIOXIDE = "total_sulfur_dioxide"
    DENSITY = "density"
    PH = "ph"
    SULPHATES = "sulphates"
    ALCOHOL = "alcohol"

    # Target variable
    TARGET = "quality"
    """Median of at least three expert sensory scores (integer-valued, modelled as continuous)."""
    QUALITY = TARGET

    def metadata(self) -> ColumnMetadata:
        """Get metadata for this column."""
        return _COLUMN_METADATA_WINE[self]


WINE_TYPE_COL = "wine_type"
"""Tag column added when red and white tables are merged."""


def _meta(original: str, cleaned: str, pretty: str, unit: str = "") -> ColumnMetadata:
    label = f"{pretty} ({unit})" if unit else pretty
    return ColumnMetadata(original_name=original, cleaned_name=cleaned, dtype="float64", pretty_name=label, unit=unit)


_COLUMN_METADATA_WINE: dict[WineColumn, ColumnMetadata] = {
    WineColumn.FIXED_ACIDITY: _meta("fixed acidity", "fixed_acidity", "Fixed Acidity", "g/dm³"),
    WineColumn.VOLATILE_ACIDITY: _meta("volatile acidity", "volatile_acidity", "Volatile Acidity", "g/dm³"),
    WineColumn.CITRIC_ACID: _meta("citric acid", "citric_acid", "Citric Acid", "g/dm³"),
    WineColumn.RESIDUAL_SUGAR: _meta("residual sugar", "residual_sugar", "Residual Sugar", "g/dm³"),
    WineColumn.CHLORIDES: _meta("chlorides", "chlorides", "Chlorides", "g/dm³"),
    WineColumn.FREE_SULFUR_DIOXIDE: _meta("free sulfur dioxide", "free_sulfur_dioxide", "Free SO₂", "mg/dm³"),
    WineColumn.TOTAL_SULFUR_DIOXIDE: _meta("total sulfur dioxide", "total_sulfur_dioxide", "Total SO₂", "mg/dm³"),
    WineColumn.DENSITY: _meta("density", "density", "Density", "g/cm³"),
    WineColumn.PH: _meta("pH", "ph", "pH"),
    WineColumn.SULPHATES: _meta("sulphates", "sulphates", "Sulphates", "g/dm³"),
    WineColumn.ALCOHOL: _meta("alcohol", "alcohol", "Alcohol", "% vol."),
    WineColumn.QUALITY: _meta("quality", "quality", "Quality Score"),
}


class WineColor(StrEnum):
    """Wine colour variant; each colour is a separate table with the shared schema."""

    RED = "red"
    WHITE = "white"
