import pandas as pd

from .core.points import DataPoint


def to_numeric_safe(series: pd.Series):
    return pd.to_numeric(series, errors="coerce")


def frame_from_columns(df: pd.DataFrame, x: str, y: str) -> pd.DataFrame:
    """Two-column ``x``/``y`` float frame; rows with non-numeric cells dropped."""
    out = pd.DataFrame({
        "x": to_numeric_safe(df[x]),
        "y": to_numeric_safe(df[y]),
    })
    return out.dropna(how="any").reset_index(drop=True)


def points_from_frame(df: pd.DataFrame, x: str = "x", y: str = "y"):
    clean = frame_from_columns(df, x, y)
    return [DataPoint(float(a), float(b)) for a, b in zip(clean["x"], clean["y"])]


def frame_from_points(points) -> pd.DataFrame:
    return pd.DataFrame(
        [(p[0], p[1]) for p in points], columns=["x", "y"], dtype=float
    )
