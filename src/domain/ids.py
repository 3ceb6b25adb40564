"""Record identity helpers.

The spreadsheet backend hands ids back as numbers or strings depending on how
the cell was formatted, so every id comparison goes through ``coerce_id``.
"""


def coerce_id(value: object) -> str:
    """Render an id as a canonical string.

    Integral floats lose their fractional part so that ``1718000000000.0``
    and ``"1718000000000"`` compare equal.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def same_id(left: object, right: object) -> bool:
    """Compare two ids after string coercion."""
    return coerce_id(left) == coerce_id(right)
