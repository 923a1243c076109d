"""Game resource paths for icons."""

ICON_DIGITS = 6


def icon_path(icon_id: int) -> str:
    """
    Path of the high-resolution texture for an icon.

    Icon ids are zero-padded to six digits and grouped into folders of a
    thousand, e.g. ``ui/icon/062000/062101_hr1.tex`` for id 62101. Ids that
    are already longer than that are used as-is.
    """
    name = str(icon_id)
    if len(name) < ICON_DIGITS:
        name = name.zfill(ICON_DIGITS)
    return f"ui/icon/{name[:3]}000/{name}_hr1.tex"
