BOILERPLATE_TITLE_MARKERS = (
    "本版责编",
)
FULL_VERSION_MARKER = "完整版"


def is_boilerplate_title(value: str | None) -> bool:
    if not value:
        return True
    normalized = value.strip()
    if not normalized:
        return True

    # Editorial-credit lines sit in the same list as real articles.
    for marker in BOILERPLATE_TITLE_MARKERS:
        if marker in normalized:
            return True

    return False


def strip_full_version_marker(value: str) -> str:
    return value.replace(FULL_VERSION_MARKER, "").strip()
