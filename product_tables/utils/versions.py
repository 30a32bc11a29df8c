"""Dotted version comparison for widget update checks."""


def _parts(version: str) -> list[int]:
    out = []
    for piece in (version or "").strip().split("."):
        try:
            out.append(int(piece))
        except ValueError:
            out.append(0)
    return out


def compare_versions(v1: str, v2: str) -> int:
    """Return -1 if v1 < v2, 0 if equal, 1 if v1 > v2. Missing or non-numeric parts count as 0."""
    parts1 = _parts(v1)
    parts2 = _parts(v2)
    for i in range(max(len(parts1), len(parts2))):
        a = parts1[i] if i < len(parts1) else 0
        b = parts2[i] if i < len(parts2) else 0
        if a < b:
            return -1
        if a > b:
            return 1
    return 0
