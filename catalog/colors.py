import json
import unicodedata


def normalize_color(label):
    """Canonical form for comparing color labels: 'ázul ' -> 'AZUL'."""
    decomposed = unicodedata.normalize("NFD", label.strip().upper())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_colors(labels):
    return [normalize_color(label) for label in labels]


def parse_colors(raw):
    """
    Read a product's stored colors into a list of labels.

    The column has held three encodings over time: a JSON array, a single
    plain label and, from older fixtures, a native list.

    Args:
        raw: None, a list/tuple, or a string.

    Returns:
        list: color labels as stored (not normalized)
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(c) for c in raw if c is not None]
    if not isinstance(raw, str):
        return [str(raw)]
    if not raw.strip():
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return [raw]
    if isinstance(parsed, list):
        return [str(c) for c in parsed if c is not None]
    if isinstance(parsed, str):
        return [parsed]
    return [raw]


def dump_colors(labels):
    if not labels:
        return None
    return json.dumps(list(labels), ensure_ascii=False)
