from __future__ import annotations

import re

from kb.core.errors import ValidationError

# ASCII digits only: no sign prefix other than "-", no padding, no "_" separators.
_INT_ID_RE = re.compile(r"-?[0-9]+")


def parse_int_id(raw: str | None, detail: str) -> int:
    text = str(raw or "")
    if not _INT_ID_RE.fullmatch(text):
        raise ValidationError(detail)
    return int(text)


def is_truthy_flag(raw: str | None) -> bool:
    return str(raw or "").strip().lower() in {"1", "true"}
