"""JSON text shared by every store.

JSON columns are written unescaped so substring search over their text
matches non-ASCII values (diacritics, Tibetan script) as typed.
"""

import json
from typing import Any


def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)
