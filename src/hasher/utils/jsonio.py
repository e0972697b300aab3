from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Union

# file names that are not valid UTF-8 come back from os.walk as lone
# surrogates; they are written and read back as the original bytes
ENCODING_ERRORS = "surrogateescape"


def write_json(path: Union[str, Path], payload: Dict[str, Any]) -> Path:
    output_path = Path(path)
    text = json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
    data = (text + "\n").encode("utf-8", errors=ENCODING_ERRORS)

    if not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = output_path.with_name(output_path.name + ".tmp")
    try:
        tmp_path.write_bytes(data)
        os.replace(tmp_path, output_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    return output_path


def read_json(path: Union[str, Path]) -> Any:
    text = Path(path).read_bytes().decode("utf-8", errors=ENCODING_ERRORS)
    return json.loads(text)
