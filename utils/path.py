# utils/path.py
import os
from typing import Optional

def default_output_path(input_path: str, output_path: Optional[str] = None) -> str:
    """
    沒有指定輸出時，寫到輸入檔旁邊：song.mid -> song.mid.split.mid
    """
    if output_path:
        return output_path
    return f"{input_path}.split.mid"

def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
