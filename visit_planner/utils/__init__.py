from visit_planner.utils.json_block import (
    extract_json_block,
    parse_json_block,
)

__all__ = [
    "extract_json_block",
    "parse_json_block",
]
