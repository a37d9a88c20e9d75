from typing import List, Optional, Sequence

STATUS_KEY = "status"
_STATUS_PREFIX = STATUS_KEY + ":"

def parse_tags(tags_str: Optional[str]) -> List[str]:
    """
    Parses "k1:v1,k2:v2" into ["k1:v1", "k2:v2"].
    Blank entries and entries without a ':' separator are dropped.
    """
    if not tags_str:
        return []

    result = []
    for pair in tags_str.split(","):
        pair = pair.strip()
        if pair and ":" in pair:
            result.append(pair)
    return result

def with_status(tags: Sequence[str], status: str) -> List[str]:
    """
    Returns a copy of `tags` carrying exactly one `status:<status>` entry.
    The first existing status tag is replaced in place and any further ones
    are dropped; with none present the status tag is appended.
    The input sequence is never modified.
    """
    status_tag = f"{_STATUS_PREFIX}{status}"
    merged = []
    replaced = False

    for tag in tags:
        if not tag.startswith(_STATUS_PREFIX):
            merged.append(tag)
        elif not replaced:
            merged.append(status_tag)
            replaced = True

    if not replaced:
        merged.append(status_tag)
    return merged
