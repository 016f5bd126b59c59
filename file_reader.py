import pandas as pd

WAY_COLUMNS = ["id", "from", "to", "name", "type", "base_time"]


def split_csv_allow_commas(line, min_fields):
    """Split on commas that are not inside parentheses."""
    parts = []
    buf = []
    depth = 0
    for ch in line:
        if ch == ',' and depth == 0:
            parts.append("".join(buf).strip())
            buf = []
            continue
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth = max(depth - 1, 0)
        buf.append(ch)
    if buf:
        parts.append("".join(buf).strip())
    if len(parts) < min_fields:
        raise ValueError(f"Line '{line}' parsed into too few fields: {parts}")
    return parts


def is_content_line(line):
    """False for blank lines and '#' comments."""
    line = line.strip()
    return bool(line) and not line.startswith("#")


def parse_config_file(path):
    """Parses a road network file with [WAYS] and [META] sections.

    Other sections (such as [NODES] with map coordinates) are skipped.

    Returns:
        ways: Pandas DataFrame of ways (columns: id, from, to, name, type, base_time)
        start: start node id, or None when [META] has no START
        goals: list of goal node ids
    """
    section = None
    ways = []
    start = None
    goals = []

    with open(path, "r", encoding="utf-8") as f:
        for raw in f:
            if not is_content_line(raw):
                continue
            line = raw.strip()
            if line.startswith("[") and line.endswith("]"):
                section = line.upper()
            elif section == "[WAYS]":
                way_id, from_id, to_id, name, kind, minutes = split_csv_allow_commas(line, 6)[:6]
                ways.append([int(way_id), int(from_id), int(to_id), name, kind, float(minutes)])
            elif section == "[META]":
                key, *values = [x.strip() for x in line.split(",")]
                if key.upper() == "START":
                    start = int(values[0])
                elif key.upper() == "GOAL":
                    goals = [int(g) for g in values]

    return pd.DataFrame(ways, columns=WAY_COLUMNS), start, goals
