def replace_char(token: str, segment: int, index: int) -> str:
    """Return the token with one character of the given segment changed."""
    parts = token.split(".")
    part = parts[segment]
    new_char = "A" if part[index] != "A" else "B"
    parts[segment] = part[:index] + new_char + part[index + 1:]
    return ".".join(parts)
