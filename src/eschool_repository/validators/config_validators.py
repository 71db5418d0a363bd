def _normalized(value: object) -> str | None:
    # Env values may carry stray whitespace ("debug \n" from a .env file)
    if value is None:
        return None
    return str(value).strip()


def to_uppercase(value: object) -> str | None:
    """
    Strip and upper-case a setting value; None is kept as None.
    """
    normalized = _normalized(value)
    return normalized.upper() if normalized is not None else None


def to_lowercase(value: object) -> str | None:
    """
    Strip and lower-case a setting value; None is kept as None.
    """
    normalized = _normalized(value)
    return normalized.lower() if normalized is not None else None
