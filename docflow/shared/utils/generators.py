"""ID and value generators (CUID primary keys, stored file names)."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_stored_name(extension: str) -> str:
    """Return a unique on-disk file name keeping the given extension (e.g. '.pdf')."""
    ext = extension.lower() if extension else ""
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return f"{generate_cuid()}{ext}"
