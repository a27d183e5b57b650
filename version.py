# ABOUTME: Version information for the forum API

__version__ = "1.0.0"


def get_version_string() -> str:
    return f"Forum API v{__version__}"
