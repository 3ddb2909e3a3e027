"""pcio - playingcards.io asset bundle builder.

Exports are lazily loaded to avoid import conflicts when running
submodules directly with `python -m pcio.<module>`.
"""

__version__ = "0.1.0"

__all__ = [
    # errors.py
    "PcioError",
    # config.py
    "BuildConfig",
    "ConfigError",
    # packager.py
    "package_assets",
    "PackagingError",
    "PackageResult",
    "MANIFEST_ENTRY",
    "ASSET_PREFIX",
    # build.py
    "run_build",
]


def __getattr__(name: str):
    """Lazy import for module exports."""
    if name == "PcioError":
        from pcio import errors
        return getattr(errors, name)
    elif name in ("BuildConfig", "ConfigError"):
        from pcio import config
        return getattr(config, name)
    elif name in ("package_assets", "PackagingError", "PackageResult", "MANIFEST_ENTRY", "ASSET_PREFIX"):
        from pcio import packager
        return getattr(packager, name)
    elif name == "run_build":
        from pcio import build
        return getattr(build, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
