"""MockingBird - A terminal mock coding interview with an AI interviewer."""

try:
    from ._version import __version__
except ImportError:
    try:
        from importlib.metadata import version

        __version__ = version("mockingbird")
    except Exception:
        __version__ = "0.0.0+unknown"
