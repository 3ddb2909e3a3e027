"""Base error for pcio build steps."""


class PcioError(Exception):
    """A build step failed; the run is aborted."""
    pass
