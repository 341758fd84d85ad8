"""Shell word completion, script caching and Fig spec generation for usage-spec CLIs."""

__version__ = "2.1.1"
__all__ = ["cache", "completion", "fig"]