"""Search Arena: compare web search providers side by side and judge the results."""

__version__ = "0.1.0"
