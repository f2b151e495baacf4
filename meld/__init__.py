"""meld — one hub config, many coding-agent config bundles."""

__version__ = "0.1.0"
