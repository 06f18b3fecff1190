"""upsert-pr: create or update a pull request from CI."""

__version__ = "0.1.0"
