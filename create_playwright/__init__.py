"""create-playwright -- scaffolds a Playwright Test project."""

__version__ = "1.0.0"
