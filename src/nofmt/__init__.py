"""nofmt - run a source formatter while keeping `// go:nofmt` regions intact."""

__version__ = "0.3.0"
