"""recallkit: spaced-repetition scheduling with review load balancing."""

__version__ = "0.3.0"
