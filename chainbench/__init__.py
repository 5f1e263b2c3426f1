"""Chain bias benchmark: which blockchain do LLMs default to?"""

__version__ = "0.1.0"
