"""Building blocks for a small command shell: tokenizer, expansion, pipelines and builtins."""

__version__ = "0.1.0"