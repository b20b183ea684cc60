"""codeforge — turn generative model replies into files and shell actions."""

__version__ = "0.1.0"
