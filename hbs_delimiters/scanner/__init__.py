"""hbs-delimiters scanner package.

Provides the delimiter rewrite machinery: marker normalization, the matcher
cache, the tag scanner, the literal-text guard and two-tier recomposition.
"""
