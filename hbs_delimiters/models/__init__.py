"""hbs-delimiters models package.

Defines the data contracts shared by the scanner and the compile pipeline:

  - delimiter.py: LiteralToken, PatternToken, DelimiterSet, DelimiterConfigError
  - segment.py  : TagVariant, LiteralSegment, TagSegment, Segment
"""
