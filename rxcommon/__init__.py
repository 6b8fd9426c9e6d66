"""
rxcommon — shared plumbing for the rxren rename tool
----------------------------------------------------

Modules:
  base.logging  : Emoji/colour logging setup (Rich or ANSI console, optional log file)
  base.file_io  : YAML config and CSV report file helpers
  shared.loader : YAML configuration loading and validation
  shared.report : CSV report export and summaries
  shared.utils  : tqdm progress wrapper
"""
