"""Example extension modules, loadable with ``knit examples.<name>``."""
