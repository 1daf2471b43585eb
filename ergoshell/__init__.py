"""ergoshell -- input/output shell around a keyboard layout generation engine.

Reads a config from a file, a ``.zip``/``.ekb`` bundle, or a folder, sends it
to the generation engine, and writes the resulting points, outlines, cases and
PCBs to an output folder.  Watch mode regenerates on every config change.
"""

__version__ = "0.1.0"
