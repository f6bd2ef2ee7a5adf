"""
Makes the `cfgnormal` package importable when running the tools from a source checkout.
"""
import os
import sys

_root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _root_dir not in sys.path:
  sys.path.insert(0, _root_dir)
