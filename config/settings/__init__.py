"""Settings package for the hotel booking core.

`base.py` contains common configuration shared across environments; the
`dev.py`, `prod.py` and `test.py` modules extend it with environment
specific overrides.
"""
