import os

# Keep Log output out of test runs.
os.environ.setdefault("SMARTCAL_QUIET", "1")
