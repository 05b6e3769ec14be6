import os

# Allow Qt-backed tests to run on headless hosts.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
