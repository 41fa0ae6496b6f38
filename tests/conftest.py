import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep event logs out of the working tree
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="tripolis-contact-logs-")
