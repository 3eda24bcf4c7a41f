"""Test runner script."""
import os
import sys
import tempfile
import unittest
from pathlib import Path

# Add src directory to path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

if __name__ == "__main__":
    # Keep logs and stored context out of the real home directory
    os.environ.setdefault("BUDGETWISE_HOME", tempfile.mkdtemp(prefix="budgetwise-tests-"))

    loader = unittest.TestLoader()
    start_dir = Path(__file__).parent
    suite = loader.discover(start_dir, pattern="test_*.py")

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    # Exit with error code if tests failed
    sys.exit(0 if result.wasSuccessful() else 1)
