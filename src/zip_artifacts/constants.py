"""Global constants for zip-artifacts.

These values serve as defaults for archive naming, writer chunking and
logging.  The log level can be overridden with the ``LOG_LEVEL``
environment variable.
"""

import os

# Archive naming
DEFAULT_EXTENSION = "zip"
ZIP_SUFFIX = ".zip"

# Host output directory used when a build does not configure one
DEFAULT_OUTPUT_DIRNAME = "dist"

# Writer
DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_FILE_MODE = 0o100664
# Last year a DOS timestamp can hold
DOS_MAX_YEAR = 2107

# Logging
DEFAULT_LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
