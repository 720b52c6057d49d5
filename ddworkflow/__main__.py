import sys

from ddworkflow.application import main

# Allows `python -m ddworkflow` as an alternative to the console script.
if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
