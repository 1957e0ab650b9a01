import sys

from sam_runner.cli import main

sys.exit(main())
