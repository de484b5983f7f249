import sys

from clapboard.main import main

sys.exit(main())
