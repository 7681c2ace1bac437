import sys

from roi_model.cli import main

sys.exit(main())
