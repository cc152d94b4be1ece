import sys

from forecast_builder.cli import main

sys.exit(main())
