import sys

from polyline_select.main import main

sys.exit(main())
