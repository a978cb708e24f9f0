import sys

from statsd_console.main import main

sys.exit(main())
