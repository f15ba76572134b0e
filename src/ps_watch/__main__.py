import sys

from ps_watch.main import main

sys.exit(main())
