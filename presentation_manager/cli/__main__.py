import sys

from presentation_manager.cli.presmgrctl import main

sys.exit(main())
