import sys

from notifier_hooks.cli import main

sys.exit(main())
