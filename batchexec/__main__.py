import sys

from batchexec.scripts.batchexec import main

sys.exit(main())
