import sys

from knowledge_sync.main import main

sys.exit(main())
