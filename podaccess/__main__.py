import sys

from podaccess.tasks.collect_task import main

if __name__ == "__main__":
    sys.exit(main())
