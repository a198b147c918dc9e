import sys

from rdl_json_schema.cli import main

sys.exit(main())
